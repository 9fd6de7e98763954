"""Result dataclasses for the rating fold, leaderboard and placements."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Optional

import polars as pl

from standings.core.constants import DEFAULT_STARTING_RATING
from standings.core.records import MatchRecord, MatchResult, MatchType


@dataclass
class NormalizationReport:
    """Counts of raw rows accepted and dropped by the normalizer."""

    total: int = 0
    valid: int = 0
    invalid_reasons: Counter = field(default_factory=Counter)

    @property
    def invalid(self) -> int:
        return self.total - self.valid

    def __str__(self) -> str:
        message = f"{self.valid}/{self.total} rows valid"
        if self.invalid_reasons:
            reasons = ", ".join(
                f"{reason}={count}"
                for reason, count in sorted(self.invalid_reasons.items())
            )
            message += f" (dropped: {reasons})"
        return message


@dataclass(frozen=True)
class FoldDiagnostics:
    """What happened to each input match during a fold."""

    applied: int = 0
    duplicates: int = 0
    unknown_players: int = 0
    invalid_rows: int = 0


@dataclass
class PlayerStats:
    wins: int = 0
    losses: int = 0
    draws: int = 0
    games: int = 0

    @property
    def win_rate(self) -> float:
        """Percentage of games won, 0.0 without games."""
        if self.games == 0:
            return 0.0
        return round(self.wins / self.games * 100.0, 1)

    def record(self, result: MatchResult) -> None:
        if result is MatchResult.WIN:
            self.wins += 1
        elif result is MatchResult.LOSS:
            self.losses += 1
        else:
            self.draws += 1
        self.games += 1


@dataclass(frozen=True)
class RatedMatchEntry:
    """One match in a player's history, annotated with rating movement."""

    date: Optional[date]
    event_name: str
    round_number: int
    opponent_id: str
    opponent_name: str
    score: float
    opponent_score: float
    faction: str
    opponent_faction: str
    match_type: MatchType
    rating_before: float
    rating_after: float
    delta: float
    opponent_rating_before: float
    result: MatchResult
    team_id: Optional[str] = None
    opponent_team_id: Optional[str] = None
    team_score: Optional[float] = None
    opponent_team_score: Optional[float] = None
    rank_note: Optional[str] = None

    def to_dict(self) -> dict:
        row = asdict(self)
        row["match_type"] = self.match_type.value
        row["result"] = self.result.value
        return row


@dataclass(frozen=True)
class FoldResult:
    """Final state of a chronological replay of all matches."""

    ratings: dict[str, float]
    stats: dict[str, PlayerStats]
    histories: dict[str, tuple[RatedMatchEntry, ...]]
    matches: tuple[MatchRecord, ...] = ()
    diagnostics: FoldDiagnostics = field(default_factory=FoldDiagnostics)
    # Rating a player holds before their first match
    starting_rating: float = DEFAULT_STARTING_RATING

    def rating(self, player_id: str, default: float | None = None) -> float | None:
        return self.ratings.get(player_id, default)

    def history(self, player_id: str) -> tuple[RatedMatchEntry, ...]:
        return self.histories.get(player_id, ())

    def to_dataframe(self) -> pl.DataFrame:
        """Convert final ratings and counters to a Polars DataFrame.

        Returns:
            DataFrame with player_id, rating, wins, losses, draws, games
            sorted by rating descending.
        """
        player_ids = list(self.ratings)
        dataframe = pl.DataFrame(
            {
                "player_id": player_ids,
                "rating": [float(self.ratings[p]) for p in player_ids],
                "wins": [self.stats[p].wins for p in player_ids],
                "losses": [self.stats[p].losses for p in player_ids],
                "draws": [self.stats[p].draws for p in player_ids],
                "games": [self.stats[p].games for p in player_ids],
            },
            schema={
                "player_id": pl.Utf8,
                "rating": pl.Float64,
                "wins": pl.Int64,
                "losses": pl.Int64,
                "draws": pl.Int64,
                "games": pl.Int64,
            },
        )
        return dataframe.sort("rating", descending=True, maintain_order=True)

    def history_dataframe(self, player_id: str) -> pl.DataFrame:
        """One row per match in ``player_id``'s history, oldest first."""
        rows = [entry.to_dict() for entry in self.history(player_id)]
        if not rows:
            return pl.DataFrame()
        return pl.DataFrame(rows)


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    player_id: str
    name: str
    region: str
    country: Optional[str]
    rating: float
    tier: str
    wins: int
    losses: int
    draws: int
    games: int

    @property
    def has_matches(self) -> bool:
        return self.games > 0

    @property
    def win_rate(self) -> float:
        if self.games == 0:
            return 0.0
        return round(self.wins / self.games * 100.0, 1)


@dataclass(frozen=True)
class LeaderboardRow:
    """A leaderboard entry as shown in a (possibly filtered) view."""

    position: int
    entry: LeaderboardEntry


@dataclass(frozen=True)
class Leaderboard:
    """All players ranked by rating, with global positions."""

    entries: tuple[LeaderboardEntry, ...]
    top_tier_ids: frozenset[str] = frozenset()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def get(self, player_id: str) -> LeaderboardEntry | None:
        for entry in self.entries:
            if entry.player_id == player_id:
                return entry
        return None

    def global_rank(self, player_id: str) -> int | None:
        entry = self.get(player_id)
        return entry.rank if entry is not None else None

    def to_dataframe(self) -> pl.DataFrame:
        """Convert the leaderboard to a Polars DataFrame."""
        schema = {
            "rank": pl.Int64,
            "player_id": pl.Utf8,
            "name": pl.Utf8,
            "region": pl.Utf8,
            "country": pl.Utf8,
            "rating": pl.Float64,
            "tier": pl.Utf8,
            "wins": pl.Int64,
            "losses": pl.Int64,
            "draws": pl.Int64,
            "games": pl.Int64,
            "win_rate": pl.Float64,
        }
        rows = [
            {
                "rank": entry.rank,
                "player_id": entry.player_id,
                "name": entry.name,
                "region": entry.region,
                "country": entry.country,
                "rating": float(entry.rating),
                "tier": entry.tier,
                "wins": entry.wins,
                "losses": entry.losses,
                "draws": entry.draws,
                "games": entry.games,
                "win_rate": entry.win_rate,
            }
            for entry in self.entries
        ]
        return pl.DataFrame(rows, schema=schema)


@dataclass(frozen=True)
class RoundResult:
    """One placement participant's outcome in one round."""

    round_number: int
    opponent_id: Optional[str]
    score: float
    opponent_score: float
    outcome: MatchResult
    is_eight_player: bool = False


@dataclass(frozen=True)
class SinglesPlacement:
    player_id: str
    name: str
    wins: int
    losses: int
    draws: int
    total_score: float
    games: int
    main_faction: Optional[str]
    round_results: tuple[Optional[RoundResult], ...]


@dataclass(frozen=True)
class TeamPlacement:
    team_id: str
    name: str
    round_wins: int
    round_draws: int
    round_losses: int
    total_points: float
    round_results: tuple[Optional[RoundResult], ...]


@dataclass(frozen=True)
class EventPlacement:
    """Final ranking of one event instance."""

    event_name: str
    date: Optional[date]
    is_team_event: bool
    rounds: tuple[int, ...]
    placements: tuple[SinglesPlacement | TeamPlacement, ...]
    eight_player_rounds: frozenset[int] = frozenset()

    def __len__(self) -> int:
        return len(self.placements)

    @property
    def winner_id(self) -> str | None:
        if not self.placements:
            return None
        first = self.placements[0]
        return first.team_id if self.is_team_event else first.player_id

    def to_dataframe(self) -> pl.DataFrame:
        """Placements as a Polars DataFrame, one row per participant.

        Per-round outcomes are rendered as ``Win``/``Loss``/``Draw`` columns
        named ``round_<n>``; missing rounds are null.
        """
        rows = []
        for place, placement in enumerate(self.placements, start=1):
            if self.is_team_event:
                row = {
                    "place": place,
                    "id": placement.team_id,
                    "name": placement.name,
                    "wins": placement.round_wins,
                    "draws": placement.round_draws,
                    "losses": placement.round_losses,
                    "points": float(placement.total_points),
                    "main_faction": None,
                }
            else:
                row = {
                    "place": place,
                    "id": placement.player_id,
                    "name": placement.name,
                    "wins": placement.wins,
                    "draws": placement.draws,
                    "losses": placement.losses,
                    "points": float(placement.total_score),
                    "main_faction": placement.main_faction,
                }
            for round_number, result in zip(
                self.rounds, placement.round_results
            ):
                row[f"round_{round_number}"] = (
                    result.outcome.value if result is not None else None
                )
            rows.append(row)

        schema = {
            "place": pl.Int64,
            "id": pl.Utf8,
            "name": pl.Utf8,
            "wins": pl.Int64,
            "draws": pl.Int64,
            "losses": pl.Int64,
            "points": pl.Float64,
            "main_faction": pl.Utf8,
        }
        schema.update({f"round_{n}": pl.Utf8 for n in self.rounds})
        return pl.DataFrame(rows, schema=schema)
