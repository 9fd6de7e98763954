"""Summary statistics for a single player's page."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Sequence

from standings.core.records import MatchRecord, MatchResult
from standings.core.results import FoldResult, Leaderboard, RatedMatchEntry
from standings.postprocess.grades import rank_tier
from standings.tournaments.events import events_won


@dataclass(frozen=True)
class PlayerProfile:
    player_id: str
    name: str
    rating: float
    rank: Optional[int]
    tier: str
    wins: int
    losses: int
    draws: int
    games: int
    win_rate: float
    average_opponent_rating: int
    longest_win_streak: int
    longest_loss_streak: int
    best_win: Optional[RatedMatchEntry]
    worst_loss: Optional[RatedMatchEntry]
    most_played_factions: tuple[str, ...]
    events_won: tuple[tuple[Optional[date], str], ...] = field(default=())

    @property
    def main_faction(self) -> Optional[str]:
        return self.most_played_factions[0] if self.most_played_factions else None


def longest_streaks(history: Iterable[RatedMatchEntry]) -> tuple[int, int]:
    """Longest runs of consecutive wins and of consecutive losses.

    A draw ends both runs.
    """
    max_wins = max_losses = wins = losses = 0
    for entry in history:
        if entry.result is MatchResult.WIN:
            wins, losses = wins + 1, 0
        elif entry.result is MatchResult.LOSS:
            wins, losses = 0, losses + 1
        else:
            wins = losses = 0
        max_wins = max(max_wins, wins)
        max_losses = max(max_losses, losses)
    return max_wins, max_losses


def most_played_factions(history: Sequence[RatedMatchEntry]) -> tuple[str, ...]:
    """Every faction tied at the highest play count, first played first."""
    counts = Counter(entry.faction for entry in history if entry.faction)
    if not counts:
        return ()
    top = max(counts.values())
    return tuple(faction for faction, count in counts.items() if count == top)


def _best_win(history: Sequence[RatedMatchEntry]) -> Optional[RatedMatchEntry]:
    best = None
    for entry in history:
        if entry.result is MatchResult.WIN and (
            best is None or entry.delta > best.delta
        ):
            best = entry
    return best


def _worst_loss(history: Sequence[RatedMatchEntry]) -> Optional[RatedMatchEntry]:
    worst = None
    for entry in history:
        if entry.result is MatchResult.LOSS and (
            worst is None or entry.delta < worst.delta
        ):
            worst = entry
    return worst


def build_player_profile(
    fold_result: FoldResult,
    leaderboard: Leaderboard,
    player_id: str,
    matches: Optional[Iterable[MatchRecord]] = None,
) -> Optional[PlayerProfile]:
    """Assemble the profile of ``player_id``.

    Returns ``None`` for a player that is neither rated nor on the
    leaderboard. Events won are computed from ``matches`` (defaults to the
    matches of the fold).
    """
    entry = leaderboard.get(player_id)
    if entry is None and player_id not in fold_result.ratings:
        return None

    history = fold_result.history(player_id)
    stats = fold_result.stats.get(player_id)
    win_streak, loss_streak = longest_streaks(history)
    opponent_ratings = [e.opponent_rating_before for e in history]

    if matches is None:
        matches = fold_result.matches

    return PlayerProfile(
        player_id=player_id,
        name=entry.name if entry is not None else player_id,
        rating=(
            entry.rating if entry is not None else fold_result.ratings[player_id]
        ),
        rank=entry.rank if entry is not None else None,
        tier=(
            entry.tier
            if entry is not None
            else rank_tier(fold_result.ratings[player_id])
        ),
        wins=stats.wins if stats else 0,
        losses=stats.losses if stats else 0,
        draws=stats.draws if stats else 0,
        games=stats.games if stats else 0,
        win_rate=stats.win_rate if stats else 0.0,
        average_opponent_rating=(
            round(sum(opponent_ratings) / len(opponent_ratings))
            if opponent_ratings
            else 0
        ),
        longest_win_streak=win_streak,
        longest_loss_streak=loss_streak,
        best_win=_best_win(history),
        worst_loss=_worst_loss(history),
        most_played_factions=most_played_factions(history),
        events_won=tuple(events_won(player_id, matches)),
    )
