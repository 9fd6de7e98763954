"""Canonical record types consumed by the rating fold and placement engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class MatchResult(str, Enum):
    """Outcome of one match from one player's point of view."""

    WIN = "Win"
    LOSS = "Loss"
    DRAW = "Draw"

    @classmethod
    def from_scores(cls, own_score: float, opponent_score: float) -> MatchResult:
        if own_score > opponent_score:
            return cls.WIN
        if own_score < opponent_score:
            return cls.LOSS
        return cls.DRAW


class MatchType(str, Enum):
    SINGLES = "Singles"
    TEAMS = "Teams"


@dataclass
class Player:
    """A roster entry."""

    id: str
    name: str
    state: Optional[str] = None
    country: Optional[str] = None
    # Ratings are always recomputed; a supplied value is informational only
    rating: Optional[float] = None

    @property
    def region(self) -> str:
        return self.state.strip().upper() if self.state else ""


@dataclass(frozen=True)
class MatchRecord:
    """One completed game between two players.

    ``player1_*`` and ``player2_*`` fields belong to the side listed first
    and second in the source row. Team fields are only set when
    ``is_team_match`` is true.
    """

    date: Optional[date]
    player1_id: str
    player2_id: str
    score1: float
    score2: float
    player1_faction: str
    player2_faction: str
    event_name: str
    round_number: int
    is_team_match: bool = False
    team_score1: Optional[float] = None
    team_score2: Optional[float] = None
    team1_id: Optional[str] = None
    team2_id: Optional[str] = None
    table_number: Optional[str] = None

    @property
    def dedup_key(self) -> tuple:
        """Identity of the logical match; later copies are duplicates."""
        key = (
            self.player1_id,
            self.player2_id,
            self.round_number,
            self.event_name,
        )
        if self.is_team_match:
            return key + (self.table_number,)
        return key

    @property
    def event_key(self) -> tuple[Optional[date], str]:
        """Identity of the event instance (one date + name)."""
        return (self.date, self.event_name)

    @property
    def total_score(self) -> float:
        return self.score1 + self.score2

    @property
    def match_type(self) -> MatchType:
        return MatchType.TEAMS if self.is_team_match else MatchType.SINGLES

    @property
    def has_team_scores(self) -> bool:
        return self.team_score1 is not None and self.team_score2 is not None

    def side(self, player_id: str) -> int:
        """Return 1 or 2 for the side ``player_id`` played, 0 otherwise."""
        if player_id == self.player1_id:
            return 1
        if player_id == self.player2_id:
            return 2
        return 0
