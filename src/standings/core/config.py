"""Configuration dataclasses for the standings engine."""

from dataclasses import dataclass, field
from typing import Optional

from standings.core.constants import (
    ALL_REGIONS,
    DEFAULT_K_FACTOR,
    DEFAULT_STARTING_RATING,
    EIGHT_PLAYER_ROUND_TOTAL,
    LEAGUE_BYE_PENALTY,
    LEAGUE_MAX_CHANGE,
    LEAGUE_MIN_CHANGE,
    TEAM_DRAW_MARGIN,
    TEAM_GAME_TOTAL,
    TEAM_MIXED_RESULT_WEIGHT,
    TOP_TIER_SIZE,
)


@dataclass
class RatingConfig:
    """Configuration for the rating update functions."""

    starting_rating: float = DEFAULT_STARTING_RATING
    k_factor: float = DEFAULT_K_FACTOR

    # Clamp non-zero changes into [min_change, max_change] magnitude.
    # None disables the bound.
    min_change: Optional[int] = None
    max_change: Optional[int] = None

    # Team matches
    team_mixed_weight: float = TEAM_MIXED_RESULT_WEIGHT
    team_draw_margin: float = TEAM_DRAW_MARGIN

    # Bye/forfeit rule for singles; None disables it
    bye_penalty: Optional[int] = None
    team_game_total: int = TEAM_GAME_TOTAL

    @classmethod
    def league(cls) -> "RatingConfig":
        """Settings used by the league site (clamped changes, bye rule)."""
        return cls(
            min_change=LEAGUE_MIN_CHANGE,
            max_change=LEAGUE_MAX_CHANGE,
            bye_penalty=LEAGUE_BYE_PENALTY,
        )


@dataclass
class LeaderboardConfig:
    """Configuration for leaderboard assembly."""

    # Positions that are always labelled with the top tier
    top_tier_size: int = TOP_TIER_SIZE

    # Include roster players that never played, at the starting rating
    include_inactive: bool = True

    def __post_init__(self) -> None:
        if self.top_tier_size < 0:
            raise ValueError("top_tier_size must be non-negative")


@dataclass
class LeaderboardFilter:
    """Post-hoc view over a fully folded leaderboard."""

    search: str = ""
    region: str = ALL_REGIONS
    hide_no_matches: bool = False

    @property
    def is_bare_region(self) -> bool:
        """Region filter active with no search and no match toggle."""
        return (
            self.region != ALL_REGIONS
            and not self.search.strip()
            and not self.hide_no_matches
        )


@dataclass
class PlacementConfig:
    """Configuration for tournament placements."""

    team_game_total: int = TEAM_GAME_TOTAL
    draw_margin: float = TEAM_DRAW_MARGIN
    eight_player_total: int = EIGHT_PLAYER_ROUND_TOTAL


@dataclass
class PipelineConfig:
    """Configuration for the full standings pipeline."""

    rating: RatingConfig = field(default_factory=RatingConfig)
    leaderboard: LeaderboardConfig = field(default_factory=LeaderboardConfig)
    placement: PlacementConfig = field(default_factory=PlacementConfig)

    # Consolidate sub-factions into parent factions in faction statistics
    consolidate_factions: bool = True
