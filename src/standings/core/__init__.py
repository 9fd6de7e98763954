"""Core components for league ratings."""

from standings.core.config import (
    LeaderboardConfig,
    LeaderboardFilter,
    PipelineConfig,
    PlacementConfig,
    RatingConfig,
)
from standings.core.elo import (
    actual_score,
    clamp_change,
    expected_score,
    margin_multiplier,
    rating_delta,
    singles_deltas,
    team_deltas,
    team_rating_delta,
)
from standings.core.parser import (
    deduplicate_matches,
    fill_team_scores,
    normalize_match,
    normalize_matches,
    parse_players,
)
from standings.core.records import MatchRecord, MatchResult, MatchType, Player
from standings.core.results import (
    EventPlacement,
    FoldDiagnostics,
    FoldResult,
    Leaderboard,
    LeaderboardEntry,
    LeaderboardRow,
    NormalizationReport,
    PlayerStats,
    RatedMatchEntry,
    RoundResult,
    SinglesPlacement,
    TeamPlacement,
)

__all__ = [
    # Config
    "RatingConfig",
    "LeaderboardConfig",
    "LeaderboardFilter",
    "PlacementConfig",
    "PipelineConfig",
    # Rating math
    "expected_score",
    "actual_score",
    "margin_multiplier",
    "rating_delta",
    "clamp_change",
    "singles_deltas",
    "team_rating_delta",
    "team_deltas",
    # Normalization
    "normalize_match",
    "normalize_matches",
    "fill_team_scores",
    "deduplicate_matches",
    "parse_players",
    # Records
    "MatchRecord",
    "MatchResult",
    "MatchType",
    "Player",
    # Results
    "NormalizationReport",
    "FoldDiagnostics",
    "FoldResult",
    "PlayerStats",
    "RatedMatchEntry",
    "Leaderboard",
    "LeaderboardEntry",
    "LeaderboardRow",
    "RoundResult",
    "SinglesPlacement",
    "TeamPlacement",
    "EventPlacement",
]
