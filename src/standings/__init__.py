"""League ratings, leaderboards and event placements."""

from __future__ import annotations

# Core functionality - Main API
from standings.analysis import (
    build_player_profile,
    faction_stats,
    recompute_all,
)

# Key constants for convenience
from standings.core.constants import (
    DEFAULT_K_FACTOR,
    DEFAULT_STARTING_RATING,
    TEAM_DRAW_MARGIN,
    TOP_TIER_SIZE,
)
from standings.core.elo import rating_delta, team_rating_delta
from standings.core.parser import normalize_match, normalize_matches
from standings.postprocess import (
    build_leaderboard,
    filter_leaderboard,
    rank_tier,
)
from standings.tournaments import build_event_catalog, place_event

__version__ = "0.1.0"

__all__ = [
    # Core API - Essential functions
    "recompute_all",
    "normalize_match",
    "normalize_matches",
    # Rating math
    "rating_delta",
    "team_rating_delta",
    "rank_tier",
    # Leaderboard
    "build_leaderboard",
    "filter_leaderboard",
    # Events
    "place_event",
    "build_event_catalog",
    # Player pages
    "build_player_profile",
    "faction_stats",
    # Constants
    "DEFAULT_STARTING_RATING",
    "DEFAULT_K_FACTOR",
    "TEAM_DRAW_MARGIN",
    "TOP_TIER_SIZE",
]
