"""
Configuration constants for league ratings and tournament placements.

This module centralizes all default parameters used by the rating fold,
the rank classifier and the placement engine to ensure consistency and
easy tuning.
"""

# =============================================================================
# Rating Parameters
# =============================================================================

# Rating every player starts from when history is replayed
DEFAULT_STARTING_RATING: float = 1500.0

# Default used by the manual-entry upload path; kept for reference only
UPLOAD_STARTING_RATING: float = 1200.0

# Elo K-factor and logistic scale
DEFAULT_K_FACTOR: float = 32.0
ELO_SCALE: float = 400.0

# Margin-of-victory multiplier: ln(margin + 1) * (D / (diff * S + D))
MARGIN_DAMPING: float = 2.2
MARGIN_RATING_SCALE: float = 0.001

# Share of the individual change applied when a player's game result
# disagrees with their team's round result
TEAM_MIXED_RESULT_WEIGHT: float = 0.5

# League clamp for non-zero changes when enabled (magnitude bounds)
LEAGUE_MIN_CHANGE: int = 10
LEAGUE_MAX_CHANGE: int = 100

# Penalty for the side that scored zero in a bye/forfeit when enabled
LEAGUE_BYE_PENALTY: int = 10

# =============================================================================
# Team Format Parameters
# =============================================================================

# Individual games in a teams event always total this many points
TEAM_GAME_TOTAL: int = 20

# Aggregate team scores within this margin are a drawn round
TEAM_DRAW_MARGIN: int = 10

# Combined score of a round between two 8-player teams (eight 20-point games)
EIGHT_PLAYER_ROUND_TOTAL: int = 160

# =============================================================================
# Tier Parameters
# =============================================================================

# Number of leaderboard positions that are always labelled with the top tier
TOP_TIER_SIZE: int = 10

TOP_TIER = "War-Master"

# (tier_name, minimum_rating), highest first
TIER_THRESHOLDS: list[tuple[str, float]] = [
    ("Chapter-Master", 2000),
    ("War-Lord", 1900),
    ("Captain", 1750),
    ("Lieutenant", 1600),
    ("Sergeant", 1450),
    ("Trooper", 1300),
]
BOTTOM_TIER = "Scout"

# =============================================================================
# Normalization Defaults
# =============================================================================

UNKNOWN_EVENT = "Unknown Event"
UNKNOWN_FACTION = "Unknown"
DEFAULT_ROUND_NUMBER: int = 0

# =============================================================================
# Regions
# =============================================================================

ALL_REGIONS = "All"
REGION_GROUPS: dict[str, frozenset[str]] = {
    "Australia": frozenset(
        {"ACT", "NSW", "NT", "QLD", "SA", "TAS", "VIC", "WA"}
    ),
    "New Zealand": frozenset({"NZN", "NZS"}),
}

# =============================================================================
# Event Size Buckets
# =============================================================================

# (label, minimum rounds, maximum rounds or None for open-ended)
EVENT_SIZE_BUCKETS: list[tuple[str, int, int | None]] = [
    ("RTT", 1, 3),
    ("GT", 4, 5),
    ("Super Major", 6, None),
]
