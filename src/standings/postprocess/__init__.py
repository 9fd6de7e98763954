"""Post-processing utilities for league ratings."""

from __future__ import annotations

from standings.postprocess.grades import (
    TIER_ORDER,
    GradeSystem,
    TierGradeSystem,
    rank_tier,
    rank_tier_for_position,
    rank_transition_note,
)
from standings.postprocess.rankings import (
    build_leaderboard,
    filter_leaderboard,
    region_matches,
)

__all__ = [
    # Leaderboard
    "build_leaderboard",
    "filter_leaderboard",
    "region_matches",
    # Tiers
    "TIER_ORDER",
    "rank_tier",
    "rank_tier_for_position",
    "rank_transition_note",
    "GradeSystem",
    "TierGradeSystem",
]
