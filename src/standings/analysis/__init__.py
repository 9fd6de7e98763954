"""Rating fold and history analysis."""

from __future__ import annotations

from standings.analysis.engine import (
    annotate_rank_transitions,
    rating_after_each_match,
    recompute_all,
    sort_matches,
)
from standings.analysis.factions import (
    FACTION_ALIASES,
    faction_stats,
    normalize_faction,
)
from standings.analysis.profile import (
    PlayerProfile,
    build_player_profile,
    longest_streaks,
    most_played_factions,
)

__all__ = [
    # Fold
    "recompute_all",
    "sort_matches",
    "annotate_rank_transitions",
    "rating_after_each_match",
    # Profiles
    "PlayerProfile",
    "build_player_profile",
    "longest_streaks",
    "most_played_factions",
    # Factions
    "FACTION_ALIASES",
    "normalize_faction",
    "faction_stats",
]
