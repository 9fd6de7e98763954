"""
Leaderboard assembly and filtered views.

The leaderboard is built once from a complete fold. Filters only select
rows; ratings, tiers and global ranks are never recomputed for a view.
"""

import logging
from typing import Dict, List, Mapping, Optional

from standings.core.config import LeaderboardConfig, LeaderboardFilter
from standings.core.constants import ALL_REGIONS, REGION_GROUPS
from standings.core.records import Player
from standings.core.results import (
    FoldResult,
    Leaderboard,
    LeaderboardEntry,
    LeaderboardRow,
    PlayerStats,
)
from standings.postprocess.grades import rank_tier_for_position

logger = logging.getLogger(__name__)


def build_leaderboard(
    fold_result: FoldResult,
    players: Optional[Mapping[str, Player]] = None,
    config: Optional[LeaderboardConfig] = None,
    starting_rating: Optional[float] = None,
) -> Leaderboard:
    """
    Rank every rated player, plus roster players who never played.

    Parameters
    ----------
    fold_result : FoldResult
        Output of a complete chronological fold
    players : Mapping[str, Player], optional
        Roster used for names and regions
    config : LeaderboardConfig, optional
        Top tier size and whether to include inactive roster players
    starting_rating : float, optional
        Rating shown for roster players without matches. Defaults to the
        starting rating the fold was run with

    Returns
    -------
    Leaderboard
        Entries sorted by rating descending (ties by name, then id) with
        1-based global ranks
    """
    config = config or LeaderboardConfig()
    if starting_rating is None:
        starting_rating = fold_result.starting_rating
    players = players or {}

    ratings: Dict[str, float] = dict(fold_result.ratings)
    if config.include_inactive:
        for player_id in players:
            ratings.setdefault(player_id, starting_rating)

    def _name(player_id: str) -> str:
        player = players.get(player_id)
        return player.name if player is not None else player_id

    ordered = sorted(
        ratings,
        key=lambda pid: (-ratings[pid], _name(pid).lower(), pid),
    )

    entries: List[LeaderboardEntry] = []
    for index, player_id in enumerate(ordered):
        rank = index + 1
        rating = ratings[player_id]
        stats = fold_result.stats.get(player_id) or PlayerStats()
        player = players.get(player_id)
        entries.append(
            LeaderboardEntry(
                rank=rank,
                player_id=player_id,
                name=_name(player_id),
                region=player.region if player is not None else "",
                country=player.country if player is not None else None,
                rating=rating,
                tier=rank_tier_for_position(
                    rating, rank, config.top_tier_size
                ),
                wins=stats.wins,
                losses=stats.losses,
                draws=stats.draws,
                games=stats.games,
            )
        )

    top_tier_ids = frozenset(
        entry.player_id for entry in entries[: config.top_tier_size]
    )
    logger.debug(
        "Built leaderboard with %d players (%d in top tier)",
        len(entries),
        len(top_tier_ids),
    )
    return Leaderboard(entries=tuple(entries), top_tier_ids=top_tier_ids)


def region_matches(state: Optional[str], region_filter: str) -> bool:
    """Whether a player's state code falls inside ``region_filter``.

    ``"All"`` matches everyone, grouped names such as ``"Australia"`` match
    any of their member codes, anything else is an exact code match
    ignoring case.
    """
    if not region_filter or region_filter == ALL_REGIONS:
        return True
    code = (state or "").strip().upper()
    group = REGION_GROUPS.get(region_filter)
    if group is not None:
        return code in group
    return code == region_filter.strip().upper()


def _matches_filter(
    entry: LeaderboardEntry, leaderboard_filter: LeaderboardFilter
) -> bool:
    search = leaderboard_filter.search.strip().lower()
    if search and search not in entry.name.lower():
        return False
    if not region_matches(entry.region, leaderboard_filter.region):
        return False
    if leaderboard_filter.hide_no_matches and not entry.has_matches:
        return False
    return True


def filter_leaderboard(
    leaderboard: Leaderboard,
    leaderboard_filter: Optional[LeaderboardFilter] = None,
) -> List[LeaderboardRow]:
    """
    Select leaderboard rows for display.

    Rows keep their global rank as position, except under a bare region
    filter (no search text, no match toggle) where positions run 1..n
    within the region.

    Parameters
    ----------
    leaderboard : Leaderboard
        Fully assembled leaderboard
    leaderboard_filter : LeaderboardFilter, optional
        Search text, region and match toggle

    Returns
    -------
    List[LeaderboardRow]
        Selected rows in leaderboard order
    """
    leaderboard_filter = leaderboard_filter or LeaderboardFilter()
    selected = [
        entry
        for entry in leaderboard
        if _matches_filter(entry, leaderboard_filter)
    ]
    if leaderboard_filter.is_bare_region:
        return [
            LeaderboardRow(position=index + 1, entry=entry)
            for index, entry in enumerate(selected)
        ]
    return [LeaderboardRow(position=entry.rank, entry=entry) for entry in selected]
