"""
Rank tiers for league ratings.

Ratings map to named tiers by fixed thresholds. The first
``TOP_TIER_SIZE`` positions of the global leaderboard are always labelled
with the top tier regardless of rating.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

import polars as pl

from standings.core.constants import (
    BOTTOM_TIER,
    TIER_THRESHOLDS,
    TOP_TIER,
    TOP_TIER_SIZE,
)

# Lowest to highest
TIER_ORDER: List[str] = (
    [BOTTOM_TIER] + [name for name, _ in reversed(TIER_THRESHOLDS)] + [TOP_TIER]
)


def rank_tier(rating: float, is_in_global_top10: bool = False) -> str:
    """
    Classify a rating into a tier.

    Parameters
    ----------
    rating : float
        Current rating
    is_in_global_top10 : bool
        Whether the player holds a top position on the global leaderboard

    Returns
    -------
    str
        Tier name
    """
    if is_in_global_top10:
        return TOP_TIER
    for name, minimum in TIER_THRESHOLDS:
        if rating >= minimum:
            return name
    return BOTTOM_TIER


def rank_tier_for_position(
    rating: float, rank_position: Optional[int], top_tier_size: int = TOP_TIER_SIZE
) -> str:
    """Tier for a player at ``rank_position`` (1-based) on the global board."""
    in_top = rank_position is not None and 1 <= rank_position <= top_tier_size
    return rank_tier(rating, is_in_global_top10=in_top)


def tier_index(tier: str) -> int:
    return TIER_ORDER.index(tier)


def rank_transition_note(
    rating_before: float, rating_after: float, delta: float
) -> Optional[str]:
    """Describe a tier change caused by one match, if any.

    Positions are not known match by match, so the top tier override is
    never applied here.
    """
    if delta == 0:
        return None
    before = rank_tier(rating_before)
    after = rank_tier(rating_after)
    if before == after:
        return None
    if delta > 0 and tier_index(after) > tier_index(before):
        return f"Promoted to {after}"
    if delta < 0 and tier_index(after) < tier_index(before):
        return f"Demoted to {after}"
    return None


class GradeSystem(ABC):
    """Abstract base class for grade systems."""

    @abstractmethod
    def assign_grades(
        self, df: pl.DataFrame, column_name: str = "tier"
    ) -> pl.DataFrame:
        """
        Assign grades to a DataFrame.

        Parameters
        ----------
        df : pl.DataFrame
            DataFrame with leaderboard data
        column_name : str
            Name for the grade column

        Returns
        -------
        pl.DataFrame
            DataFrame with added grade column
        """
        pass


class TierGradeSystem(GradeSystem):
    """Rating thresholds with a top tier override for leading positions."""

    def __init__(
        self,
        rating_column: str = "rating",
        rank_column: str = "rank",
        thresholds: Optional[List[Tuple[str, float]]] = None,
        top_tier_size: int = TOP_TIER_SIZE,
    ):
        """
        Initialize the tier grade system.

        Parameters
        ----------
        rating_column : str
            Column containing ratings
        rank_column : str
            Column containing 1-based global positions
        thresholds : List[Tuple[str, float]], optional
            (tier, minimum rating) pairs, highest first
        top_tier_size : int
            Positions always labelled with the top tier
        """
        if top_tier_size < 0:
            raise ValueError("top_tier_size must be non-negative")
        self.rating_column = rating_column
        self.rank_column = rank_column
        self.thresholds = thresholds or TIER_THRESHOLDS
        self.top_tier_size = top_tier_size

    def assign_grades(
        self, df: pl.DataFrame, column_name: str = "tier"
    ) -> pl.DataFrame:
        """Assign tiers from rating thresholds and leaderboard positions."""
        for column in (self.rating_column, self.rank_column):
            if column not in df.columns:
                raise ValueError(f"Column '{column}' not found in DataFrame")

        rating = pl.col(self.rating_column)
        rank = pl.col(self.rank_column)

        expr = pl.when(
            (rank >= 1) & (rank <= self.top_tier_size)
        ).then(pl.lit(TOP_TIER))
        for name, minimum in self.thresholds:
            expr = expr.when(rating >= minimum).then(pl.lit(name))
        expr = expr.otherwise(pl.lit(BOTTOM_TIER))

        return df.with_columns(expr.alias(column_name))
