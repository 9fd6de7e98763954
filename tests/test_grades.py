import polars as pl
import pytest

from standings.postprocess.grades import (
    TIER_ORDER,
    TierGradeSystem,
    rank_tier,
    rank_tier_for_position,
    rank_transition_note,
)


@pytest.mark.parametrize(
    "rating, tier",
    [
        (2400, "Chapter-Master"),
        (2000, "Chapter-Master"),
        (1999.9, "War-Lord"),
        (1900, "War-Lord"),
        (1750, "Captain"),
        (1600, "Lieutenant"),
        (1599, "Sergeant"),
        (1450, "Sergeant"),
        (1300, "Trooper"),
        (1299, "Scout"),
        (800, "Scout"),
    ],
)
def test_rank_tier_thresholds(rating, tier):
    assert rank_tier(rating) == tier


def test_top_ten_override_wins_over_rating():
    assert rank_tier(1550, is_in_global_top10=True) == "War-Master"
    assert rank_tier_for_position(1550, 7) == "War-Master"
    assert rank_tier_for_position(1550, 10) == "War-Master"
    assert rank_tier_for_position(1550, 11) == "Sergeant"
    assert rank_tier_for_position(1550, None) == "Sergeant"


def test_custom_top_tier_size():
    assert rank_tier_for_position(1200, 3, top_tier_size=3) == "War-Master"
    assert rank_tier_for_position(1200, 4, top_tier_size=3) == "Scout"
    assert rank_tier_for_position(1200, 1, top_tier_size=0) == "Scout"


def test_tier_order_lowest_to_highest():
    assert TIER_ORDER[0] == "Scout"
    assert TIER_ORDER[-1] == "War-Master"
    assert TIER_ORDER.index("Captain") > TIER_ORDER.index("Lieutenant")


def test_rank_transition_notes():
    assert rank_transition_note(1440, 1460, 20) == "Promoted to Sergeant"
    assert rank_transition_note(1460, 1437, -23) == "Demoted to Trooper"
    assert rank_transition_note(1500, 1510, 10) is None
    assert rank_transition_note(1500, 1500, 0) is None


def test_rank_transition_ignores_top_ten():
    # A jump across two boundaries names the final tier
    assert rank_transition_note(1590, 1760, 170) == "Promoted to Captain"


class TestTierGradeSystem:
    def test_assigns_tiers_with_override(self):
        df = pl.DataFrame(
            {"rank": [1, 2, 3, 4], "rating": [1400.0, 1350.0, 2100.0, 1200.0]}
        )
        graded = TierGradeSystem(top_tier_size=2).assign_grades(df)
        assert graded["tier"].to_list() == [
            "War-Master",
            "War-Master",
            "Chapter-Master",
            "Scout",
        ]

    def test_custom_column_name(self):
        df = pl.DataFrame({"rank": [20], "rating": [1610.0]})
        graded = TierGradeSystem().assign_grades(df, column_name="grade")
        assert graded["grade"].to_list() == ["Lieutenant"]

    def test_missing_column_raises(self):
        df = pl.DataFrame({"rating": [1500.0]})
        with pytest.raises(ValueError, match="rank"):
            TierGradeSystem().assign_grades(df)

    def test_negative_top_tier_size_raises(self):
        with pytest.raises(ValueError):
            TierGradeSystem(top_tier_size=-1)
