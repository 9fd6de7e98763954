import pytest

from standings.analysis.engine import recompute_all
from standings.core.config import (
    LeaderboardConfig,
    LeaderboardFilter,
    RatingConfig,
)
from standings.core.records import MatchRecord, Player
from standings.core.results import FoldResult, PlayerStats
from standings.postprocess.rankings import (
    build_leaderboard,
    filter_leaderboard,
    region_matches,
)


def _fold(ratings, games=1):
    return FoldResult(
        ratings=dict(ratings),
        stats={pid: PlayerStats(wins=games, games=games) for pid in ratings},
        histories={},
    )


def _roster():
    return {
        "p1": Player("p1", "Alice", state="NSW"),
        "p2": Player("p2", "Bruno", state="VIC"),
        "p3": Player("p3", "Chen", state="NZN"),
        "p4": Player("p4", "Dana", state="nsw"),
        "p5": Player("p5", "Eve", state="QLD"),
    }


def test_sorted_by_rating_with_global_ranks():
    board = build_leaderboard(_fold({"a": 1500, "b": 1700, "c": 1600}))
    assert [e.player_id for e in board] == ["b", "c", "a"]
    assert [e.rank for e in board] == [1, 2, 3]
    assert board.global_rank("a") == 3
    assert board.get("missing") is None


def test_ties_broken_by_name_then_id():
    roster = {
        "x2": Player("x2", "Zed"),
        "x1": Player("x1", "Amy"),
    }
    board = build_leaderboard(_fold({"x2": 1500, "x1": 1500}), roster)
    assert [e.name for e in board] == ["Amy", "Zed"]


def test_top_ten_override():
    # Twelve players from 1600 down to 1490
    ratings = {f"p{i:02d}": 1610 - i * 10 for i in range(1, 13)}
    board = build_leaderboard(_fold(ratings))
    seventh = board.entries[6]
    assert seventh.rating == 1540
    assert seventh.rank == 7
    assert seventh.tier == "War-Master"
    assert board.entries[10].tier == "Sergeant"
    assert len(board.top_tier_ids) == 10
    assert board.entries[11].player_id not in board.top_tier_ids


def test_seventh_place_at_1550_is_war_master():
    ratings = {f"p{i}": 2000 - i * 50 for i in range(1, 7)}
    ratings["seventh"] = 1550
    ratings.update({f"q{i}": 1400 - i for i in range(1, 5)})
    board = build_leaderboard(_fold(ratings))
    entry = board.get("seventh")
    assert entry.rank == 7
    assert entry.tier == "War-Master"


def test_roster_players_without_matches_included():
    board = build_leaderboard(_fold({"p1": 1550}), _roster())
    assert len(board) == 5
    inactive = board.get("p5")
    assert inactive.rating == 1500
    assert inactive.games == 0
    assert not inactive.has_matches
    assert inactive.win_rate == 0.0
    assert board.get("p1").region == "NSW"


def test_inactive_players_use_fold_starting_rating():
    fold = recompute_all(
        [
            MatchRecord(
                date=None,
                player1_id="p1",
                player2_id="p2",
                score1=80,
                score2=40,
                player1_faction="Orks",
                player2_faction="Necrons",
                event_name="RTT Cup",
                round_number=1,
            )
        ],
        config=RatingConfig(starting_rating=1200),
    )
    assert fold.starting_rating == 1200
    board = build_leaderboard(fold, _roster())
    assert board.get("p5").rating == 1200
    assert build_leaderboard(fold, _roster(), starting_rating=1000).get(
        "p5"
    ).rating == 1000


def test_exclude_inactive():
    board = build_leaderboard(
        _fold({"p1": 1550}),
        _roster(),
        LeaderboardConfig(include_inactive=False),
    )
    assert [e.player_id for e in board] == ["p1"]


def test_negative_top_tier_size_rejected():
    with pytest.raises(ValueError):
        LeaderboardConfig(top_tier_size=-1)


@pytest.mark.parametrize(
    "state, region, expected",
    [
        ("NSW", "Australia", True),
        ("wa", "Australia", True),
        ("NZN", "Australia", False),
        ("NZS", "New Zealand", True),
        ("VIC", "New Zealand", False),
        ("vic", "VIC", True),
        ("QLD", "VIC", False),
        (None, "All", True),
        (None, "VIC", False),
        ("", "Australia", False),
    ],
)
def test_region_matches(state, region, expected):
    assert region_matches(state, region) is expected


class TestFilterLeaderboard:
    def _board(self):
        ratings = {"p1": 1700, "p2": 1650, "p3": 1600, "p4": 1550}
        fold = FoldResult(
            ratings=ratings,
            stats={pid: PlayerStats(wins=1, games=1) for pid in ratings},
            histories={},
        )
        return build_leaderboard(fold, _roster())

    def test_no_filter_keeps_global_numbering(self):
        rows = filter_leaderboard(self._board())
        assert [r.position for r in rows] == [1, 2, 3, 4, 5]

    def test_bare_region_filter_renumbers(self):
        rows = filter_leaderboard(
            self._board(), LeaderboardFilter(region="Australia")
        )
        assert [r.entry.player_id for r in rows] == ["p1", "p2", "p4", "p5"]
        assert [r.position for r in rows] == [1, 2, 3, 4]

    def test_region_with_search_keeps_global_rank(self):
        rows = filter_leaderboard(
            self._board(), LeaderboardFilter(search="da", region="Australia")
        )
        assert [r.entry.player_id for r in rows] == ["p4"]
        assert [r.position for r in rows] == [4]

    def test_region_with_match_toggle_keeps_global_rank(self):
        rows = filter_leaderboard(
            self._board(),
            LeaderboardFilter(region="Australia", hide_no_matches=True),
        )
        assert [r.entry.player_id for r in rows] == ["p1", "p2", "p4"]
        assert [r.position for r in rows] == [1, 2, 4]

    def test_search_only_keeps_global_rank(self):
        rows = filter_leaderboard(self._board(), LeaderboardFilter(search="CHEN"))
        assert [(r.position, r.entry.name) for r in rows] == [(3, "Chen")]

    def test_filters_do_not_change_ratings_or_tiers(self):
        board = self._board()
        rows = filter_leaderboard(board, LeaderboardFilter(region="VIC"))
        (row,) = rows
        assert row.position == 1
        assert row.entry == board.get("p2")
        assert row.entry.tier == "War-Master"


def test_to_dataframe_columns():
    df = build_leaderboard(_fold({"a": 1500}), {}).to_dataframe()
    assert df.columns == [
        "rank",
        "player_id",
        "name",
        "region",
        "country",
        "rating",
        "tier",
        "wins",
        "losses",
        "draws",
        "games",
        "win_rate",
    ]
    assert df.row(0, named=True)["win_rate"] == 100.0
