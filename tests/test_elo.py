import math

import pytest

from standings.core.config import RatingConfig
from standings.core.elo import (
    clamp_change,
    expected_score,
    is_bye,
    margin_multiplier,
    rating_delta,
    round_half_away,
    singles_deltas,
    team_deltas,
    team_rating_delta,
)


def test_expected_score_equal_ratings_is_half():
    assert expected_score(1500, 1500) == 0.5


def test_expected_score_favours_higher_rating():
    e = expected_score(1600, 1400)
    assert e == pytest.approx(1 / (1 + 10 ** (-0.5)))
    assert expected_score(1400, 1600) == pytest.approx(1 - e)


def test_rating_delta_equal_players_blowout():
    # E = 0.5, damping = 1
    expected = round(32 * math.log(51) * 0.5)
    assert rating_delta(1500, 1500, 100, 50) == expected == 63


def test_rating_delta_draw_is_zero():
    assert rating_delta(1500, 1500, 60, 60) == 0
    assert rating_delta(1800, 1200, 45, 45) == 0


def test_margin_multiplier_damped_for_favourite():
    even = margin_multiplier(1500, 1500, 80, 40)
    favourite = margin_multiplier(1900, 1500, 80, 40)
    underdog = margin_multiplier(1500, 1900, 80, 40)
    assert favourite < even < underdog


def test_larger_margin_gives_larger_change():
    assert rating_delta(1500, 1500, 90, 10) > rating_delta(1500, 1500, 55, 45)


def test_round_half_away_is_symmetric():
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3
    assert round_half_away(2.49) == 2
    assert round_half_away(-0.4) == 0


class TestSinglesDeltas:
    def test_winner_gain_equals_loser_loss(self):
        d1, d2 = singles_deltas(1620, 1480, 72, 41)
        assert d1 > 0
        assert d2 == -d1

    def test_second_player_wins(self):
        assert singles_deltas(1500, 1500, 50, 100) == (-63, 63)

    @pytest.mark.parametrize(
        "r1, r2, s1, s2",
        [
            (1500, 1500, 100, 50),
            (1732, 1411, 33, 87),
            (1411, 1732, 61, 60),
            (2050, 1300, 99, 0),
        ],
    )
    def test_zero_sum(self, r1, r2, s1, s2):
        d1, d2 = singles_deltas(r1, r2, s1, s2)
        assert d1 + d2 == 0

    def test_draw_no_change(self):
        assert singles_deltas(1700, 1400, 50, 50) == (0, 0)

    def test_upset_moves_more_than_expected_win(self):
        upset, _ = singles_deltas(1400, 1700, 70, 50)
        expected, _ = singles_deltas(1700, 1400, 70, 50)
        assert upset > expected > 0


class TestLeagueRules:
    def test_clamp_change_bounds_magnitude(self):
        assert clamp_change(5, 10, 100) == 10
        assert clamp_change(-5, 10, 100) == -10
        assert clamp_change(-150, 10, 100) == -100
        assert clamp_change(42, 10, 100) == 42
        assert clamp_change(0, 10, 100) == 0

    def test_clamp_disabled_by_default(self):
        assert clamp_change(3) == 3

    def test_is_bye(self):
        assert is_bye(0, 45, 20)
        assert is_bye(62, 0, 20)
        # 0-20 in a team game is a real result
        assert not is_bye(0, 20, 20)
        assert not is_bye(30, 45, 20)

    def test_bye_costs_only_zero_scorer(self):
        config = RatingConfig.league()
        assert singles_deltas(1500, 1500, 0, 45, config) == (-10, 0)
        assert singles_deltas(1500, 1500, 45, 0, config) == (0, -10)

    def test_team_total_zero_is_not_bye(self):
        config = RatingConfig.league()
        # round(32 * ln(21) * 0.5) = 49
        assert singles_deltas(1500, 1500, 0, 20, config) == (-49, 49)

    def test_small_changes_raised_to_minimum(self):
        config = RatingConfig.league()
        # Heavy favourite winning by one point moves about 1 point
        assert singles_deltas(1900, 1300, 51, 50) == (1, -1)
        d1, d2 = singles_deltas(1900, 1300, 51, 50, config)
        assert d1 == 10
        assert d2 == -10


class TestTeamRatingDelta:
    def test_winning_team_big_margin_beats_losing_team_narrow_win(self):
        big = team_rating_delta(1500, 1500, 18, 2, 90, 70)
        narrow = team_rating_delta(1500, 1500, 11, 9, 70, 90)
        assert big > narrow
        # full weight: round(16 * ln 17)
        assert big == 45
        # mixed result: half weight, sign of the team
        assert narrow == -9

    def test_team_draw_keeps_individual_change(self):
        # round(16 * ln 3) = 18
        assert team_rating_delta(1500, 1500, 11, 9, 80, 75) == 18
        assert team_rating_delta(1500, 1500, 11, 9, 85, 75) == 18

    def test_individual_loss_on_winning_team_is_positive(self):
        assert team_rating_delta(1500, 1500, 9, 11, 90, 70) == 9

    def test_individual_draw_on_team_draw_is_zero(self):
        assert team_rating_delta(1600, 1500, 10, 10, 80, 80) == 0

    def test_sides_use_their_own_ordering(self):
        d1, d2 = team_deltas(1640, 1420, 13, 7, 84, 76)
        assert d1 == team_rating_delta(1640, 1420, 13, 7, 84, 76)
        assert d2 == team_rating_delta(1420, 1640, 7, 13, 76, 84)

    def test_not_forced_zero_sum(self):
        d1, d2 = team_deltas(1700, 1400, 12, 8, 70, 90)
        assert d1 != -d2
