"""
Margin-of-victory Elo updates for singles and team games.

Singles updates are zero-sum: the change is computed once, from the winner's
point of view, and the loser receives the negation. Team updates are computed
independently per side, because each side's change also depends on how its
team did in the round.
"""

from __future__ import annotations

import math
from typing import Optional

from standings.core.config import RatingConfig
from standings.core.constants import (
    DEFAULT_K_FACTOR,
    ELO_SCALE,
    MARGIN_DAMPING,
    MARGIN_RATING_SCALE,
)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Keeps ``round_half_away(-x) == -round_half_away(x)`` so both sides of a
    match see the same magnitude.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def expected_score(rating_a: float, rating_b: float) -> float:
    """Probability-like expected score of A against B."""
    return 1.0 / (1.0 + 10.0 ** ((rating_b - rating_a) / ELO_SCALE))


def actual_score(score_a: float, score_b: float) -> float:
    if score_a > score_b:
        return 1.0
    if score_a < score_b:
        return 0.0
    return 0.5


def margin_multiplier(
    rating_a: float, rating_b: float, score_a: float, score_b: float
) -> float:
    """Scale factor growing with the score gap.

    Damped when A is already the higher rated side so expected blowouts do
    not inflate ratings.
    """
    margin = abs(score_a - score_b)
    damping = MARGIN_DAMPING / (
        (rating_a - rating_b) * MARGIN_RATING_SCALE + MARGIN_DAMPING
    )
    return math.log(margin + 1.0) * damping


def _raw_change(
    rating_a: float,
    rating_b: float,
    score_a: float,
    score_b: float,
    k_factor: float,
) -> float:
    return (
        k_factor
        * margin_multiplier(rating_a, rating_b, score_a, score_b)
        * (actual_score(score_a, score_b) - expected_score(rating_a, rating_b))
    )


def rating_delta(
    rating_a: float,
    rating_b: float,
    score_a: float,
    score_b: float,
    k_factor: float = DEFAULT_K_FACTOR,
) -> int:
    """Rating change for A after a singles game against B.

    A drawn game never moves ratings.

    Examples:
        >>> rating_delta(1500, 1500, 100, 50)
        63
        >>> rating_delta(1500, 1500, 60, 60)
        0
    """
    if score_a == score_b:
        return 0
    return round_half_away(
        _raw_change(rating_a, rating_b, score_a, score_b, k_factor)
    )


def clamp_change(
    delta: int,
    min_change: Optional[int] = None,
    max_change: Optional[int] = None,
) -> int:
    """Bound the magnitude of a non-zero change; zero stays zero."""
    if delta == 0:
        return 0
    magnitude = abs(delta)
    if min_change is not None:
        magnitude = max(magnitude, min_change)
    if max_change is not None:
        magnitude = min(magnitude, max_change)
    return int(math.copysign(magnitude, delta))


def is_bye(score1: float, score2: float, game_total: int) -> bool:
    """A zero score in a game that is not a 20-point team game is a forfeit."""
    return (score1 == 0 or score2 == 0) and score1 + score2 != game_total


def singles_deltas(
    rating1: float,
    rating2: float,
    score1: float,
    score2: float,
    config: RatingConfig | None = None,
) -> tuple[int, int]:
    """Changes for both sides of a singles game, ``delta2 == -delta1``.

    With ``config.bye_penalty`` set, a forfeit costs the side that scored
    zero a flat penalty and leaves the other side unchanged.
    """
    config = config or RatingConfig()

    if score1 == score2:
        return 0, 0

    if config.bye_penalty is not None and is_bye(
        score1, score2, config.team_game_total
    ):
        if score1 == 0:
            return -config.bye_penalty, 0
        return 0, -config.bye_penalty

    if score1 > score2:
        gain = rating_delta(rating1, rating2, score1, score2, config.k_factor)
        gain = clamp_change(gain, config.min_change, config.max_change)
        return gain, -gain

    gain = rating_delta(rating2, rating1, score2, score1, config.k_factor)
    gain = clamp_change(gain, config.min_change, config.max_change)
    return -gain, gain


def team_round_result(
    team_score: float, opponent_team_score: float, draw_margin: float
) -> float:
    """1 for a team round win, 0 for a loss, 0.5 within the draw margin."""
    if abs(team_score - opponent_team_score) <= draw_margin:
        return 0.5
    return 1.0 if team_score > opponent_team_score else 0.0


def team_rating_delta(
    rating_self: float,
    rating_opp: float,
    self_game_score: float,
    opp_game_score: float,
    self_team_score: float,
    opp_team_score: float,
    config: RatingConfig | None = None,
) -> int:
    """Rating change for one player in a team game.

    The individual change uses the singles formula from this player's side.
    The team round result then decides its sign and weight: a drawn round
    keeps the individual change, agreement between individual and team
    result applies it in full, and a mixed result applies
    ``config.team_mixed_weight`` of it. In both decided cases the sign
    follows the team.
    """
    config = config or RatingConfig()

    individual = actual_score(self_game_score, opp_game_score)
    change = _raw_change(
        rating_self,
        rating_opp,
        self_game_score,
        opp_game_score,
        config.k_factor,
    )
    team = team_round_result(
        self_team_score, opp_team_score, config.team_draw_margin
    )

    if team != 0.5:
        sign = 1.0 if team == 1.0 else -1.0
        weight = 1.0 if individual == team else config.team_mixed_weight
        change = sign * weight * abs(change)

    delta = round_half_away(change)
    return clamp_change(delta, config.min_change, config.max_change)


def team_deltas(
    rating1: float,
    rating2: float,
    score1: float,
    score2: float,
    team_score1: float,
    team_score2: float,
    config: RatingConfig | None = None,
) -> tuple[int, int]:
    """Independent changes for both sides of a team game."""
    delta1 = team_rating_delta(
        rating1, rating2, score1, score2, team_score1, team_score2, config
    )
    delta2 = team_rating_delta(
        rating2, rating1, score2, score1, team_score2, team_score1, config
    )
    return delta1, delta2
