"""
Final placements for one event instance.

An event is a teams event when every one of its games totals exactly
``team_game_total`` points (20 in league exports); a single game with any
other total makes the whole event singles.

Singles players are ranked by wins, then total raw score. Teams are ranked
by round wins, then total aggregate points, where each team pairing of a
round is settled once from the summed game scores of its players.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from typing import Iterable, Mapping, Optional, Sequence

from standings.core.config import PlacementConfig
from standings.core.constants import EIGHT_PLAYER_ROUND_TOTAL, TEAM_GAME_TOTAL
from standings.core.parser import deduplicate_matches
from standings.core.records import MatchRecord, MatchResult, Player
from standings.core.results import (
    EventPlacement,
    RoundResult,
    SinglesPlacement,
    TeamPlacement,
)

logger = logging.getLogger(__name__)


def is_team_event(
    matches: Sequence[MatchRecord], team_game_total: int = TEAM_GAME_TOTAL
) -> bool:
    """Every game of the event totals ``team_game_total``."""
    return bool(matches) and all(
        match.total_score == team_game_total for match in matches
    )


def is_eight_player_round(
    round_matches: Iterable[MatchRecord],
    total: int = EIGHT_PLAYER_ROUND_TOTAL,
) -> bool:
    """A round whose games add up to ``total`` points (eight games of 20)."""
    return sum(match.total_score for match in round_matches) == total


def round_numbers(matches: Iterable[MatchRecord]) -> tuple[int, ...]:
    return tuple(sorted({match.round_number for match in matches}))


def _outcome(own: float, opponent: float, draw_margin: float = 0) -> MatchResult:
    if abs(own - opponent) <= draw_margin:
        return MatchResult.DRAW
    return MatchResult.WIN if own > opponent else MatchResult.LOSS


def _place_singles(
    matches: Sequence[MatchRecord],
    rounds: tuple[int, ...],
    players: Mapping[str, Player],
) -> list[SinglesPlacement]:
    counters: dict[str, Counter] = {}
    totals: dict[str, float] = defaultdict(float)
    factions: dict[str, Counter] = {}
    per_round: dict[str, dict[int, RoundResult]] = defaultdict(dict)

    for match in matches:
        sides = (
            (match.player1_id, match.player2_id, match.score1, match.score2,
             match.player1_faction),
            (match.player2_id, match.player1_id, match.score2, match.score1,
             match.player2_faction),
        )
        for player_id, opponent_id, own, opponent, faction in sides:
            outcome = _outcome(own, opponent)
            counters.setdefault(player_id, Counter())[outcome] += 1
            totals[player_id] += own
            # Counter keeps insertion order, so ties go to the first faction
            factions.setdefault(player_id, Counter())[faction] += 1
            per_round[player_id].setdefault(
                match.round_number,
                RoundResult(
                    round_number=match.round_number,
                    opponent_id=opponent_id,
                    score=own,
                    opponent_score=opponent,
                    outcome=outcome,
                ),
            )

    placements = []
    for player_id, counter in counters.items():
        player = players.get(player_id)
        main_faction = factions[player_id].most_common(1)[0][0]
        placements.append(
            SinglesPlacement(
                player_id=player_id,
                name=player.name if player is not None else player_id,
                wins=counter[MatchResult.WIN],
                losses=counter[MatchResult.LOSS],
                draws=counter[MatchResult.DRAW],
                total_score=totals[player_id],
                games=sum(counter.values()),
                main_faction=main_faction,
                round_results=tuple(
                    per_round[player_id].get(n) for n in rounds
                ),
            )
        )

    placements.sort(key=lambda p: (-p.wins, -p.total_score))
    return placements


def _place_teams(
    matches: Sequence[MatchRecord],
    rounds: tuple[int, ...],
    teams: Mapping[str, str],
    config: PlacementConfig,
) -> tuple[list[TeamPlacement], frozenset[int]]:
    # (round, unordered team pair) -> games of that pairing
    pairings: dict[tuple[int, frozenset], list[MatchRecord]] = defaultdict(list)
    for match in matches:
        if not (match.team1_id and match.team2_id):
            logger.debug("Ignoring team game without team ids: %s", match)
            continue
        key = (match.round_number, frozenset((match.team1_id, match.team2_id)))
        pairings[key].append(match)

    counters: dict[str, Counter] = {}
    points: dict[str, float] = defaultdict(float)
    per_round: dict[str, dict[int, RoundResult]] = defaultdict(dict)

    # Tagged per round, over every pairing of the round
    by_round: dict[int, list[MatchRecord]] = defaultdict(list)
    for match in matches:
        by_round[match.round_number].append(match)
    eight_player_rounds = frozenset(
        round_number
        for round_number, round_matches in by_round.items()
        if is_eight_player_round(round_matches, config.eight_player_total)
    )

    for (round_number, _), pairing_matches in pairings.items():
        aggregate: dict[str, float] = defaultdict(float)
        for match in pairing_matches:
            aggregate[match.team1_id] += match.score1
            aggregate[match.team2_id] += match.score2

        eight_player = round_number in eight_player_rounds

        first = pairing_matches[0]
        for team_id, opponent_id in (
            (first.team1_id, first.team2_id),
            (first.team2_id, first.team1_id),
        ):
            own, opponent = aggregate[team_id], aggregate[opponent_id]
            outcome = _outcome(own, opponent, config.draw_margin)
            counters.setdefault(team_id, Counter())[outcome] += 1
            points[team_id] += own
            per_round[team_id].setdefault(
                round_number,
                RoundResult(
                    round_number=round_number,
                    opponent_id=opponent_id,
                    score=own,
                    opponent_score=opponent,
                    outcome=outcome,
                    is_eight_player=eight_player,
                ),
            )

    placements = [
        TeamPlacement(
            team_id=team_id,
            name=teams.get(team_id, team_id),
            round_wins=counter[MatchResult.WIN],
            round_draws=counter[MatchResult.DRAW],
            round_losses=counter[MatchResult.LOSS],
            total_points=points[team_id],
            round_results=tuple(per_round[team_id].get(n) for n in rounds),
        )
        for team_id, counter in counters.items()
    ]
    placements.sort(key=lambda p: (-p.round_wins, -p.total_points))
    return placements, eight_player_rounds


def place_event(
    matches: Iterable[MatchRecord],
    config: Optional[PlacementConfig] = None,
    players: Optional[Mapping[str, Player]] = None,
    teams: Optional[Mapping[str, str]] = None,
) -> EventPlacement:
    """Rank the participants of one event instance.

    Repeated rows of the same game (same players, round and event, plus
    table for team games) are counted once.

    Args:
        matches: Every game of the event (one date and event name).
        config: Team game total, round draw margin and eight-player total.
        players: Roster used for player names.
        teams: Team id to display name.

    Returns:
        An :class:`EventPlacement`; empty when there are no matches.
    """
    config = config or PlacementConfig()
    matches, _ = deduplicate_matches(matches)
    if not matches:
        return EventPlacement(
            event_name="", date=None, is_team_event=False, rounds=(),
            placements=(),
        )

    rounds = round_numbers(matches)
    team_event = is_team_event(matches, config.team_game_total)
    eight_player_rounds: frozenset[int] = frozenset()

    # A 20-point event without team ids can only be ranked per player
    if team_event and any(m.team1_id and m.team2_id for m in matches):
        placements, eight_player_rounds = _place_teams(
            matches, rounds, teams or {}, config
        )
    else:
        team_event = False
        placements = _place_singles(matches, rounds, players or {})

    first = matches[0]
    return EventPlacement(
        event_name=first.event_name,
        date=first.date,
        is_team_event=team_event,
        rounds=rounds,
        placements=tuple(placements),
        eight_player_rounds=eight_player_rounds,
    )
