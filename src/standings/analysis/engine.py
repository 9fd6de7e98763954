"""
Chronological rating fold.

:func:`recompute_all` is the only way to obtain ratings: it replays the
complete match history from the starting rating every time. There is no
entry point that applies a single match to a stored rating, so persisted
and recomputed values cannot drift apart.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Iterable, Mapping, Optional

import polars as pl

from standings.core.config import RatingConfig
from standings.core.elo import singles_deltas, team_deltas
from standings.core.logging import get_logger, log_timing
from standings.core.parser import (
    deduplicate_matches,
    fill_team_scores,
    normalize_matches,
    parse_players,
)
from standings.core.records import MatchRecord, MatchResult, Player
from standings.core.results import (
    FoldDiagnostics,
    FoldResult,
    PlayerStats,
    RatedMatchEntry,
)
from standings.postprocess.grades import rank_transition_note

logger = get_logger(__name__)


def _sort_key(match: MatchRecord) -> tuple:
    # Undated matches replay first
    return (
        match.date is not None,
        match.date or date.min,
        match.round_number,
    )


def sort_matches(matches: Iterable[MatchRecord]) -> list[MatchRecord]:
    """Stable sort by ``(date, round_number)``, undated records first."""
    return sorted(matches, key=_sort_key)


def _match_deltas(
    match: MatchRecord,
    rating1: float,
    rating2: float,
    config: RatingConfig,
) -> tuple[int, int]:
    if match.is_team_match and match.has_team_scores:
        return team_deltas(
            rating1,
            rating2,
            match.score1,
            match.score2,
            match.team_score1,
            match.team_score2,
            config,
        )
    return singles_deltas(
        rating1, rating2, match.score1, match.score2, config
    )


def _entry(
    match: MatchRecord,
    side: int,
    names: Mapping[str, str],
    rating_before: float,
    opponent_rating_before: float,
    delta: int,
) -> RatedMatchEntry:
    if side == 1:
        own, opp = match.score1, match.score2
        opponent_id = match.player2_id
        faction, opponent_faction = match.player1_faction, match.player2_faction
        team_id, opponent_team_id = match.team1_id, match.team2_id
        team_score, opponent_team_score = match.team_score1, match.team_score2
    else:
        own, opp = match.score2, match.score1
        opponent_id = match.player1_id
        faction, opponent_faction = match.player2_faction, match.player1_faction
        team_id, opponent_team_id = match.team2_id, match.team1_id
        team_score, opponent_team_score = match.team_score2, match.team_score1

    return RatedMatchEntry(
        date=match.date,
        event_name=match.event_name,
        round_number=match.round_number,
        opponent_id=opponent_id,
        opponent_name=names.get(opponent_id, opponent_id),
        score=own,
        opponent_score=opp,
        faction=faction,
        opponent_faction=opponent_faction,
        match_type=match.match_type,
        rating_before=rating_before,
        rating_after=rating_before + delta,
        delta=delta,
        opponent_rating_before=opponent_rating_before,
        result=MatchResult.from_scores(own, opp),
        team_id=team_id,
        opponent_team_id=opponent_team_id,
        team_score=team_score,
        opponent_team_score=opponent_team_score,
    )


def annotate_rank_transitions(
    history: Iterable[RatedMatchEntry],
) -> list[RatedMatchEntry]:
    """Return a copy of ``history`` with promotion and demotion notes."""
    annotated = []
    for entry in history:
        note = rank_transition_note(
            entry.rating_before, entry.rating_after, entry.delta
        )
        if note != entry.rank_note:
            entry = replace(entry, rank_note=note)
        annotated.append(entry)
    return annotated


def recompute_all(
    matches: Iterable[Mapping[str, Any] | MatchRecord] | pl.DataFrame,
    players: Optional[
        Mapping[str, Player] | Iterable[Mapping[str, Any]] | pl.DataFrame
    ] = None,
    config: Optional[RatingConfig] = None,
) -> FoldResult:
    """Replay every match in chronological order and return final state.

    Args:
        matches: Raw rows (either export schema), canonical records or a
            polars DataFrame of raw rows.
        players: Optional roster. When given, matches that reference a
            player id missing from it are skipped.
        config: Rating parameters. Defaults to :class:`RatingConfig`.

    Returns:
        A :class:`FoldResult` with final ratings, win/loss/draw counters,
        per-player histories and diagnostics.
    """
    config = config or RatingConfig()

    roster: Optional[Mapping[str, Player]] = None
    if players is not None:
        roster = (
            players if isinstance(players, Mapping) else parse_players(players)
        )
    names = {pid: player.name for pid, player in (roster or {}).items()}

    records, report = normalize_matches(matches)
    records, duplicates = deduplicate_matches(records)
    records = fill_team_scores(records)

    unknown = 0
    if roster is not None:
        known = []
        for match in records:
            if match.player1_id in roster and match.player2_id in roster:
                known.append(match)
            else:
                unknown += 1
                logger.debug(
                    "Skipping match with unknown player: %s vs %s",
                    match.player1_id,
                    match.player2_id,
                )
        if unknown:
            logger.warning(
                "Skipped %d matches referencing players not in the roster",
                unknown,
            )
        records = known

    ordered = sort_matches(records)

    ratings: dict[str, float] = {}
    stats: dict[str, PlayerStats] = {}
    histories: dict[str, list[RatedMatchEntry]] = {}

    with log_timing(logger, f"replaying {len(ordered)} matches"):
        for match in ordered:
            p1, p2 = match.player1_id, match.player2_id
            for pid in (p1, p2):
                if pid not in ratings:
                    ratings[pid] = config.starting_rating
                    stats[pid] = PlayerStats()
                    histories[pid] = []

            rating1, rating2 = ratings[p1], ratings[p2]
            delta1, delta2 = _match_deltas(match, rating1, rating2, config)

            entry1 = _entry(match, 1, names, rating1, rating2, delta1)
            entry2 = _entry(match, 2, names, rating2, rating1, delta2)
            stats[p1].record(entry1.result)
            stats[p2].record(entry2.result)
            histories[p1].append(entry1)
            histories[p2].append(entry2)

            ratings[p1] = rating1 + delta1
            ratings[p2] = rating2 + delta2

    final_histories = {
        pid: tuple(annotate_rank_transitions(history))
        for pid, history in histories.items()
    }

    diagnostics = FoldDiagnostics(
        applied=len(ordered),
        duplicates=duplicates,
        unknown_players=unknown,
        invalid_rows=report.invalid,
    )
    logger.info(
        "Rated %d players from %d matches (%d duplicates, %d invalid rows)",
        len(ratings),
        diagnostics.applied,
        diagnostics.duplicates,
        diagnostics.invalid_rows,
    )
    return FoldResult(
        ratings=ratings,
        stats=stats,
        histories=final_histories,
        matches=tuple(ordered),
        diagnostics=diagnostics,
        starting_rating=config.starting_rating,
    )


def rating_after_each_match(result: FoldResult, player_id: str) -> list[float]:
    """Rating after every match of ``player_id``, oldest first."""
    return [entry.rating_after for entry in result.history(player_id)]
