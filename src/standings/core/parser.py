"""
Normalization of raw league rows into canonical records.

Singles and teams exports name their columns differently (``eventName`` or
``event_name``, ``teamscore1`` or ``teamScore1`` and so on). Each logical
field is resolved through an ordered list of candidate keys; the first
present, non-empty value wins.

Rows that cannot be rated (missing player id, non-numeric score) are not
errors: :func:`normalize_match` returns ``None`` for them and
:func:`normalize_matches` counts them in a :class:`NormalizationReport`.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

import polars as pl

from standings.core.constants import (
    DEFAULT_ROUND_NUMBER,
    UNKNOWN_EVENT,
    UNKNOWN_FACTION,
)
from standings.core.records import MatchRecord, Player
from standings.core.results import NormalizationReport

logger = logging.getLogger(__name__)

# Logical field -> candidate keys, in order of preference
MATCH_FIELDS: dict[str, tuple[str, ...]] = {
    "date": ("date", "matchDate", "match_date"),
    "player1_id": ("player1Id", "player1_id"),
    "player2_id": ("player2Id", "player2_id"),
    "score1": ("score1",),
    "score2": ("score2",),
    "player1_faction": ("player1Faction", "player1_faction"),
    "player2_faction": ("player2Faction", "player2_faction"),
    "event_name": ("eventName", "event_name"),
    "round_number": ("gameNumber", "game_number", "roundNumber", "round_number"),
    "team_score1": ("teamScore1", "team_score1", "teamscore1"),
    "team_score2": ("teamScore2", "team_score2", "teamscore2"),
    "team1_id": ("team1Id", "team1_id", "player1TeamId", "player1team_id"),
    "team2_id": ("team2Id", "team2_id", "player2TeamId", "player2team_id"),
    "table_number": ("tableNumber", "table_number", "table"),
    "is_team_match": ("isTeamMatch", "is_team_match", "isTeams"),
}

PLAYER_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id", "playerId", "player_id"),
    "name": ("name", "playerName", "player_name"),
    "state": ("state", "region"),
    "country": ("country",),
    "rating": ("rating", "elo"),
}

_TEAM_MARKERS = ("team_score1", "team_score2", "team1_id", "team2_id")

_DATE_FORMATS = ("%d/%m/%Y", "%d-%m-%Y", "%Y/%m/%d", "%d/%m/%y")

_TRUE_STRINGS = {"1", "true", "yes", "y", "t"}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float) and value != value:
        return True
    return False


def resolve_field(
    row: Mapping[str, Any],
    field: str,
    table: Mapping[str, tuple[str, ...]] = MATCH_FIELDS,
) -> Any:
    """Return the first present, non-empty candidate value for ``field``.

    Strings are returned stripped. Missing fields resolve to ``None``.
    """
    for key in table[field]:
        value = row.get(key)
        if _is_blank(value):
            continue
        return value.strip() if isinstance(value, str) else value
    return None


def parse_score(value: Any) -> float | int | None:
    """Parse a raw score; integral values come back as ``int``."""
    if _is_blank(value) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return int(number) if number.is_integer() else number


def parse_round_number(value: Any) -> int:
    score = parse_score(value)
    if score is None:
        return DEFAULT_ROUND_NUMBER
    return int(score)


def parse_date(value: Any) -> Optional[date]:
    """Parse ISO or day-first dates; unparseable values give ``None``."""
    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for date_format in _DATE_FORMATS:
        try:
            return datetime.strptime(text, date_format).date()
        except ValueError:
            continue
    return None


def _parse_flag(value: Any) -> Optional[bool]:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_STRINGS


def _as_id(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def invalid_reason(row: Mapping[str, Any]) -> Optional[str]:
    """Why ``row`` cannot be rated, or ``None`` when it is usable."""
    if _as_id(resolve_field(row, "player1_id")) is None:
        return "missing_player1_id"
    if _as_id(resolve_field(row, "player2_id")) is None:
        return "missing_player2_id"
    if parse_score(resolve_field(row, "score1")) is None:
        return "invalid_score1"
    if parse_score(resolve_field(row, "score2")) is None:
        return "invalid_score2"
    return None


def normalize_match(
    row: Mapping[str, Any] | MatchRecord,
    is_team_match: Optional[bool] = None,
) -> Optional[MatchRecord]:
    """Convert one raw singles or teams row into a :class:`MatchRecord`.

    Args:
        row: Raw row (mapping) or an already canonical record.
        is_team_match: Force the schema. When ``None`` the row's own flag
            or the presence of team fields decides.

    Returns:
        The canonical record, or ``None`` when the row is invalid.
    """
    if isinstance(row, MatchRecord):
        return row
    if invalid_reason(row) is not None:
        return None

    if is_team_match is None:
        is_team_match = _parse_flag(resolve_field(row, "is_team_match"))
    if is_team_match is None:
        is_team_match = any(
            resolve_field(row, marker) is not None for marker in _TEAM_MARKERS
        )

    team_fields: dict[str, Any] = {}
    if is_team_match:
        team_fields = {
            "team_score1": parse_score(resolve_field(row, "team_score1")),
            "team_score2": parse_score(resolve_field(row, "team_score2")),
            "team1_id": _as_id(resolve_field(row, "team1_id")),
            "team2_id": _as_id(resolve_field(row, "team2_id")),
            "table_number": _as_id(resolve_field(row, "table_number")),
        }

    return MatchRecord(
        date=parse_date(resolve_field(row, "date")),
        player1_id=_as_id(resolve_field(row, "player1_id")),
        player2_id=_as_id(resolve_field(row, "player2_id")),
        score1=parse_score(resolve_field(row, "score1")),
        score2=parse_score(resolve_field(row, "score2")),
        player1_faction=resolve_field(row, "player1_faction")
        or UNKNOWN_FACTION,
        player2_faction=resolve_field(row, "player2_faction")
        or UNKNOWN_FACTION,
        event_name=resolve_field(row, "event_name") or UNKNOWN_EVENT,
        round_number=parse_round_number(resolve_field(row, "round_number")),
        is_team_match=bool(is_team_match),
        **team_fields,
    )


def iter_rows(rows: Iterable[Mapping[str, Any]] | pl.DataFrame):
    """Iterate mappings from a list of dicts or a polars DataFrame."""
    if isinstance(rows, pl.DataFrame):
        return rows.iter_rows(named=True)
    return iter(rows)


def normalize_matches(
    rows: Iterable[Mapping[str, Any] | MatchRecord] | pl.DataFrame,
    is_team_match: Optional[bool] = None,
) -> tuple[list[MatchRecord], NormalizationReport]:
    """Normalize many rows, dropping and counting invalid ones.

    Args:
        rows: Raw rows (dicts or a polars DataFrame) or canonical records.
        is_team_match: Force the teams or singles schema for every row.

    Returns:
        Tuple of (valid records in input order, report).
    """
    report = NormalizationReport()
    records: list[MatchRecord] = []

    for index, row in enumerate(iter_rows(rows)):
        report.total += 1
        if isinstance(row, MatchRecord):
            records.append(row)
            report.valid += 1
            continue
        reason = invalid_reason(row)
        if reason is not None:
            report.invalid_reasons[reason] += 1
            logger.debug("Dropping row %d: %s", index, reason)
            continue
        records.append(normalize_match(row, is_team_match=is_team_match))
        report.valid += 1

    if report.invalid:
        logger.info("Normalized matches: %s", report)
    return records, report


def _pairing_key(match: MatchRecord) -> tuple:
    return (
        match.date,
        match.event_name,
        match.round_number,
        frozenset((match.team1_id, match.team2_id)),
    )


def fill_team_scores(matches: Iterable[MatchRecord]) -> list[MatchRecord]:
    """Derive missing team scores from the round's pairing.

    A team game without team scores gets, for each side, the sum of that
    team's game scores against the same opposing team in the same event
    instance and round. Games without both team ids are left unchanged.
    """
    matches = list(matches)
    totals: dict[tuple, dict[str, float]] = defaultdict(
        lambda: defaultdict(float)
    )
    for match in matches:
        if not match.is_team_match or not (match.team1_id and match.team2_id):
            continue
        pairing = totals[_pairing_key(match)]
        pairing[match.team1_id] += match.score1
        pairing[match.team2_id] += match.score2

    filled: list[MatchRecord] = []
    for match in matches:
        if (
            match.is_team_match
            and not match.has_team_scores
            and match.team1_id
            and match.team2_id
        ):
            pairing = totals[_pairing_key(match)]
            match = replace(
                match,
                team_score1=pairing[match.team1_id],
                team_score2=pairing[match.team2_id],
            )
        filled.append(match)
    return filled


def deduplicate_matches(
    matches: Iterable[MatchRecord],
) -> tuple[list[MatchRecord], int]:
    """Keep the first occurrence of each logical match.

    Returns:
        Tuple of (kept records in input order, number of duplicates skipped).
    """
    seen: set[tuple] = set()
    kept: list[MatchRecord] = []
    duplicates = 0
    for match in matches:
        key = match.dedup_key
        if key in seen:
            duplicates += 1
            logger.debug("Skipping duplicate match %s", key)
            continue
        seen.add(key)
        kept.append(match)
    return kept, duplicates


def parse_players(
    rows: Iterable[Mapping[str, Any] | Player] | pl.DataFrame,
) -> dict[str, Player]:
    """Build the roster keyed by player id.

    Rows without an id are dropped; the first row for an id wins and a
    missing name falls back to the id.
    """
    roster: dict[str, Player] = {}
    for row in iter_rows(rows):
        if isinstance(row, Player):
            roster.setdefault(row.id, row)
            continue
        player_id = _as_id(resolve_field(row, "id", PLAYER_FIELDS))
        if player_id is None or player_id in roster:
            continue
        roster[player_id] = Player(
            id=player_id,
            name=resolve_field(row, "name", PLAYER_FIELDS) or player_id,
            state=resolve_field(row, "state", PLAYER_FIELDS),
            country=resolve_field(row, "country", PLAYER_FIELDS),
            rating=parse_score(resolve_field(row, "rating", PLAYER_FIELDS)),
        )
    return roster
