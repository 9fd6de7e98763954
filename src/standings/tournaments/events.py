"""
Event catalog built from the match history.

An event instance is one (date, event name) pair. The catalog lists each
instance with its match type (Singles/Teams, by the 20-point rule) and a
size label derived from the number of distinct rounds.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

import polars as pl

from standings.core.config import PlacementConfig
from standings.core.constants import (
    ALL_REGIONS,
    EVENT_SIZE_BUCKETS,
    TEAM_GAME_TOTAL,
)
from standings.core.parser import deduplicate_matches
from standings.core.records import MatchRecord, MatchType
from standings.tournaments.placement import (
    is_team_event,
    place_event,
    round_numbers,
)

ALL_EVENTS = ALL_REGIONS

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def group_events(
    matches: Iterable[MatchRecord],
) -> dict[tuple[Optional[date], str], list[MatchRecord]]:
    """Group matches by event instance, in first-seen order."""
    events: dict[tuple[Optional[date], str], list[MatchRecord]] = {}
    for match in matches:
        events.setdefault(match.event_key, []).append(match)
    return events


def event_size_label(round_count: int) -> str:
    """``RTT`` for 1-3 rounds, ``GT`` for 4-5, ``Super Major`` beyond."""
    for label, minimum, maximum in EVENT_SIZE_BUCKETS:
        if round_count >= minimum and (maximum is None or round_count <= maximum):
            return label
    return ""


def slugify(name: str) -> str:
    """
    Examples:
        >>> slugify("Gash Hammer Gaming July RTT")
        'gash-hammer-gaming-july-rtt'
    """
    return _SLUG_RE.sub("-", name.lower()).strip("-")


def event_date_code(event_date: Optional[date]) -> str:
    """``ddmmyy`` code used in event identifiers."""
    if event_date is None:
        return ""
    return event_date.strftime("%d%m%y")


@dataclass(frozen=True)
class EventSummary:
    date: date
    name: str
    slug: str
    match_type: MatchType
    event_type: str
    round_count: int
    match_count: int

    @property
    def event_id(self) -> str:
        return f"{self.slug}/{event_date_code(self.date)}"


def build_event_catalog(
    matches: Iterable[MatchRecord],
    team_game_total: int = TEAM_GAME_TOTAL,
) -> list[EventSummary]:
    """Summaries of every dated event instance, newest first.

    Undated matches cannot be placed on the calendar and are left out.
    Repeated rows of the same game within an event are counted once.
    """
    catalog = []
    for (event_date, name), event_matches in group_events(matches).items():
        if event_date is None:
            continue
        event_matches, _ = deduplicate_matches(event_matches)
        rounds = round_numbers(event_matches)
        catalog.append(
            EventSummary(
                date=event_date,
                name=name,
                slug=slugify(name),
                match_type=(
                    MatchType.TEAMS
                    if is_team_event(event_matches, team_game_total)
                    else MatchType.SINGLES
                ),
                event_type=event_size_label(len(rounds)),
                round_count=len(rounds),
                match_count=len(event_matches),
            )
        )
    catalog.sort(key=lambda summary: summary.date, reverse=True)
    return catalog


def filter_events(
    catalog: Iterable[EventSummary],
    match_type: str = ALL_EVENTS,
    event_type: str = ALL_EVENTS,
    search: str = "",
) -> list[EventSummary]:
    search = search.strip().lower()
    return [
        summary
        for summary in catalog
        if (match_type == ALL_EVENTS or summary.match_type.value == match_type)
        and (event_type == ALL_EVENTS or summary.event_type == event_type)
        and search in summary.name.lower()
    ]


def catalog_dataframe(catalog: Sequence[EventSummary]) -> pl.DataFrame:
    """Convert the catalog to a Polars DataFrame."""
    return pl.DataFrame(
        {
            "date": [summary.date for summary in catalog],
            "name": [summary.name for summary in catalog],
            "event_id": [summary.event_id for summary in catalog],
            "match_type": [summary.match_type.value for summary in catalog],
            "event_type": [summary.event_type for summary in catalog],
            "rounds": [summary.round_count for summary in catalog],
            "matches": [summary.match_count for summary in catalog],
        },
        schema={
            "date": pl.Date,
            "name": pl.Utf8,
            "event_id": pl.Utf8,
            "match_type": pl.Utf8,
            "event_type": pl.Utf8,
            "rounds": pl.Int64,
            "matches": pl.Int64,
        },
    )


def _team_in_event(
    player_id: str, event_matches: Iterable[MatchRecord]
) -> Optional[str]:
    for match in event_matches:
        side = match.side(player_id)
        if side == 1 and match.team1_id:
            return match.team1_id
        if side == 2 and match.team2_id:
            return match.team2_id
    return None


def events_won(
    player_id: str,
    matches: Iterable[MatchRecord],
    team_of: Optional[Mapping[str, str]] = None,
    config: Optional[PlacementConfig] = None,
) -> list[tuple[Optional[date], str]]:
    """Event instances won by ``player_id`` or by the team they played for.

    The player's team is read from their own games in each event; pass
    ``team_of`` to override it with a fixed player-to-team mapping.
    """
    won = []
    for key, event_matches in group_events(matches).items():
        if not any(match.side(player_id) for match in event_matches):
            continue
        placement = place_event(event_matches, config)
        if placement.winner_id is None:
            continue
        if placement.is_team_event:
            team_id = (team_of or {}).get(player_id) or _team_in_event(
                player_id, event_matches
            )
            if team_id is not None and placement.winner_id == team_id:
                won.append(key)
        elif placement.winner_id == player_id:
            won.append(key)
    return won
