"""Event placements and the event catalog."""

from __future__ import annotations

from standings.tournaments.events import (
    EventSummary,
    build_event_catalog,
    catalog_dataframe,
    event_date_code,
    event_size_label,
    events_won,
    filter_events,
    group_events,
    slugify,
)
from standings.tournaments.placement import (
    is_eight_player_round,
    is_team_event,
    place_event,
    round_numbers,
)

__all__ = [
    # Placement
    "place_event",
    "is_team_event",
    "is_eight_player_round",
    "round_numbers",
    # Catalog
    "EventSummary",
    "group_events",
    "build_event_catalog",
    "filter_events",
    "catalog_dataframe",
    "event_size_label",
    "event_date_code",
    "slugify",
    "events_won",
]
