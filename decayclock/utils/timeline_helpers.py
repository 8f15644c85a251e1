"""Timeline helpers for persisted events.

Stateless grouping, filtering, sorting and date formatting used by the
timeline views and the clock_status script.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Dict, List

from config.defaults import EVENT_TYPES
from decayclock.models.events import StoredEvent
from decayclock.utils.date_utils import parse_event_date

ALL_TYPES = "all"


def sort_events_chronologically(events: List[StoredEvent], order: str = "desc") -> List[StoredEvent]:
    """Return a new list sorted by event_date ("desc" = newest first)."""
    return sorted(events, key=lambda e: e.event_date, reverse=(order == "desc"))


def group_events_by_platform(events: List[StoredEvent]) -> Dict[str, List[StoredEvent]]:
    """Group events by service slug, newest first within each platform.

    Events loaded without their service are keyed by service_id.
    """
    grouped: Dict[str, List[StoredEvent]] = OrderedDict()
    for event in events:
        key = event.service.slug if event.service else event.service_id
        grouped.setdefault(key, []).append(event)
    return OrderedDict((k, sort_events_chronologically(v, "desc")) for k, v in grouped.items())


def filter_events_by_type(events: List[StoredEvent], event_type: str) -> List[StoredEvent]:
    """Keep events of one category; "all" keeps everything."""
    if event_type == ALL_TYPES:
        return list(events)
    return [e for e in events if e.event_type == event_type]


def get_unique_event_types(events: List[StoredEvent]) -> List[str]:
    """Sorted distinct categories present in the events."""
    return sorted({e.event_type for e in events if e.event_type})


def is_valid_filter_type(value: str) -> bool:
    return value == ALL_TYPES or value in EVENT_TYPES


def format_event_date(date_str: str) -> str:
    """Short display form: YYYY-MM. Unparseable input is returned unchanged."""
    parsed = parse_event_date(date_str[:10])
    if parsed is None:
        return date_str
    return f"{parsed.year}-{parsed.month:02d}"


def format_event_date_full(date_str: str) -> str:
    """Long display form, e.g. "Feb 10, 2023". Unparseable input is returned unchanged."""
    parsed = parse_event_date(date_str[:10])
    if parsed is None:
        return date_str
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"
