"""Unit tests for decayclock.utils.timeline_helpers."""

from __future__ import annotations

import pytest

from decayclock.models.events import StoredEvent, StoredService
from decayclock.utils.timeline_helpers import (
    filter_events_by_type,
    format_event_date,
    format_event_date_full,
    get_unique_event_types,
    group_events_by_platform,
    is_valid_filter_type,
    sort_events_chronologically,
)


def _stored(event_id, event_date, event_type="API", service=None, service_id="svc-1"):
    return StoredEvent(
        id=event_id,
        service_id=service.id if service else service_id,
        title=f"Event {event_id}",
        description="",
        event_date=event_date,
        severity="minor",
        event_type=event_type,
        service=service,
    )


@pytest.fixture
def events():
    twitter = StoredService(id="svc-1", name="Twitter", slug="twitter")
    reddit = StoredService(id="svc-2", name="Reddit", slug="reddit")
    return [
        _stored("e1", "2021-05-01", "Ads", twitter),
        _stored("e2", "2023-02-10", "API", twitter),
        _stored("e3", "2023-06-12", "API", reddit),
    ]


class TestSorting:
    def test_desc_is_default(self, events):
        assert [e.id for e in sort_events_chronologically(events)] == ["e3", "e2", "e1"]

    def test_asc(self, events):
        assert [e.id for e in sort_events_chronologically(events, "asc")] == ["e1", "e2", "e3"]

    def test_returns_new_list(self, events):
        result = sort_events_chronologically(events)
        assert result is not events
        assert [e.id for e in events] == ["e1", "e2", "e3"]


class TestGrouping:
    def test_groups_by_slug_newest_first(self, events):
        grouped = group_events_by_platform(events)
        assert list(grouped) == ["twitter", "reddit"]
        assert [e.id for e in grouped["twitter"]] == ["e2", "e1"]

    def test_falls_back_to_service_id(self):
        grouped = group_events_by_platform([_stored("e1", "2021-01-01", service_id="svc-9")])
        assert list(grouped) == ["svc-9"]


class TestTypeFilter:
    def test_all_keeps_everything(self, events):
        assert len(filter_events_by_type(events, "all")) == 3

    def test_single_type(self, events):
        assert [e.id for e in filter_events_by_type(events, "API")] == ["e2", "e3"]

    def test_unique_types_sorted(self, events):
        assert get_unique_event_types(events) == ["API", "Ads"]

    def test_valid_filter_types(self):
        assert is_valid_filter_type("all")
        assert is_valid_filter_type("Privacy")
        assert not is_valid_filter_type("privacy")


class TestFormatting:
    def test_short_format(self):
        assert format_event_date("2023-02-10") == "2023-02"

    def test_full_format(self):
        assert format_event_date_full("2023-02-10") == "Feb 10, 2023"

    def test_unparseable_returned_unchanged(self):
        assert format_event_date("unknown") == "unknown"
        assert format_event_date_full("unknown") == "unknown"
