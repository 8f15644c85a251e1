"""Pairwise event matching for cross-provider deduplication.

Two events from different providers describe the same real-world occurrence
when they fall in the same calendar month, share a category (or one side is
the "Other" wildcard), and their titles or descriptions overlap enough.
"""

from __future__ import annotations

from config.defaults import (
    DESCRIPTION_OVERLAP_THRESHOLD,
    TITLE_OVERLAP_THRESHOLD,
    WILDCARD_EVENT_TYPE,
)
from decayclock.models.events import ResearchedEvent
from decayclock.utils.date_utils import is_same_month
from decayclock.utils.text import word_overlap


def categories_compatible(type_a: str, type_b: str) -> bool:
    """Equal categories, or either side is the wildcard category."""
    return type_a == type_b or WILDCARD_EVENT_TYPE in (type_a, type_b)


def events_match(event_a: ResearchedEvent, event_b: ResearchedEvent) -> bool:
    """Decide whether two events describe the same occurrence.

    The relation is symmetric but not transitive: A may match B and B match C
    while A does not match C. Grouping compares each event against group
    representatives only, so results depend on provider order.

    Args:
        event_a: First event.
        event_b: Second event.

    Returns:
        True if the events should be merged into one group.
    """
    if not is_same_month(event_a.event_date, event_b.event_date):
        return False
    if not categories_compatible(event_a.event_type, event_b.event_type):
        return False
    if word_overlap(event_a.title, event_b.title) >= TITLE_OVERLAP_THRESHOLD:
        return True
    return (
        word_overlap(event_a.description, event_b.description) >= DESCRIPTION_OVERLAP_THRESHOLD
        and event_a.severity == event_b.severity
    )
