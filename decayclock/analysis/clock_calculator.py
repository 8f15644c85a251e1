"""Clock score calculator.

Turns the persisted event history into a single 0-100 "decay level" with a
band label and color. Each event contributes its severity score weighted by
an age decay factor; the total is normalized and clamped.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence

from config.defaults import (
    CLOCK_BANDS,
    CLOCK_DECAY_STEPS,
    CLOCK_FLOOR_DECAY,
    CLOCK_MAX_LEVEL,
    CLOCK_NORMALIZATION_CONSTANT,
    CLOCK_SCALE,
)
from decayclock.models.clock import ClockState
from decayclock.models.events import SEVERITY_SCORES, StoredEvent
from decayclock.utils.date_utils import years_between
from decayclock.utils.numbers import round_half_up

logger = logging.getLogger(__name__)


def get_severity_score(severity: str) -> int:
    """minor=1 … critical=5; unknown severities score 0."""
    return SEVERITY_SCORES.get(severity, 0)


def get_decay_factor(age_years: float) -> float:
    """Weight applied to an event of the given age in years."""
    for upper_bound, factor in CLOCK_DECAY_STEPS:
        if age_years < upper_bound:
            return factor
    return CLOCK_FLOOR_DECAY


def _band_for(level: float):
    for upper, label, color in CLOCK_BANDS:
        if level <= upper:
            return label, color
    _, label, color = CLOCK_BANDS[-1]
    return label, color


def get_position_label(level: float) -> str:
    return _band_for(level)[0]


def get_color_for_level(level: float) -> str:
    return _band_for(level)[1]


def calculate_clock_level(events: Iterable[StoredEvent], today: Optional[date] = None) -> int:
    """Weighted, normalized score of all events, clamped to [0, 100]."""
    total = 0.0
    for event in events:
        total += get_severity_score(event.severity) * get_decay_factor(
            years_between(event.event_date, today)
        )
    level = round_half_up(total / CLOCK_NORMALIZATION_CONSTANT * CLOCK_SCALE)
    return max(0, min(CLOCK_MAX_LEVEL, level))


def calculate_clock_state(
    events: Sequence[StoredEvent], today: Optional[date] = None
) -> ClockState:
    """Compute the gauge state for a set of persisted events.

    Args:
        events: All persisted events (any order).
        today: Reference date for event ages (defaults to the current date).

    Returns:
        ClockState with level, band label/color, and event/service counts.
    """
    event_list: List[StoredEvent] = list(events)
    level = calculate_clock_level(event_list, today) if event_list else 0
    state = ClockState(
        level=level,
        position=get_position_label(level),
        color=get_color_for_level(level),
        last_updated=datetime.now(),
        event_count=len(event_list),
        service_count=len({e.service_id for e in event_list}),
    )
    logger.debug(
        "Clock level %d (%s) from %d events across %d services",
        state.level, state.position, state.event_count, state.service_count,
    )
    return state
