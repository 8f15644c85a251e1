"""Date utilities for DecayClock.

Provider event dates must be strict ISO calendar dates (YYYY-MM-DD). Always
route them through parse_event_date() before comparing them.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

from dateutil.relativedelta import relativedelta

_EVENT_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_event_date(value: str) -> Optional[date]:
    """Parse a strict YYYY-MM-DD string.

    Args:
        value: Candidate date string.

    Returns:
        The parsed date, or None if the string is not a real calendar date.
    """
    if not isinstance(value, str) or not _EVENT_DATE_RE.match(value):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def is_valid_event_date(value: str, today: Optional[date] = None) -> bool:
    """Check a provider event date: strict format, real date, not in the future.

    Args:
        value: Candidate date string.
        today: Reference date (defaults to the current date).

    Returns:
        True if the date is acceptable.
    """
    parsed = parse_event_date(value)
    if parsed is None:
        return False
    return parsed <= (today or date.today())


def is_same_month(date_a: str, date_b: str) -> bool:
    """Check whether two ISO dates fall in the same calendar year and month.

    Args:
        date_a: First date string (YYYY-MM-DD).
        date_b: Second date string (YYYY-MM-DD).

    Returns:
        True if year and month match; False if either is unparseable.
    """
    da = parse_event_date(date_a)
    db = parse_event_date(date_b)
    if da is None or db is None:
        return False
    return (da.year, da.month) == (db.year, db.month)


def years_between(event_date: str, today: Optional[date] = None) -> float:
    """Fractional calendar years elapsed from event_date to today.

    Whole years are counted with relativedelta, so an event dated exactly N
    calendar years ago is exactly N years old. Future dates count as 0.

    Args:
        event_date: ISO date string (YYYY-MM-DD).
        today: Reference date (defaults to the current date).

    Returns:
        Age in years, never negative. Unparseable dates count as 0.
    """
    parsed = parse_event_date(event_date[:10] if isinstance(event_date, str) else "")
    if parsed is None:
        return 0.0
    today = today or date.today()
    if parsed >= today:
        return 0.0
    delta = relativedelta(today, parsed)
    return delta.years + delta.months / 12.0 + delta.days / 365.25
