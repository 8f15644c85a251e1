"""Event and service data models for DecayClock.

Defines the shapes a provider research response is parsed into, and the
persisted service/event records the clock and timeline read back.
All fields are typed; no raw dicts are returned from agent code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from config.defaults import SEVERITIES

# Severity score mapping: minor=1 … critical=5
SEVERITY_SCORES = {severity: rank for rank, severity in enumerate(SEVERITIES, start=1)}


@dataclass
class ResearchedEvent:
    """One candidate enshittification event as emitted by a provider."""

    title: str
    description: str
    event_date: str            # YYYY-MM-DD
    severity: str              # one of SEVERITIES
    event_type: str            # one of EVENT_TYPES
    source_url: Optional[str] = None
    confidence: str = "medium"  # provider's self-reported tier: high, medium, low


@dataclass
class ResearchedService:
    """Platform description returned alongside the researched events."""

    name: str
    description: str
    category: str


@dataclass
class ResearchResponse:
    """A validated research payload from a single provider."""

    service: ResearchedService
    events: List[ResearchedEvent] = field(default_factory=list)


@dataclass
class StoredService:
    """A persisted platform record."""

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    category: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class StoredEvent:
    """A persisted enshittification event.

    `service` is only populated when the store is asked to join service data.
    """

    id: str
    service_id: str
    title: str
    description: str
    event_date: str
    severity: str
    event_type: str = "Other"
    source_url: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
    service: Optional[StoredService] = None


@dataclass
class RecentPlatform:
    """Summary row for the recently-researched platforms listing."""

    name: str
    slug: str
    event_count: int
    updated_at: str
