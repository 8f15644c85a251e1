"""Clock gauge data models for DecayClock."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ClockState:
    """Computed decay gauge state. Never persisted."""

    level: int            # 0-100
    position: str         # band label, e.g. "Early warning"
    color: str            # band color tag, e.g. "green"
    last_updated: datetime
    event_count: int = 0
    service_count: int = 0
