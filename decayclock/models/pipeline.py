"""Research orchestration data models for DecayClock.

Defines ResearchContext (state threaded through the research agents) and
SaveResult (outcome of the research-and-persist admin workflow).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from config.settings import ResearchConfig
from decayclock.models.providers import ProviderConfig
from decayclock.models.verification import CrossVerifiedResult, ProviderResult


@dataclass
class ResearchContext:
    """Shared state for one research request.

    Each agent reads the fields populated by earlier agents and returns its
    own result; the orchestrator stores it back here. Nothing in a context is
    shared between concurrent requests.
    """

    config: ResearchConfig
    platform_name: str
    providers: List[ProviderConfig] = field(default_factory=list)
    request_id: str = ""

    # Injected for tests; defaults to the real date when None
    today: Optional[date] = None

    # ── Agent results (populated progressively) ────────────────────────────────
    provider_results: List[ProviderResult] = field(default_factory=list)
    verified_result: Optional[CrossVerifiedResult] = None

    # ── Request metadata ───────────────────────────────────────────────────────
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, warning: str) -> None:
        """Append a warning to the request warning list."""
        self.warnings.append(warning)

    @property
    def successful_results(self) -> List[ProviderResult]:
        return [r for r in self.provider_results if r.success and r.data is not None]


@dataclass
class SaveResult:
    """Outcome of researching a platform and persisting the result."""

    success: bool
    message: str
    service_id: Optional[str] = None
    event_count: Optional[int] = None
