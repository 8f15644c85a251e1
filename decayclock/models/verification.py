"""Cross-verification data models for DecayClock.

Defines the tagged per-provider result, the ephemeral event groups built while
verifying, and the merged output handed back to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from decayclock.models.events import ResearchedEvent, ResearchedService, ResearchResponse


class ErrorType:
    """Failure taxonomy tags carried by ResearchError.type."""

    API_ERROR = "api_error"
    RATE_LIMIT = "rate_limit"
    PARSE_ERROR = "parse_error"
    VALIDATION_ERROR = "validation_error"


class VerificationConfidence:
    """Confidence tiers assigned to merged events."""

    VERIFIED = "verified"
    LIKELY = "likely"
    UNVERIFIED = "unverified"
    DISPUTED = "disputed"


@dataclass
class ResearchError:
    """A typed failure. `retry_after` (seconds) is only set for rate limits."""

    type: str
    message: str
    retry_after: Optional[int] = None


@dataclass
class ProviderResult:
    """Outcome of querying one provider: either `data` or `error` is set."""

    provider_id: str
    provider_name: str
    success: bool
    data: Optional[ResearchResponse] = None
    error: Optional[ResearchError] = None
    duration_ms: int = 0


@dataclass
class GroupMember:
    """One event inside an EventGroup, tagged with the provider that emitted it."""

    event: ResearchedEvent
    provider_name: str


@dataclass
class EventGroup:
    """Events judged to describe the same real-world occurrence."""

    representative: ResearchedEvent
    members: List[GroupMember] = field(default_factory=list)

    @property
    def provider_names(self) -> List[str]:
        """Distinct provider names in first-seen order."""
        seen: List[str] = []
        for member in self.members:
            if member.provider_name not in seen:
                seen.append(member.provider_name)
        return seen


@dataclass
class ContradictionFlag:
    """A disagreement between providers inside one matched group."""

    dimension: str       # "severity" or "date"
    detail: str = ""
    values: List[str] = field(default_factory=list)


@dataclass
class VerificationRecord:
    """Cross-provider corroboration attached to a merged event."""

    confidence: str = VerificationConfidence.LIKELY
    agreed_by: List[str] = field(default_factory=list)
    consensus_score: int = 100
    conflicts: List[ContradictionFlag] = field(default_factory=list)


@dataclass
class VerifiedEvent(ResearchedEvent):
    """A ResearchedEvent augmented with its verification record."""

    verification: VerificationRecord = field(default_factory=VerificationRecord)


@dataclass
class VerificationMetadata:
    """Aggregate statistics for one cross-verification pass."""

    providers_queried: List[str] = field(default_factory=list)
    providers_succeeded: List[str] = field(default_factory=list)
    consensus_score: int = 0
    verified_event_count: int = 0
    total_event_count: int = 0
    conflict_count: int = 0


@dataclass
class CrossVerifiedResult:
    """The merged, date-ascending event list produced from all providers."""

    service: ResearchedService
    events: List[VerifiedEvent] = field(default_factory=list)
    metadata: VerificationMetadata = field(default_factory=VerificationMetadata)


@dataclass
class ResearchOutcome:
    """Tagged top-level result of a research request."""

    success: bool
    data: Optional[CrossVerifiedResult] = None
    error: Optional[ResearchError] = None

    @classmethod
    def ok(cls, data: CrossVerifiedResult) -> "ResearchOutcome":
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls, error_type: str, message: str, retry_after: Optional[int] = None
    ) -> "ResearchOutcome":
        return cls(
            success=False,
            error=ResearchError(type=error_type, message=message, retry_after=retry_after),
        )
