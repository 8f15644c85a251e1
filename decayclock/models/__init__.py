"""DecayClock data models package.

All agent input/output schemas are defined here as typed dataclasses.
Never return raw Dict from agent code; always use the typed models.
"""

from decayclock.models.clock import ClockState
from decayclock.models.events import (
    SEVERITY_SCORES,
    RecentPlatform,
    ResearchedEvent,
    ResearchedService,
    ResearchResponse,
    StoredEvent,
    StoredService,
)
from decayclock.models.pipeline import ResearchContext, SaveResult
from decayclock.models.providers import ConnectionTestResult, ProviderConfig
from decayclock.models.verification import (
    ContradictionFlag,
    CrossVerifiedResult,
    ErrorType,
    EventGroup,
    GroupMember,
    ProviderResult,
    ResearchError,
    ResearchOutcome,
    VerificationConfidence,
    VerificationMetadata,
    VerificationRecord,
    VerifiedEvent,
)

__all__ = [
    # events
    "SEVERITY_SCORES",
    "ResearchedEvent",
    "ResearchedService",
    "ResearchResponse",
    "StoredEvent",
    "StoredService",
    "RecentPlatform",
    # clock
    "ClockState",
    # providers
    "ProviderConfig",
    "ConnectionTestResult",
    # verification
    "ErrorType",
    "VerificationConfidence",
    "ResearchError",
    "ProviderResult",
    "GroupMember",
    "EventGroup",
    "ContradictionFlag",
    "VerificationRecord",
    "VerifiedEvent",
    "VerificationMetadata",
    "CrossVerifiedResult",
    "ResearchOutcome",
    # pipeline
    "ResearchContext",
    "SaveResult",
]
