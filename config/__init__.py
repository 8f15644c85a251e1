"""DecayClock configuration package."""

from config.defaults import (
    ANTHROPIC_MODEL,
    DESCRIPTION_OVERLAP_THRESHOLD,
    EVENT_TYPES,
    MIN_PLATFORM_NAME_LENGTH,
    PROVIDER_TIMEOUT_SECONDS,
    SEVERITIES,
    TITLE_OVERLAP_THRESHOLD,
)
from config.settings import ResearchConfig

__all__ = [
    "ResearchConfig",
    "SEVERITIES",
    "EVENT_TYPES",
    "TITLE_OVERLAP_THRESHOLD",
    "DESCRIPTION_OVERLAP_THRESHOLD",
    "PROVIDER_TIMEOUT_SECONDS",
    "MIN_PLATFORM_NAME_LENGTH",
    "ANTHROPIC_MODEL",
]
