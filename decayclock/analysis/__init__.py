"""DecayClock analysis package.

Pure, deterministic functions: response parsing, platform relevance
filtering, event matching and clock scoring. No network access.
"""

from decayclock.analysis.clock_calculator import (
    calculate_clock_state,
    get_color_for_level,
    get_decay_factor,
    get_position_label,
    get_severity_score,
)
from decayclock.analysis.event_matching import events_match
from decayclock.analysis.platform_filter import (
    filter_events_for_platform,
    mentions_platform,
    mentions_related_platform,
)
from decayclock.analysis.response_parser import (
    ResponseParseResult,
    parse_provider_response,
    validate_research_payload,
)

__all__ = [
    "calculate_clock_state",
    "get_color_for_level",
    "get_decay_factor",
    "get_position_label",
    "get_severity_score",
    "events_match",
    "filter_events_for_platform",
    "mentions_platform",
    "mentions_related_platform",
    "ResponseParseResult",
    "parse_provider_response",
    "validate_research_payload",
]
