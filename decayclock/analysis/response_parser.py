"""Parse, validate and normalize one provider's research answer.

Provider output is free text that should contain a single JSON object. The
pipeline here is explicit: parse the text, validate the payload shape, then
build typed events (dropping low-confidence ones, coercing unknown
severities/categories, and applying the platform relevance filter).
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

from config.defaults import (
    DEFAULT_EVENT_TYPE,
    DEFAULT_SEVERITY,
    DEFAULT_SOURCE_CONFIDENCE,
    EVENT_TYPES,
    SEVERITIES,
    SOURCE_CONFIDENCES,
)
from decayclock.analysis.platform_filter import filter_events_for_platform
from decayclock.models.events import ResearchedEvent, ResearchedService, ResearchResponse
from decayclock.models.verification import ErrorType, ResearchError
from decayclock.utils.date_utils import is_valid_event_date

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*")

_SEVERITY_LOOKUP = {s.lower(): s for s in SEVERITIES}
_EVENT_TYPE_LOOKUP = {t.lower(): t for t in EVENT_TYPES}


@dataclass
class ResponseParseResult:
    """Tagged outcome of parse_provider_response(): `data` or `error` is set."""

    success: bool
    data: Optional[ResearchResponse] = None
    error: Optional[ResearchError] = None


def _safe_parse_llm_json(text: str) -> Optional[Any]:
    """Leniently parse provider JSON output.

    Strips markdown code fences, then searches for the outermost JSON
    object or array boundaries and parses only that portion.

    Args:
        text: Raw provider output string.

    Returns:
        Parsed Python object (dict or list), or None on failure.
    """
    if not text:
        return None

    text = _FENCE_RE.sub("", text).strip().rstrip("`").strip()

    # Object first: a research answer is a single object that contains arrays
    for start_char, end_char in [("{", "}"), ("[", "]")]:
        s = text.find(start_char)
        e = text.rfind(end_char)
        if s != -1 and e > s:
            try:
                return json.loads(text[s : e + 1])
            except (ValueError, RecursionError):
                pass

    return None


def _validate_event(event: Any, index: int, today: Optional[date]) -> Optional[str]:
    if not isinstance(event, dict):
        return f"Event {index} is not an object"
    title = event.get("title")
    if not isinstance(title, str) or not title.strip():
        return f"Event {index} is missing title"
    description = event.get("description")
    if not isinstance(description, str) or not description.strip():
        return f"Event {index} is missing description"
    if not is_valid_event_date(event.get("event_date"), today):
        return f"Event {index} has invalid date format (expected YYYY-MM-DD)"
    if not isinstance(event.get("severity"), str):
        return f"Event {index} is missing severity"
    return None


def validate_research_payload(payload: Any, today: Optional[date] = None) -> Optional[str]:
    """Check the structure of a parsed research payload.

    Args:
        payload: Parsed JSON value.
        today: Reference date for rejecting future event dates.

    Returns:
        None if the payload is acceptable, otherwise the first validation message.
    """
    if not isinstance(payload, dict):
        return "Response is not an object"

    service = payload.get("service")
    if not isinstance(service, dict):
        return "Missing or invalid service object"
    name = service.get("name")
    if not isinstance(name, str) or not name.strip():
        return "Service name is required"
    if not isinstance(service.get("description"), str):
        return "Service description is required"
    if not isinstance(service.get("category"), str):
        return "Service category is required"

    events = payload.get("events")
    if not isinstance(events, list):
        return "Events must be an array"
    if not events:
        return "At least one event is required"

    for index, event in enumerate(events):
        error = _validate_event(event, index, today)
        if error:
            return error
    return None


def coerce_severity(value: str) -> str:
    """Map a provider severity onto the vocabulary; unknown values become the default."""
    return _SEVERITY_LOOKUP.get((value or "").strip().lower(), DEFAULT_SEVERITY)


def coerce_event_type(value: Any) -> str:
    """Map a provider category onto the vocabulary; unknown values become "Other"."""
    if not isinstance(value, str):
        return DEFAULT_EVENT_TYPE
    return _EVENT_TYPE_LOOKUP.get(value.strip().lower(), DEFAULT_EVENT_TYPE)


def coerce_confidence(value: Any) -> str:
    """Map a source confidence onto high/medium/low; anything else becomes "medium"."""
    if not isinstance(value, str):
        return DEFAULT_SOURCE_CONFIDENCE
    value = value.strip().lower()
    return value if value in SOURCE_CONFIDENCES else DEFAULT_SOURCE_CONFIDENCE


def _build_event(raw: Dict[str, Any]) -> ResearchedEvent:
    source_url = raw.get("source_url")
    if not isinstance(source_url, str) or not source_url.strip():
        source_url = None
    confidence = coerce_confidence(raw.get("confidence"))
    return ResearchedEvent(
        title=raw["title"].strip(),
        description=raw["description"].strip(),
        event_date=raw["event_date"],
        severity=coerce_severity(raw["severity"]),
        event_type=coerce_event_type(raw.get("event_type")),
        source_url=source_url,
        confidence=confidence,
    )


def build_research_response(payload: Dict[str, Any], platform_name: str) -> ResearchResponse:
    """Turn a validated payload into a typed, platform-filtered response.

    Args:
        payload: Payload that passed validate_research_payload().
        platform_name: Target platform for the relevance filter.

    Returns:
        ResearchResponse whose events exclude low-confidence and off-platform entries.
    """
    raw_service = payload["service"]
    service = ResearchedService(
        name=raw_service["name"].strip(),
        description=raw_service["description"],
        category=raw_service["category"],
    )
    events: List[ResearchedEvent] = [
        _build_event(raw) for raw in payload["events"]
        if str(raw.get("confidence", "")).strip().lower() != "low"
    ]
    return ResearchResponse(
        service=service,
        events=filter_events_for_platform(events, platform_name),
    )


def parse_provider_response(
    text: str, platform_name: str, today: Optional[date] = None
) -> ResponseParseResult:
    """Run the full parse, validate and build pipeline on raw provider text.

    Args:
        text: Raw completion text from a provider.
        platform_name: Target platform name.
        today: Reference date for the future-date check.

    Returns:
        ResponseParseResult carrying either the ResearchResponse or a
        parse_error / validation_error.
    """
    payload = _safe_parse_llm_json(text)
    if payload is None:
        logger.warning("Provider JSON parse failed. Raw response (first 200 chars): %.200s", text)
        return ResponseParseResult(
            success=False,
            error=ResearchError(type=ErrorType.PARSE_ERROR, message="Failed to parse JSON response"),
        )

    validation_error = validate_research_payload(payload, today)
    if validation_error:
        logger.info("Provider response rejected: %s", validation_error)
        return ResponseParseResult(
            success=False,
            error=ResearchError(type=ErrorType.VALIDATION_ERROR, message=validation_error),
        )

    return ResponseParseResult(success=True, data=build_research_response(payload, platform_name))
