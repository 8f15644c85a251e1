"""Platform relevance filtering for researched events.

Drops events that are not specifically about the target platform, including
events really about a parent company or sibling product.

Two rules, applied in order to `title + " " + description`:
  1. Must-mention: the platform name appears as a case-insensitive substring,
     or one of its aliases appears as a whole word.
  2. Sibling exclusion: if a related platform's alias appears as a whole word
     and the target is not evidenced by a whole-word mention of its own name
     or aliases, the event is about the sibling and is excluded.

Aliases are matched as whole words because short aliases ("x", "ig", "ms")
would otherwise match inside almost any sentence.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from decayclock.models.events import ResearchedEvent
from decayclock.utils.text import contains_word

logger = logging.getLogger(__name__)

# Platform names at least this long are matched as substrings
_SUBSTRING_MIN_LENGTH = 4

PLATFORM_ALIASES: Dict[str, List[str]] = {
    "facebook": ["fb", "facebook"],
    "instagram": ["ig", "instagram", "insta"],
    "twitter": ["x", "twitter"],
    "youtube": ["yt", "youtube"],
    "tiktok": ["tiktok", "tt"],
    "snapchat": ["snap", "snapchat"],
    "linkedin": ["li", "linkedin"],
    "reddit": ["reddit"],
    "whatsapp": ["whatsapp", "wa"],
    "netflix": ["netflix"],
    "spotify": ["spotify"],
    "amazon": ["amazon", "amz"],
    "google": ["google"],
    "apple": ["apple"],
    "microsoft": ["microsoft", "ms"],
    "meta": ["meta"],
    "threads": ["threads"],
    "oculus": ["oculus"],
    "android": ["android"],
    "chrome": ["chrome"],
}

# Platform → related platforms whose events must not be credited to it
RELATED_PLATFORMS: Dict[str, List[str]] = {
    "facebook": ["instagram", "whatsapp", "meta", "oculus", "threads"],
    "instagram": ["facebook", "whatsapp", "meta", "threads"],
    "whatsapp": ["facebook", "instagram", "meta"],
    "meta": ["facebook", "instagram", "whatsapp", "oculus", "threads"],
    "youtube": ["google"],
    "google": ["youtube", "android", "chrome"],
}


def canonical_platform(platform: str) -> str:
    """Resolve a platform name to its alias-table key.

    "Facebook" → "facebook"; "X" → "twitter"; unknown names are lowercased.
    """
    normalized = (platform or "").strip().lower()
    if normalized in PLATFORM_ALIASES:
        return normalized
    for key, aliases in PLATFORM_ALIASES.items():
        if normalized in aliases:
            return key
    return normalized


def _aliases_for(platform: str) -> Sequence[str]:
    key = canonical_platform(platform)
    return PLATFORM_ALIASES.get(key, [key])


def mentions_platform(text: str, platform: str) -> bool:
    """Rule 1: does the text mention the target platform at all?

    Names shorter than four characters ("X") are matched as whole words like
    aliases; longer names are plain substrings.
    """
    normalized_text = (text or "").lower()
    normalized_platform = (platform or "").strip().lower()
    if not normalized_platform:
        return False
    if len(normalized_platform) >= _SUBSTRING_MIN_LENGTH and normalized_platform in normalized_text:
        return True
    return any(contains_word(normalized_text, alias) for alias in _aliases_for(platform))


def _evidences_platform(text: str, platform: str) -> bool:
    """Whole-word mention of the platform's own name or aliases."""
    if contains_word(text, (platform or "").strip()):
        return True
    return any(contains_word(text, alias) for alias in _aliases_for(platform))


def mentions_related_platform(text: str, platform: str) -> bool:
    """Rule 2: is the text about a sibling platform rather than the target?"""
    related = RELATED_PLATFORMS.get(canonical_platform(platform), [])
    if not related:
        return False
    sibling_mentioned = any(
        contains_word(text, alias)
        for sibling in related
        for alias in PLATFORM_ALIASES.get(sibling, [sibling])
    )
    if not sibling_mentioned:
        return False
    return not _evidences_platform(text, platform)


def is_relevant_event(event: ResearchedEvent, platform: str) -> bool:
    """Apply both rules to one event."""
    combined_text = f"{event.title} {event.description}"
    if not mentions_platform(combined_text, platform):
        return False
    if mentions_related_platform(combined_text, platform):
        return False
    return True


def filter_events_for_platform(
    events: List[ResearchedEvent], platform: str
) -> List[ResearchedEvent]:
    """Keep only events specifically about the target platform.

    Idempotent: filtering an already-filtered list returns the same events.

    Args:
        events: Candidate events in provider order.
        platform: Target platform name as entered by the user.

    Returns:
        New list with irrelevant events removed, order preserved.
    """
    kept = [e for e in events if is_relevant_event(e, platform)]
    if len(kept) != len(events):
        logger.debug(
            "Platform filter (%s): kept %d of %d events", platform, len(kept), len(events)
        )
    return kept
