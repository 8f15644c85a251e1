"""Text processing utilities for DecayClock.

Word tokenization for cross-provider event matching, whole-word mention
checks for platform filtering, and slug generation for persisted services.
"""

from __future__ import annotations

import re
from typing import Set

from config.defaults import OVERLAP_MIN_WORD_LENGTH, SLUG_MAX_LENGTH

_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")


def word_set(text: str, min_length: int = OVERLAP_MIN_WORD_LENGTH) -> Set[str]:
    """Split text on whitespace into a set of lowercase words longer than min_length.

    Punctuation is kept attached to its word, so "pricing," and "pricing"
    are different words.

    Args:
        text: Input text.
        min_length: Words of this length or shorter are dropped.

    Returns:
        Set of lowercase words.
    """
    if not text:
        return set()
    return {w for w in _WHITESPACE_RE.split(text.lower()) if len(w) > min_length}


def word_overlap(text_a: str, text_b: str) -> float:
    """Shared-word ratio relative to the smaller of the two word sets.

    Args:
        text_a: First text.
        text_b: Second text.

    Returns:
        Overlap in [0.0, 1.0]; 0.0 if either text has no qualifying words.
    """
    words_a = word_set(text_a)
    words_b = word_set(text_b)
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / min(len(words_a), len(words_b))


def contains_word(text: str, term: str) -> bool:
    """Case-insensitive whole-word (or whole-phrase) containment check.

    "meta" is found in "Meta's new policy" but not in "metadata".

    Args:
        text: Text to search.
        term: Word or phrase to look for.

    Returns:
        True if term occurs bounded by non-word characters.
    """
    if not text or not term:
        return False
    pattern = r"(?<!\w)" + re.escape(term.lower()) + r"(?!\w)"
    return re.search(pattern, text.lower()) is not None


def generate_slug(name: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Build a URL slug: lowercase, runs of non-alphanumerics become '-'.

    Args:
        name: Display name.
        max_length: Maximum slug length.

    Returns:
        Slug string (may be empty for names with no alphanumerics).
    """
    slug = _SLUG_SEPARATOR_RE.sub("-", (name or "").lower()).strip("-")
    return slug[:max_length]


def truncate(value: str, max_length: int) -> str:
    """Truncate a string to max_length characters."""
    return (value or "")[:max_length]
