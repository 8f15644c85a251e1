"""Unit tests for decayclock.analysis.event_matching and decayclock.utils.text overlap.

Covers:
- word_set / word_overlap: tokenization rules and the smaller-set denominator
- events_match: month rule, category wildcard, title and description clauses
- Reflexivity and symmetry
"""

from __future__ import annotations

import pytest

from decayclock.analysis.event_matching import categories_compatible, events_match
from decayclock.utils.text import word_overlap, word_set


# ── Word overlap ─────────────────────────────────────────────────────────────────

class TestWordOverlap:
    def test_short_words_are_ignored(self):
        """Words of two characters or fewer must not count."""
        assert word_set("X is an API change") == {"api", "change"}

    def test_lowercases_and_deduplicates(self):
        assert word_set("Pricing PRICING pricing") == {"pricing"}

    def test_ratio_uses_smaller_set(self):
        """2 shared words / min(3, 4) = 0.667."""
        ratio = word_overlap("API pricing introduced", "Twitter API pricing changes")
        assert ratio == pytest.approx(2 / 3)

    def test_empty_text_gives_zero(self):
        assert word_overlap("", "Twitter API pricing") == 0.0
        assert word_overlap("a b c", "Twitter API pricing") == 0.0

    def test_punctuation_stays_attached(self):
        """Splitting is on whitespace only, so 'pricing,' differs from 'pricing'."""
        assert word_overlap("pricing, changes", "pricing tiers") == 0.0


# ── Category compatibility ───────────────────────────────────────────────────────

class TestCategoriesCompatible:
    def test_equal_categories(self):
        assert categories_compatible("API", "API")

    def test_other_is_wildcard_on_either_side(self):
        assert categories_compatible("Other", "Privacy")
        assert categories_compatible("Ads", "Other")

    def test_different_categories(self):
        assert not categories_compatible("Ads", "Privacy")


# ── events_match ─────────────────────────────────────────────────────────────────

class TestEventsMatch:
    def test_reflexive(self, make_event):
        """An event always matches itself."""
        event = make_event()
        assert events_match(event, event)

    def test_twitter_near_duplicates_match(self, make_event):
        a = make_event(title="API pricing introduced", event_date="2023-02-10", severity="major")
        b = make_event(
            title="Twitter API pricing changes", event_date="2023-02-20", severity="significant"
        )
        assert events_match(a, b)
        assert events_match(b, a)

    def test_different_month_never_matches(self, make_event):
        """Identical text one day apart across a month boundary must not match."""
        a = make_event(event_date="2023-01-31")
        b = make_event(event_date="2023-02-01")
        assert not events_match(a, b)

    def test_same_month_different_year(self, make_event):
        assert not events_match(make_event(event_date="2022-02-10"), make_event(event_date="2023-02-10"))

    def test_category_mismatch_blocks_match(self, make_event):
        a = make_event(event_type="API")
        b = make_event(event_type="Ads")
        assert not events_match(a, b)

    def test_other_category_matches_anything(self, make_event):
        a = make_event(event_type="Other")
        b = make_event(event_type="Ads")
        assert events_match(a, b)

    def test_description_clause_requires_same_severity(self, make_event):
        """Low title overlap falls back to description overlap, which needs equal severity."""
        description = "Developers lost free access to the platform programming interface"
        a = make_event(title="Developer shock", description=description, severity="major")
        b = make_event(title="Something unrelated", description=description, severity="major")
        c = make_event(title="Something unrelated", description=description, severity="minor")
        assert events_match(a, b)
        assert not events_match(a, c)

    def test_no_overlap_no_match(self, make_event):
        a = make_event(title="Ads everywhere", description="More sponsored posts in feeds")
        b = make_event(title="Privacy policy rewrite", description="Data sharing with advertisers")
        assert not events_match(a, b)

    def test_unparseable_dates_do_not_match(self, make_event):
        a = make_event(event_date="2023-02")
        assert not events_match(a, a)
