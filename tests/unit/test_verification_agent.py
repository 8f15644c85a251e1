"""Unit tests for decayclock.agents.verification_agent.

Covers:
- Greedy grouping against representatives (order dependence included)
- Confidence tiers and consensus scores
- Severity merge by most common value, contradiction flags
- Full cross-verification assembly and metadata
"""

from __future__ import annotations

import copy

import pytest

from decayclock.agents.verification_agent import (
    cross_verify_results,
    detect_conflicts,
    determine_confidence,
    group_events,
    merge_group,
    merge_service_info,
    most_common,
)
from decayclock.models.verification import (
    ErrorType,
    EventGroup,
    GroupMember,
    ProviderResult,
    ResearchError,
    VerificationConfidence,
)


def _failed(provider_name):
    return ProviderResult(
        provider_id=provider_name.lower(),
        provider_name=provider_name,
        success=False,
        error=ResearchError(type=ErrorType.API_ERROR, message="down"),
    )


@pytest.fixture
def chain_events(make_event):
    """Three events where A~B and B~C but A does not match C."""
    a = make_event(title="alpha beta gamma delta epsilon", description="apples oranges")
    b = make_event(title="alpha beta zeta theta iota", description="bananas cherries")
    c = make_event(title="zeta theta kappa lambda omega", description="grapes melons")
    return a, b, c


# ── Grouping ─────────────────────────────────────────────────────────────────────

class TestGroupEvents:
    def test_order_a_b_c_leaves_c_alone(self, chain_events):
        a, b, c = chain_events
        groups = group_events([("P1", [a]), ("P2", [b]), ("P3", [c])])
        assert [len(g.members) for g in groups] == [2, 1]
        assert groups[0].representative is a

    def test_order_b_a_c_forms_one_group(self, chain_events):
        a, b, c = chain_events
        groups = group_events([("P2", [b]), ("P1", [a]), ("P3", [c])])
        assert len(groups) == 1
        assert groups[0].provider_names == ["P2", "P1", "P3"]

    def test_event_joins_first_matching_group(self, make_event):
        first = make_event(event_type="API")
        second = make_event(event_type="Ads")
        wildcard = make_event(event_type="Other")
        groups = group_events([("P1", [first, second]), ("P2", [wildcard])])
        assert [len(g.members) for g in groups] == [2, 1]

    def test_same_input_gives_same_groups(self, chain_events, make_event):
        a, b, c = chain_events
        other = make_event(title="Unrelated advertising overhaul", event_type="Ads", event_date="2022-03-01")
        tagged = [("P1", [a, other]), ("P2", [b]), ("P3", [c, copy.copy(other)])]
        first = group_events(tagged)
        second = group_events(tagged)
        assert all(x.representative is y.representative for x, y in zip(first, second))
        assert [g.provider_names for g in first] == [g.provider_names for g in second]

    def test_empty_input(self):
        assert group_events([]) == []


# ── Confidence and merge ─────────────────────────────────────────────────────────

class TestConfidence:
    @pytest.mark.parametrize(
        "agreement,total,expected",
        [
            (1, 1, VerificationConfidence.LIKELY),
            (2, 2, VerificationConfidence.VERIFIED),
            (3, 5, VerificationConfidence.VERIFIED),
            (2, 4, VerificationConfidence.LIKELY),
            (1, 3, VerificationConfidence.UNVERIFIED),
        ],
    )
    def test_tiers(self, agreement, total, expected):
        assert determine_confidence(agreement, total) == expected

    def test_disputed_never_assigned(self):
        tiers = {determine_confidence(a, t) for t in range(1, 6) for a in range(1, t + 1)}
        assert VerificationConfidence.DISPUTED not in tiers


class TestMostCommon:
    def test_majority(self):
        assert most_common(["minor", "major", "major"]) == "major"

    def test_tie_goes_to_first_seen(self):
        assert most_common(["major", "significant"]) == "major"
        assert most_common(["significant", "major"]) == "significant"

    def test_tie_in_longer_list_goes_to_first_seen(self):
        """Both reach two, but "major" appears first even though "significant" got there first."""
        assert most_common(["major", "significant", "significant", "major"]) == "major"

    def test_empty(self):
        assert most_common([]) is None


class TestMergeGroup:
    def test_merge_uses_representative_and_common_severity(self, make_event):
        rep = make_event(severity="minor", source_url="https://rep.example")
        group = EventGroup(
            representative=rep,
            members=[
                GroupMember(rep, "P1"),
                GroupMember(make_event(severity="major"), "P2"),
                GroupMember(make_event(severity="major"), "P3"),
            ],
        )
        merged = merge_group(group, total_providers=3)
        assert merged.severity == "major"
        assert merged.source_url == "https://rep.example"
        assert merged.verification.agreed_by == ["P1", "P2", "P3"]
        assert merged.verification.consensus_score == 100
        assert merged.verification.confidence == VerificationConfidence.VERIFIED

    def test_agreement_counts_distinct_providers(self, make_event):
        event = make_event()
        group = EventGroup(
            representative=event, members=[GroupMember(event, "P1"), GroupMember(event, "P1")]
        )
        merged = merge_group(group, total_providers=2)
        assert merged.verification.agreed_by == ["P1"]
        assert merged.verification.consensus_score == 50
        assert merged.verification.confidence == VerificationConfidence.UNVERIFIED

    def test_consensus_rounds_half_up(self, make_event):
        event = make_event()
        group = EventGroup(
            representative=event, members=[GroupMember(event, "P1"), GroupMember(event, "P2")]
        )
        assert merge_group(group, total_providers=3).verification.consensus_score == 67


class TestDetectConflicts:
    def _group(self, *events):
        return EventGroup(
            representative=events[0],
            members=[GroupMember(e, f"P{i}") for i, e in enumerate(events)],
        )

    def test_severity_spread(self, make_event):
        flags = detect_conflicts(
            self._group(make_event(severity="minor"), make_event(severity="major"))
        )
        [flag] = flags
        assert flag.dimension == "severity"
        assert flag.values == ["minor", "major"]

    def test_date_spread(self, make_event):
        flags = detect_conflicts(
            self._group(make_event(event_date="2023-02-01"), make_event(event_date="2023-02-20"))
        )
        assert [f.dimension for f in flags] == ["date"]
        assert "19 days" in flags[0].detail

    def test_small_differences_not_flagged(self, make_event):
        group = self._group(
            make_event(severity="major", event_date="2023-02-10"),
            make_event(severity="significant", event_date="2023-02-20"),
        )
        assert detect_conflicts(group) == []

    def test_single_member(self, make_event):
        assert detect_conflicts(self._group(make_event())) == []


# ── Full cross-verification ──────────────────────────────────────────────────────

class TestCrossVerifyResults:
    def test_twitter_two_providers(self, make_event, make_result):
        a = make_event(title="API pricing introduced", event_date="2023-02-10", severity="major")
        b = make_event(
            title="Twitter API pricing changes", event_date="2023-02-20", severity="significant"
        )
        result = cross_verify_results(
            [make_result("Provider A", [a]), make_result("Provider B", [b], service_name="Twitter / X")],
            "Twitter",
        )
        [event] = result.events
        assert event.title == "API pricing introduced"
        assert event.severity == "major"
        assert event.verification.confidence == VerificationConfidence.VERIFIED
        assert event.verification.agreed_by == ["Provider A", "Provider B"]
        assert event.verification.consensus_score == 100
        assert event.verification.conflicts == []
        assert result.service.name == "Twitter"
        assert result.metadata.consensus_score == 100
        assert result.metadata.verified_event_count == 1

    def test_three_providers_drop_uncorroborated(self, make_event, make_result):
        x = make_event(title="Twitter API pricing introduced", event_date="2023-02-10")
        y = make_event(
            title="Twitter removed legacy verification checkmarks",
            description="Twitter took away checkmarks from unpaid accounts.",
            event_date="2023-04-20",
            event_type="Paywall",
        )
        z = make_event(
            title="Twitter Blue price hike",
            description="Twitter raised the subscription price.",
            event_date="2023-10-01",
            event_type="Monetization",
        )
        results = [
            make_result("P1", [y, x]),
            make_result("P2", [x, y]),
            make_result("P3", [y, z]),
        ]
        merged = cross_verify_results(results, "Twitter")
        assert [e.event_date for e in merged.events] == ["2023-02-10", "2023-04-20"]
        x_out, y_out = merged.events
        assert x_out.verification.confidence == VerificationConfidence.LIKELY
        assert x_out.verification.consensus_score == 67
        assert y_out.verification.confidence == VerificationConfidence.VERIFIED
        assert merged.metadata.total_event_count == 2
        assert merged.metadata.verified_event_count == 1
        assert merged.metadata.consensus_score == 84

    def test_single_provider_keeps_everything_as_likely(self, make_event, make_result):
        events = [make_event(event_date="2023-02-10"), make_event(title="Twitter ads", event_date="2021-01-01", event_type="Ads")]
        merged = cross_verify_results([make_result("Only", events)], "Twitter")
        assert [e.event_date for e in merged.events] == ["2021-01-01", "2023-02-10"]
        assert {e.verification.confidence for e in merged.events} == {VerificationConfidence.LIKELY}
        assert {e.verification.consensus_score for e in merged.events} == {100}

    def test_failed_providers_in_metadata_only(self, make_event, make_result):
        merged = cross_verify_results(
            [_failed("Down"), make_result("Up", [make_event()])], "Twitter"
        )
        assert merged.metadata.providers_queried == ["Down", "Up"]
        assert merged.metadata.providers_succeeded == ["Up"]
        assert merged.events[0].verification.confidence == VerificationConfidence.LIKELY

    def test_no_successful_results(self):
        merged = cross_verify_results([_failed("Down")], "Twitter")
        assert merged.events == []
        assert merged.service.name == "Unknown"
        assert merged.metadata.consensus_score == 0

    def test_irrelevant_events_filtered_without_mutating_input(self, make_event, make_result):
        relevant = make_event(title="Facebook cut organic reach", description="", event_type="Algorithm")
        sibling = make_event(title="Instagram rolled out more ads", description="", event_type="Ads")
        results = [make_result("P1", [relevant, sibling], service_name="Facebook")]
        snapshot = copy.deepcopy(results)
        merged = cross_verify_results(results, "Facebook")
        assert [e.title for e in merged.events] == ["Facebook cut organic reach"]
        assert results == snapshot

    def test_conflicts_are_counted(self, make_event, make_result):
        a = make_event(severity="minor", event_date="2023-02-01")
        b = make_event(severity="critical", event_date="2023-02-25")
        merged = cross_verify_results([make_result("P1", [a]), make_result("P2", [b])], "Twitter")
        assert merged.metadata.conflict_count == 2
        assert merged.events[0].verification.confidence == VerificationConfidence.VERIFIED


class TestMergeServiceInfo:
    def test_first_successful_wins(self, make_event, make_result):
        results = [
            _failed("Down"),
            make_result("P1", [make_event()], service_name="Twitter"),
            make_result("P2", [make_event()], service_name="Twitter / X"),
        ]
        assert merge_service_info(results).name == "Twitter"
