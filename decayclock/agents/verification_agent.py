"""CrossVerificationAgent: merge per-provider research into one event list.

Steps:
- Re-apply the platform relevance filter to each successful result
- Greedy single-pass grouping of matching events across providers
- Confidence tier and consensus score per group
- Representative merge with the group's most common severity
- Contradiction flags for severity or date disagreements inside a group
- Date-ascending assembly, dropping uncorroborated events when several
  providers answered
"""

from __future__ import annotations

import dataclasses
import logging
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from config.defaults import (
    CONFLICT_DATE_SPREAD_DAYS,
    CONFLICT_SEVERITY_SPREAD,
    LIKELY_AGREEMENT_COUNT,
    VERIFIED_AGREEMENT_COUNT,
)
from decayclock.agents.base import BaseAgent
from decayclock.analysis.event_matching import events_match
from decayclock.analysis.platform_filter import filter_events_for_platform
from decayclock.models.events import SEVERITY_SCORES, ResearchedEvent, ResearchedService
from decayclock.models.pipeline import ResearchContext
from decayclock.models.verification import (
    ContradictionFlag,
    CrossVerifiedResult,
    EventGroup,
    GroupMember,
    ProviderResult,
    VerificationConfidence,
    VerificationMetadata,
    VerificationRecord,
    VerifiedEvent,
)
from decayclock.utils.date_utils import parse_event_date
from decayclock.utils.numbers import round_half_up

logger = logging.getLogger(__name__)

UNKNOWN_SERVICE = ResearchedService(name="Unknown", description="", category="other")


def _successful(results: Sequence[ProviderResult]) -> List[ProviderResult]:
    return [r for r in results if r.success and r.data is not None]


def group_events(
    tagged_events: Sequence[Tuple[str, Sequence[ResearchedEvent]]]
) -> List[EventGroup]:
    """Greedy single-pass grouping of events across providers.

    Each event is compared with the representative (first member) of every
    existing group and joins the first one it matches; otherwise it opens a
    new group. Because events_match() is not transitive, the outcome depends
    on iteration order: with A~B, B~C and A!~C, the order B, A, C yields one
    group while A, B, C leaves C on its own.

    Args:
        tagged_events: (provider_name, events) pairs in provider order.

    Returns:
        Groups in creation order.
    """
    groups: List[EventGroup] = []
    for provider_name, events in tagged_events:
        for event in events:
            member = GroupMember(event=event, provider_name=provider_name)
            for group in groups:
                if events_match(group.representative, event):
                    group.members.append(member)
                    break
            else:
                groups.append(EventGroup(representative=event, members=[member]))
    return groups


def determine_confidence(agreement_count: int, total_providers: int) -> str:
    """Confidence tier for a group found by `agreement_count` distinct providers.

    A single successful provider cannot corroborate itself, so its events are
    always "likely". The "disputed" tier is never assigned here.
    """
    if total_providers == 1:
        return VerificationConfidence.LIKELY
    if agreement_count >= total_providers or agreement_count >= VERIFIED_AGREEMENT_COUNT:
        return VerificationConfidence.VERIFIED
    if agreement_count >= LIKELY_AGREEMENT_COUNT:
        return VerificationConfidence.LIKELY
    return VerificationConfidence.UNVERIFIED


def most_common(values: Sequence[str]) -> Optional[str]:
    """Most frequent value; ties go to the value seen first."""
    if not values:
        return None
    # Counter keeps insertion order and most_common() sorts stably, so a tie
    # goes to the earliest value: [a, b, b, a] gives a, not b.
    return Counter(values).most_common(1)[0][0]


def detect_conflicts(group: EventGroup) -> List[ContradictionFlag]:
    """Flag severity or date disagreements between the members of a group.

    Args:
        group: A matched event group.

    Returns:
        Zero, one or two ContradictionFlag objects.
    """
    flags: List[ContradictionFlag] = []
    if len(group.members) < 2:
        return flags

    severities = list(dict.fromkeys(m.event.severity for m in group.members))
    ranks = [SEVERITY_SCORES[s] for s in severities if s in SEVERITY_SCORES]
    if ranks and max(ranks) - min(ranks) >= CONFLICT_SEVERITY_SPREAD:
        flags.append(
            ContradictionFlag(
                dimension="severity",
                detail=f"Providers disagree on severity by {max(ranks) - min(ranks)} levels",
                values=severities,
            )
        )

    dates = list(dict.fromkeys(m.event.event_date for m in group.members))
    parsed = [d for d in (parse_event_date(v) for v in dates) if d is not None]
    if parsed:
        spread = (max(parsed) - min(parsed)).days
        if spread >= CONFLICT_DATE_SPREAD_DAYS:
            flags.append(
                ContradictionFlag(
                    dimension="date",
                    detail=f"Provider dates span {spread} days",
                    values=dates,
                )
            )
    return flags


def merge_group(group: EventGroup, total_providers: int) -> VerifiedEvent:
    """Build the merged output event for one group."""
    agreed_by = group.provider_names
    confidence = determine_confidence(len(agreed_by), total_providers)
    consensus_score = (
        round_half_up(100 * len(agreed_by) / total_providers) if total_providers > 0 else 100
    )
    fields = dataclasses.asdict(group.representative)
    fields["severity"] = (
        most_common([m.event.severity for m in group.members]) or group.representative.severity
    )
    return VerifiedEvent(
        **fields,
        verification=VerificationRecord(
            confidence=confidence,
            agreed_by=agreed_by,
            consensus_score=consensus_score,
            conflicts=detect_conflicts(group),
        ),
    )


def merge_service_info(results: Sequence[ProviderResult]) -> ResearchedService:
    """Service description from the first successful provider."""
    for result in _successful(results):
        if result.data.service is not None:
            return result.data.service
    return dataclasses.replace(UNKNOWN_SERVICE)


def cross_verify_results(
    results: Sequence[ProviderResult], target_platform: str
) -> CrossVerifiedResult:
    """Merge per-provider research into one deduplicated, scored event list.

    Input results are not modified.

    Args:
        results: Provider results in priority order (failed ones included).
        target_platform: Platform name used for the relevance filter.

    Returns:
        CrossVerifiedResult with date-ascending events and aggregate metadata.
    """
    successful = _successful(results)
    total_providers = len(successful)

    tagged_events = [
        (r.provider_name, filter_events_for_platform(r.data.events, target_platform))
        for r in successful
    ]
    groups = group_events(tagged_events)
    merged = [merge_group(group, total_providers) for group in groups]

    merged.sort(key=lambda e: e.event_date)
    if total_providers > 1:
        events = [
            e for e in merged
            if e.verification.confidence != VerificationConfidence.UNVERIFIED
        ]
    else:
        events = merged

    overall = (
        round_half_up(sum(e.verification.consensus_score for e in events) / len(events))
        if events else 0
    )
    metadata = VerificationMetadata(
        providers_queried=[r.provider_name for r in results],
        providers_succeeded=[r.provider_name for r in successful],
        consensus_score=overall,
        verified_event_count=sum(
            1 for e in events if e.verification.confidence == VerificationConfidence.VERIFIED
        ),
        total_event_count=len(events),
        conflict_count=sum(len(e.verification.conflicts) for e in events),
    )
    logger.info(
        "Cross-verification (%s): %d groups from %d providers → %d events "
        "(%d verified, consensus %d%%, %d conflicts)",
        target_platform,
        len(groups),
        total_providers,
        metadata.total_event_count,
        metadata.verified_event_count,
        metadata.consensus_score,
        metadata.conflict_count,
    )
    return CrossVerifiedResult(
        service=merge_service_info(results),
        events=events,
        metadata=metadata,
    )


class CrossVerificationAgent(BaseAgent):
    """Merge the provider results stored on a research context."""

    name = "CrossVerificationAgent"
    version = "1.0.0"

    def run(self, context: ResearchContext) -> CrossVerifiedResult:
        return cross_verify_results(context.provider_results, context.platform_name)
