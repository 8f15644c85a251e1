"""DecayClock research orchestrator.

Runs the research agents in order for one platform and turns their output
into a tagged ResearchOutcome:

  1. ResearchAgent          (concurrent provider fan-out, parse, validate, filter)
  2. CrossVerificationAgent (grouping, confidence, merge, assembly)

Usage:
    from decayclock.pipeline import research_platform

    outcome = research_platform("Twitter", providers)
    if outcome.success:
        for event in outcome.data.events:
            print(event.event_date, event.title, event.verification.confidence)
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from config.defaults import RATE_LIMIT_RETRY_AFTER_SECONDS
from config.settings import ResearchConfig
from decayclock.agents.research_agent import ProviderFactory, ResearchAgent
from decayclock.agents.verification_agent import CrossVerificationAgent
from decayclock.io.event_store import JsonEventStore
from decayclock.io.provider_store import load_provider_configs
from decayclock.models.pipeline import ResearchContext, SaveResult
from decayclock.models.providers import ProviderConfig
from decayclock.models.verification import ErrorType, ResearchOutcome
from decayclock.utils.key_codec import EnvKeyProvider, KeyProvider
from decayclock.utils.logging_utils import get_request_logger, new_request_id

logger = logging.getLogger(__name__)

NO_PROVIDERS_MESSAGE = (
    "No AI providers configured. Add providers to the providers file or set ANTHROPIC_API_KEY."
)
NO_EVENTS_MESSAGE = "No valid events found after cross-verification"


def run(
    context: ResearchContext, provider_factory: Optional[ProviderFactory] = None
) -> ResearchOutcome:
    """Execute the research agents against a prepared context.

    Agent results are stored back on the context as they complete.

    Args:
        context: Research context (platform name, providers, config).
        provider_factory: Optional replacement for create_provider.

    Returns:
        ResearchOutcome with the cross-verified result or a typed error.
    """
    log = get_request_logger("pipeline", context.request_id, context.platform_name)
    context.start_time = datetime.now()
    try:
        if not any(p.enabled for p in context.providers):
            log.warning("No enabled providers for %r", context.platform_name)
            return ResearchOutcome.failure(ErrorType.API_ERROR, NO_PROVIDERS_MESSAGE)

        context.provider_results = ResearchAgent(provider_factory)._run_timed(context)

        if not context.successful_results:
            first_error = context.provider_results[0].error if context.provider_results else None
            if first_error is None:
                return ResearchOutcome.failure(ErrorType.API_ERROR, "All providers failed")
            for result in context.provider_results:
                if result.error:
                    context.add_warning(f"{result.provider_name}: {result.error.message}")
            log.warning("All providers failed; first error: %s", first_error.message)
            return ResearchOutcome(success=False, error=first_error)

        context.verified_result = CrossVerificationAgent()._run_timed(context)

        if not context.verified_result.events:
            log.warning("Cross-verification left no events for %r", context.platform_name)
            return ResearchOutcome.failure(ErrorType.VALIDATION_ERROR, NO_EVENTS_MESSAGE)

        return ResearchOutcome.ok(context.verified_result)
    finally:
        context.end_time = datetime.now()
        log.info(
            "Research for %r finished in %.2fs (%d warnings)",
            context.platform_name,
            (context.end_time - context.start_time).total_seconds(),
            len(context.warnings),
        )


def research_platform(
    platform_name: str,
    providers: List[ProviderConfig],
    config: Optional[ResearchConfig] = None,
    provider_factory: Optional[ProviderFactory] = None,
    today: Optional[date] = None,
) -> ResearchOutcome:
    """Research one platform with every given provider and cross-verify.

    Args:
        platform_name: Platform to research (already validated by the caller).
        providers: Provider configurations; disabled ones are skipped.
        config: Research configuration (defaults to ResearchConfig()).
        provider_factory: Optional replacement for create_provider (tests).
        today: Reference date for the future-date check.

    Returns:
        ResearchOutcome.
    """
    context = ResearchContext(
        config=config or ResearchConfig(),
        platform_name=platform_name,
        providers=list(providers),
        request_id=new_request_id(),
        today=today,
    )
    return run(context, provider_factory=provider_factory)


def research_and_save(
    platform_name: str,
    store: JsonEventStore,
    providers: Optional[List[ProviderConfig]] = None,
    config: Optional[ResearchConfig] = None,
    key_provider: Optional[KeyProvider] = None,
    provider_factory: Optional[ProviderFactory] = None,
    today: Optional[date] = None,
) -> SaveResult:
    """Admin workflow: validate the name, research the platform, persist the result.

    Args:
        platform_name: Raw platform name as entered (trimmed here).
        store: Event store receiving the result.
        providers: Provider list; loaded from the providers file when None.
        config: Research configuration (defaults to ResearchConfig()).
        key_provider: Key source for decrypting stored provider keys.
        provider_factory: Optional replacement for create_provider (tests).
        today: Reference date for the future-date check.

    Returns:
        SaveResult describing what was stored or why nothing was.
    """
    cfg = config or ResearchConfig()
    trimmed = (platform_name or "").strip()
    if len(trimmed) < cfg.min_platform_name_length:
        return SaveResult(
            success=False,
            message=f"Platform name must be at least {cfg.min_platform_name_length} characters",
        )

    if providers is None:
        providers = load_provider_configs(
            cfg.providers_file,
            key_provider or EnvKeyProvider(),
            fallback_api_key=cfg.anthropic_api_key,
        )

    outcome = research_platform(
        trimmed, providers, config=cfg, provider_factory=provider_factory, today=today
    )
    if not outcome.success:
        error = outcome.error
        if error.type == ErrorType.RATE_LIMIT:
            retry_after = error.retry_after or RATE_LIMIT_RETRY_AFTER_SECONDS
            return SaveResult(
                success=False,
                message=f"Rate limit exceeded. Please try again in {retry_after} seconds.",
            )
        return SaveResult(success=False, message=f"Research failed: {error.message}")

    return store.save_research(outcome.data)
