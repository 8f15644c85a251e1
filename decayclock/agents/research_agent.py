"""ResearchAgent: fans a research prompt out to every enabled provider.

Each provider is queried concurrently with its own timeout. Every answer goes
through the parse, validate and build pipeline in analysis.response_parser, and
every failure is captured as a tagged ProviderResult. Nothing raised by
a single provider escapes the batch.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import date
from typing import Callable, List, Optional

from config.defaults import PROVIDER_TIMEOUT_SECONDS
from decayclock.agents.base import BaseAgent
from decayclock.analysis.response_parser import parse_provider_response
from decayclock.clients.errors import ProviderRateLimitError
from decayclock.clients.providers import BaseProvider, create_provider
from decayclock.models.pipeline import ResearchContext
from decayclock.models.providers import ProviderConfig
from decayclock.models.verification import ErrorType, ProviderResult, ResearchError
from decayclock.utils.logging_utils import get_request_logger

logger = logging.getLogger(__name__)

ProviderFactory = Callable[..., BaseProvider]

RESEARCH_PROMPT = """You are a researcher documenting "enshittification" events for technology platforms and services.

CRITICAL INSTRUCTIONS:
- You are researching ONLY the platform "{platform}"
- DO NOT include events from parent companies, subsidiaries, or related platforms
- For example: If researching "Facebook", do NOT include Instagram, WhatsApp, or Meta corporate events
- If researching "Instagram", do NOT include Facebook or WhatsApp events
- Each event MUST be specifically about {platform} itself

Enshittification refers to the gradual degradation of a platform's value proposition over time, typically through:
- Increased ads and monetization at the expense of user experience
- Removal of features or making them paid-only
- API restrictions that harm third-party developers
- Privacy invasions or data exploitation
- Anti-competitive practices
- Reduced content quality or creator compensation

For the platform "{platform}", research and return REAL, VERIFIABLE events that represent enshittification. Each event must:
1. Be a real event that actually happened (no speculation)
2. Have a specific date (at least month and year)
3. Have a source URL from reputable news sites, official announcements, or documented sources
4. Be specifically about {platform} - NOT about related or parent company platforms

Return your response as a JSON object with this exact structure:
{
  "service": {
    "name": "Official Platform Name",
    "description": "Brief description of what the platform does (1-2 sentences)",
    "category": "social_media|streaming|gaming|productivity|ecommerce|other"
  },
  "events": [
    {
      "title": "Brief event title (max 100 chars)",
      "description": "Detailed description of what happened and why it's enshittification (max 500 chars)",
      "event_date": "YYYY-MM-DD",
      "severity": "minor|moderate|significant|major|critical",
      "event_type": "Paywall|Privacy|API|Ads|UX|Algorithm|Monetization|Terms|Other",
      "source_url": "https://... (news article or official announcement)",
      "confidence": "high|medium|low"
    }
  ]
}

Severity guidelines:
- minor: Small inconveniences, minor UI changes
- moderate: Noticeable degradation, some features restricted
- significant: Major feature removal, substantial price increases
- major: Breaking changes affecting many users, severe restrictions
- critical: Platform-defining negative changes, mass user exodus triggers

Event type guidelines:
- Paywall: Features moved behind paywalls, subscription required
- Privacy: Data collection, tracking, privacy policy changes
- API: API restrictions, rate limits, third-party app limitations
- Ads: Increased advertising, intrusive ads, ad-related changes
- UX: User experience degradation, confusing UI, dark patterns
- Algorithm: Feed algorithm changes, engagement manipulation
- Monetization: Price increases, creator payment cuts
- Terms: Terms of service changes, content policy changes
- Other: Anything that doesn't fit the above categories

Only include events you are confident about. Prefer fewer high-quality events over many uncertain ones.
Return 3-10 events, prioritizing the most significant ones.
Events should be ordered from oldest to newest.

VALIDATION: Before including any event, verify it mentions "{platform}" by name.
REMINDER: Only include events specifically about {platform}. Exclude events about related platforms.

IMPORTANT: Return ONLY the JSON object, no markdown formatting or explanation."""


def build_research_prompt(platform_name: str) -> str:
    """Substitute the platform name into every placeholder of the research prompt."""
    return RESEARCH_PROMPT.replace("{platform}", platform_name)


def _elapsed_ms(start: float) -> int:
    return int(round((time.monotonic() - start) * 1000))


def _failed_result(
    config: ProviderConfig,
    error_type: str,
    message: str,
    start: float,
    retry_after: Optional[int] = None,
) -> ProviderResult:
    return ProviderResult(
        provider_id=config.id,
        provider_name=config.name,
        success=False,
        error=ResearchError(type=error_type, message=message, retry_after=retry_after),
        duration_ms=_elapsed_ms(start),
    )


def query_provider(
    config: ProviderConfig,
    prompt: str,
    platform_name: str,
    timeout: float = PROVIDER_TIMEOUT_SECONDS,
    provider_factory: Optional[ProviderFactory] = None,
    today: Optional[date] = None,
) -> ProviderResult:
    """Query one provider and turn its answer into a tagged result.

    Args:
        config: Provider to query.
        prompt: Fully substituted research prompt.
        platform_name: Target platform (for the relevance filter).
        timeout: SDK request timeout in seconds.
        provider_factory: Replacement for create_provider (tests inject mocks here).
        today: Reference date for the future-date check.

    Returns:
        ProviderResult with either a filtered ResearchResponse or a ResearchError.
    """
    factory = provider_factory or create_provider
    start = time.monotonic()
    try:
        provider = factory(config, timeout=timeout)
        text = provider.query(prompt)
    except ProviderRateLimitError as exc:
        logger.warning("Provider %s rate limited (retry after %ss)", config.name, exc.retry_after)
        return _failed_result(config, ErrorType.RATE_LIMIT, str(exc), start, exc.retry_after)
    except Exception as exc:
        logger.warning("Provider %s failed: %s", config.name, exc)
        return _failed_result(
            config, ErrorType.API_ERROR, str(exc) or "Unknown error", start
        )

    parsed = parse_provider_response(text, platform_name, today)
    if not parsed.success:
        return ProviderResult(
            provider_id=config.id,
            provider_name=config.name,
            success=False,
            error=parsed.error,
            duration_ms=_elapsed_ms(start),
        )

    logger.debug(
        "Provider %s returned %d relevant events for %s",
        config.name, len(parsed.data.events), platform_name,
    )
    return ProviderResult(
        provider_id=config.id,
        provider_name=config.name,
        success=True,
        data=parsed.data,
        duration_ms=_elapsed_ms(start),
    )


class ResearchAgent(BaseAgent):
    """Concurrent multi-provider research for one platform.

    Args:
        provider_factory: Optional replacement for create_provider.
    """

    name = "ResearchAgent"
    version = "1.0.0"

    def __init__(self, provider_factory: Optional[ProviderFactory] = None) -> None:
        self.provider_factory = provider_factory

    def run(self, context: ResearchContext) -> List[ProviderResult]:
        """Query every enabled provider in parallel.

        Args:
            context: Research context with platform name, providers and config.

        Returns:
            One ProviderResult per enabled provider, in ascending priority order.
        """
        log = get_request_logger(
            "agents.research_agent", context.request_id, context.platform_name
        )
        cfg = context.config

        providers = sorted(
            (p for p in context.providers if p.enabled), key=lambda p: p.priority
        )
        if not providers:
            log.warning("No enabled providers to query")
            return []

        prompt = build_research_prompt(context.platform_name)
        timeout = cfg.provider_timeout_seconds
        log.info(
            "Querying %d providers for %r: %s",
            len(providers), context.platform_name, ", ".join(p.name for p in providers),
        )

        # One worker per provider so every call starts at once with the full timeout
        executor = ThreadPoolExecutor(
            max_workers=len(providers),
            thread_name_prefix="provider",
        )
        futures = [
            executor.submit(
                query_provider,
                provider,
                prompt,
                context.platform_name,
                timeout,
                self.provider_factory,
                context.today,
            )
            for provider in providers
        ]
        done, _ = wait(futures, timeout=timeout)
        # Stalled calls are abandoned rather than joined
        executor.shutdown(wait=False, cancel_futures=True)

        results: List[ProviderResult] = []
        for provider, future in zip(providers, futures):
            if future not in done:
                log.warning("Provider %s timed out after %.0fs", provider.name, timeout)
                results.append(
                    ProviderResult(
                        provider_id=provider.id,
                        provider_name=provider.name,
                        success=False,
                        error=ResearchError(
                            type=ErrorType.API_ERROR,
                            message=f"Provider timed out after {timeout:g}s",
                        ),
                        duration_ms=int(timeout * 1000),
                    )
                )
                continue
            try:
                results.append(future.result())
            except Exception as exc:
                log.error("Provider %s raised unexpectedly: %s", provider.name, exc)
                results.append(
                    ProviderResult(
                        provider_id=provider.id,
                        provider_name=provider.name,
                        success=False,
                        error=ResearchError(type=ErrorType.API_ERROR, message=str(exc)),
                    )
                )

        succeeded = sum(1 for r in results if r.success)
        log.info("%d of %d providers returned usable research", succeeded, len(results))
        return results
