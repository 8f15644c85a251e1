"""Shared pytest fixtures for DecayClock tests.

Conventions:
- Fixture data lives in tests/fixtures/ as static JSON files
- Providers are replaced through the provider_factory injection point, so
  no test ever reaches a real provider API
- A fixed reference date is used wherever "today" matters
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from unittest.mock import MagicMock

import pytest

from config.settings import ResearchConfig
from decayclock.models.events import ResearchedEvent, ResearchedService, ResearchResponse
from decayclock.models.providers import ProviderConfig
from decayclock.models.verification import ProviderResult

_FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Reference date for date validation and clock decay
TODAY = date(2025, 6, 1)


# ── Raw fixture data loaders ─────────────────────────────────────────────────────

def _read_fixture(name: str) -> str:
    return (_FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture(scope="session")
def twitter_reply_a() -> str:
    """Provider A's raw answer for Twitter: one 'API pricing introduced' event (major)."""
    return _read_fixture("twitter_provider_a.json")


@pytest.fixture(scope="session")
def twitter_reply_b() -> str:
    """Provider B's raw answer for Twitter: a near-duplicate event (significant)."""
    return _read_fixture("twitter_provider_b.json")


@pytest.fixture(scope="session")
def facebook_reply() -> str:
    """Raw answer for Facebook mixing relevant, sibling, low-confidence and off-vocabulary events."""
    return _read_fixture("facebook_mixed.json")


@pytest.fixture
def today() -> date:
    return TODAY


# ── Model object fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def research_config(tmp_path) -> ResearchConfig:
    """ResearchConfig isolated from the environment and the working directory."""
    return ResearchConfig(
        provider_timeout_seconds=5.0,
        providers_file=str(tmp_path / "providers.yaml"),
        store_path=str(tmp_path / "decayclock.json"),
        anthropic_api_key=None,
        log_level="WARNING",
    )


@pytest.fixture
def make_provider_config() -> Callable[..., ProviderConfig]:
    """Factory for ProviderConfig objects with sensible test defaults."""

    def _make(
        provider_id: str = "provider-a",
        name: Optional[str] = None,
        base_url: str = "https://api.example.com/v1",
        priority: int = 1,
        enabled: bool = True,
        api_key: str = "sk-test-secret",
        model: str = "test-model",
    ) -> ProviderConfig:
        return ProviderConfig(
            id=provider_id,
            name=name or provider_id.replace("-", " ").title(),
            base_url=base_url,
            api_key=api_key,
            model=model,
            enabled=enabled,
            priority=priority,
        )

    return _make


@pytest.fixture
def make_event() -> Callable[..., ResearchedEvent]:
    """Factory for ResearchedEvent objects."""

    def _make(
        title: str = "Twitter API pricing introduced",
        description: str = "Twitter ended free API access for developers.",
        event_date: str = "2023-02-10",
        severity: str = "major",
        event_type: str = "API",
        source_url: Optional[str] = "https://example.com/source",
        confidence: str = "high",
    ) -> ResearchedEvent:
        return ResearchedEvent(
            title=title,
            description=description,
            event_date=event_date,
            severity=severity,
            event_type=event_type,
            source_url=source_url,
            confidence=confidence,
        )

    return _make


@pytest.fixture
def make_result() -> Callable[..., ProviderResult]:
    """Factory for successful ProviderResult objects wrapping a list of events."""

    def _make(
        provider_name: str,
        events: List[ResearchedEvent],
        service_name: str = "Twitter",
    ) -> ProviderResult:
        return ProviderResult(
            provider_id=provider_name.lower().replace(" ", "-"),
            provider_name=provider_name,
            success=True,
            data=ResearchResponse(
                service=ResearchedService(
                    name=service_name, description=f"{service_name} platform", category="social_media"
                ),
                events=list(events),
            ),
            duration_ms=10,
        )

    return _make


# ── Mock provider factory ────────────────────────────────────────────────────────

class FakeProviderFactory:
    """Stand-in for create_provider() returning MagicMock providers.

    Args:
        replies: provider id → reply text, or an exception instance to raise.
    """

    def __init__(self, replies: Dict[str, Union[str, Exception]]) -> None:
        self.replies = replies
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, config: ProviderConfig, timeout: float = 0.0) -> MagicMock:
        self.calls.append({"id": config.id, "timeout": timeout})
        provider = MagicMock(name=f"provider-{config.id}")
        reply = self.replies[config.id]
        if isinstance(reply, Exception):
            provider.query.side_effect = reply
        else:
            provider.query.return_value = reply
        return provider


@pytest.fixture
def fake_provider_factory() -> Callable[[Dict[str, Union[str, Exception]]], FakeProviderFactory]:
    """Build a FakeProviderFactory from a reply mapping."""
    return FakeProviderFactory
