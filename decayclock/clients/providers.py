"""Multi-dialect provider clients for DecayClock.

Provides a uniform `BaseProvider.query(prompt) -> str` interface over the
text-generation backends a research request fans out to:

- AnthropicProvider: Anthropic Messages API (`anthropic` SDK)
- OllamaProvider: native Ollama chat API (`ollama` SDK)
- OpenAICompatibleProvider: any OpenAI-compatible chat-completions endpoint
  (`openai` SDK): OpenAI itself, vLLM, OpenRouter, Ollama's /v1 shim, ...

`create_provider()` picks the dialect by inspecting the configured endpoint
host and falls back to the OpenAI-compatible shape for unknown hosts.

Agent code must go through create_provider(); never import an SDK directly.
API keys are passed to SDK constructors only and are never logged.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional
from urllib.parse import urlparse

from config.defaults import (
    ANTHROPIC_HOSTS,
    CONNECTION_TEST_PROMPT,
    CONNECTION_TEST_TIMEOUT_SECONDS,
    OLLAMA_DEFAULT_PORT,
    OLLAMA_HOSTS,
    PROVIDER_TIMEOUT_SECONDS,
)
from decayclock.clients.errors import ProviderError, translate_exception
from decayclock.models.providers import ConnectionTestResult, ProviderConfig

logger = logging.getLogger(__name__)


class Dialect:
    """Wire protocol identifiers returned by detect_dialect()."""

    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"
    OPENAI = "openai"


class BaseProvider(ABC):
    """Abstract base class for all provider clients.

    Subclasses implement `_complete()` against their SDK; `query()` wraps it
    so that every failure surfaces as a ProviderError.

    Args:
        config: Provider connection and generation settings.
        timeout: Per-request timeout in seconds handed to the SDK client.
    """

    dialect: str = ""

    def __init__(self, config: ProviderConfig, timeout: float = PROVIDER_TIMEOUT_SECONDS) -> None:
        self.config = config
        self.timeout = timeout
        self._client: Optional[Any] = None

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    @abstractmethod
    def _complete(self, prompt: str) -> str:
        """Send a single user prompt and return the raw completion text."""

    def query(self, prompt: str) -> str:
        """Send a prompt and return the completion text.

        Args:
            prompt: User message content.

        Returns:
            Non-empty completion text.

        Raises:
            ProviderError: On transport, auth, provider-side or empty-response failure.
            ProviderRateLimitError: When the provider throttles the request.
        """
        try:
            text = self._complete(prompt)
        except Exception as exc:
            raise translate_exception(exc, self.name) from exc
        if not text or not text.strip():
            raise ProviderError(f"{self.name}: no content in {self.dialect} response")
        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, name={self.name!r}, model={self.config.model!r})"


class AnthropicProvider(BaseProvider):
    """Anthropic Messages API client."""

    dialect = Dialect.ANTHROPIC

    def _get_client(self) -> Any:
        """Lazily initialize and return the Anthropic client."""
        if self._client is None:
            try:
                import anthropic  # type: ignore[import]
            except ImportError:
                raise ImportError(
                    "anthropic package is required for Anthropic providers. "
                    "Install with: pip install anthropic"
                )
            self._client = anthropic.Anthropic(
                api_key=self.config.api_key or None,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def _complete(self, prompt: str) -> str:
        client = self._get_client()
        response = client.messages.create(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        for block in response.content or []:
            if getattr(block, "type", "") == "text":
                return block.text or ""
        raise ProviderError(f"{self.name}: no text content in Anthropic response")


class OpenAICompatibleProvider(BaseProvider):
    """OpenAI-compatible chat-completions client (OpenAI, vLLM, Ollama /v1, ...)."""

    dialect = Dialect.OPENAI

    def _get_client(self) -> Any:
        """Lazily initialize and return the OpenAI client bound to base_url."""
        if self._client is None:
            try:
                import openai  # type: ignore[import]
            except ImportError:
                raise ImportError(
                    "openai package is required for OpenAI-compatible providers. "
                    "Install with: pip install openai"
                )
            self._client = openai.OpenAI(
                base_url=self.config.base_url or None,
                # Local servers accept any key; the SDK refuses an empty one
                api_key=self.config.api_key or "not-needed",
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def _complete(self, prompt: str) -> str:
        client = self._get_client()
        response = client.chat.completions.create(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        if not response.choices:
            raise ProviderError(f"{self.name}: no choices in OpenAI response")
        message = response.choices[0].message
        return (message.content if message else "") or ""


class OllamaProvider(BaseProvider):
    """Native Ollama chat client.

    When an API key is configured, passes an Authorization: Bearer header for
    Ollama Cloud authentication.
    """

    dialect = Dialect.OLLAMA

    def _get_client(self) -> Any:
        """Lazily initialize and return the Ollama client."""
        if self._client is None:
            try:
                import ollama  # type: ignore[import]
            except ImportError:
                raise ImportError(
                    "ollama package is required for Ollama providers. "
                    "Install with: pip install ollama"
                )
            kwargs: dict = {"host": self.config.base_url, "timeout": self.timeout}
            if self.config.api_key:
                kwargs["headers"] = {"Authorization": f"Bearer {self.config.api_key}"}
            self._client = ollama.Client(**kwargs)
        return self._client

    def _complete(self, prompt: str) -> str:
        client = self._get_client()
        response = client.chat(
            model=self.config.model,
            messages=[{"role": "user", "content": prompt}],
            options={
                "num_predict": self.config.max_tokens,
                "temperature": self.config.temperature,
            },
        )
        if response and getattr(response, "message", None):
            return response.message.content or ""
        return ""


_DIALECT_CLASSES = {
    Dialect.ANTHROPIC: AnthropicProvider,
    Dialect.OLLAMA: OllamaProvider,
    Dialect.OPENAI: OpenAICompatibleProvider,
}


def detect_dialect(base_url: str) -> str:
    """Determine the wire protocol spoken by an endpoint.

    An empty base URL means the vendor default (Anthropic). Ollama endpoints
    addressed through their OpenAI `/v1` shim are treated as OpenAI-compatible.

    Args:
        base_url: Configured endpoint, with or without scheme.

    Returns:
        One of the Dialect constants.
    """
    base_url = (base_url or "").strip()
    if not base_url:
        return Dialect.ANTHROPIC

    parsed = urlparse(base_url if "://" in base_url else f"https://{base_url}")
    host = (parsed.hostname or "").lower()

    if host in ANTHROPIC_HOSTS:
        return Dialect.ANTHROPIC

    try:
        port = parsed.port
    except ValueError:
        port = None
    is_ollama_host = host in OLLAMA_HOSTS or port == OLLAMA_DEFAULT_PORT
    if is_ollama_host and not parsed.path.rstrip("/").endswith("/v1"):
        return Dialect.OLLAMA

    return Dialect.OPENAI


def create_provider(
    config: ProviderConfig, timeout: float = PROVIDER_TIMEOUT_SECONDS
) -> BaseProvider:
    """Build the provider client matching the configured endpoint.

    Args:
        config: Provider connection and generation settings.
        timeout: Per-request timeout in seconds.

    Returns:
        A BaseProvider subclass instance.
    """
    dialect = detect_dialect(config.base_url)
    provider = _DIALECT_CLASSES[dialect](config, timeout=timeout)
    logger.debug("Provider %s (%s) → %s dialect", config.name, config.id, dialect)
    return provider


def test_connection(
    config: ProviderConfig,
    timeout: float = CONNECTION_TEST_TIMEOUT_SECONDS,
    provider_factory: Any = None,
) -> ConnectionTestResult:
    """Probe a provider with a trivial prompt and report round-trip latency.

    Args:
        config: Provider to probe.
        timeout: Request timeout in seconds.
        provider_factory: Optional replacement for create_provider (tests).

    Returns:
        ConnectionTestResult; success requires "ok" somewhere in the reply.
    """
    factory = provider_factory or create_provider
    start = time.monotonic()
    try:
        provider = factory(config, timeout=timeout)
        reply = provider.query(CONNECTION_TEST_PROMPT)
    except Exception as exc:
        logger.warning("Connection test failed for provider %s: %s", config.name, exc)
        return ConnectionTestResult(success=False, message=str(exc) or type(exc).__name__)

    latency_ms = int(round((time.monotonic() - start) * 1000))
    if "ok" in reply.lower():
        return ConnectionTestResult(
            success=True,
            message=f"Connection successful ({latency_ms}ms)",
            latency_ms=latency_ms,
        )
    return ConnectionTestResult(
        success=False,
        message=f"Connected but received an unexpected response ({latency_ms}ms)",
        latency_ms=latency_ms,
    )


# Keep pytest from collecting test_connection as a test when imported into test modules
test_connection.__test__ = False  # type: ignore[attr-defined]
