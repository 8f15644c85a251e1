"""Provider error hierarchy for DecayClock.

Adapters translate every SDK exception into one of these so that the research
agent can map failures onto ResearchError tags without importing any SDK.
"""

from __future__ import annotations

from typing import Any, Optional

from config.defaults import RATE_LIMIT_RETRY_AFTER_SECONDS


class ProviderError(Exception):
    """Transport, provider-side or empty-response failure."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderAuthError(ProviderError):
    """The provider rejected the configured credential (401/403)."""


class ProviderRateLimitError(ProviderError):
    """The provider is throttling requests (429)."""

    def __init__(
        self,
        message: str,
        retry_after: int = RATE_LIMIT_RETRY_AFTER_SECONDS,
        status_code: Optional[int] = 429,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


def _retry_after_from(exc: Exception) -> int:
    """Read a retry-after hint (seconds) from an SDK exception's HTTP response."""
    response = getattr(exc, "response", None)
    headers: Any = getattr(response, "headers", None) or {}
    try:
        value = headers.get("retry-after")
    except AttributeError:
        return RATE_LIMIT_RETRY_AFTER_SECONDS
    if value is None:
        return RATE_LIMIT_RETRY_AFTER_SECONDS
    try:
        return max(0, int(float(value)))
    except (TypeError, ValueError):
        return RATE_LIMIT_RETRY_AFTER_SECONDS


def translate_exception(exc: Exception, provider_name: str) -> ProviderError:
    """Map an arbitrary SDK exception onto the ProviderError hierarchy.

    The anthropic, openai and ollama SDKs all expose the HTTP status on
    `status_code`; that is the only attribute relied upon here.

    Args:
        exc: Exception raised by a provider SDK call.
        provider_name: Display name used to prefix the message.

    Returns:
        A ProviderError (or subclass) chaining nothing; callers use `from exc`.
    """
    if isinstance(exc, ProviderError):
        return exc

    status = getattr(exc, "status_code", None)
    message = f"{provider_name}: {exc}" if str(exc) else f"{provider_name}: {type(exc).__name__}"

    if status == 429 or type(exc).__name__ == "RateLimitError":
        return ProviderRateLimitError(message, retry_after=_retry_after_from(exc))
    if status in (401, 403) or type(exc).__name__ in ("AuthenticationError", "PermissionDeniedError"):
        return ProviderAuthError(message, status_code=status)
    return ProviderError(message, status_code=status if isinstance(status, int) else None)
