"""Provider configuration models for DecayClock."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from config.defaults import PROVIDER_MAX_TOKENS, PROVIDER_TEMPERATURE


@dataclass
class ProviderConfig:
    """Connection and generation settings for one text-generation provider.

    `api_key` holds the decrypted credential for the duration of a request
    only; it is excluded from repr so it never reaches log output.
    """

    id: str
    name: str
    base_url: str
    api_key: str = field(default="", repr=False)
    model: str = ""
    enabled: bool = True
    priority: int = 1
    max_tokens: int = PROVIDER_MAX_TOKENS
    temperature: float = PROVIDER_TEMPERATURE


@dataclass
class ConnectionTestResult:
    """Outcome of a provider connectivity probe."""

    success: bool
    message: str
    latency_ms: Optional[int] = None
