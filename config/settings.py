"""DecayClock: ResearchConfig and environment-based configuration loading.

All runtime configuration flows through ResearchConfig. API keys come
exclusively from environment variables or the encrypted provider store.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from config.defaults import (
    DEFAULT_LOG_LEVEL,
    MIN_PLATFORM_NAME_LENGTH,
    PROVIDER_TIMEOUT_SECONDS,
    PROVIDERS_FILE,
    STORE_PATH,
)

# Load .env file if present; silently skip if missing
load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class ResearchConfig:
    """Single configuration object threaded through the research workflow.

    A fresh instance is a snapshot: agents read it but never mutate it, so
    concurrent research requests need no locking.
    """

    # ── Provider fan-out ───────────────────────────────────────────────────────
    provider_timeout_seconds: float = field(
        default_factory=lambda: _env_float("PROVIDER_TIMEOUT_SECONDS", PROVIDER_TIMEOUT_SECONDS)
    )

    # ── Admin workflow ─────────────────────────────────────────────────────────
    min_platform_name_length: int = MIN_PLATFORM_NAME_LENGTH

    # ── Storage ────────────────────────────────────────────────────────────────
    providers_file: str = field(
        default_factory=lambda: os.getenv("DECAYCLOCK_PROVIDERS_FILE", PROVIDERS_FILE)
    )
    store_path: str = field(
        default_factory=lambda: os.getenv("DECAYCLOCK_STORE_PATH", STORE_PATH)
    )

    # ── Credentials (from environment only) ────────────────────────────────────
    # Used to build the single fallback provider when the store is empty
    anthropic_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY"), repr=False
    )

    # ── Logging ────────────────────────────────────────────────────────────────
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL))

    def __post_init__(self) -> None:
        if self.provider_timeout_seconds <= 0:
            raise ValueError(
                f"provider_timeout_seconds must be positive, got {self.provider_timeout_seconds}"
            )
