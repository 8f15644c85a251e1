"""YAML-backed provider configuration store.

Provider records are kept in a YAML file with obfuscated API keys:

    providers:
      - id: openrouter
        name: OpenRouter
        base_url: https://openrouter.ai/api/v1
        api_key_encrypted: <base64>
        model: meta-llama/llama-3.1-70b-instruct
        enabled: true
        priority: 2
        max_tokens: 4096
        temperature: 0.7

Keys are decrypted only when a ProviderConfig is built for a request. When
the file is missing, unreadable or has no enabled providers, a single
fallback provider is built from ANTHROPIC_API_KEY (if set).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from config.defaults import (
    ANTHROPIC_MODEL,
    FALLBACK_PROVIDER_BASE_URL,
    FALLBACK_PROVIDER_ID,
    FALLBACK_PROVIDER_NAME,
    PROVIDER_MAX_TOKENS,
    PROVIDER_TEMPERATURE,
)
from decayclock.io.persistence import load_yaml, save_yaml
from decayclock.models.providers import ProviderConfig
from decayclock.utils.key_codec import KeyProvider, decrypt_api_key, encrypt_api_key

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def fallback_providers(api_key: Optional[str]) -> List[ProviderConfig]:
    """The single environment-backed Anthropic provider, or [] without a key."""
    if not api_key:
        return []
    return [
        ProviderConfig(
            id=FALLBACK_PROVIDER_ID,
            name=FALLBACK_PROVIDER_NAME,
            base_url=FALLBACK_PROVIDER_BASE_URL,
            api_key=api_key,
            model=ANTHROPIC_MODEL,
            enabled=True,
            priority=1,
            max_tokens=PROVIDER_MAX_TOKENS,
            temperature=PROVIDER_TEMPERATURE,
        )
    ]


def _read_records(path: PathLike) -> List[Dict[str, Any]]:
    data = load_yaml(path)
    if data is None:
        return []
    records = data.get("providers") if isinstance(data, dict) else None
    if not isinstance(records, list):
        raise ValueError(f"{path}: expected a top-level 'providers' list")
    return [r for r in records if isinstance(r, dict)]


def _write_records(records: List[Dict[str, Any]], path: PathLike) -> None:
    save_yaml({"providers": records}, path)


_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0"})


def _as_bool(value: Any, default: bool) -> bool:
    """Read a YAML flag; quoted "false" is false and unknown values are rejected."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS | _FALSE_STRINGS:
        return value.strip().lower() in _TRUE_STRINGS
    raise ValueError(f"enabled must be true or false, got {value!r}")


def _record_to_config(
    record: Dict[str, Any], key_provider: Optional[KeyProvider]
) -> ProviderConfig:
    encrypted = record.get("api_key_encrypted") or ""
    api_key = decrypt_api_key(encrypted, key_provider) if encrypted and key_provider else ""
    return ProviderConfig(
        id=str(record["id"]),
        name=str(record.get("name") or record["id"]),
        base_url=str(record.get("base_url") or ""),
        api_key=api_key,
        model=str(record.get("model") or ""),
        enabled=_as_bool(record.get("enabled"), True),
        priority=int(record.get("priority", 1)),
        max_tokens=int(record.get("max_tokens", PROVIDER_MAX_TOKENS)),
        temperature=float(record.get("temperature", PROVIDER_TEMPERATURE)),
    )


def list_provider_records(path: PathLike) -> List[ProviderConfig]:
    """All stored providers (enabled or not) in priority order, keys left encrypted.

    Returned configs carry an empty api_key; use load_provider_configs() to
    get usable credentials.
    """
    configs: List[ProviderConfig] = []
    for record in _read_records(path):
        if not record.get("id"):
            continue
        try:
            configs.append(_record_to_config(record, None))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping provider %s: %s", record.get("id"), exc)
    return sorted(configs, key=lambda c: c.priority)


def load_provider_configs(
    path: PathLike,
    key_provider: KeyProvider,
    fallback_api_key: Optional[str] = None,
) -> List[ProviderConfig]:
    """Load enabled providers sorted by ascending priority, with keys decrypted.

    Args:
        path: Providers YAML file.
        key_provider: Source of the key obfuscation secret.
        fallback_api_key: ANTHROPIC_API_KEY value for the fallback provider.

    Returns:
        Enabled ProviderConfig list, the fallback provider, or [].
    """
    try:
        records = _read_records(path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("Error loading providers from %s: %s", path, exc)
        return fallback_providers(fallback_api_key)

    configs: List[ProviderConfig] = []
    for record in records:
        if not record.get("id"):
            continue
        try:
            if not _as_bool(record.get("enabled"), True):
                continue
            configs.append(_record_to_config(record, key_provider))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping provider %s: %s", record.get("id"), exc)

    if not configs:
        logger.info("No enabled providers in %s; using environment fallback", path)
        return fallback_providers(fallback_api_key)

    configs.sort(key=lambda c: c.priority)
    logger.debug("Loaded %d providers from %s", len(configs), path)
    return configs


def load_provider_by_id(
    provider_id: str,
    path: PathLike,
    key_provider: KeyProvider,
    fallback_api_key: Optional[str] = None,
) -> Optional[ProviderConfig]:
    """Load one provider (enabled or not) by id; None if absent or unreadable."""
    if provider_id == FALLBACK_PROVIDER_ID:
        fallback = fallback_providers(fallback_api_key)
        return fallback[0] if fallback else None

    try:
        records = _read_records(path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("Error loading providers from %s: %s", path, exc)
        return None

    for record in records:
        if str(record.get("id")) == provider_id:
            try:
                return _record_to_config(record, key_provider)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Provider %s is unusable: %s", provider_id, exc)
                return None
    return None


def save_provider_record(
    config: ProviderConfig, path: PathLike, key_provider: KeyProvider
) -> None:
    """Insert or replace a provider record, obfuscating its API key.

    Args:
        config: Provider to store (api_key in plaintext).
        path: Providers YAML file (created if missing).
        key_provider: Source of the key obfuscation secret.
    """
    records = [r for r in _read_records(path) if str(r.get("id")) != config.id]
    records.append(
        {
            "id": config.id,
            "name": config.name,
            "base_url": config.base_url,
            "api_key_encrypted": (
                encrypt_api_key(config.api_key, key_provider) if config.api_key else ""
            ),
            "model": config.model,
            "enabled": config.enabled,
            "priority": config.priority,
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
        }
    )
    records.sort(key=lambda r: r.get("priority", 1))
    _write_records(records, path)
    logger.info("Saved provider %s (%s) to %s", config.name, config.id, path)


def remove_provider_record(provider_id: str, path: PathLike) -> bool:
    """Delete a provider record. Returns False if no record had that id."""
    records = _read_records(path)
    remaining = [r for r in records if str(r.get("id")) != provider_id]
    if len(remaining) == len(records):
        return False
    _write_records(remaining, path)
    logger.info("Removed provider %s from %s", provider_id, path)
    return True
