"""Logging utilities for DecayClock.

Loads config/logging.yaml, quietens the HTTP chatter of the provider SDKs and
hands out loggers that tag every line with the research request it belongs to.
All loggers are namespaced under 'decayclock'.
"""

from __future__ import annotations

import logging
import logging.config
import os
import uuid
from pathlib import Path
from typing import Any, MutableMapping, Optional

import yaml

# Provider SDK loggers that log every HTTP round trip at INFO
_SDK_LOGGERS = ("httpx", "httpcore", "anthropic", "openai", "ollama")

_DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "logging.yaml"


def configure_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """Configure logging from the YAML configuration file.

    Falls back to basicConfig if the YAML file is not found. Provider SDK
    loggers stay at WARNING unless the requested level is DEBUG.

    Args:
        config_path: Path to logging.yaml (defaults to config/logging.yaml).
        log_level: Override log level (e.g., "DEBUG", "INFO", "WARNING").
        log_file: Override the file handler's path.
    """
    level = (log_level or "").upper() or None
    path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH

    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f)
        _apply_overrides(cfg, level, log_file or os.getenv("LOG_FILE"))
        logging.config.dictConfig(cfg)
    else:
        logging.basicConfig(
            level=getattr(logging, level or "INFO", logging.INFO),
            format="%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s",
        )

    sdk_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in _SDK_LOGGERS:
        logging.getLogger(name).setLevel(sdk_level)


def _apply_overrides(cfg: dict, level: Optional[str], log_file: Optional[str]) -> None:
    if log_file:
        for handler_cfg in cfg.get("handlers", {}).values():
            if handler_cfg.get("class") == "logging.FileHandler":
                handler_cfg["filename"] = log_file
    if level:
        for logger_cfg in cfg.get("loggers", {}).values():
            logger_cfg["level"] = level
        if "root" in cfg:
            cfg["root"]["level"] = level


def get_logger(name: str) -> logging.Logger:
    """Get a namespaced logger under 'decayclock'.

    Args:
        name: Module or component name (e.g., "agents.research_agent").

    Returns:
        Logger instance with full 'decayclock.<name>' namespace.
    """
    if name.startswith("decayclock"):
        return logging.getLogger(name)
    return logging.getLogger(f"decayclock.{name}")


def new_request_id() -> str:
    """Generate a short research request identifier."""
    return uuid.uuid4().hex[:8]


class ResearchLogAdapter(logging.LoggerAdapter):
    """Logger adapter that tags records with the research request and platform.

    Usage:
        log = get_request_logger("pipeline", "a1b2c3d4", platform="Twitter")
        log.info("2 of 2 providers returned usable research")
        # Output: ... decayclock.pipeline: [a1b2c3d4 Twitter] 2 of 2 providers ...
    """

    @property
    def request_id(self) -> str:
        return self.extra["request_id"]

    @property
    def platform(self) -> Optional[str]:
        return self.extra.get("platform")

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        tag = self.request_id if not self.platform else f"{self.request_id} {self.platform}"
        # Fields are also attached to the record for formatters that want them
        kwargs.setdefault("extra", {}).update(self.extra)
        return f"[{tag}] {msg}", kwargs


def get_request_logger(
    name: str,
    request_id: Optional[str] = None,
    platform: Optional[str] = None,
) -> ResearchLogAdapter:
    """Get a logger adapter bound to one research request.

    Args:
        name: Module or component name.
        request_id: Research request identifier; a fresh one is generated when omitted.
        platform: Platform being researched, added to the prefix when given.

    Returns:
        ResearchLogAdapter that prefixes all messages with [request_id platform].
    """
    extra = {"request_id": request_id or new_request_id(), "platform": platform}
    return ResearchLogAdapter(get_logger(name), extra)
