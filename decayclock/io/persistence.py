"""File persistence utilities for DecayClock.

Atomic writes (write-to-temp-then-rename) for the JSON event store and the
YAML provider file. No business logic: file I/O only.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)


class _DataclassEncoder(json.JSONEncoder):
    """JSON encoder that handles dataclasses and Path objects."""

    def default(self, obj: Any) -> Any:
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return dataclasses.asdict(obj)
        if isinstance(obj, Path):
            return str(obj)
        return super().default(obj)


def _atomic_write(text: str, path: Path) -> None:
    """Write text next to `path` in a temp file, then rename it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        delete=False,
        suffix=".tmp",
    ) as tmp:
        tmp.write(text)
        tmp_path = tmp.name

    try:
        os.replace(tmp_path, path)
    except OSError as exc:
        os.unlink(tmp_path)
        logger.error("Atomic rename failed for %s: %s", path, exc)
        raise


def save_json(data: Any, path: str | Path, indent: int = 2) -> None:
    """Atomically write data to a JSON file.

    Args:
        data: Data to serialize. Supports dicts, lists, dataclasses, and Path objects.
        path: Output file path (parent directories are created).
        indent: JSON indentation level.
    """
    path = Path(path)
    try:
        serialized = json.dumps(data, indent=indent, ensure_ascii=False, cls=_DataclassEncoder)
    except (TypeError, ValueError) as exc:
        logger.error("JSON serialization failed for %s: %s", path, exc)
        raise
    _atomic_write(serialized, path)
    logger.debug("Saved JSON to %s (%d bytes)", path, len(serialized))


def load_json(path: str | Path) -> Optional[Any]:
    """Load and parse a JSON file.

    Returns None if the file does not exist or cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("JSON file not found: %s", path)
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to load JSON from %s: %s", path, exc)
        return None


def save_yaml(data: Any, path: str | Path) -> None:
    """Atomically write plain data (dicts, lists, scalars) to a YAML file."""
    path = Path(path)
    serialized = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    _atomic_write(serialized, path)
    logger.debug("Saved YAML to %s (%d bytes)", path, len(serialized))


def load_yaml(path: str | Path) -> Any:
    """Load a YAML file.

    Unlike load_json(), read and parse errors propagate so that callers can
    tell a broken file from a missing one.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed data, or None if the file does not exist or is empty.

    Raises:
        OSError: If the file exists but cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("YAML file not found: %s", path)
        return None
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)
