"""DecayClock I/O package.

File read/write operations and the stores built on them.
"""

from decayclock.io.event_store import JsonEventStore
from decayclock.io.persistence import load_json, load_yaml, save_json, save_yaml
from decayclock.io.provider_store import (
    fallback_providers,
    list_provider_records,
    load_provider_by_id,
    load_provider_configs,
    remove_provider_record,
    save_provider_record,
)

__all__ = [
    "JsonEventStore",
    "save_json",
    "load_json",
    "save_yaml",
    "load_yaml",
    "fallback_providers",
    "list_provider_records",
    "load_provider_by_id",
    "load_provider_configs",
    "remove_provider_record",
    "save_provider_record",
]
