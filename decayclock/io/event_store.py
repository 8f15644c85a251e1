"""JSON-file event store for researched platforms.

The whole store is one JSON document:

    {"services": [StoredService, ...], "events": [StoredEvent, ...]}

Saving research for a platform upserts its service record by slug and
replaces that service's events. Writes go through persistence.save_json()
and are serialized per store instance.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import asdict, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from config.defaults import (
    DEFAULT_EVENT_TYPE,
    EVENT_DESCRIPTION_MAX_LENGTH,
    EVENT_TITLE_MAX_LENGTH,
    RECENT_PLATFORMS_LIMIT,
    SERVICE_CATEGORY_MAX_LENGTH,
    SERVICE_DESCRIPTION_MAX_LENGTH,
    SERVICE_NAME_MAX_LENGTH,
)
from decayclock.io.persistence import load_json, save_json
from decayclock.models.events import RecentPlatform, ResearchResponse, StoredEvent, StoredService
from decayclock.models.pipeline import SaveResult
from decayclock.models.verification import CrossVerifiedResult
from decayclock.utils.text import generate_slug, truncate

logger = logging.getLogger(__name__)

_SERVICE_FIELDS = {f.name for f in fields(StoredService)}
_EVENT_FIELDS = {f.name for f in fields(StoredEvent)} - {"service"}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _service_from_dict(raw: Dict[str, Any]) -> StoredService:
    return StoredService(**{k: v for k, v in raw.items() if k in _SERVICE_FIELDS})


def _event_from_dict(raw: Dict[str, Any]) -> StoredEvent:
    return StoredEvent(**{k: v for k, v in raw.items() if k in _EVENT_FIELDS})


class JsonEventStore:
    """Persist services and their events in a single JSON file.

    Args:
        path: Location of the store file (created on first save).
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"JsonEventStore(path={str(self.path)!r})"

    # ── Raw document access ───────────────────────────────────────────────────

    def _read(self) -> Dict[str, List[Dict[str, Any]]]:
        data = load_json(self.path)
        if not isinstance(data, dict):
            return {"services": [], "events": []}
        return {
            "services": [s for s in data.get("services", []) if isinstance(s, dict)],
            "events": [e for e in data.get("events", []) if isinstance(e, dict)],
        }

    # ── Writes ────────────────────────────────────────────────────────────────

    def save_research(self, data: Union[CrossVerifiedResult, ResearchResponse]) -> SaveResult:
        """Upsert the researched service and replace its events.

        Field values are truncated to the stored length limits.

        Args:
            data: Cross-verified (or single-provider) research result.

        Returns:
            SaveResult with the service id and stored event count.
        """
        name = truncate(data.service.name.strip(), SERVICE_NAME_MAX_LENGTH)
        slug = generate_slug(data.service.name)
        if not slug:
            return SaveResult(
                success=False,
                message=f"Cannot derive a slug from service name {data.service.name!r}",
            )

        with self._lock:
            doc = self._read()
            now = _now_iso()

            service = next((s for s in doc["services"] if s.get("slug") == slug), None)
            if service is None:
                service = {"id": str(uuid.uuid4()), "slug": slug, "created_at": now}
                doc["services"].append(service)
            service.update(
                name=name,
                description=truncate(data.service.description, SERVICE_DESCRIPTION_MAX_LENGTH),
                category=truncate(data.service.category, SERVICE_CATEGORY_MAX_LENGTH),
                updated_at=now,
            )
            service_id = service["id"]

            doc["events"] = [e for e in doc["events"] if e.get("service_id") != service_id]
            for event in data.events:
                record = asdict(
                    StoredEvent(
                        id=str(uuid.uuid4()),
                        service_id=service_id,
                        title=truncate(event.title, EVENT_TITLE_MAX_LENGTH),
                        description=truncate(event.description, EVENT_DESCRIPTION_MAX_LENGTH),
                        event_date=event.event_date,
                        severity=event.severity,
                        event_type=event.event_type or DEFAULT_EVENT_TYPE,
                        source_url=event.source_url,
                        created_at=now,
                        updated_at=now,
                    )
                )
                # The joined service is never persisted inside an event
                record.pop("service")
                doc["events"].append(record)

            try:
                save_json(doc, self.path)
            except (OSError, TypeError, ValueError) as exc:
                logger.error("Failed to write event store %s: %s", self.path, exc)
                return SaveResult(success=False, message=f"Storage error: {exc}")

        logger.info("Stored %d events for %s (%s)", len(data.events), name, slug)
        return SaveResult(
            success=True,
            message=f"Successfully added {len(data.events)} events for {name}",
            service_id=service_id,
            event_count=len(data.events),
        )

    # ── Reads ─────────────────────────────────────────────────────────────────

    def load_services(self) -> List[StoredService]:
        return [_service_from_dict(s) for s in self._read()["services"]]

    def get_service_by_slug(self, slug: str) -> Optional[StoredService]:
        return next((s for s in self.load_services() if s.slug == slug), None)

    def load_events(self, with_service: bool = False) -> List[StoredEvent]:
        """All stored events in date-ascending order.

        Args:
            with_service: Attach the owning StoredService to each event.

        Returns:
            List of StoredEvent.
        """
        doc = self._read()
        events = sorted(
            (_event_from_dict(e) for e in doc["events"]), key=lambda e: e.event_date
        )
        if with_service:
            services = {s["id"]: _service_from_dict(s) for s in doc["services"] if "id" in s}
            for event in events:
                event.service = services.get(event.service_id)
        return events

    def recent_platforms(self, limit: int = RECENT_PLATFORMS_LIMIT) -> List[RecentPlatform]:
        """Most recently updated platforms with their event counts, newest first."""
        doc = self._read()
        counts: Dict[str, int] = {}
        for event in doc["events"]:
            counts[event.get("service_id")] = counts.get(event.get("service_id"), 0) + 1
        services = sorted(doc["services"], key=lambda s: s.get("updated_at", ""), reverse=True)
        return [
            RecentPlatform(
                name=s.get("name", ""),
                slug=s.get("slug", ""),
                event_count=counts.get(s.get("id"), 0),
                updated_at=s.get("updated_at", ""),
            )
            for s in services[:limit]
        ]
