"""
In-Memory Storage

Used by tests and when persistence is switched off. Snapshots are deep
copied on the way in and out so callers can never mutate stored data.
"""

import copy
from typing import Optional
from uuid import UUID

from envelope_budget.models.audit import AuditEvent
from envelope_budget.services.storage.interface import (
    AuditStorageInterface,
    Snapshot,
    StateStorageInterface,
)


class InMemoryStateStorage(StateStorageInterface):
    """Dictionary-backed snapshot storage."""

    def __init__(self, initial: Optional[dict[str, Snapshot]] = None):
        self._documents: dict[str, Snapshot] = copy.deepcopy(initial or {})
        self.save_count = 0

    def load(self, key: str) -> Optional[Snapshot]:
        document = self._documents.get(key)
        return copy.deepcopy(document) if document is not None else None

    def save(self, key: str, snapshot: Snapshot) -> None:
        self._documents[key] = copy.deepcopy(snapshot)
        self.save_count += 1

    def delete(self, key: str) -> bool:
        return self._documents.pop(key, None) is not None


class InMemoryAuditStorage(AuditStorageInterface):
    """List-backed audit log."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    def get_events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        events = [e for e in self.events if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    def get_events_by_entity(self, entity_type: str, entity_id: str) -> list[AuditEvent]:
        events = [
            e for e in self.events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        return sorted(events, key=lambda e: e.timestamp)

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return sorted(self.events, key=lambda e: e.timestamp, reverse=True)[:limit]
