"""
Local File Storage

The default backend. Each key is one JSON document in the data directory;
the audit trail is a JSON-lines file next to it.

DESIGN DECISION: A save writes the full snapshot to a temporary file in
the same directory and then renames it over the old one. The rename is
atomic, so a crash mid-write leaves the previous snapshot readable.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union
from uuid import UUID

from pydantic import ValidationError

from envelope_budget.models.audit import AuditEvent
from envelope_budget.services.storage.interface import (
    AuditStorageInterface,
    Snapshot,
    StateStorageInterface,
    StorageError,
)


class LocalFileStateStorage(StateStorageInterface):
    """Snapshots stored as `<data_dir>/<key>.json`."""

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)

    def _path_for(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    def load(self, key: str) -> Optional[Snapshot]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as fh:
                document = json.load(fh)
        except json.JSONDecodeError as e:
            raise StorageError(f"Stored state at {path} is not valid JSON: {e}")
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}")

        if not isinstance(document, dict):
            raise StorageError(f"Stored state at {path} is not a JSON object")
        return document

    def save(self, key: str, snapshot: Snapshot) -> None:
        path = self._path_for(key)
        tmp_name = None
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir,
                prefix=f".{key}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(snapshot, fh, ensure_ascii=False, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Failed to save state to {path}: {e}")

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}")
        return True


class LocalFileAuditStorage(AuditStorageInterface):
    """
    Append-only JSON-lines audit log.

    Unreadable lines are skipped when querying.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    def append_event(self, event: AuditEvent) -> bool:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write(event.model_dump_json() + "\n")
            return True
        except OSError:
            return False

    def _read_events(self) -> list[AuditEvent]:
        if not self._path.exists():
            return []
        events = []
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                for line in fh:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        events.append(AuditEvent.model_validate_json(line))
                    except ValidationError:
                        continue
        except OSError as e:
            raise StorageError(f"Failed to read audit log {self._path}: {e}")
        return events

    def get_events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        events = [e for e in self._read_events() if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    def get_events_by_entity(self, entity_type: str, entity_id: str) -> list[AuditEvent]:
        events = [
            e for e in self._read_events()
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        return sorted(events, key=lambda e: e.timestamp)

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        events = self._read_events()
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
