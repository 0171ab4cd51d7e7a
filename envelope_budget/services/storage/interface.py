"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the whole ledger in a local JSON file by default
2. Use in-memory storage for testing
3. Mirror the snapshot into Google Sheets when configured
4. Keep the ledger decoupled from storage implementation

The interface is intentionally simple: the ledger state is one document
stored under one key. Backends never see partial updates.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional
from uuid import UUID

from envelope_budget.models.audit import AuditEvent


Snapshot = dict[str, Any]


class StateStorageInterface(ABC):
    """
    Abstract interface for ledger snapshot storage.

    A snapshot is a JSON-compatible dict. Every save replaces the whole
    document; a failed save leaves the previous document intact.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[Snapshot]:
        """
        Read the snapshot stored under a key.

        Args:
            key: Storage key

        Returns:
            The snapshot, or None if nothing is stored under the key

        Raises:
            StorageError: If the backend cannot be read or the data is corrupt
        """
        pass

    @abstractmethod
    def save(self, key: str, snapshot: Snapshot) -> None:
        """
        Replace the snapshot stored under a key.

        Args:
            key: Storage key
            snapshot: The full snapshot

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Erase the snapshot stored under a key.

        Returns:
            True if something was erased
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one session).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.

        Args:
            entity_type: Type of entity (e.g., 'account', 'envelope')
            entity_id: The entity's key

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Key not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
