"""
Storage Services Package

Provides abstract interfaces and concrete implementations for ledger
snapshot and audit storage. Local JSON files are the default backend;
memory and Google Sheets are swappable alternatives.
"""

from envelope_budget.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    NotFoundError,
    Snapshot,
    StateStorageInterface,
    StorageError,
)
from envelope_budget.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryStateStorage,
)
from envelope_budget.services.storage.local import (
    LocalFileAuditStorage,
    LocalFileStateStorage,
)
from envelope_budget.services.storage.snapshot import (
    migrate_monthly_history,
    normalize_month_key,
    snapshot_to_state,
    state_to_snapshot,
)
from envelope_budget.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsStateStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "Snapshot",
    "StateStorageInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryStateStorage",
    # Local file implementation
    "LocalFileAuditStorage",
    "LocalFileStateStorage",
    # Snapshot codec
    "migrate_monthly_history",
    "normalize_month_key",
    "snapshot_to_state",
    "state_to_snapshot",
    # Google Sheets implementation
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsStateStorage",
]
