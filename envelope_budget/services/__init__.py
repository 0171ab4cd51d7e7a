"""Services package."""

from envelope_budget.services.storage import (
    AuditStorageInterface,
    ConnectionError,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsStateStorage,
    InMemoryAuditStorage,
    InMemoryStateStorage,
    LocalFileAuditStorage,
    LocalFileStateStorage,
    NotFoundError,
    StateStorageInterface,
    StorageError,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "ConnectionError",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsStateStorage",
    "InMemoryAuditStorage",
    "InMemoryStateStorage",
    "LocalFileAuditStorage",
    "LocalFileStateStorage",
    "NotFoundError",
    "StateStorageInterface",
    "StorageError",
]
