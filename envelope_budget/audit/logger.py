"""
Audit Logger

DESIGN DECISION: Every ledger operation is logged, accepted or rejected.
This provides:
1. Complete traceability of balance changes
2. Debugging capability
3. User can see history of their interactions

The audit logger:
- Is synchronous, like the ledger it observes
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace the events of one session
"""

from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from envelope_budget.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from envelope_budget.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend (for persistence), when one is given
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("envelope_budget.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage is None:
            return True

        try:
            stored = self._storage.append_event(event)
        except Exception as e:
            stored = False
            self._logger.error(
                "audit_storage_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
        else:
            if not stored:
                self._logger.error(
                    "audit_storage_failed",
                    event_id=str(event.event_id),
                )
        return stored

    def log_operation_succeeded(
        self,
        operation: str,
        message: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a ledger operation that changed state."""
        event = AuditEventBuilder.operation_succeeded(
            operation=operation,
            message=message,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details or {},
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_operation_rejected(
        self,
        operation: str,
        error_kind: str,
        field: Optional[str],
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a ledger operation that was refused before any write."""
        event = AuditEventBuilder.operation_rejected(
            operation=operation,
            error_kind=error_kind,
            field=field,
            message=message,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_state_loaded(
        self,
        state_key: str,
        account_count: int,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.state_loaded(
            state_key=state_key,
            account_count=account_count,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_state_saved(
        self,
        state_key: str,
        last_updated: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.state_saved(
            state_key=state_key,
            last_updated=last_updated,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_state_reset(
        self,
        state_key: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.state_reset(
            state_key=state_key,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_save_failed(
        self,
        state_key: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.save_failed(
            state_key=state_key,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a session and pass it through
    every operation of that session.
    """
    return uuid4()
