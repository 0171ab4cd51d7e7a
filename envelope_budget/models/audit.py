"""
Audit Models for Envelope Budget

Every ledger operation outcome is logged for audit purposes.
This provides:
1. Traceability of every balance change
2. Debugging information when an operation is rejected
3. A way to reconstruct what happened before a reset

DESIGN DECISION: Audit logs are append-only. We never delete or modify them,
not even on reset.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every ledger operation has its own event type.
    """
    # Accounts
    ACCOUNT_CREATED = "account_created"
    BALANCE_CORRECTED = "balance_corrected"
    ACCOUNT_RULE_SET = "account_rule_set"
    EMERGENCY_USAGE_RECORDED = "emergency_usage_recorded"
    EMERGENCY_TARGET_SET = "emergency_target_set"

    # Money movement
    INCOME_POSTED = "income_posted"
    EXPENSE_RECORDED = "expense_recorded"
    TRANSFER_COMPLETED = "transfer_completed"
    UNALLOCATED_SWEPT = "unallocated_swept"

    # Envelopes and goals
    ENVELOPE_ALLOCATED = "envelope_allocated"
    ENVELOPES_SWEPT = "envelopes_swept"
    GOAL_CREATED = "goal_created"
    GOAL_ALLOCATED = "goal_allocated"

    # Rejections
    OPERATION_REJECTED = "operation_rejected"

    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_SAVED = "state_saved"
    STATE_RESET = "state_reset"
    SAVE_FAILED = "save_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every operation outcome creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'envelope', 'goal')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Key of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events in one session)"
    )

    # Event details
    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )

    # Additional data (event-specific)
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    # User action tracking
    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, entity_type, entity_id,
         correlation_id, description, details_json, error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


# Operation name -> event type for successful operations
OPERATION_EVENT_TYPES: dict[str, AuditEventType] = {
    "create_account": AuditEventType.ACCOUNT_CREATED,
    "post_income": AuditEventType.INCOME_POSTED,
    "allocate_envelope": AuditEventType.ENVELOPE_ALLOCATED,
    "sweep_envelopes": AuditEventType.ENVELOPES_SWEPT,
    "record_expense": AuditEventType.EXPENSE_RECORDED,
    "transfer": AuditEventType.TRANSFER_COMPLETED,
    "correct_balance": AuditEventType.BALANCE_CORRECTED,
    "sweep_unallocated": AuditEventType.UNALLOCATED_SWEPT,
    "create_goal": AuditEventType.GOAL_CREATED,
    "allocate_to_goal": AuditEventType.GOAL_ALLOCATED,
    "set_account_rule": AuditEventType.ACCOUNT_RULE_SET,
    "record_emergency_usage": AuditEventType.EMERGENCY_USAGE_RECORDED,
    "set_emergency_target": AuditEventType.EMERGENCY_TARGET_SET,
}


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.operation_succeeded("transfer", ...)
        event = AuditEventBuilder.operation_rejected("transfer", ...)
    """

    @staticmethod
    def operation_succeeded(
        operation: str,
        message: str,
        entity_type: Optional[str],
        entity_id: Optional[str],
        details: dict[str, Any],
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=OPERATION_EVENT_TYPES.get(operation, AuditEventType.SYSTEM_ERROR),
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=message,
            details={"operation": operation, **details},
            is_user_action=True,
        )

    @staticmethod
    def operation_rejected(
        operation: str,
        error_kind: str,
        field: Optional[str],
        message: str,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_REJECTED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"{operation} rejected: {message}",
            details={
                "operation": operation,
                "field": field,
            },
            error_code=error_kind,
            error_message=message,
            is_user_action=True,
        )

    @staticmethod
    def state_loaded(
        state_key: str,
        account_count: int,
        transaction_count: int,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            entity_type="snapshot",
            entity_id=state_key,
            correlation_id=correlation_id,
            description=f"Ledger restored with {account_count} accounts",
            details={
                "account_count": account_count,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def state_saved(
        state_key: str,
        last_updated: str,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="snapshot",
            entity_id=state_key,
            correlation_id=correlation_id,
            description="Ledger snapshot saved",
            details={"last_updated": last_updated},
        )

    @staticmethod
    def state_reset(
        state_key: str,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_RESET,
            severity=AuditSeverity.WARNING,
            entity_type="snapshot",
            entity_id=state_key,
            correlation_id=correlation_id,
            description="All ledger data was reset",
            is_user_action=True,
        )

    @staticmethod
    def save_failed(
        state_key: str,
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="snapshot",
            entity_id=state_key,
            correlation_id=correlation_id,
            description="Failed to persist ledger snapshot",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
