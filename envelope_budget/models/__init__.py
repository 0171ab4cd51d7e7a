"""
Data Models Package

This package contains all Pydantic models used in the Envelope Budget system.
All ledger state and every persisted snapshot must conform to these schemas.
"""

from envelope_budget.models.ledger import (
    OPENING_BALANCE_SOURCE,
    UNALLOCATED_SOURCE,
    Account,
    AccountRule,
    AccountRuleKind,
    AccountRules,
    AccountType,
    AutoTransfer,
    EmergencyRecord,
    FundsScope,
    Goal,
    LedgerState,
    MinBalanceAlert,
    MonthlyHistoryEntry,
    MonthlyTransferSchedule,
    OperationResult,
    Transaction,
    TransactionKind,
    ValidationIssue,
)
from envelope_budget.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from envelope_budget.models.views import (
    AccountGroup,
    AccountRow,
    DashboardSummary,
    EnvelopeCard,
    FinancialReport,
    GoalCard,
    MonthlyChartPoint,
)

__all__ = [
    # Ledger models
    "OPENING_BALANCE_SOURCE",
    "UNALLOCATED_SOURCE",
    "Account",
    "AccountRule",
    "AccountRuleKind",
    "AccountRules",
    "AccountType",
    "AutoTransfer",
    "EmergencyRecord",
    "FundsScope",
    "Goal",
    "LedgerState",
    "MinBalanceAlert",
    "MonthlyHistoryEntry",
    "MonthlyTransferSchedule",
    "OperationResult",
    "Transaction",
    "TransactionKind",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # View models
    "AccountGroup",
    "AccountRow",
    "DashboardSummary",
    "EnvelopeCard",
    "FinancialReport",
    "GoalCard",
    "MonthlyChartPoint",
]
