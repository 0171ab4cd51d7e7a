"""
Main Orchestrator for Envelope Budget

This module ties together the ledger, storage, validation and audit
logging into a session that a presentation layer drives.

Flow of every mutating operation:
1. Presentation passes primitive input (strings, numbers, dates)
2. Ledger validates, then applies the change
3. Session stamps lastUpdated and persists the full snapshot
4. Outcome is audited and returned as an OperationResult

DESIGN DECISION: The orchestrator enforces the boundaries:
- A rejected operation never persists anything
- A failed save restores the in-memory state to the last saved snapshot
- Every outcome is audited

Only LedgerError is turned into a failure result. Storage errors are not
user mistakes and propagate to the caller.
"""

from datetime import date, datetime
from typing import Any, Callable, Optional
from uuid import UUID

import structlog
from pydantic import ValidationError

from envelope_budget.audit import AuditLogger, create_correlation_id
from envelope_budget.config import Settings, get_settings
from envelope_budget.exceptions import LedgerError
from envelope_budget.ledger import Ledger
from envelope_budget.models.ledger import (
    EmergencyRecord,
    LedgerState,
    OperationResult,
)
from envelope_budget.queries import LedgerViews, format_currency
from envelope_budget.services.storage import (
    AuditStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsStateStorage,
    InMemoryAuditStorage,
    InMemoryStateStorage,
    LocalFileAuditStorage,
    LocalFileStateStorage,
    StateStorageInterface,
    StorageError,
    snapshot_to_state,
    state_to_snapshot,
)
from envelope_budget.validation import InputValidator


def _local_now() -> datetime:
    return datetime.now().astimezone()


class LedgerSession:
    """
    One user's ledger session.

    Owns the Ledger, persists after each successful operation and audits
    every outcome. Operations take an optional reference date `on`; when
    omitted the session clock's current date is used.
    """

    def __init__(
        self,
        state_storage: Optional[StateStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[InputValidator] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
        correlation_id: Optional[UUID] = None,
    ):
        self._settings = settings or get_settings()
        self._app_settings = self._settings.app
        self._state_key = self._settings.storage.state_key
        self._storage = state_storage
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or InputValidator(self._app_settings)
        self._clock = clock or _local_now
        self._correlation_id = correlation_id or create_correlation_id()
        self._ledger = Ledger(validator=self._validator)

    # =========================================================================
    # PLUMBING
    # =========================================================================

    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id

    @property
    def state_key(self) -> str:
        return self._state_key

    @property
    def state_storage(self) -> Optional[StateStorageInterface]:
        return self._storage

    def today(self) -> date:
        return self._clock().date()

    def _money(self, amount: Any) -> str:
        return format_currency(amount, self._app_settings.currency_symbol)

    def load(self) -> LedgerState:
        """
        Restore the ledger from storage.

        Starts empty when nothing is stored (or no storage is configured).

        Raises:
            StorageError: If the stored snapshot cannot be read
        """
        document = self._storage.load(self._state_key) if self._storage else None
        state = snapshot_to_state(document) if document is not None else LedgerState()
        self._ledger = Ledger(state, self._validator)

        if document is not None:
            self._audit_logger.log_state_loaded(
                state_key=self._state_key,
                account_count=len(state.accounts),
                transaction_count=len(state.transactions),
                correlation_id=self._correlation_id,
            )
        return self.snapshot()

    def _persist(self, before: LedgerState) -> None:
        state = self._ledger.state
        state.last_updated = self._clock()
        if self._storage is None:
            return

        try:
            self._storage.save(self._state_key, state_to_snapshot(state))
        except StorageError as e:
            self._ledger = Ledger(before, self._validator)
            self._audit_logger.log_save_failed(
                state_key=self._state_key,
                error_message=str(e),
                correlation_id=self._correlation_id,
            )
            raise

        self._audit_logger.log_state_saved(
            state_key=self._state_key,
            last_updated=state.last_updated.isoformat(),
            correlation_id=self._correlation_id,
        )

    def _run(
        self,
        operation: str,
        apply: Callable[[], tuple[Any, str, dict[str, Any]]],
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
    ) -> OperationResult:
        """
        Apply one ledger operation, persist and audit it.

        `apply` returns (value, success message, audit details).
        """
        before = self._ledger.snapshot()
        try:
            value, message, details = apply()
        except LedgerError as e:
            self._audit_logger.log_operation_rejected(
                operation=operation,
                error_kind=e.error_kind,
                field=e.field,
                message=e.message,
                correlation_id=self._correlation_id,
            )
            return OperationResult.failed(operation, e.message, e.field, e.error_kind)

        self._persist(before)
        self._audit_logger.log_operation_succeeded(
            operation=operation,
            message=message,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details,
            correlation_id=self._correlation_id,
        )
        return OperationResult.ok(operation, message, value)

    # =========================================================================
    # READ SIDE
    # =========================================================================

    def snapshot(self) -> LedgerState:
        """A copy of the current state. Mutating it has no effect."""
        return self._ledger.snapshot()

    def views(self) -> LedgerViews:
        return LedgerViews(self.snapshot(), self._app_settings)

    def emergency_history(self, account_key: str) -> list[EmergencyRecord]:
        """
        Raises:
            LedgerError: If the account is unknown or not an emergency fund
        """
        return self._ledger.emergency_history(account_key)

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    def create_account(
        self,
        name: Any,
        number: Any,
        account_type: Any,
        balance: Any,
        on: Optional[date] = None,
    ) -> OperationResult:
        on = on or self.today()

        def apply():
            account = self._ledger.create_account(name, number, account_type, balance, on)
            return (
                account.key,
                f"Account {account.name} added successfully",
                {
                    "account_type": account.account_type.value,
                    "opening_balance": str(account.balance),
                },
            )

        entity_id = None
        if isinstance(name, str) and isinstance(number, str):
            entity_id = f"{name.strip()}-{number.strip()}"
        return self._run("create_account", apply, "account", entity_id)

    def correct_balance(self, account_key: str, new_balance: Any) -> OperationResult:
        def apply():
            account = self._ledger.correct_balance(account_key, new_balance)
            return (
                account.balance,
                f"Balance of {account.name} updated to {self._money(account.balance)}",
                {"balance": str(account.balance)},
            )

        return self._run("correct_balance", apply, "account", account_key)

    # =========================================================================
    # INCOME, ENVELOPES, EXPENSES, TRANSFERS
    # =========================================================================

    def post_income(
        self,
        amount: Any,
        account_key: str,
        on: Optional[date] = None,
    ) -> OperationResult:
        on = on or self.today()

        def apply():
            txn = self._ledger.post_income(amount, account_key, on)
            return (
                txn,
                f"Income of {self._money(txn.amount)} added to {txn.account_name}",
                {"amount": str(txn.amount), "transaction_id": txn.id},
            )

        return self._run("post_income", apply, "account", account_key)

    def allocate_envelope(self, name: Any, amount: Any) -> OperationResult:
        def apply():
            balance = self._ledger.allocate_envelope(name, amount)
            return (
                balance,
                f"Envelope {str(name).strip()} now holds {self._money(balance)}",
                {"envelope_balance": str(balance)},
            )

        entity_id = name.strip() if isinstance(name, str) else None
        return self._run("allocate_envelope", apply, "envelope", entity_id)

    def sweep_envelopes(self) -> OperationResult:
        def apply():
            swept = self._ledger.sweep_envelopes()
            return (
                swept,
                f"Moved {self._money(swept)} from envelopes to unallocated funds",
                {"amount": str(swept)},
            )

        return self._run("sweep_envelopes", apply, "envelope")

    def record_expense(
        self,
        name: Any,
        amount: Any,
        account_key: str,
        envelope: Optional[str] = None,
        on: Optional[date] = None,
    ) -> OperationResult:
        on = on or self.today()

        def apply():
            txn = self._ledger.record_expense(name, amount, account_key, on, envelope)
            return (
                txn,
                f"Expense {txn.name} of {self._money(txn.amount)} recorded",
                {
                    "amount": str(txn.amount),
                    "envelope": txn.envelope,
                    "transaction_id": txn.id,
                },
            )

        return self._run("record_expense", apply, "account", account_key)

    def transfer(
        self,
        from_key: str,
        to_key: str,
        amount: Any,
        on: Optional[date] = None,
    ) -> OperationResult:
        on = on or self.today()

        def apply():
            txn = self._ledger.transfer(from_key, to_key, amount, on)
            return (
                txn,
                "Transfer completed successfully",
                {
                    "to_account": to_key,
                    "amount": str(txn.amount),
                    "transaction_id": txn.id,
                },
            )

        return self._run("transfer", apply, "account", from_key)

    def sweep_unallocated(
        self,
        account_key: str,
        on: Optional[date] = None,
    ) -> OperationResult:
        on = on or self.today()

        def apply():
            txn = self._ledger.sweep_unallocated(account_key, on)
            return (
                txn,
                f"Successfully moved {self._money(txn.amount)} to the selected account",
                {"amount": str(txn.amount), "transaction_id": txn.id},
            )

        return self._run("sweep_unallocated", apply, "account", account_key)

    # =========================================================================
    # GOALS
    # =========================================================================

    def create_goal(self, name: Any, target: Any) -> OperationResult:
        def apply():
            goal = self._ledger.create_goal(name, target)
            return (
                goal,
                f"Goal {str(name).strip()} created",
                {"target": str(goal.target)},
            )

        entity_id = name.strip() if isinstance(name, str) else None
        return self._run("create_goal", apply, "goal", entity_id)

    def allocate_to_goal(self, name: Any, amount: Any) -> OperationResult:
        def apply():
            goal = self._ledger.allocate_to_goal(name, amount)
            return (
                goal,
                f"Goal {str(name).strip()} is {goal.progress_percent:.1f}% funded",
                {"allocated": str(goal.allocated), "target": str(goal.target)},
            )

        entity_id = name.strip() if isinstance(name, str) else None
        return self._run("allocate_to_goal", apply, "goal", entity_id)

    # =========================================================================
    # ACCOUNT RULES
    # =========================================================================

    def set_min_balance_alert(self, account_key: str, threshold: Any) -> OperationResult:
        def apply():
            rules = self._ledger.set_min_balance_alert(account_key, threshold)
            return (
                rules,
                "Minimum balance alert saved",
                {"rule": "min_balance_alert", "threshold": str(rules.min_balance)},
            )

        return self._run("set_account_rule", apply, "account", account_key)

    def set_auto_transfer(
        self,
        account_key: str,
        target_account: str,
        percentage: Any,
    ) -> OperationResult:
        def apply():
            rules = self._ledger.set_auto_transfer(account_key, target_account, percentage)
            return (
                rules,
                "Auto-transfer rule saved",
                {
                    "rule": "auto_transfer",
                    "target_account": target_account,
                    "percentage": str(rules.auto_transfer.percentage),
                },
            )

        return self._run("set_account_rule", apply, "account", account_key)

    def set_monthly_transfer(
        self,
        account_key: str,
        day: Any,
        amount: Any,
    ) -> OperationResult:
        def apply():
            rules = self._ledger.set_monthly_transfer(account_key, day, amount)
            return (
                rules,
                "Monthly transfer schedule saved",
                {
                    "rule": "monthly_transfer_schedule",
                    "day": rules.monthly_transfer.day,
                    "amount": str(rules.monthly_transfer.amount),
                },
            )

        return self._run("set_account_rule", apply, "account", account_key)

    # =========================================================================
    # EMERGENCY FUNDS
    # =========================================================================

    def record_emergency_usage(
        self,
        account_key: str,
        amount: Any,
        at: Optional[datetime] = None,
    ) -> OperationResult:
        at = at or self._clock()

        def apply():
            record = self._ledger.record_emergency_usage(account_key, amount, at)
            return (
                record,
                f"Emergency usage of {self._money(record.amount)} recorded",
                {"amount": str(record.amount)},
            )

        return self._run("record_emergency_usage", apply, "account", account_key)

    def set_emergency_target(self, account_key: str, target: Any) -> OperationResult:
        def apply():
            account = self._ledger.set_emergency_target(account_key, target)
            return (
                account.emergency_target,
                f"Emergency fund target set to {self._money(account.emergency_target)}",
                {"target": str(account.emergency_target)},
            )

        return self._run("set_emergency_target", apply, "account", account_key)

    # =========================================================================
    # RESET
    # =========================================================================

    def reset(self) -> OperationResult:
        """
        Erase all data in memory and in storage.

        Safe to call repeatedly. Storage is erased first; if that fails the
        in-memory state is kept so it still matches what a reload would see.

        Raises:
            StorageError: If the stored snapshot cannot be deleted
        """
        if self._storage is not None:
            try:
                self._storage.delete(self._state_key)
            except StorageError as e:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"operation": "reset", "state_key": self._state_key},
                    correlation_id=self._correlation_id,
                )
                raise
        self._ledger.reset()
        self._audit_logger.log_state_reset(
            state_key=self._state_key,
            correlation_id=self._correlation_id,
        )
        return OperationResult.ok("reset", "All data has been reset")


def _build_storage(
    settings: Settings,
) -> tuple[StateStorageInterface, AuditStorageInterface]:
    """
    Pick storage backends from settings.

    Falls back to local files when Google Sheets is selected but
    cannot be reached or is not configured.
    """
    storage_settings = settings.storage

    if storage_settings.backend == "memory":
        return InMemoryStateStorage(), InMemoryAuditStorage()

    if storage_settings.backend == "google_sheets":
        try:
            client = GoogleSheetsClient(settings.google_sheets)
            client.get_spreadsheet()
            return GoogleSheetsStateStorage(client), GoogleSheetsAuditStorage(client)
        except (ValidationError, StorageError) as e:
            structlog.get_logger("envelope_budget.orchestrator").warning(
                "google_sheets_unavailable",
                error=str(e),
                fallback="local",
            )

    return (
        LocalFileStateStorage(storage_settings.data_dir),
        LocalFileAuditStorage(storage_settings.audit_path),
    )


def create_app_components(
    use_storage: bool = True,
    settings: Optional[Settings] = None,
) -> LedgerSession:
    """
    Factory function to create a ready-to-use session.

    Args:
        use_storage: Whether to persist snapshots and audit events.
                    Set to False for a throwaway in-memory session.

    Returns:
        A LedgerSession with the stored state already loaded
    """
    settings = settings or get_settings()

    if use_storage:
        state_storage, audit_storage = _build_storage(settings)
        audit_logger = AuditLogger(audit_storage)
    else:
        state_storage = None
        audit_logger = AuditLogger()  # Local-only logging

    session = LedgerSession(
        state_storage=state_storage,
        audit_logger=audit_logger,
        settings=settings,
    )
    session.load()
    return session
