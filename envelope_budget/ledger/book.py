"""
The Ledger

Holds all financial state for one session and the operations that keep
account balances, envelope balances, unallocated funds and the
transaction log mutually consistent.

DESIGN DECISION: Every operation validates ALL of its inputs and
preconditions before its first write. A rejected operation raises a
LedgerError and leaves the state exactly as it was.

CONSISTENCY RULES:
1. An account's balance equals the signed sum of its transaction log
   (opening balances are logged). Balance correction is the one
   deliberate exception.
2. Transfers conserve the total balance across accounts.
3. Allocation is the only way unallocated funds enter an envelope.
4. An expense without an envelope is charged to unallocated funds.

Every mutating operation takes the reference date explicitly so that
month buckets never depend on the wall clock.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from envelope_budget.exceptions import (
    DuplicateEntityError,
    InsufficientFundsError,
    LedgerValidationError,
    UnknownEntityError,
)
from envelope_budget.ledger import history
from envelope_budget.models.ledger import (
    OPENING_BALANCE_SOURCE,
    UNALLOCATED_SOURCE,
    Account,
    AccountRule,
    AccountRules,
    AccountType,
    AutoTransfer,
    EmergencyRecord,
    FundsScope,
    Goal,
    LedgerState,
    MinBalanceAlert,
    MonthlyTransferSchedule,
    Transaction,
    TransactionKind,
)
from envelope_budget.validation import InputValidator, parse_account_type, to_decimal


INCOME_TRANSACTION_NAME = "Monthly Income"
OPENING_BALANCE_NAME = "Opening Balance"
MONTH_END_SWEEP_NAME = "Month End - Unallocated Funds Transfer"


class Ledger:
    """
    Owns a LedgerState and applies operations to it.

    Construct one per session (or per test). Nothing here is global.
    """

    def __init__(
        self,
        state: Optional[LedgerState] = None,
        validator: Optional[InputValidator] = None,
    ):
        self._state = state or LedgerState()
        self._validator = validator or InputValidator()

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def state(self) -> LedgerState:
        """The live state. Treat as read-only outside the ledger."""
        return self._state

    def snapshot(self) -> LedgerState:
        """A deep copy that can be handed to views or storage."""
        return self._state.model_copy(deep=True)

    def get_account(self, account_key: Optional[str], field: str = "account") -> Account:
        """
        Look up an account by key.

        Raises:
            LedgerValidationError: If no account was selected
            UnknownEntityError: If the key does not exist
        """
        if not account_key:
            raise LedgerValidationError("Please select an account", field=field)
        account = self._state.accounts.get(account_key)
        if account is None:
            raise UnknownEntityError(
                "Selected account not found",
                field=field,
                entity_type="account",
                key=account_key,
            )
        return account

    def total_balance(self) -> Decimal:
        return sum(
            (account.balance for account in self._state.accounts.values()),
            Decimal(0),
        )

    def total_allocated(self) -> Decimal:
        return sum(self._state.envelopes.values(), Decimal(0))

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    def create_account(
        self,
        name: Any,
        number: Any,
        account_type: Any,
        balance: Any,
        on: date,
    ) -> Account:
        """
        Add a new account.

        A positive opening balance is logged as a transfer from the
        "opening-balance" pseudo-source so the balance stays explainable
        from the account's log.

        Raises:
            LedgerValidationError: If any form field is invalid
            DuplicateEntityError: If an account with the same key exists
        """
        self._validator.raise_for_issues(
            self._validator.check_account(name, number, account_type, balance)
        )
        name = name.strip()
        number = number.strip()
        opening = to_decimal(balance)

        key = Account.make_key(name, number)
        if key in self._state.accounts:
            raise DuplicateEntityError(
                f"Account {name} (****{number}) already exists",
                field="account_name",
                entity_type="account",
                key=key,
            )

        account = Account(
            name=name,
            number=number,
            account_type=parse_account_type(account_type),
            balance=opening,
        )
        if opening > 0:
            opening_txn = Transaction(
                name=OPENING_BALANCE_NAME,
                amount=opening,
                posted_on=on,
                kind=TransactionKind.TRANSFER,
                from_account=OPENING_BALANCE_SOURCE,
                to_account=key,
                account_name=name,
            )
            account.transactions.append(opening_txn)
            self._state.transactions.append(opening_txn)

        self._state.accounts[key] = account
        return account

    def correct_balance(self, account_key: str, new_balance: Any) -> Account:
        """
        Overwrite an account's balance (reconciliation).

        Deliberately bypasses the transaction log: nothing is appended.

        Raises:
            UnknownEntityError: If the account does not exist
            LedgerValidationError: If the balance is negative or not a number
        """
        account = self.get_account(account_key)
        balance = self._validator.parse_amount(
            new_balance,
            field="balance",
            message="Balance cannot be negative.",
        )
        account.balance = balance
        return account

    # =========================================================================
    # INCOME
    # =========================================================================

    def post_income(self, amount: Any, account_key: str, on: date) -> Transaction:
        """
        Post the period's income into an account.

        Sets monthly_income, credits the account, logs an income transaction
        and recomputes unallocated funds as income minus everything already
        sitting in envelopes. The month bucket's income is replaced, not
        summed, so re-posting in the same month corrects the figure.

        Raises:
            LedgerValidationError: If the amount is invalid or no account was chosen
            UnknownEntityError: If the account does not exist
        """
        income = self._validator.parse_amount(
            amount,
            field="income",
            message="Please enter a valid income amount",
        )
        account = self.get_account(account_key, field="income_account")

        transaction = Transaction(
            name=INCOME_TRANSACTION_NAME,
            amount=income,
            posted_on=on,
            kind=TransactionKind.INCOME,
            to_account=account_key,
            account_name=account.name,
        )

        self._state.monthly_income = income
        account.balance += income
        account.transactions.append(transaction)
        self._state.transactions.append(transaction)
        self._state.unallocated_amount = income - self.total_allocated()
        history.record_income(self._state.monthly_history, transaction)
        return transaction

    # =========================================================================
    # ENVELOPES
    # =========================================================================

    def allocate_envelope(self, name: Any, amount: Any) -> Decimal:
        """
        Move unallocated funds into an envelope (created on first use).

        Returns the envelope's new balance.

        Raises:
            LedgerValidationError: If the name is blank or the amount invalid
            InsufficientFundsError: If amount exceeds unallocated funds
        """
        envelope = self._validator.require_text(
            name,
            field="envelope_name",
            message="Envelope name cannot be empty.",
        )
        allocation = self._validator.parse_amount(amount, field="envelope_amount")

        available = self._state.unallocated_amount
        if allocation > available:
            raise InsufficientFundsError(
                "Insufficient unallocated funds to create this envelope.",
                scope=FundsScope.UNALLOCATED,
                requested=allocation,
                available=available,
                field="envelope_amount",
            )

        envelopes = self._state.envelopes
        envelopes[envelope] = envelopes.get(envelope, Decimal(0)) + allocation
        self._state.unallocated_amount -= allocation
        return envelopes[envelope]

    def sweep_envelopes(self) -> Decimal:
        """
        Return every envelope's balance to unallocated funds.

        Envelopes are kept with a zero balance. Returns the amount moved.

        Raises:
            UnknownEntityError: If there are no envelopes at all
        """
        envelopes = self._state.envelopes
        if not envelopes:
            raise UnknownEntityError(
                "No funds to move to unallocated.",
                entity_type="envelope",
            )

        swept = self.total_allocated()
        self._state.unallocated_amount += swept
        for name in envelopes:
            envelopes[name] = Decimal(0)
        return swept

    # =========================================================================
    # EXPENSES & TRANSFERS
    # =========================================================================

    def record_expense(
        self,
        name: Any,
        amount: Any,
        account_key: str,
        on: date,
        envelope: Optional[str] = None,
    ) -> Transaction:
        """
        Spend from an account, optionally against an envelope.

        Checks run in order: name, amount, account, account balance,
        envelope. Without an envelope the expense is charged to
        unallocated funds.

        Raises:
            LedgerValidationError: If name or amount is invalid
            UnknownEntityError: If the account or envelope does not exist
            InsufficientFundsError: If the account or envelope is short
        """
        label = self._validator.require_text(
            name,
            field="transaction_name",
            message="Please enter a transaction name",
        )
        spend = self._validator.parse_amount(amount, field="transaction_amount")
        account = self.get_account(account_key, field="transaction_account")

        if spend > account.balance:
            raise InsufficientFundsError(
                f"Insufficient funds in account {account.name}",
                scope=FundsScope.ACCOUNT,
                requested=spend,
                available=account.balance,
                field="transaction_amount",
            )

        envelope = envelope.strip() if isinstance(envelope, str) else envelope
        if envelope:
            if envelope not in self._state.envelopes:
                raise UnknownEntityError(
                    f"Envelope {envelope} not found",
                    field="transaction_envelope",
                    entity_type="envelope",
                    key=envelope,
                )
            envelope_balance = self._state.envelopes[envelope]
            if spend > envelope_balance:
                raise InsufficientFundsError(
                    f"Insufficient funds in envelope {envelope}",
                    scope=FundsScope.ENVELOPE,
                    requested=spend,
                    available=envelope_balance,
                    field="transaction_amount",
                )

        transaction = Transaction(
            name=label,
            amount=spend,
            posted_on=on,
            kind=TransactionKind.EXPENSE,
            from_account=account_key,
            envelope=envelope or None,
            account_name=account.name,
        )

        account.balance -= spend
        account.transactions.append(transaction)
        if envelope:
            self._state.envelopes[envelope] -= spend
        else:
            self._state.unallocated_amount -= spend
        self._state.transactions.append(transaction)
        history.record_expense(self._state.monthly_history, transaction)
        return transaction

    def transfer(
        self,
        from_key: str,
        to_key: str,
        amount: Any,
        on: date,
    ) -> Transaction:
        """
        Move money between two accounts.

        Raises:
            LedgerValidationError: If the amount is not positive or the accounts are the same
            UnknownEntityError: If either account does not exist
            InsufficientFundsError: If the source balance is short
        """
        source = self.get_account(from_key, field="from_account")
        value = self._validator.parse_amount(
            amount,
            field="amount",
            message="Invalid transfer amount.",
        )
        if value <= 0:
            raise LedgerValidationError("Invalid transfer amount.", field="amount")
        if value > source.balance:
            raise InsufficientFundsError(
                f"Insufficient funds in account {source.name}",
                scope=FundsScope.ACCOUNT,
                requested=value,
                available=source.balance,
            )
        destination = self.get_account(to_key, field="to_account")
        if from_key == to_key:
            raise LedgerValidationError(
                "Cannot transfer to the same account.",
                field="to_account",
            )

        transaction = Transaction(
            name=f"Transfer to {destination.name}",
            amount=value,
            posted_on=on,
            kind=TransactionKind.TRANSFER,
            from_account=from_key,
            to_account=to_key,
        )

        source.balance -= value
        destination.balance += value
        source.transactions.append(transaction)
        destination.transactions.append(transaction)
        self._state.transactions.append(transaction)
        return transaction

    def sweep_unallocated(self, account_key: str, on: date) -> Transaction:
        """
        Month-end: move all unallocated funds into an account.

        The transfer is added to the month's history only if that month
        already has a bucket.

        Raises:
            LedgerValidationError: If no account was chosen
            InsufficientFundsError: If there are no unallocated funds
            UnknownEntityError: If the account does not exist
        """
        if not account_key:
            raise LedgerValidationError(
                "Please select an account to move unallocated funds to.",
                field="month_end_account",
            )
        available = self._state.unallocated_amount
        if available <= 0:
            raise InsufficientFundsError(
                "No unallocated funds to move.",
                scope=FundsScope.UNALLOCATED,
                requested=available,
                available=available,
                field=None,
            )
        account = self.get_account(account_key, field="month_end_account")

        transaction = Transaction(
            name=MONTH_END_SWEEP_NAME,
            amount=available,
            posted_on=on,
            kind=TransactionKind.TRANSFER,
            from_account=UNALLOCATED_SOURCE,
            to_account=account_key,
        )

        account.balance += available
        account.transactions.append(transaction)
        self._state.transactions.append(transaction)
        history.record_if_tracked(self._state.monthly_history, transaction)
        self._state.unallocated_amount = Decimal(0)
        return transaction

    # =========================================================================
    # GOALS
    # =========================================================================

    def create_goal(self, name: Any, target: Any) -> Goal:
        """
        Create a goal with zero allocation.

        Re-creating an existing goal starts it over.

        Raises:
            LedgerValidationError: If the name is blank or the target invalid
        """
        goal_name = self._validator.require_text(
            name,
            field="goal_name",
            message="Goal name cannot be empty.",
        )
        goal_target = self._validator.parse_amount(target, field="goal_amount")

        goal = Goal(target=goal_target)
        self._state.goals[goal_name] = goal
        return goal

    def allocate_to_goal(self, name: Any, amount: Any) -> Goal:
        """
        Add to a goal's allocation. Overshooting the target is allowed.

        Raises:
            LedgerValidationError: If no goal was chosen or the amount is invalid
            UnknownEntityError: If the goal does not exist
        """
        goal_name = self._validator.require_text(
            name,
            field="goal_dropdown",
            message="Please select a goal.",
        )
        allocation = self._validator.parse_amount(amount, field="goal_allocation")
        goal = self._state.goals.get(goal_name)
        if goal is None:
            raise UnknownEntityError(
                f"Goal {goal_name} not found",
                field="goal_dropdown",
                entity_type="goal",
                key=goal_name,
            )

        goal.allocated += allocation
        return goal

    # =========================================================================
    # ACCOUNT RULES (inert)
    # =========================================================================

    def set_account_rule(self, account_key: str, rule: AccountRule) -> AccountRules:
        """
        Attach a rule to an account, replacing any rule of the same kind.

        Rules are stored and persisted only; nothing evaluates them.

        Raises:
            UnknownEntityError: If the account (or auto-transfer target) does not exist
            LedgerValidationError: If an auto-transfer targets its own account,
                or a rule value is out of range
        """
        account = self.get_account(account_key)
        if isinstance(rule, AutoTransfer):
            self.get_account(rule.target_account, field="target_account")
            if rule.target_account == account_key:
                raise LedgerValidationError(
                    "An account cannot auto-transfer to itself.",
                    field="target_account",
                )
        _check_rule_values(rule)

        if account.rules is None:
            account.rules = AccountRules()
        account.rules.apply(rule)
        return account.rules

    def set_min_balance_alert(self, account_key: str, threshold: Any) -> AccountRules:
        value = self._validator.parse_amount(threshold, field="min_balance")
        return self.set_account_rule(account_key, MinBalanceAlert(threshold=value))

    def set_auto_transfer(
        self,
        account_key: str,
        target_account: str,
        percentage: Any,
    ) -> AccountRules:
        self.get_account(account_key)
        self.get_account(target_account, field="target_account")
        value = self._validator.parse_amount(percentage, field="percentage")
        return self.set_account_rule(
            account_key,
            AutoTransfer(target_account=target_account, percentage=value),
        )

    def set_monthly_transfer(
        self,
        account_key: str,
        day: Any,
        amount: Any,
    ) -> AccountRules:
        day_value = to_decimal(day)
        if day_value is None or day_value != day_value.to_integral_value() or not 1 <= day_value <= 31:
            raise LedgerValidationError(
                "Enter a day of the month between 1 and 31.",
                field="day",
            )
        value = self._validator.parse_amount(amount, field="amount")
        return self.set_account_rule(
            account_key,
            MonthlyTransferSchedule(day=int(day_value), amount=value),
        )

    # =========================================================================
    # EMERGENCY FUND TRACKING (informational)
    # =========================================================================

    def _get_emergency_account(self, account_key: str) -> Account:
        account = self.get_account(account_key)
        if account.account_type != AccountType.EMERGENCY:
            raise LedgerValidationError(
                "This feature is only available for emergency savings accounts.",
                field="account",
            )
        return account

    def record_emergency_usage(
        self,
        account_key: str,
        amount: Any,
        at: datetime,
    ) -> EmergencyRecord:
        """Log a use of the emergency fund. Does not touch the balance."""
        account = self._get_emergency_account(account_key)
        value = self._validator.parse_amount(amount, field="emergency_amount")

        record = EmergencyRecord(recorded_at=at, amount=value)
        account.emergency_history.append(record)
        return record

    def set_emergency_target(self, account_key: str, target: Any) -> Account:
        """Set the replenishment target of an emergency fund."""
        account = self._get_emergency_account(account_key)
        account.emergency_target = self._validator.parse_amount(
            target,
            field="emergency_target",
        )
        return account

    def emergency_history(self, account_key: str) -> list[EmergencyRecord]:
        return list(self._get_emergency_account(account_key).emergency_history)

    # =========================================================================
    # RESET
    # =========================================================================

    def reset(self) -> None:
        """Clear everything back to the empty initial state."""
        self._state = LedgerState()


def _check_rule_values(rule: AccountRule) -> None:
    """Range checks for newly set rules."""
    if isinstance(rule, MinBalanceAlert) and rule.threshold < 0:
        raise LedgerValidationError(
            "Minimum balance cannot be negative.",
            field="min_balance",
        )
    if isinstance(rule, AutoTransfer) and not Decimal(0) < rule.percentage <= Decimal(100):
        raise LedgerValidationError(
            "Percentage must be between 0 and 100.",
            field="percentage",
        )
    if isinstance(rule, MonthlyTransferSchedule):
        if not 1 <= rule.day <= 31:
            raise LedgerValidationError(
                "Enter a day of the month between 1 and 31.",
                field="day",
            )
        if rule.amount < 0:
            raise LedgerValidationError(
                "Amount cannot be negative.",
                field="amount",
            )
