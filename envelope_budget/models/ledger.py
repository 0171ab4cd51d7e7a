"""
Core Data Models for Envelope Budget

These models define the schemas for all financial state held by the ledger.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Round-trip through the persisted snapshot with its original field names
4. Support the audit trail

DESIGN DECISION: Python attributes are snake_case, the persisted snapshot
is camelCase. Every model uses an alias generator so the snapshot keeps the
exact field names earlier versions of the app wrote (monthlyIncome,
fromAccount, emergencyHistory, ...). Amounts are Decimal in memory and plain
JSON numbers on disk.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)
from pydantic.alias_generators import to_camel


# Decimal in Python, number in JSON
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]

OPENING_BALANCE_SOURCE = "opening-balance"
UNALLOCATED_SOURCE = "unallocated"


def _new_transaction_id() -> str:
    return uuid4().hex


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountType(str, Enum):
    """
    Supported account types.

    Only EMERGENCY accounts carry emergency-fund tracking.
    """
    SALARY = "salary"
    SAVINGS = "savings"
    EMERGENCY = "emergency"


class TransactionKind(str, Enum):
    """How a transaction routes money."""
    INCOME = "income"      # credited to toAccount
    EXPENSE = "expense"    # debited from fromAccount
    TRANSFER = "transfer"  # fromAccount -> toAccount


class AccountRuleKind(str, Enum):
    """
    Kinds of declarative account rules.

    NOTE: Rules are inert configuration. They are recorded and persisted
    but nothing in the ledger evaluates or triggers them.
    """
    MIN_BALANCE_ALERT = "min_balance_alert"
    AUTO_TRANSFER = "auto_transfer"
    MONTHLY_TRANSFER_SCHEDULE = "monthly_transfer_schedule"


class FundsScope(str, Enum):
    """Where an insufficient-funds condition was detected."""
    ACCOUNT = "account"
    ENVELOPE = "envelope"
    UNALLOCATED = "unallocated"


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(BaseModel):
    """
    A single money movement.

    Immutable once created. The same record is appended to the global log,
    the log of every account it touches and, where the operation says so,
    the month-history bucket.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
    )

    id: str = Field(
        default_factory=_new_transaction_id,
        description="Unique transaction identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Description shown in the transaction feed"
    )
    amount: Money = Field(
        ...,
        ge=0,
        description="Positive magnitude; direction comes from kind and routing"
    )
    posted_on: date = Field(
        ...,
        alias="date",
        description="Calendar day the transaction belongs to"
    )
    kind: TransactionKind = Field(
        ...,
        alias="type",
        description="income, expense or transfer"
    )
    from_account: Optional[str] = Field(
        default=None,
        description="Debited account key (or a pseudo-source such as 'unallocated')"
    )
    to_account: Optional[str] = Field(
        default=None,
        description="Credited account key"
    )
    envelope: Optional[str] = Field(
        default=None,
        description="Envelope an expense was charged against"
    )
    account_name: Optional[str] = Field(
        default=None,
        description="Display name of the owning account at posting time"
    )

    @field_validator('id', mode='before')
    @classmethod
    def coerce_legacy_id(cls, v: Any) -> Any:
        """Older snapshots used millisecond timestamps as numeric ids."""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator('from_account', 'to_account', 'envelope', mode='before')
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def month_key(self) -> str:
        return self.posted_on.strftime("%Y-%m")

    def signed_amount_for(self, account_key: str) -> Decimal:
        """
        Effect of this transaction on the given account's balance.

        Credits are positive, debits negative, unrelated accounts zero.
        """
        delta = Decimal(0)
        if self.to_account == account_key:
            delta += self.amount
        if self.from_account == account_key:
            delta -= self.amount
        return delta


# =============================================================================
# ACCOUNT RULES (tagged variants)
# =============================================================================
# Rule and emergency values carry no range bounds here: older snapshots hold
# unchecked values and must still load. Ledger.set_account_rule and
# Ledger.record_emergency_usage enforce the ranges on input.

class MinBalanceAlert(BaseModel):
    """Alert threshold below which the balance is considered low."""

    kind: Literal[AccountRuleKind.MIN_BALANCE_ALERT] = Field(
        default=AccountRuleKind.MIN_BALANCE_ALERT,
        exclude=True,
    )
    threshold: Money


class AutoTransfer(BaseModel):
    """Percentage of incoming funds to forward to another account."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    kind: Literal[AccountRuleKind.AUTO_TRANSFER] = Field(
        default=AccountRuleKind.AUTO_TRANSFER,
        exclude=True,
    )
    target_account: str = Field(..., min_length=1)
    percentage: Money


class MonthlyTransferSchedule(BaseModel):
    """Fixed amount to move on a given day of every month."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    kind: Literal[AccountRuleKind.MONTHLY_TRANSFER_SCHEDULE] = Field(
        default=AccountRuleKind.MONTHLY_TRANSFER_SCHEDULE,
        exclude=True,
    )
    day: int
    amount: Money


AccountRule = Annotated[
    Union[MinBalanceAlert, AutoTransfer, MonthlyTransferSchedule],
    Field(discriminator="kind"),
]


class AccountRules(BaseModel):
    """
    Rule set attached to an account: one slot per rule kind.

    Setting a rule of a kind that is already present replaces it.
    The minimum-balance slot is persisted as a bare number.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    min_balance: Optional[Money] = None
    auto_transfer: Optional[AutoTransfer] = None
    monthly_transfer: Optional[MonthlyTransferSchedule] = None

    def apply(self, rule: AccountRule) -> None:
        if isinstance(rule, MinBalanceAlert):
            self.min_balance = rule.threshold
        elif isinstance(rule, AutoTransfer):
            self.auto_transfer = rule
        elif isinstance(rule, MonthlyTransferSchedule):
            self.monthly_transfer = rule
        else:
            raise TypeError(f"Unsupported account rule: {type(rule).__name__}")

    def get(self, kind: AccountRuleKind) -> Optional[AccountRule]:
        if kind == AccountRuleKind.MIN_BALANCE_ALERT:
            if self.min_balance is None:
                return None
            return MinBalanceAlert(threshold=self.min_balance)
        if kind == AccountRuleKind.AUTO_TRANSFER:
            return self.auto_transfer
        return self.monthly_transfer

    @property
    def active(self) -> list[AccountRule]:
        """Configured rules in kind order."""
        rules = [self.get(kind) for kind in AccountRuleKind]
        return [rule for rule in rules if rule is not None]


# =============================================================================
# ACCOUNTS
# =============================================================================

class EmergencyRecord(BaseModel):
    """A dated use of an emergency fund. Informational only."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    recorded_at: datetime = Field(..., alias="date")
    amount: Money
    record_type: Literal["usage"] = Field(default="usage", alias="type")


class Account(BaseModel):
    """
    A bank account tracked by the ledger.

    Identified by the composite key "{name}-{number}".
    Accounts are never deleted.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name"
    )
    number: str = Field(
        ...,
        pattern=r"^\d{4}$",
        description="Last four digits of the account number"
    )
    account_type: AccountType = Field(
        ...,
        alias="type",
        description="salary, savings or emergency"
    )
    balance: Money = Field(
        default=Decimal(0),
        ge=0,
        description="Current balance"
    )
    transactions: list[Transaction] = Field(
        default_factory=list,
        description="Transactions touching this account, in posting order"
    )
    rules: Optional[AccountRules] = None

    # Emergency accounts only
    emergency_history: list[EmergencyRecord] = Field(default_factory=list)
    emergency_target: Optional[Money] = None

    @field_validator('number', mode='before')
    @classmethod
    def coerce_number(cls, v: Any) -> Any:
        if isinstance(v, int):
            return f"{v:04d}"
        return v

    @staticmethod
    def make_key(name: str, number: str) -> str:
        return f"{name}-{number}"

    @property
    def key(self) -> str:
        return self.make_key(self.name, self.number)

    @property
    def masked_number(self) -> str:
        return f"****{self.number}"


# =============================================================================
# ENVELOPE / GOAL / HISTORY
# =============================================================================

class Goal(BaseModel):
    """A savings goal. Allocation may overshoot the target."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    target: Money = Field(..., ge=0)
    allocated: Money = Field(default=Decimal(0), ge=0)

    @property
    def progress_percent(self) -> Decimal:
        if self.target == 0:
            return Decimal(0)
        return self.allocated / self.target * 100

    @property
    def remaining(self) -> Decimal:
        return max(self.target - self.allocated, Decimal(0))


class MonthlyHistoryEntry(BaseModel):
    """Income and expense totals for one calendar month."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    income: Money = Decimal(0)
    expenses: Money = Decimal(0)
    transactions: list[Transaction] = Field(default_factory=list)


class LedgerState(BaseModel):
    """
    The whole financial state of one session.

    This is exactly what gets persisted: one snapshot under one key.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    monthly_income: Money = Decimal(0)
    envelopes: dict[str, Money] = Field(default_factory=dict)
    transactions: list[Transaction] = Field(default_factory=list)
    goals: dict[str, Goal] = Field(default_factory=dict)
    last_updated: Optional[datetime] = None
    monthly_history: dict[str, MonthlyHistoryEntry] = Field(default_factory=dict)
    unallocated_amount: Money = Decimal(0)
    accounts: dict[str, Account] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return (
            not self.accounts
            and not self.envelopes
            and not self.goals
            and not self.transactions
            and not self.monthly_history
            and self.monthly_income == 0
            and self.unallocated_amount == 0
        )


# =============================================================================
# RESULT MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single input validation issue."""

    field: str = Field(
        ...,
        description="Input field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'out_of_range')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class OperationResult(BaseModel):
    """
    Outcome of one session operation, as seen by the presentation layer.

    On success the caller refreshes its views. On failure `message`
    is shown next to `field` (or in a general dialog when field is None).
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    operation: str
    message: str
    field: Optional[str] = None
    error_kind: Optional[str] = None
    value: Optional[Any] = None

    @classmethod
    def ok(cls, operation: str, message: str, value: Any = None) -> "OperationResult":
        return cls(success=True, operation=operation, message=message, value=value)

    @classmethod
    def failed(
        cls,
        operation: str,
        message: str,
        field: Optional[str],
        error_kind: str,
    ) -> "OperationResult":
        return cls(
            success=False,
            operation=operation,
            message=message,
            field=field,
            error_kind=error_kind,
        )
