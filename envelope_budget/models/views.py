"""
View Models

Read-only projections of the ledger state that a presentation layer
renders (dashboard, account tables, envelope and goal cards, the
transaction feed, the monthly chart and the financial report).

These carry data only. Formatting into HTML or charts happens elsewhere.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from envelope_budget.models.ledger import AccountType, Transaction


class DashboardSummary(BaseModel):
    """Aggregate totals shown at the top of the dashboard."""

    total_balance: Decimal = Field(
        ...,
        description="Sum of all account balances"
    )
    unallocated_amount: Decimal
    monthly_income: Decimal
    account_count: int = Field(ge=0)
    last_updated: Optional[datetime] = None


class AccountRow(BaseModel):
    """One row of the accounts table."""

    key: str
    name: str
    masked_number: str
    account_type: AccountType
    balance: Decimal
    rule_count: int = Field(default=0, ge=0)
    supports_emergency_tracking: bool = False


class AccountGroup(BaseModel):
    """Accounts of a single type."""

    account_type: AccountType
    title: str
    accounts: list[AccountRow] = Field(default_factory=list)

    @property
    def total_balance(self) -> Decimal:
        return sum((row.balance for row in self.accounts), Decimal(0))


class EnvelopeCard(BaseModel):
    """An envelope and its share of the monthly income."""

    name: str
    amount: Decimal
    share_of_income: Decimal = Field(
        default=Decimal(0),
        description="Percentage of monthly income (0 when no income is set)"
    )


class GoalCard(BaseModel):
    """A savings goal and its progress. Progress may exceed 100."""

    name: str
    target: Decimal
    allocated: Decimal
    progress_percent: Decimal
    is_complete: bool


class MonthlyChartPoint(BaseModel):
    """Income vs. expenses for one month."""

    month: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}$",
        description="Month key (YYYY-MM)"
    )
    income: Decimal = Decimal(0)
    expenses: Decimal = Decimal(0)

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


class FinancialReport(BaseModel):
    """The monthly financial report."""

    month: str
    monthly_income: Decimal
    monthly_expenses: Decimal
    unallocated_amount: Decimal
    total_balance: Decimal
    envelopes: list[EnvelopeCard] = Field(default_factory=list)
    goals: list[GoalCard] = Field(default_factory=list)
    accounts: list[AccountRow] = Field(default_factory=list)
    recent_transactions: list[Transaction] = Field(default_factory=list)
