"""
Ledger Views

DESIGN DECISION: Views are DETERMINISTIC read-only projections.
They take a LedgerState snapshot and return view models; they never
mutate the state and never consult the wall clock (the report month is
passed in).

A presentation layer renders these. Nothing here knows about HTML.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from envelope_budget.config import AppSettings, get_settings
from envelope_budget.ledger.history import chart_series, expenses_for, month_key
from envelope_budget.models.ledger import AccountType, LedgerState, Transaction
from envelope_budget.models.views import (
    AccountGroup,
    AccountRow,
    DashboardSummary,
    EnvelopeCard,
    FinancialReport,
    GoalCard,
    MonthlyChartPoint,
)


ACCOUNT_GROUP_TITLES = {
    AccountType.SALARY: "Salary Accounts",
    AccountType.SAVINGS: "Savings Accounts",
    AccountType.EMERGENCY: "Emergency Funds",
}

CENT = Decimal("0.01")


def format_currency(amount: Decimal, symbol: str = "₹") -> str:
    """Format an amount as e.g. ₹1,234.50 (negative amounts as -₹50.00)."""
    value = Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


class LedgerViews:
    """
    Builds view models from a ledger snapshot.

    Usage:
        views = LedgerViews(session.snapshot())
        summary = views.dashboard()
    """

    def __init__(
        self,
        state: LedgerState,
        settings: Optional[AppSettings] = None,
    ):
        self._state = state
        self._settings = settings or get_settings().app

    def format_currency(self, amount: Decimal) -> str:
        return format_currency(amount, self._settings.currency_symbol)

    # =========================================================================
    # DASHBOARD
    # =========================================================================

    def total_balance(self) -> Decimal:
        return sum(
            (account.balance for account in self._state.accounts.values()),
            Decimal(0),
        )

    def dashboard(self) -> DashboardSummary:
        return DashboardSummary(
            total_balance=self.total_balance(),
            unallocated_amount=self._state.unallocated_amount,
            monthly_income=self._state.monthly_income,
            account_count=len(self._state.accounts),
            last_updated=self._state.last_updated,
        )

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    def account_rows(self) -> list[AccountRow]:
        rows = []
        for key, account in self._state.accounts.items():
            rows.append(AccountRow(
                key=key,
                name=account.name,
                masked_number=account.masked_number,
                account_type=account.account_type,
                balance=account.balance,
                rule_count=len(account.rules.active) if account.rules else 0,
                supports_emergency_tracking=account.account_type == AccountType.EMERGENCY,
            ))
        return rows

    def accounts_by_type(self) -> list[AccountGroup]:
        """
        Accounts grouped salary, savings, emergency.

        Every group is returned, empty or not, so the layout is stable.
        """
        rows = self.account_rows()
        return [
            AccountGroup(
                account_type=account_type,
                title=ACCOUNT_GROUP_TITLES[account_type],
                accounts=[row for row in rows if row.account_type == account_type],
            )
            for account_type in AccountType
        ]

    # =========================================================================
    # ENVELOPES & GOALS
    # =========================================================================

    def envelope_cards(self) -> list[EnvelopeCard]:
        income = self._state.monthly_income
        cards = []
        for name, amount in self._state.envelopes.items():
            share = amount / income * 100 if income > 0 else Decimal(0)
            cards.append(EnvelopeCard(name=name, amount=amount, share_of_income=share))
        return cards

    def goal_cards(self) -> list[GoalCard]:
        return [
            GoalCard(
                name=name,
                target=goal.target,
                allocated=goal.allocated,
                progress_percent=goal.progress_percent,
                is_complete=goal.target > 0 and goal.allocated >= goal.target,
            )
            for name, goal in self._state.goals.items()
        ]

    # =========================================================================
    # TRANSACTIONS & HISTORY
    # =========================================================================

    def transaction_feed(self, limit: Optional[int] = None) -> list[Transaction]:
        """Global log newest first; same-day entries keep posting order."""
        feed = sorted(
            self._state.transactions,
            key=lambda t: t.posted_on,
            reverse=True,
        )
        return feed[:limit] if limit is not None else feed

    def monthly_chart(self, months: Optional[int] = None) -> list[MonthlyChartPoint]:
        if months is None:
            months = self._settings.chart_months
        return chart_series(self._state.monthly_history, months)

    def financial_report(self, on: date, recent: int = 10) -> FinancialReport:
        """The report for the month containing `on`."""
        key = month_key(on)
        return FinancialReport(
            month=key,
            monthly_income=self._state.monthly_income,
            monthly_expenses=expenses_for(self._state.monthly_history, key),
            unallocated_amount=self._state.unallocated_amount,
            total_balance=self.total_balance(),
            envelopes=self.envelope_cards(),
            goals=self.goal_cards(),
            accounts=self.account_rows(),
            recent_transactions=self.transaction_feed(limit=recent),
        )
