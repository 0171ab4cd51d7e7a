"""
Monthly History

Per-month income/expense buckets keyed by "YYYY-MM".

- Buckets are created lazily on the first posting of a month.
- Income is overwritten by each income posting (the latest figure wins)
  and the bucket keeps only the latest income transaction.
- Expenses accumulate.
- Month-end sweeps are only recorded in a bucket that already exists.
"""

from datetime import date
from decimal import Decimal

from envelope_budget.models.ledger import (
    MonthlyHistoryEntry,
    Transaction,
    TransactionKind,
)
from envelope_budget.models.views import MonthlyChartPoint


MONTH_KEY_FORMAT = "%Y-%m"


def month_key(on: date) -> str:
    return on.strftime(MONTH_KEY_FORMAT)


def ensure_bucket(
    history: dict[str, MonthlyHistoryEntry],
    key: str,
) -> MonthlyHistoryEntry:
    """Get the bucket for a month, creating an empty one if needed."""
    bucket = history.get(key)
    if bucket is None:
        bucket = MonthlyHistoryEntry()
        history[key] = bucket
    return bucket


def record_income(
    history: dict[str, MonthlyHistoryEntry],
    transaction: Transaction,
) -> MonthlyHistoryEntry:
    """Overwrite the month's income with this posting."""
    bucket = ensure_bucket(history, transaction.month_key)
    bucket.transactions = [
        t for t in bucket.transactions if t.kind != TransactionKind.INCOME
    ]
    bucket.income = transaction.amount
    bucket.transactions.append(transaction)
    return bucket


def record_expense(
    history: dict[str, MonthlyHistoryEntry],
    transaction: Transaction,
) -> MonthlyHistoryEntry:
    bucket = ensure_bucket(history, transaction.month_key)
    bucket.expenses += transaction.amount
    bucket.transactions.append(transaction)
    return bucket


def record_if_tracked(
    history: dict[str, MonthlyHistoryEntry],
    transaction: Transaction,
) -> bool:
    """Append to the month's bucket only if that month is already tracked."""
    bucket = history.get(transaction.month_key)
    if bucket is None:
        return False
    bucket.transactions.append(transaction)
    return True


def expenses_for(history: dict[str, MonthlyHistoryEntry], key: str) -> Decimal:
    bucket = history.get(key)
    return bucket.expenses if bucket else Decimal(0)


def chart_series(
    history: dict[str, MonthlyHistoryEntry],
    months: int = 6,
) -> list[MonthlyChartPoint]:
    """
    Income vs. expenses for the most recent tracked months, oldest first.

    Months without any posting are not padded in.
    """
    keys = sorted(history)[-months:] if months > 0 else []
    return [
        MonthlyChartPoint(
            month=key,
            income=history[key].income,
            expenses=history[key].expenses,
        )
        for key in keys
    ]
