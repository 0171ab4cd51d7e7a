"""Ledger package: the state owner and its monthly history helpers."""

from envelope_budget.ledger.book import (
    INCOME_TRANSACTION_NAME,
    MONTH_END_SWEEP_NAME,
    OPENING_BALANCE_NAME,
    Ledger,
)
from envelope_budget.ledger.history import chart_series, month_key

__all__ = [
    "Ledger",
    "INCOME_TRANSACTION_NAME",
    "MONTH_END_SWEEP_NAME",
    "OPENING_BALANCE_NAME",
    "chart_series",
    "month_key",
]
