"""Read-only ledger views."""

from envelope_budget.queries.views import LedgerViews, format_currency

__all__ = ["LedgerViews", "format_currency"]
