"""
Snapshot Codec

Converts between LedgerState and the JSON-compatible document that the
storage backends persist.

Loading also upgrades documents written by earlier versions of the app:
- numeric (timestamp) transaction ids become strings
- transactions without an id get a fresh one
- month-history keys written as "January 2024" are merged into the
  matching "2024-01" bucket
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import ValidationError

from envelope_budget.models.ledger import LedgerState, MonthlyHistoryEntry
from envelope_budget.services.storage.interface import Snapshot, StorageError


LEGACY_MONTH_FORMAT = "%B %Y"
MONTH_KEY_FORMAT = "%Y-%m"


def state_to_snapshot(state: LedgerState) -> Snapshot:
    """Dump a state with its persisted (camelCase) field names."""
    return state.model_dump(mode="json", by_alias=True, exclude_none=True)


def normalize_month_key(key: str) -> Optional[str]:
    """
    Return the "YYYY-MM" form of a month key, or None if it is unreadable.
    """
    for fmt in (MONTH_KEY_FORMAT, LEGACY_MONTH_FORMAT):
        try:
            return datetime.strptime(key.strip(), fmt).strftime(MONTH_KEY_FORMAT)
        except ValueError:
            continue
    return None


def _merge_buckets(
    current: MonthlyHistoryEntry,
    other: MonthlyHistoryEntry,
) -> MonthlyHistoryEntry:
    return MonthlyHistoryEntry(
        income=current.income if current.income != Decimal(0) else other.income,
        expenses=current.expenses + other.expenses,
        transactions=current.transactions + other.transactions,
    )


def migrate_monthly_history(
    history: dict[str, MonthlyHistoryEntry],
) -> dict[str, MonthlyHistoryEntry]:
    """
    Re-key month history by "YYYY-MM".

    Buckets that map to the same month are merged. Keys that are not
    recognisable months are dropped.
    """
    migrated: dict[str, MonthlyHistoryEntry] = {}
    for key, bucket in history.items():
        canonical = normalize_month_key(key)
        if canonical is None:
            continue
        existing = migrated.get(canonical)
        migrated[canonical] = _merge_buckets(existing, bucket) if existing else bucket
    return dict(sorted(migrated.items()))


def snapshot_to_state(snapshot: dict[str, Any]) -> LedgerState:
    """
    Rebuild a LedgerState from a stored document.

    Raises:
        StorageError: If the document does not describe a valid ledger
    """
    try:
        state = LedgerState.model_validate(snapshot)
    except ValidationError as e:
        raise StorageError(f"Stored ledger state is invalid: {e}")

    state.monthly_history = migrate_monthly_history(state.monthly_history)
    return state
