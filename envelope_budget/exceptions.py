"""
Ledger Exceptions

Three kinds of user-recoverable failures:
- validation: malformed or out-of-range input
- reference: an account, envelope or goal that does not exist
- insufficient_funds: the account, envelope or unallocated pool is short

Every exception carries the input field it is tied to so the
presentation layer can show the message next to that field.
None of them is fatal; the ledger raises them before its first write.
"""

from decimal import Decimal
from typing import Optional

from envelope_budget.models.ledger import FundsScope


class LedgerError(Exception):
    """Base exception for ledger operations."""

    error_kind = "ledger"

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class LedgerValidationError(LedgerError):
    """Input is malformed or out of range."""

    error_kind = "validation"


class UnknownEntityError(LedgerError):
    """Operation references an account, envelope or goal that does not exist."""

    error_kind = "reference"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        entity_type: Optional[str] = None,
        key: Optional[str] = None,
    ):
        self.entity_type = entity_type
        self.key = key
        super().__init__(message, field)


class DuplicateEntityError(UnknownEntityError):
    """An account with the same key already exists."""


class InsufficientFundsError(LedgerError):
    """Requested amount exceeds what is available."""

    error_kind = "insufficient_funds"

    def __init__(
        self,
        message: str,
        scope: FundsScope,
        requested: Decimal,
        available: Decimal,
        field: Optional[str] = "amount",
    ):
        self.scope = scope
        self.requested = requested
        self.available = available
        super().__init__(message, field)
