"""Validation package."""

from envelope_budget.validation.validator import (
    InputValidator,
    parse_account_type,
    to_decimal,
)

__all__ = ["InputValidator", "parse_account_type", "to_decimal"]
