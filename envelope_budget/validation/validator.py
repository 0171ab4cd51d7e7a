"""
Input Validation

DESIGN DECISION: Every user-supplied value passes through a named rule
before the ledger touches state:

- required:        present and not blank
- amount:          a finite number >= 0 that a JSON number stores exactly
- account_number:  exactly four digits
- account_name:    between the configured min and max length

Rules are looked up by name and run in order; the first failing rule
produces the issue for that field. Callers turn issues into a
LedgerValidationError so a rejected operation never mutates anything.

IMPORTANT: Validation NEVER silently fixes input.
Whitespace around names is trimmed; everything else is reported.
"""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, Sequence

from envelope_budget.config import AppSettings, get_settings
from envelope_budget.exceptions import LedgerValidationError
from envelope_budget.models.ledger import AccountType, ValidationIssue


ACCOUNT_NUMBER_PATTERN = re.compile(r"^\d{4}$")


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert user input to a finite Decimal.

    Returns None for anything that is not a number.
    Floats go through str() so 0.1 stays 0.1.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, Decimal):
            number = value
        elif isinstance(value, int):
            number = Decimal(value)
        elif isinstance(value, float):
            if not math.isfinite(value):
                return None
            number = Decimal(str(value))
        elif isinstance(value, str):
            number = Decimal(value.strip())
        else:
            return None
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def fits_float(number: Decimal) -> bool:
    """
    True if the amount survives the trip through a JSON (double) number.

    Snapshots store amounts as floats, so roughly 15 significant digits
    is the most an amount can carry.
    """
    return Decimal(repr(float(number))) == number


class InputValidator:
    """
    Validates raw user input for ledger operations.

    Stateless apart from the configured account-name bounds.
    """

    DEFAULT_MESSAGES = {
        "required": "This field is required",
        "amount": "Please enter a valid amount",
        "account_number": "Please enter valid last 4 digits of account number",
        "account_name": "Please enter a valid account name ({min}-{max} characters)",
    }

    ISSUE_TYPES = {
        "required": "missing",
        "amount": "invalid_amount",
        "account_number": "invalid_format",
        "account_name": "out_of_range",
    }

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app
        self._rules: dict[str, Callable[[Any], bool]] = {
            "required": self._is_present,
            "amount": self._is_amount,
            "account_number": self._is_account_number,
            "account_name": self._is_account_name,
        }

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    @staticmethod
    def _is_present(value: Any) -> bool:
        return value is not None and str(value).strip() != ""

    @staticmethod
    def _is_amount(value: Any) -> bool:
        number = to_decimal(value)
        return number is not None and number >= 0 and fits_float(number)

    @staticmethod
    def _is_account_number(value: Any) -> bool:
        return isinstance(value, str) and ACCOUNT_NUMBER_PATTERN.match(value) is not None

    def _is_account_name(self, value: Any) -> bool:
        return (
            isinstance(value, str)
            and self._settings.account_name_min_length
            <= len(value)
            <= self._settings.account_name_max_length
        )

    def _message_for(self, rule: str) -> str:
        return self.DEFAULT_MESSAGES[rule].format(
            min=self._settings.account_name_min_length,
            max=self._settings.account_name_max_length,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate_input(
        self,
        value: Any,
        rules: Sequence[str],
        field: str,
        message: Optional[str] = None,
    ) -> list[ValidationIssue]:
        """
        Run the named rules against a value.

        Stops at the first failing rule. Returns an empty list when
        the value passes every rule.

        Raises:
            KeyError: If a rule name is unknown
        """
        for rule in rules:
            check = self._rules[rule]
            if not check(value):
                return [ValidationIssue(
                    field=field,
                    issue_type=self.ISSUE_TYPES[rule],
                    message=message or self._message_for(rule),
                )]
        return []

    def is_valid(self, value: Any, rules: Sequence[str]) -> bool:
        return all(self._rules[rule](value) for rule in rules)

    @staticmethod
    def raise_for_issues(issues: Sequence[ValidationIssue]) -> None:
        """Raise the first error-level issue, if any."""
        for issue in issues:
            if issue.severity == "error":
                raise LedgerValidationError(issue.message, field=issue.field)

    def parse_amount(
        self,
        value: Any,
        field: str = "amount",
        message: Optional[str] = None,
    ) -> Decimal:
        """
        Validate and convert an amount.

        Raises:
            LedgerValidationError: If the value is not a non-negative number
        """
        self.raise_for_issues(self.validate_input(value, ["amount"], field, message))
        return to_decimal(value)

    def require_text(
        self,
        value: Any,
        field: str,
        message: Optional[str] = None,
    ) -> str:
        """
        Validate that a text value is present and return it trimmed.

        Raises:
            LedgerValidationError: If the value is missing or blank
        """
        self.raise_for_issues(self.validate_input(value, ["required"], field, message))
        return str(value).strip()

    def check_account(
        self,
        name: Any,
        number: Any,
        account_type: Any,
        balance: Any,
    ) -> list[ValidationIssue]:
        """
        Validate the new-account form.

        Fields are checked in form order: name, number, balance, type.
        All issues are returned so a form can highlight every field at once.
        """
        name = name.strip() if isinstance(name, str) else name
        number = number.strip() if isinstance(number, str) else number

        issues = []
        issues.extend(self.validate_input(name, ["required", "account_name"], "account_name"))
        issues.extend(self.validate_input(number, ["account_number"], "account_number"))
        issues.extend(self.validate_input(
            balance,
            ["amount"],
            "account_balance",
            "Please enter a valid balance amount",
        ))

        type_issues = self.validate_input(
            account_type,
            ["required"],
            "account_type",
            "Please select an account type",
        )
        if not type_issues and parse_account_type(account_type) is None:
            type_issues = [ValidationIssue(
                field="account_type",
                issue_type="invalid_value",
                message=f"Unknown account type: {account_type}",
            )]
        issues.extend(type_issues)

        return issues

    def get_user_friendly_summary(
        self,
        issues: Sequence[ValidationIssue],
    ) -> str:
        """
        Generate a user-friendly summary of validation issues.

        This is what we show in a general dialog.
        """
        if not issues:
            return "All checks passed."

        lines = ["Please fix the following:"]
        for issue in issues:
            lines.append(f"   • {issue.message}")
        return "\n".join(lines)


def parse_account_type(value: Any) -> Optional[AccountType]:
    """Accept an AccountType or its (case-insensitive) value."""
    if isinstance(value, AccountType):
        return value
    if not isinstance(value, str):
        return None
    try:
        return AccountType(value.strip().lower())
    except ValueError:
        return None
