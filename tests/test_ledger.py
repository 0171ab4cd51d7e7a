"""
Tests for the Ledger

Covers every operation, the consistency rules between accounts,
envelopes and unallocated funds, and the all-or-nothing guarantee of
rejected operations.
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from envelope_budget.exceptions import (
    DuplicateEntityError,
    InsufficientFundsError,
    LedgerValidationError,
    UnknownEntityError,
)
from envelope_budget.ledger import Ledger
from envelope_budget.ledger.book import MONTH_END_SWEEP_NAME, OPENING_BALANCE_NAME
from envelope_budget.models.ledger import (
    OPENING_BALANCE_SOURCE,
    UNALLOCATED_SOURCE,
    AccountType,
    AutoTransfer,
    FundsScope,
    MinBalanceAlert,
    MonthlyTransferSchedule,
    TransactionKind,
)


DAY = date(2024, 1, 15)


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def funded(ledger):
    """A (1000) and B (0), income 500 posted to A."""
    ledger.create_account("Alpha", "1111", "salary", 1000, DAY)
    ledger.create_account("Bravo", "2222", "savings", 0, DAY)
    ledger.post_income(500, "Alpha-1111", DAY)
    return ledger


def _account_log_total(ledger, key):
    account = ledger.state.accounts[key]
    return sum((t.signed_amount_for(key) for t in account.transactions), Decimal(0))


class TestCreateAccount:
    """Tests for account creation."""

    def test_create_account(self, ledger):
        """Test that a valid account is added under its composite key."""
        account = ledger.create_account("Main", "1234", "salary", "250.50", DAY)
        assert account.key == "Main-1234"
        assert account.account_type == AccountType.SALARY
        assert ledger.state.accounts["Main-1234"].balance == Decimal("250.50")

    def test_opening_balance_is_logged(self, ledger):
        """Test that a positive opening balance produces a transfer entry."""
        ledger.create_account("Main", "1234", "salary", 1000, DAY)
        account = ledger.state.accounts["Main-1234"]
        assert len(account.transactions) == 1
        txn = account.transactions[0]
        assert txn.name == OPENING_BALANCE_NAME
        assert txn.kind == TransactionKind.TRANSFER
        assert txn.from_account == OPENING_BALANCE_SOURCE
        assert ledger.state.transactions == [txn]
        assert ledger.state.monthly_history == {}

    def test_zero_opening_balance_is_not_logged(self, ledger):
        """Test that an empty account starts with an empty log."""
        ledger.create_account("Main", "1234", "savings", 0, DAY)
        assert ledger.state.accounts["Main-1234"].transactions == []
        assert ledger.state.transactions == []

    def test_name_and_number_are_trimmed(self, ledger):
        """Test that surrounding whitespace is dropped from the key."""
        account = ledger.create_account("  Main  ", " 1234 ", "salary", 0, DAY)
        assert account.key == "Main-1234"

    @pytest.mark.parametrize("name,number,account_type,balance,field", [
        ("", "1234", "salary", 0, "account_name"),
        ("ab", "1234", "salary", 0, "account_name"),
        ("x" * 51, "1234", "salary", 0, "account_name"),
        ("Main", "123", "salary", 0, "account_number"),
        ("Main", "12a4", "salary", 0, "account_number"),
        ("Main", "1234", "salary", -1, "account_balance"),
        ("Main", "1234", "salary", "abc", "account_balance"),
        ("Main", "1234", "", 0, "account_type"),
        ("Main", "1234", "checking", 0, "account_type"),
    ])
    def test_invalid_account_rejected(self, ledger, name, number, account_type, balance, field):
        """Test that each invalid form field is reported and nothing is added."""
        with pytest.raises(LedgerValidationError) as exc_info:
            ledger.create_account(name, number, account_type, balance, DAY)
        assert exc_info.value.field == field
        assert ledger.state.accounts == {}

    def test_duplicate_account_rejected(self, ledger):
        """Test that an existing account is never overwritten."""
        ledger.create_account("Main", "1234", "salary", 100, DAY)
        with pytest.raises(DuplicateEntityError):
            ledger.create_account("Main", "1234", "savings", 0, DAY)
        assert ledger.state.accounts["Main-1234"].balance == Decimal("100")
        assert ledger.state.accounts["Main-1234"].account_type == AccountType.SALARY


class TestIncome:
    """Tests for posting income."""

    def test_post_income(self, funded):
        """Test that income credits the account and resets unallocated."""
        state = funded.state
        assert state.accounts["Alpha-1111"].balance == Decimal("1500")
        assert state.monthly_income == Decimal("500")
        assert state.unallocated_amount == Decimal("500")
        bucket = state.monthly_history["2024-01"]
        assert bucket.income == Decimal("500")
        assert bucket.transactions[-1].kind == TransactionKind.INCOME

    def test_unallocated_accounts_for_existing_envelopes(self, funded):
        """Test that unallocated = income minus what envelopes already hold."""
        funded.allocate_envelope("Food", 200)
        funded.post_income(800, "Alpha-1111", DAY)
        assert funded.state.unallocated_amount == Decimal("600")

    def test_reposting_overwrites_month_income(self, funded):
        """Test that the month's income figure is replaced, not summed."""
        funded.post_income(700, "Alpha-1111", DAY)
        bucket = funded.state.monthly_history["2024-01"]
        assert bucket.income == Decimal("700")
        incomes = [t for t in bucket.transactions if t.kind == TransactionKind.INCOME]
        assert len(incomes) == 1
        # Account and global logs keep both postings
        assert funded.state.accounts["Alpha-1111"].balance == Decimal("2200")

    def test_income_requires_account(self, ledger):
        """Test that a missing account is reported on the account field."""
        with pytest.raises(LedgerValidationError) as exc_info:
            ledger.post_income(100, "", DAY)
        assert exc_info.value.field == "income_account"
        assert ledger.state.monthly_income == Decimal("0")

    def test_income_unknown_account(self, ledger):
        """Test that an unknown account is a reference error."""
        with pytest.raises(UnknownEntityError) as exc_info:
            ledger.post_income(100, "Ghost-0000", DAY)
        assert exc_info.value.error_kind == "reference"

    def test_income_invalid_amount(self, funded):
        """Test that a negative income is rejected before any write."""
        with pytest.raises(LedgerValidationError) as exc_info:
            funded.post_income(-5, "Alpha-1111", DAY)
        assert exc_info.value.field == "income"
        assert funded.state.monthly_income == Decimal("500")


class TestEnvelopes:
    """Tests for envelope allocation and sweeping."""

    def test_allocate(self, funded):
        """Test that allocation moves exactly the amount."""
        assert funded.allocate_envelope("Food", 200) == Decimal("200")
        assert funded.state.envelopes["Food"] == Decimal("200")
        assert funded.state.unallocated_amount == Decimal("300")

    def test_allocate_accumulates(self, funded):
        """Test that a second allocation adds to the envelope."""
        funded.allocate_envelope("Food", 100)
        funded.allocate_envelope("Food", 50)
        assert funded.state.envelopes["Food"] == Decimal("150")
        assert funded.state.unallocated_amount == Decimal("350")

    def test_allocate_more_than_unallocated(self, funded):
        """Test that over-allocation fails and changes nothing."""
        funded.allocate_envelope("Food", 200)
        with pytest.raises(InsufficientFundsError) as exc_info:
            funded.allocate_envelope("Rent", 1000)
        assert exc_info.value.scope == FundsScope.UNALLOCATED
        assert funded.state.unallocated_amount == Decimal("300")
        assert "Rent" not in funded.state.envelopes

    def test_allocate_blank_name(self, funded):
        """Test that a blank envelope name is rejected."""
        with pytest.raises(LedgerValidationError) as exc_info:
            funded.allocate_envelope("   ", 10)
        assert exc_info.value.field == "envelope_name"

    def test_sweep_envelopes(self, funded):
        """Test that sweeping zeroes envelopes and restores unallocated."""
        funded.allocate_envelope("Food", 200)
        funded.allocate_envelope("Fun", 100)
        assert funded.sweep_envelopes() == Decimal("300")
        assert funded.state.envelopes == {"Food": Decimal("0"), "Fun": Decimal("0")}
        assert funded.state.unallocated_amount == Decimal("500")

    def test_sweep_without_envelopes(self, funded):
        """Test that sweeping with no envelopes is rejected."""
        with pytest.raises(UnknownEntityError):
            funded.sweep_envelopes()
        assert funded.state.unallocated_amount == Decimal("500")


class TestExpenses:
    """Tests for recording expenses."""

    def test_expense_against_envelope(self, funded):
        """Test that an envelope expense debits account and envelope."""
        funded.allocate_envelope("Food", 200)
        txn = funded.record_expense("Groceries", 50, "Alpha-1111", DAY, envelope="Food")
        assert funded.state.accounts["Alpha-1111"].balance == Decimal("1450")
        assert funded.state.envelopes["Food"] == Decimal("150")
        assert funded.state.unallocated_amount == Decimal("300")
        assert txn.account_name == "Alpha"
        assert funded.state.monthly_history["2024-01"].expenses == Decimal("50")

    def test_expense_without_envelope_debits_unallocated(self, funded):
        """Test that an envelope-less expense is charged to unallocated funds."""
        funded.record_expense("Bus", 20, "Alpha-1111", DAY)
        assert funded.state.unallocated_amount == Decimal("480")
        assert funded.state.accounts["Alpha-1111"].balance == Decimal("1480")

    def test_expense_exceeding_account_balance(self, ledger):
        """Test the 100-from-50 case: rejected, nothing appended."""
        ledger.create_account("Small", "5050", "savings", 50, DAY)
        before = len(ledger.state.transactions)
        with pytest.raises(InsufficientFundsError) as exc_info:
            ledger.record_expense("TV", 100, "Small-5050", DAY)
        assert exc_info.value.scope == FundsScope.ACCOUNT
        assert ledger.state.accounts["Small-5050"].balance == Decimal("50")
        assert len(ledger.state.transactions) == before
        assert ledger.state.monthly_history == {}

    def test_expense_exceeding_envelope(self, funded):
        """Test that an envelope cannot go negative."""
        funded.allocate_envelope("Food", 20)
        with pytest.raises(InsufficientFundsError) as exc_info:
            funded.record_expense("Dinner", 30, "Alpha-1111", DAY, envelope="Food")
        assert exc_info.value.scope == FundsScope.ENVELOPE
        assert funded.state.envelopes["Food"] == Decimal("20")
        assert funded.state.accounts["Alpha-1111"].balance == Decimal("1500")

    def test_expense_unknown_envelope(self, funded):
        """Test that a missing envelope is a reference error."""
        with pytest.raises(UnknownEntityError) as exc_info:
            funded.record_expense("Dinner", 10, "Alpha-1111", DAY, envelope="Nope")
        assert exc_info.value.entity_type == "envelope"

    def test_account_checked_before_envelope(self, funded):
        """Test check order: account balance is reported before the envelope."""
        with pytest.raises(InsufficientFundsError) as exc_info:
            funded.record_expense("Car", 99999, "Alpha-1111", DAY, envelope="Nope")
        assert exc_info.value.scope == FundsScope.ACCOUNT

    @pytest.mark.parametrize("name,amount,account,field", [
        ("", 10, "Alpha-1111", "transaction_name"),
        ("Lunch", "ten", "Alpha-1111", "transaction_amount"),
        ("Lunch", -1, "Alpha-1111", "transaction_amount"),
        ("Lunch", 10, "", "transaction_account"),
    ])
    def test_invalid_expense(self, funded, name, amount, account, field):
        """Test that each invalid input is reported on its field."""
        with pytest.raises(LedgerValidationError) as exc_info:
            funded.record_expense(name, amount, account, DAY)
        assert exc_info.value.field == field


class TestTransfers:
    """Tests for account-to-account transfers."""

    def test_transfer(self, funded):
        """Test that a transfer moves money and is logged on both accounts."""
        txn = funded.transfer("Alpha-1111", "Bravo-2222", 300, DAY)
        state = funded.state
        assert state.accounts["Alpha-1111"].balance == Decimal("1200")
        assert state.accounts["Bravo-2222"].balance == Decimal("300")
        assert txn.name == "Transfer to Bravo"
        assert txn in state.accounts["Alpha-1111"].transactions
        assert txn in state.accounts["Bravo-2222"].transactions
        assert state.transactions[-1] == txn

    def test_transfer_does_not_touch_history(self, funded):
        """Test that transfers are not month-history events."""
        before = funded.state.monthly_history["2024-01"].model_copy(deep=True)
        funded.transfer("Alpha-1111", "Bravo-2222", 300, DAY)
        assert funded.state.monthly_history["2024-01"] == before

    def test_transfer_conserves_total(self, funded):
        """Test that the sum of balances is unchanged."""
        total = funded.total_balance()
        funded.transfer("Alpha-1111", "Bravo-2222", "123.45", DAY)
        funded.transfer("Bravo-2222", "Alpha-1111", "23.45", DAY)
        assert funded.total_balance() == total

    def test_transfer_insufficient(self, funded):
        """Test that a transfer cannot overdraw the source."""
        with pytest.raises(InsufficientFundsError):
            funded.transfer("Bravo-2222", "Alpha-1111", 1, DAY)
        assert funded.state.accounts["Bravo-2222"].balance == Decimal("0")

    @pytest.mark.parametrize("amount", [0, -10, "abc"])
    def test_transfer_invalid_amount(self, funded, amount):
        """Test that non-positive amounts are rejected."""
        with pytest.raises(LedgerValidationError):
            funded.transfer("Alpha-1111", "Bravo-2222", amount, DAY)

    def test_transfer_to_same_account(self, funded):
        """Test that source and destination must differ."""
        with pytest.raises(LedgerValidationError) as exc_info:
            funded.transfer("Alpha-1111", "Alpha-1111", 10, DAY)
        assert exc_info.value.field == "to_account"
        assert funded.state.accounts["Alpha-1111"].balance == Decimal("1500")

    def test_transfer_unknown_destination(self, funded):
        """Test that an unknown destination is a reference error."""
        with pytest.raises(UnknownEntityError):
            funded.transfer("Alpha-1111", "Ghost-0000", 10, DAY)
        assert funded.state.accounts["Alpha-1111"].balance == Decimal("1500")


class TestBalanceCorrectionAndSweep:
    """Tests for balance correction and the month-end sweep."""

    def test_correct_balance(self, funded):
        """Test that correction overwrites the balance without logging."""
        log_length = len(funded.state.transactions)
        funded.correct_balance("Alpha-1111", "999.99")
        assert funded.state.accounts["Alpha-1111"].balance == Decimal("999.99")
        assert len(funded.state.transactions) == log_length

    def test_correct_balance_negative(self, funded):
        """Test that a negative balance is rejected."""
        with pytest.raises(LedgerValidationError) as exc_info:
            funded.correct_balance("Alpha-1111", -1)
        assert exc_info.value.message == "Balance cannot be negative."

    def test_sweep_unallocated(self, funded):
        """Test that month-end moves all unallocated funds to the account."""
        txn = funded.sweep_unallocated("Bravo-2222", DAY)
        assert txn.name == MONTH_END_SWEEP_NAME
        assert txn.from_account == UNALLOCATED_SOURCE
        assert funded.state.accounts["Bravo-2222"].balance == Decimal("500")
        assert funded.state.unallocated_amount == Decimal("0")
        assert funded.state.monthly_history["2024-01"].transactions[-1] == txn

    def test_sweep_untracked_month(self, funded):
        """Test that a sweep does not create a month bucket."""
        funded.sweep_unallocated("Bravo-2222", date(2024, 2, 1))
        assert "2024-02" not in funded.state.monthly_history

    def test_sweep_with_nothing_unallocated(self, funded):
        """Test that a sweep with no funds is rejected."""
        funded.allocate_envelope("All", 500)
        with pytest.raises(InsufficientFundsError) as exc_info:
            funded.sweep_unallocated("Bravo-2222", DAY)
        assert exc_info.value.scope == FundsScope.UNALLOCATED

    def test_sweep_requires_account(self, funded):
        """Test that an account must be selected."""
        with pytest.raises(LedgerValidationError):
            funded.sweep_unallocated("", DAY)
        assert funded.state.unallocated_amount == Decimal("500")


class TestGoals:
    """Tests for savings goals."""

    def test_create_and_allocate(self, ledger):
        """Test goal creation and allocation."""
        ledger.create_goal("Trip", 1000)
        goal = ledger.allocate_to_goal("Trip", 250)
        assert goal.allocated == Decimal("250")
        assert goal.progress_percent == Decimal("25")

    def test_over_allocation_allowed(self, ledger):
        """Test that a goal may be funded past its target."""
        ledger.create_goal("Trip", 100)
        goal = ledger.allocate_to_goal("Trip", 150)
        assert goal.progress_percent == Decimal("150")

    def test_goal_allocation_does_not_touch_funds(self, funded):
        """Test that goals are tracking only."""
        funded.create_goal("Trip", 100)
        funded.allocate_to_goal("Trip", 50)
        assert funded.state.unallocated_amount == Decimal("500")

    def test_recreate_goal_resets(self, ledger):
        """Test that re-creating a goal starts it over."""
        ledger.create_goal("Trip", 100)
        ledger.allocate_to_goal("Trip", 50)
        goal = ledger.create_goal("Trip", 300)
        assert goal.allocated == Decimal("0")
        assert goal.target == Decimal("300")

    def test_allocate_unknown_goal(self, ledger):
        """Test that an unknown goal is a reference error."""
        with pytest.raises(UnknownEntityError):
            ledger.allocate_to_goal("Ghost", 10)

    def test_blank_goal_name(self, ledger):
        """Test that a blank goal name is rejected."""
        with pytest.raises(LedgerValidationError):
            ledger.create_goal("", 10)


class TestAccountRules:
    """Tests for inert account rules."""

    def test_set_rules(self, funded):
        """Test that each rule kind lands in its slot."""
        funded.set_min_balance_alert("Alpha-1111", 100)
        funded.set_auto_transfer("Alpha-1111", "Bravo-2222", 10)
        funded.set_monthly_transfer("Alpha-1111", 5, 200)
        rules = funded.state.accounts["Alpha-1111"].rules
        assert rules.min_balance == Decimal("100")
        assert rules.auto_transfer.target_account == "Bravo-2222"
        assert rules.monthly_transfer.day == 5
        assert len(rules.active) == 3

    def test_rules_are_inert(self, funded):
        """Test that setting a rule moves no money."""
        funded.set_auto_transfer("Alpha-1111", "Bravo-2222", 50)
        funded.post_income(100, "Alpha-1111", DAY)
        assert funded.state.accounts["Bravo-2222"].balance == Decimal("0")

    def test_set_account_rule_directly(self, funded):
        """Test the typed rule entry point."""
        rules = funded.set_account_rule("Bravo-2222", MinBalanceAlert(threshold=Decimal("5")))
        assert rules.min_balance == Decimal("5")

    def test_auto_transfer_to_self(self, funded):
        """Test that an account cannot auto-transfer to itself."""
        with pytest.raises(LedgerValidationError):
            funded.set_auto_transfer("Alpha-1111", "Alpha-1111", 10)

    def test_auto_transfer_unknown_target(self, funded):
        """Test that the target account must exist."""
        with pytest.raises(UnknownEntityError):
            funded.set_auto_transfer("Alpha-1111", "Ghost-0000", 10)
        assert funded.state.accounts["Alpha-1111"].rules is None

    @pytest.mark.parametrize("percentage", [0, 101, "x"])
    def test_auto_transfer_bad_percentage(self, funded, percentage):
        """Test the percentage bounds."""
        with pytest.raises(LedgerValidationError):
            funded.set_auto_transfer("Alpha-1111", "Bravo-2222", percentage)

    @pytest.mark.parametrize("day", [0, 32, "1.5", None])
    def test_monthly_transfer_bad_day(self, funded, day):
        """Test the day-of-month bounds."""
        with pytest.raises(LedgerValidationError):
            funded.set_monthly_transfer("Alpha-1111", day, 10)

    @pytest.mark.parametrize("rule,field", [
        (MinBalanceAlert(threshold=Decimal("-5")), "min_balance"),
        (AutoTransfer(target_account="Bravo-2222", percentage=Decimal("150")), "percentage"),
        (MonthlyTransferSchedule(day=0, amount=Decimal("10")), "day"),
        (MonthlyTransferSchedule(day=5, amount=Decimal("-10")), "amount"),
    ])
    def test_set_account_rule_checks_ranges(self, funded, rule, field):
        """Test that typed rules are range-checked on the way in."""
        with pytest.raises(LedgerValidationError) as exc_info:
            funded.set_account_rule("Alpha-1111", rule)
        assert exc_info.value.field == field
        assert funded.state.accounts["Alpha-1111"].rules is None


class TestEmergencyFunds:
    """Tests for emergency fund tracking."""

    @pytest.fixture
    def emergency(self, ledger):
        ledger.create_account("Rainy", "9999", "emergency", 5000, DAY)
        return ledger

    def test_record_usage(self, emergency):
        """Test that usage is logged without touching the balance."""
        at = datetime(2024, 1, 20, tzinfo=timezone.utc)
        record = emergency.record_emergency_usage("Rainy-9999", 750, at)
        assert record.amount == Decimal("750")
        assert emergency.emergency_history("Rainy-9999") == [record]
        assert emergency.state.accounts["Rainy-9999"].balance == Decimal("5000")

    def test_set_target(self, emergency):
        """Test setting the replenishment target."""
        account = emergency.set_emergency_target("Rainy-9999", 10000)
        assert account.emergency_target == Decimal("10000")

    def test_only_emergency_accounts(self, funded):
        """Test that other account types are rejected."""
        with pytest.raises(LedgerValidationError):
            funded.set_emergency_target("Alpha-1111", 100)
        with pytest.raises(LedgerValidationError):
            funded.emergency_history("Alpha-1111")


class TestLedgerProperties:
    """End-to-end scenarios and invariants."""

    def test_reference_scenario(self, ledger):
        """Test the full income/allocate/spend/transfer walkthrough."""
        ledger.create_account("Alpha", "1111", "salary", 1000, DAY)
        ledger.create_account("Bravo", "2222", "savings", 0, DAY)

        ledger.post_income(500, "Alpha-1111", DAY)
        assert ledger.state.accounts["Alpha-1111"].balance == Decimal("1500")
        assert ledger.state.unallocated_amount == Decimal("500")

        ledger.allocate_envelope("Food", 200)
        assert ledger.state.envelopes["Food"] == Decimal("200")
        assert ledger.state.unallocated_amount == Decimal("300")

        ledger.record_expense("Groceries", 50, "Alpha-1111", DAY, envelope="Food")
        assert ledger.state.accounts["Alpha-1111"].balance == Decimal("1450")
        assert ledger.state.envelopes["Food"] == Decimal("150")

        ledger.transfer("Alpha-1111", "Bravo-2222", 300, DAY)
        assert ledger.state.accounts["Alpha-1111"].balance == Decimal("1150")
        assert ledger.state.accounts["Bravo-2222"].balance == Decimal("300")
        assert len(ledger.state.transactions) == 4

    def test_balances_match_account_logs(self, funded):
        """Test that every balance equals the signed sum of its log."""
        funded.allocate_envelope("Food", 200)
        funded.record_expense("Groceries", 50, "Alpha-1111", DAY, envelope="Food")
        funded.record_expense("Bus", 5, "Alpha-1111", DAY)
        funded.transfer("Alpha-1111", "Bravo-2222", 300, DAY)
        funded.sweep_unallocated("Bravo-2222", DAY)
        for key, account in funded.state.accounts.items():
            assert account.balance == _account_log_total(funded, key)

    def test_rejected_operations_leave_state_untouched(self, funded):
        """Test that a batch of failures changes nothing at all."""
        before = funded.snapshot()
        failures = [
            lambda: funded.allocate_envelope("Food", 10**6),
            lambda: funded.record_expense("X", 10**6, "Alpha-1111", DAY),
            lambda: funded.transfer("Alpha-1111", "Alpha-1111", 1, DAY),
            lambda: funded.post_income("nope", "Alpha-1111", DAY),
            lambda: funded.sweep_envelopes(),
            lambda: funded.allocate_to_goal("Ghost", 1),
        ]
        for attempt in failures:
            with pytest.raises(Exception):
                attempt()
        assert funded.state == before

    def test_snapshot_is_a_copy(self, funded):
        """Test that mutating a snapshot does not affect the ledger."""
        snapshot = funded.snapshot()
        snapshot.unallocated_amount = Decimal("0")
        snapshot.accounts.clear()
        assert funded.state.unallocated_amount == Decimal("500")
        assert "Alpha-1111" in funded.state.accounts

    def test_reset_is_idempotent(self, funded):
        """Test that reset empties the ledger and can be repeated."""
        funded.reset()
        assert funded.state.is_empty
        funded.reset()
        assert funded.state.is_empty


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
