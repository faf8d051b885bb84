"""
Unit tests for payment_utils: pure functions, no database.
"""
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from enums.payment_method import PaymentMethod
from enums.payment_status import PaymentStatus
from enums.payment_type import PaymentType
from utils.payment_utils import (
    compute_effective_status,
    month_bounds,
    obligation_key_for,
    rent_due_date,
    summarize_payments,
    validate_mark_as_paid,
    validate_settlement,
)


def payment(**overrides):
    values = dict(
        amount=Decimal("5000"),
        payment_type=PaymentType.RENT,
        payment_method=PaymentMethod.CASH,
        status=PaymentStatus.PENDING,
        due_date=date(2025, 11, 5),
    )
    values.update(overrides)
    return SimpleNamespace(**values)


# ── compute_effective_status ─────────────────────────────────────────────────

class TestEffectiveStatus:
    def test_pending_past_due_is_overdue(self):
        assert compute_effective_status(payment(), date(2025, 11, 10)) == PaymentStatus.OVERDUE

    def test_pending_on_due_date_stays_pending(self):
        assert compute_effective_status(payment(), date(2025, 11, 5)) == PaymentStatus.PENDING

    def test_due_before_due_date_stays_due(self):
        p = payment(status=PaymentStatus.DUE)
        assert compute_effective_status(p, date(2025, 11, 1)) == PaymentStatus.DUE

    @pytest.mark.parametrize("today", [date(2025, 1, 1), date(2025, 11, 5), date(2030, 1, 1)])
    def test_paid_is_never_overdue(self, today):
        p = payment(status=PaymentStatus.PAID)
        assert compute_effective_status(p, today) == PaymentStatus.PAID

    def test_is_deterministic(self):
        p = payment()
        today = date(2025, 12, 1)
        assert compute_effective_status(p, today) == compute_effective_status(p, today)


# ── rent periods ─────────────────────────────────────────────────────────────

class TestRentPeriods:
    def test_month_bounds(self):
        assert month_bounds(date(2025, 2, 14)) == (date(2025, 2, 1), date(2025, 2, 28))

    def test_due_date_uses_lease_anniversary(self):
        assert rent_due_date(date(2025, 11, 1), date(2025, 3, 15)) == date(2025, 11, 15)

    def test_due_date_clamped_to_month_length(self):
        assert rent_due_date(date(2025, 2, 1), date(2025, 1, 31)) == date(2025, 2, 28)

    def test_configured_due_day_wins(self):
        assert rent_due_date(date(2025, 11, 1), date(2025, 3, 15), due_day=5) == date(2025, 11, 5)

    def test_no_lease_start_defaults_to_first(self):
        assert rent_due_date(date(2025, 11, 1), None) == date(2025, 11, 1)

    def test_obligation_keys(self):
        assert obligation_key_for(PaymentType.RENT, 7, date(2025, 11, 1)) == "rent:7:2025-11"
        assert obligation_key_for(PaymentType.DEPOSIT, 7, None) == "deposit:7"
        assert obligation_key_for(PaymentType.UTILITY, 7, date(2025, 11, 1)) is None
        assert obligation_key_for(PaymentType.RENT, 7, None) is None


# ── validate_mark_as_paid ────────────────────────────────────────────────────

class TestValidateMarkAsPaid:
    today = date(2025, 11, 10)

    def test_cash_payment_needs_no_reference(self):
        result = validate_mark_as_paid(payment(), date(2025, 11, 10), PaymentMethod.CASH, None, self.today, 31)
        assert result.is_valid

    def test_non_cash_requires_reference(self):
        result = validate_mark_as_paid(
            payment(), date(2025, 11, 10), PaymentMethod.BANK_TRANSFER, "  ", self.today, 31
        )
        assert result.errors == ["Transaction reference is required for non-cash payments"]

    def test_already_paid(self):
        result = validate_mark_as_paid(
            payment(status=PaymentStatus.PAID), date(2025, 11, 10), PaymentMethod.CASH, None, self.today, 31
        )
        assert "Payment is already marked as paid" in result.errors

    def test_missing_date(self):
        result = validate_mark_as_paid(payment(), None, PaymentMethod.CASH, None, self.today, 31)
        assert result.errors == ["Payment date is required"]

    def test_too_early(self):
        result = validate_mark_as_paid(payment(), date(2025, 9, 1), PaymentMethod.CASH, None, self.today, 31)
        assert result.errors == ["Payment date cannot be more than 31 days before the due date"]

    def test_future_date(self):
        result = validate_mark_as_paid(payment(), date(2025, 11, 11), PaymentMethod.CASH, None, self.today, 31)
        assert result.errors == ["Payment date cannot be in the future"]

    def test_settlement_rules_ignore_stored_status(self):
        result = validate_settlement(
            date(2025, 11, 5), date(2025, 9, 1), PaymentMethod.CHECK, None, self.today, 31
        )
        assert result.errors == [
            "Payment date cannot be more than 31 days before the due date",
            "Transaction reference is required for non-cash payments",
        ]


# ── summarize_payments ───────────────────────────────────────────────────────

class TestSummarizePayments:
    today = date(2025, 11, 10)

    def test_empty_set(self):
        summary = summarize_payments([], self.today)
        assert summary["total_amount"] == 0
        assert summary["deposit_status"] == "none"
        assert summary["count_by_status"]["paid"] == 0

    def test_totals_use_effective_status(self):
        payments = [
            payment(status=PaymentStatus.PAID, amount=Decimal("5000")),
            payment(due_date=date(2025, 11, 5), amount=Decimal("5000")),
            payment(due_date=date(2025, 12, 5), amount=Decimal("5000")),
            payment(payment_type=PaymentType.DEPOSIT, due_date=date(2025, 12, 1), amount=Decimal("2000")),
        ]
        summary = summarize_payments(payments, self.today)
        assert summary["total_amount"] == Decimal("17000")
        assert summary["paid_amount"] == Decimal("5000")
        assert summary["overdue_amount"] == Decimal("5000")
        assert summary["pending_amount"] == Decimal("7000")
        assert summary["outstanding_amount"] == Decimal("12000")
        assert summary["count_by_status"] == {"pending": 2, "paid": 1, "overdue": 1, "due": 0}
        assert summary["by_type"]["deposit"]["count"] == 1
        assert summary["by_method"]["cash"]["count"] == 4
        assert summary["deposit_status"] == "pending"

    def test_paid_deposit(self):
        payments = [payment(payment_type=PaymentType.DEPOSIT, status=PaymentStatus.PAID)]
        assert summarize_payments(payments, self.today)["deposit_status"] == "paid"
