"""
Pure ledger helpers: status derivation, rent periods and summary folds.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from enums.payment_method import PaymentMethod
from enums.payment_status import PaymentStatus, DepositStatus
from enums.payment_type import PaymentType


@dataclass
class PaymentResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)

    def add_error(self, message: str):
        self.errors.append(message)
        self.is_valid = False


def compute_effective_status(payment, today: date) -> PaymentStatus:
    """
    Read-time status of an obligation.

    A paid payment stays paid whatever its due date; an unpaid one past its
    due date reads as overdue; otherwise the stored status is reported.
    """
    stored = PaymentStatus(payment.status)
    if stored == PaymentStatus.PAID:
        return PaymentStatus.PAID
    if payment.due_date is not None and today > payment.due_date:
        return PaymentStatus.OVERDUE
    return stored


def month_bounds(as_of: date) -> Tuple[date, date]:
    last_day = calendar.monthrange(as_of.year, as_of.month)[1]
    return as_of.replace(day=1), as_of.replace(day=last_day)


def clamp_day(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, max(1, min(day, last_day)))


def rent_due_date(period_start: date, lease_start: Optional[date], due_day: Optional[int] = None) -> date:
    """
    Due date of a rent obligation within the month starting at period_start.

    A configured due_day wins; otherwise the lease anniversary day is used.
    Either is clamped to the length of the month.
    """
    if due_day is not None:
        day = due_day
    elif lease_start is not None:
        day = lease_start.day
    else:
        day = 1
    return clamp_day(period_start.year, period_start.month, day)


def rent_obligation_key(tenant_id: int, period_start: date) -> str:
    return f"rent:{tenant_id}:{period_start.year:04d}-{period_start.month:02d}"


def deposit_obligation_key(tenant_id: int) -> str:
    return f"deposit:{tenant_id}"


def obligation_key_for(payment_type: PaymentType, tenant_id: int, period_start: Optional[date]) -> Optional[str]:
    if payment_type == PaymentType.RENT and period_start is not None:
        return rent_obligation_key(tenant_id, period_start)
    if payment_type == PaymentType.DEPOSIT:
        return deposit_obligation_key(tenant_id)
    return None


def validate_mark_as_paid(
    payment,
    payment_date: Optional[date],
    method: PaymentMethod,
    transaction_reference: Optional[str],
    today: date,
    early_window_days: int,
) -> PaymentResult:
    result = PaymentResult()

    if PaymentStatus(payment.status) == PaymentStatus.PAID:
        result.add_error("Payment is already marked as paid")

    for error in validate_settlement(
        payment.due_date, payment_date, method, transaction_reference, today, early_window_days
    ).errors:
        result.add_error(error)

    return result


def validate_settlement(
    due_date: date,
    payment_date: Optional[date],
    method: PaymentMethod,
    transaction_reference: Optional[str],
    today: date,
    early_window_days: int,
) -> PaymentResult:
    """Payment date and reference rules shared by every path into paid."""
    result = PaymentResult()

    if payment_date is None:
        result.add_error("Payment date is required")
    else:
        earliest = due_date - timedelta(days=early_window_days)
        if payment_date < earliest:
            result.add_error(
                f"Payment date cannot be more than {early_window_days} days before the due date"
            )
        if payment_date > today:
            result.add_error("Payment date cannot be in the future")

    if PaymentMethod(method) != PaymentMethod.CASH and not (transaction_reference or "").strip():
        result.add_error("Transaction reference is required for non-cash payments")

    return result


def deposit_status(payments: Iterable) -> DepositStatus:
    deposits = [p for p in payments if PaymentType(p.payment_type) == PaymentType.DEPOSIT]
    if not deposits:
        return DepositStatus.NONE
    if all(PaymentStatus(p.status) == PaymentStatus.PAID for p in deposits):
        return DepositStatus.PAID
    return DepositStatus.PENDING


def _bucket() -> Dict[str, object]:
    return {"count": 0, "total_amount": Decimal("0")}


def summarize_payments(payments: Iterable, today: date) -> dict:
    """
    Fold a set of obligations into totals. Nothing persisted is trusted:
    every figure comes from the payments passed in.
    """
    payments = list(payments)

    total = Decimal("0")
    paid = Decimal("0")
    pending = Decimal("0")
    overdue = Decimal("0")
    count_by_status = {status.value: 0 for status in PaymentStatus}
    by_type: Dict[str, Dict[str, object]] = {}
    by_method: Dict[str, Dict[str, object]] = {}

    for payment in payments:
        amount = Decimal(payment.amount)
        status = compute_effective_status(payment, today)

        total += amount
        count_by_status[status.value] += 1
        if status == PaymentStatus.PAID:
            paid += amount
        elif status == PaymentStatus.OVERDUE:
            overdue += amount
        else:
            pending += amount

        type_bucket = by_type.setdefault(PaymentType(payment.payment_type).value, _bucket())
        type_bucket["count"] += 1
        type_bucket["total_amount"] += amount

        method_bucket = by_method.setdefault(PaymentMethod(payment.payment_method).value, _bucket())
        method_bucket["count"] += 1
        method_bucket["total_amount"] += amount

    return {
        "total_payments": len(payments),
        "total_amount": total,
        "paid_amount": paid,
        "pending_amount": pending,
        "overdue_amount": overdue,
        "outstanding_amount": pending + overdue,
        "count_by_status": count_by_status,
        "by_type": by_type,
        "by_method": by_method,
        "deposit_status": deposit_status(payments).value,
    }
