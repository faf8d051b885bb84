import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import RENT_DUE_DAY, PAYMENT_EARLY_WINDOW_DAYS
from database.models.payment_model import Payment
from database.models.tenant_model import Tenant
from enums.payment_method import PaymentMethod
from enums.payment_status import PaymentStatus
from enums.payment_type import PaymentType
from enums.tenant_status import TenantStatus
from schemas.payment_schema import PaymentCreate, PaymentResponse, PaymentUpdate
from services.base_service import BaseService
from services.room_service import RoomService
from utils.id_generator import generate_receipt_number
from utils.payment_utils import (
    PaymentResult,
    compute_effective_status,
    deposit_obligation_key,
    month_bounds,
    obligation_key_for,
    rent_due_date,
    rent_obligation_key,
    summarize_payments,
    validate_mark_as_paid,
    validate_settlement,
)
from utils.room_utils import resolve_monthly_rent, resolve_security_deposit

logger = logging.getLogger(__name__)


@dataclass
class LedgerResult(PaymentResult):
    payment: Optional[Payment] = None


class PaymentService(BaseService):
    """
    Payment ledger: recurring obligations per tenant, their lifecycle and
    the summaries computed from them. Obligations are never deleted.
    """

    def __init__(self):
        super().__init__(Payment)
        self.room_service = RoomService()

    def get_payment(self, db: Session, payment_id: int) -> Optional[Payment]:
        return self.get(db, payment_id)

    def get_payments(
        self,
        db: Session,
        tenant_id: Optional[int] = None,
        room_id: Optional[int] = None,
        payment_type: Optional[PaymentType] = None,
        status: Optional[PaymentStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Payment]:
        query = db.query(Payment)
        if tenant_id is not None:
            query = query.filter(Payment.tenant_id == tenant_id)
        if room_id is not None:
            query = query.filter(Payment.room_id == room_id)
        if payment_type:
            query = query.filter(Payment.payment_type == payment_type)
        if status:
            query = query.filter(Payment.status == status)
        return query.order_by(Payment.due_date.desc(), Payment.id.desc()).offset(skip).limit(limit).all()

    def get_overdue_payments(self, db: Session, today: date) -> List[Payment]:
        return (
            db.query(Payment)
            .filter(Payment.status != PaymentStatus.PAID, Payment.due_date < today)
            .order_by(Payment.due_date)
            .all()
        )

    def to_response(self, payment: Payment, today: date) -> PaymentResponse:
        response = PaymentResponse.model_validate(payment)
        response.effective_status = compute_effective_status(payment, today)
        return response

    def create_payment(
        self, db: Session, payment_in: PaymentCreate, today: date, recorded_by_id: Optional[int] = None
    ) -> LedgerResult:
        result = LedgerResult()

        tenant = db.query(Tenant).filter(Tenant.id == payment_in.tenant_id).first()
        if tenant is None:
            result.add_error("Tenant not found")

        room_id = payment_in.room_id
        if room_id is None and tenant is not None:
            room_id = tenant.room_id
        if room_id is None:
            result.add_error("Tenant has no room assigned; room_id is required")
        elif self.room_service.get(db, room_id) is None:
            result.add_error("Room not found")

        if payment_in.status == PaymentStatus.OVERDUE:
            result.add_error("Overdue is derived from the due date and cannot be set directly")
        if payment_in.status == PaymentStatus.PAID:
            for error in validate_settlement(
                payment_in.due_date,
                payment_in.payment_date,
                payment_in.payment_method,
                payment_in.transaction_reference,
                today,
                PAYMENT_EARLY_WINDOW_DAYS,
            ).errors:
                result.add_error(error)
        elif payment_in.payment_date is not None:
            result.add_error("Payment date may only be set when the payment is paid")

        if not result.is_valid:
            return result

        payment = Payment(
            **payment_in.model_dump(exclude={"room_id"}),
            room_id=room_id,
            obligation_key=obligation_key_for(payment_in.payment_type, tenant.id, payment_in.period_start),
            recorded_by_id=recorded_by_id,
        )
        if payment.status == PaymentStatus.PAID:
            payment.is_late_payment = payment.payment_date > payment.due_date
            payment.receipt_number = self._unique_receipt_number(db, payment.payment_date)

        created = self._insert_obligation(db, payment)
        if created is None:
            result.add_error("An obligation of this type already exists for this tenant and period")
            return result

        logger.info("Recorded %s payment %s for tenant %s", created.payment_type.value, created.id, tenant.id)
        result.payment = created
        return result

    def update_payment(self, db: Session, payment: Payment, payment_in: PaymentUpdate) -> LedgerResult:
        result = LedgerResult(payment=payment)
        new_due_date = payment_in.model_dump(exclude_unset=True).get("due_date")
        if (
            new_due_date is not None
            and new_due_date != payment.due_date
            and PaymentStatus(payment.status) == PaymentStatus.PAID
        ):
            result.add_error("Due date of a paid payment cannot be changed")
            return result

        result.payment = self.update(db, payment, payment_in)
        return result

    def mark_as_paid(
        self,
        db: Session,
        payment_id: int,
        payment_date: Optional[date],
        method: PaymentMethod,
        transaction_reference: Optional[str],
        notes: Optional[str],
        today: date,
        recorded_by_id: Optional[int] = None,
    ) -> LedgerResult:
        payment = self.get_for_update(db, payment_id)
        if payment is None:
            db.rollback()
            return LedgerResult(is_valid=False, errors=["Payment not found"])

        validation = validate_mark_as_paid(
            payment, payment_date, method, transaction_reference, today, PAYMENT_EARLY_WINDOW_DAYS
        )
        if not validation.is_valid:
            db.rollback()
            return LedgerResult(is_valid=False, errors=validation.errors, payment=payment)

        payment.status = PaymentStatus.PAID
        payment.payment_date = payment_date
        payment.payment_method = method
        payment.transaction_reference = (transaction_reference or "").strip() or None
        if notes:
            payment.notes = notes
        payment.is_late_payment = payment_date > payment.due_date
        payment.recorded_by_id = recorded_by_id
        if not payment.receipt_number:
            payment.receipt_number = self._unique_receipt_number(db, payment_date)

        db.commit()
        db.refresh(payment)
        logger.info("Payment %s marked as paid (receipt %s)", payment.id, payment.receipt_number)
        return LedgerResult(payment=payment)

    def generate_monthly_obligations(
        self, db: Session, as_of: date, due_day: Optional[int] = RENT_DUE_DAY
    ) -> List[Payment]:
        """
        Create the rent obligation of the month containing as_of for every
        active tenant with a room. Re-running for the same month creates
        nothing: the obligation key is unique per tenant and month.
        """
        period_start, period_end = month_bounds(as_of)

        tenants = (
            db.query(Tenant)
            .filter(
                Tenant.is_archived == False,
                Tenant.tenant_status == TenantStatus.ACTIVE,
                Tenant.room_id.isnot(None),
            )
            .order_by(Tenant.id)
            .all()
        )

        # Plain values only: a rolled back insert expires every loaded instance
        candidates = []
        for tenant in tenants:
            room = self.room_service.get_tenant_room(db, tenant)
            amount = resolve_monthly_rent(tenant, room)
            if amount <= 0:
                logger.warning("Tenant %s has no rent configured, skipping", tenant.id)
                continue
            candidates.append((tenant.id, room.id, amount, tenant.lease_start_date))

        created = []
        for tenant_id, room_id, amount, lease_start in candidates:
            payment = Payment(
                tenant_id=tenant_id,
                room_id=room_id,
                amount=amount,
                payment_type=PaymentType.RENT,
                payment_method=PaymentMethod.CASH,
                status=PaymentStatus.PENDING,
                due_date=rent_due_date(period_start, lease_start, due_day),
                period_start=period_start,
                period_end=period_end,
                obligation_key=rent_obligation_key(tenant_id, period_start),
                description=f"Monthly rent for {period_start:%B %Y}",
            )
            inserted = self._insert_obligation(db, payment)
            if inserted is not None:
                created.append(inserted)

        logger.info(
            "Monthly rent generation for %s: %s created, %s already present",
            f"{period_start:%Y-%m}", len(created), len(candidates) - len(created),
        )
        return created

    def ensure_deposit_obligation(self, db: Session, tenant: Tenant, today: date) -> Optional[Payment]:
        """Create the tenant's single security deposit obligation if it is missing."""
        room = self.room_service.get_tenant_room(db, tenant)
        if room is None:
            return None

        amount = resolve_security_deposit(tenant, room)
        if amount <= 0:
            return None

        payment = Payment(
            tenant_id=tenant.id,
            room_id=room.id,
            amount=amount,
            payment_type=PaymentType.DEPOSIT,
            payment_method=PaymentMethod.CASH,
            status=PaymentStatus.PENDING,
            due_date=tenant.lease_start_date or today,
            obligation_key=deposit_obligation_key(tenant.id),
            description="Security deposit",
        )
        return self._insert_obligation(db, payment)

    def backfill_deposits(self, db: Session, today: date) -> List[Payment]:
        """Create deposit obligations for assigned tenants who predate them."""
        tenant_ids = [
            tenant_id for (tenant_id,) in (
                db.query(Tenant.id)
                .filter(Tenant.is_archived == False, Tenant.room_id.isnot(None))
                .order_by(Tenant.id)
                .all()
            )
        ]

        created = []
        for tenant_id in tenant_ids:
            tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
            payment = self.ensure_deposit_obligation(db, tenant, today)
            if payment is not None:
                created.append(payment)

        logger.info("Deposit backfill created %s obligations", len(created))
        return created

    def summarize(
        self,
        db: Session,
        today: date,
        tenant_id: Optional[int] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> dict:
        query = db.query(Payment)
        if tenant_id is not None:
            query = query.filter(Payment.tenant_id == tenant_id)
        if year is not None:
            if month is not None:
                start, end = month_bounds(date(year, month, 1))
            else:
                start, end = date(year, 1, 1), date(year, 12, 31)
            query = query.filter(Payment.due_date >= start, Payment.due_date <= end)

        summary = summarize_payments(query.all(), today)
        summary["tenant_id"] = tenant_id
        summary["period"] = (
            f"{year:04d}-{month:02d}" if year is not None and month is not None
            else (f"{year:04d}" if year is not None else None)
        )
        return summary

    def outstanding_balance(self, db: Session, tenant_id: int, today: date) -> Decimal:
        return self.summarize(db, today, tenant_id=tenant_id)["outstanding_amount"]

    def _insert_obligation(self, db: Session, payment: Payment) -> Optional[Payment]:
        db.add(payment)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info("Obligation %s already exists, nothing created", payment.obligation_key)
            return None
        db.refresh(payment)
        return payment

    def _unique_receipt_number(self, db: Session, issued_on: date) -> str:
        receipt_number = generate_receipt_number(issued_on)
        while db.query(Payment.id).filter(Payment.receipt_number == receipt_number).first():
            receipt_number = generate_receipt_number(issued_on)
        return receipt_number
