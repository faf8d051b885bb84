import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.tenant_model import Tenant
from database.models.user_model import User
from enums.payment_status import PaymentStatus
from enums.payment_type import PaymentType
from schemas.payment_schema import (
    PaymentCreate,
    PaymentUpdate,
    MarkPaidRequest,
    MonthlyGenerationRequest,
)
from services.payment_service import PaymentService
from utils.dependencies import staff_or_admin_required, tenant_required
from responses.success import data_response, success_response, created_response
from responses.error import (
    not_found_error,
    validation_error,
    internal_server_error,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])
payment_service = PaymentService()


@router.get("")
def list_payments(
    tenant_id: Optional[int] = None,
    room_id: Optional[int] = None,
    payment_type: Optional[PaymentType] = None,
    status: Optional[PaymentStatus] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    today = date.today()
    payments = payment_service.get_payments(db, tenant_id, room_id, payment_type, status, skip, limit)
    return data_response([payment_service.to_response(p, today) for p in payments])


@router.post("")
def create_payment(
    payment_in: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    today = date.today()
    try:
        result = payment_service.create_payment(db, payment_in, today, current_user.id)
    except Exception:
        logger.exception("Failed to create payment")
        return internal_server_error("Failed to create payment")

    if not result.is_valid:
        return validation_error(result.errors)
    return created_response(
        "Payment recorded successfully", payment_service.to_response(result.payment, today)
    )


@router.get("/stats")
def get_payment_stats(
    year: Optional[int] = None,
    month: Optional[int] = Query(default=None, ge=1, le=12),
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    summary = payment_service.summarize(db, as_of or date.today(), year=year, month=month)
    return data_response(summary)


@router.get("/overdue")
def get_overdue_payments(
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    today = as_of or date.today()
    payments = payment_service.get_overdue_payments(db, today)
    return data_response({
        "overdue_payments": [payment_service.to_response(p, today) for p in payments],
        "count": len(payments),
    })


@router.post("/generate-monthly")
def generate_monthly_rent(
    request: MonthlyGenerationRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    """
    Create the rent obligations of the month containing as_of (default
    today). Obligations that already exist are left alone.
    """
    as_of = request.as_of or date.today()
    try:
        created = payment_service.generate_monthly_obligations(db, as_of)
    except Exception:
        logger.exception("Monthly rent generation failed")
        return internal_server_error("Monthly rent generation failed")

    return success_response(
        f"Generated {len(created)} rent obligations for {as_of:%B %Y}",
        {
            "created": len(created),
            "payments": [payment_service.to_response(p, as_of) for p in created],
        },
    )


@router.post("/backfill-deposits")
def backfill_deposits(
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    today = date.today()
    created = payment_service.backfill_deposits(db, today)
    return success_response(
        f"Created {len(created)} deposit obligations",
        {
            "created": len(created),
            "payments": [payment_service.to_response(p, today) for p in created],
        },
    )


@router.get("/my-payments")
def get_my_payments(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(tenant_required),
):
    today = date.today()
    payments = payment_service.get_payments(db, tenant_id=tenant.id)
    return data_response({
        "payments": [payment_service.to_response(p, today) for p in payments],
        "summary": payment_service.summarize(db, today, tenant_id=tenant.id),
    })


@router.get("/tenant/{tenant_id}")
def get_tenant_payments(
    tenant_id: int,
    payment_type: Optional[PaymentType] = None,
    status: Optional[PaymentStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not tenant:
        return not_found_error(f"Tenant {tenant_id} not found")

    today = date.today()
    payments = payment_service.get_payments(db, tenant_id=tenant_id, payment_type=payment_type, status=status)
    return data_response({
        "tenant": {"id": tenant.id, "name": tenant.full_name, "email": tenant.email},
        "payments": [payment_service.to_response(p, today) for p in payments],
        "summary": payment_service.summarize(db, today, tenant_id=tenant_id),
    })


@router.get("/tenant/{tenant_id}/summary")
def get_tenant_payment_summary(
    tenant_id: int,
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not tenant:
        return not_found_error(f"Tenant {tenant_id} not found")
    return data_response(payment_service.summarize(db, as_of or date.today(), tenant_id=tenant_id))


@router.get("/{payment_id}")
def get_payment(
    payment_id: int,
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    payment = payment_service.get_payment(db, payment_id)
    if not payment:
        return not_found_error(f"Payment with ID {payment_id} not found.")
    return data_response(payment_service.to_response(payment, as_of or date.today()))


@router.patch("/{payment_id}")
def update_payment(
    payment_id: int,
    payment_in: PaymentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    payment = payment_service.get_payment(db, payment_id)
    if not payment:
        return not_found_error(f"Payment with ID {payment_id} not found.")
    result = payment_service.update_payment(db, payment, payment_in)
    if not result.is_valid:
        return validation_error(result.errors)
    return success_response("Payment updated successfully", payment_service.to_response(result.payment, date.today()))


@router.put("/{payment_id}/mark-paid")
def mark_payment_as_paid(
    payment_id: int,
    request: MarkPaidRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    today = date.today()
    result = payment_service.mark_as_paid(
        db,
        payment_id,
        request.payment_date,
        request.payment_method,
        request.transaction_reference,
        request.notes,
        today,
        current_user.id,
    )
    if result.payment is None and not result.is_valid:
        return not_found_error(f"Payment with ID {payment_id} not found.")
    if not result.is_valid:
        return validation_error(result.errors)
    return success_response("Payment marked as paid successfully", payment_service.to_response(result.payment, today))
