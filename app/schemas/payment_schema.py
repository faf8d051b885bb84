from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from enums.payment_status import PaymentStatus
from enums.payment_type import PaymentType
from enums.payment_method import PaymentMethod


class PaymentBase(BaseModel):
    tenant_id: int
    room_id: Optional[int] = None
    amount: Decimal = Field(gt=0, decimal_places=2)
    payment_type: PaymentType = PaymentType.RENT
    payment_method: PaymentMethod = PaymentMethod.CASH
    due_date: date
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    description: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def period_is_ordered(self):
        if self.period_start and self.period_end and self.period_end <= self.period_start:
            raise ValueError("Period end date must be after start date")
        return self


class PaymentCreate(PaymentBase):
    status: PaymentStatus = PaymentStatus.PENDING
    payment_date: Optional[date] = None
    transaction_reference: Optional[str] = Field(default=None, max_length=100)


class PaymentUpdate(BaseModel):
    """The amount is fixed at creation and status changes go through mark-paid."""

    due_date: Optional[date] = None
    description: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("due_date")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Due date cannot be null; omit it to keep the current value")
        return value


class MarkPaidRequest(BaseModel):
    payment_date: Optional[date] = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    transaction_reference: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None, max_length=1000)


class MonthlyGenerationRequest(BaseModel):
    as_of: Optional[date] = None


class PaymentResponse(BaseModel):
    id: int
    tenant_id: int
    room_id: int
    amount: float
    payment_type: PaymentType
    payment_method: PaymentMethod
    status: PaymentStatus
    effective_status: Optional[PaymentStatus] = None
    due_date: date
    payment_date: Optional[date] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    receipt_number: Optional[str] = None
    transaction_reference: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    is_late_payment: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
