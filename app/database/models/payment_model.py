from sqlalchemy import Column, Integer, String, Numeric, Boolean, Date, DateTime, ForeignKey, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database.init import Base
from enums.payment_status import PaymentStatus
from enums.payment_type import PaymentType
from enums.payment_method import PaymentMethod


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)

    amount = Column(Numeric(10, 2), nullable=False)
    payment_type = Column(SQLAlchemyEnum(PaymentType), nullable=False, default=PaymentType.RENT, index=True)
    payment_method = Column(SQLAlchemyEnum(PaymentMethod), nullable=False, default=PaymentMethod.CASH)
    status = Column(SQLAlchemyEnum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING, index=True)

    due_date = Column(Date, nullable=False, index=True)
    payment_date = Column(Date, nullable=True)
    period_start = Column(Date, nullable=True)
    period_end = Column(Date, nullable=True)

    # "rent:<tenant>:<YYYY-MM>" or "deposit:<tenant>", NULL for other types
    obligation_key = Column(String(64), unique=True, nullable=True)
    receipt_number = Column(String(50), unique=True, nullable=True)
    transaction_reference = Column(String(100), nullable=True, index=True)
    description = Column(String(500), nullable=True)
    notes = Column(String(1000), nullable=True)
    is_late_payment = Column(Boolean, default=False)
    recorded_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    tenant = relationship("Tenant", back_populates="payments")
    room = relationship("Room", back_populates="payments")
    recorded_by = relationship("User")
