from sqlalchemy import Column, Integer, String, Numeric, Boolean, Date, DateTime, ForeignKey, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database.init import Base
from enums.tenant_status import TenantStatus


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    phone_number = Column(String(20), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, unique=True)

    # Set and cleared only through RoomService.assign_tenant / remove_tenant
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=True, index=True)
    lease_start_date = Column(Date, nullable=True)
    lease_end_date = Column(Date, nullable=True)
    monthly_rent = Column(Numeric(10, 2), nullable=True)
    security_deposit = Column(Numeric(10, 2), nullable=True)

    tenant_status = Column(SQLAlchemyEnum(TenantStatus), nullable=False, default=TenantStatus.PENDING, index=True)
    is_archived = Column(Boolean, default=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    room = relationship("Room", back_populates="tenants")
    user = relationship("User", back_populates="tenant")
    payments = relationship("Payment", back_populates="tenant")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
