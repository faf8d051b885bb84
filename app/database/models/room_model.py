from sqlalchemy import Column, Integer, String, Numeric, Boolean, Date, DateTime, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database.init import Base
from enums.room_status import RoomStatus, RoomType


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(10), unique=True, index=True, nullable=False)
    room_type = Column(SQLAlchemyEnum(RoomType), nullable=True)
    floor = Column(Integer, nullable=True)
    description = Column(String(500), nullable=True)
    notes = Column(String(1000), nullable=True)

    capacity = Column(Integer, nullable=False)
    # Only assignment and removal in RoomService may change this counter
    occupancy_current = Column(Integer, nullable=False, default=0)
    status = Column(SQLAlchemyEnum(RoomStatus), nullable=False, default=RoomStatus.AVAILABLE, index=True)
    monthly_rent = Column(Numeric(10, 2), nullable=False, default=0)
    security_deposit = Column(Numeric(10, 2), nullable=False, default=0)
    is_active = Column(Boolean, default=True, index=True)

    last_maintenance_date = Column(Date, nullable=True)
    next_maintenance_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    tenants = relationship("Tenant", back_populates="room")
    payments = relationship("Payment", back_populates="room")
