from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal

from enums.room_status import RoomStatus, RoomType
from enums.tenant_status import TenantStatus


class RoomBase(BaseModel):
    room_number: str = Field(min_length=1, max_length=10)
    room_type: Optional[RoomType] = None
    floor: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = Field(default=None, max_length=500)
    capacity: int = Field(gt=0)
    monthly_rent: Decimal = Field(ge=0, decimal_places=2)
    security_deposit: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    last_maintenance_date: Optional[date] = None
    next_maintenance_date: Optional[date] = None


class RoomCreate(RoomBase):
    status: RoomStatus = RoomStatus.AVAILABLE

    @model_validator(mode="after")
    def new_room_is_not_occupied(self):
        if self.status == RoomStatus.OCCUPIED:
            raise ValueError("A new room has no tenants and cannot be created as occupied")
        return self


class RoomUpdate(BaseModel):
    """Occupancy is deliberately absent: it only changes through assignment."""

    room_number: Optional[str] = Field(default=None, min_length=1, max_length=10)
    room_type: Optional[RoomType] = None
    floor: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=1000)
    capacity: Optional[int] = Field(default=None, gt=0)
    monthly_rent: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    security_deposit: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    last_maintenance_date: Optional[date] = None
    next_maintenance_date: Optional[date] = None

    @field_validator("room_number", "capacity", "monthly_rent", "security_deposit")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null; omit it to keep the current value")
        return value


class RoomStatusUpdate(BaseModel):
    status: RoomStatus
    notes: Optional[str] = Field(default=None, max_length=1000)


class TenantAssignment(BaseModel):
    tenant_id: int
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None
    monthly_rent: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    security_deposit: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)


class RoomTenantResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    tenant_status: TenantStatus
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)


class RoomResponse(BaseModel):
    id: int
    room_number: str
    room_type: Optional[RoomType] = None
    floor: Optional[int] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    capacity: int
    occupancy_current: int
    status: RoomStatus
    monthly_rent: float
    security_deposit: float
    is_active: bool
    last_maintenance_date: Optional[date] = None
    next_maintenance_date: Optional[date] = None
    tenants: List[RoomTenantResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
