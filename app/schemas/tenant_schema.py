from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from datetime import date, datetime

from enums.tenant_status import TenantStatus


class TenantBase(BaseModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    phone_number: Optional[str] = Field(default=None, pattern=r"^\+?[0-9]{10,15}$")


class TenantCreate(TenantBase):
    user_id: Optional[int] = None


class TenantUpdate(BaseModel):
    """Room and lease fields are not editable here; see room assignment."""

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    phone_number: Optional[str] = Field(default=None, pattern=r"^\+?[0-9]{10,15}$")
    tenant_status: Optional[TenantStatus] = None

    @field_validator("first_name", "last_name", "tenant_status")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null; omit it to keep the current value")
        return value


class TenantResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone_number: Optional[str] = None
    room_id: Optional[int] = None
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None
    monthly_rent: Optional[float] = None
    security_deposit: Optional[float] = None
    tenant_status: TenantStatus
    is_archived: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
