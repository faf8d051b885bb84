"""
Pure helpers for room occupancy and maintenance calculations.

None of these functions touch the database or read the system clock; callers
pass the room (any object with the Room attributes) and, where needed, today.
"""

import math
from dataclasses import dataclass, field, asdict
from datetime import date
from decimal import Decimal
from typing import List, Optional

from enums.room_status import RoomStatus


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)

    def add_error(self, message: str):
        self.errors.append(message)
        self.is_valid = False


@dataclass
class CapacityStatus:
    current: int
    capacity: int
    remaining: int
    occupancy_rate: float
    is_full: bool
    is_empty: bool
    is_partially_occupied: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class MaintenanceStatus:
    needs_maintenance: bool
    is_overdue: bool
    days_until_maintenance: Optional[int]
    days_since_last_maintenance: Optional[int]
    status: str

    def to_dict(self) -> dict:
        return asdict(self)


def calculate_occupancy_rate(room) -> float:
    if not room.capacity:
        return 0.0
    return room.occupancy_current / room.capacity * 100


def is_room_available(room) -> bool:
    return (
        bool(room.is_active)
        and room.status == RoomStatus.AVAILABLE
        and room.occupancy_current < room.capacity
    )


def compute_capacity_status(room) -> CapacityStatus:
    current = room.occupancy_current or 0
    capacity = room.capacity or 0
    remaining = max(0, capacity - current)

    return CapacityStatus(
        current=current,
        capacity=capacity,
        remaining=remaining,
        occupancy_rate=round(calculate_occupancy_rate(room), 2),
        is_full=capacity > 0 and remaining == 0,
        is_empty=current == 0,
        is_partially_occupied=current > 0 and remaining > 0,
    )


def compute_maintenance_status(room, today: date) -> MaintenanceStatus:
    """
    Derive the maintenance view of a room from its two maintenance dates.

    Dates are whole days, so the ceiling/floor of the difference are the
    difference itself.
    """
    next_date = room.next_maintenance_date
    last_date = room.last_maintenance_date

    under_maintenance = room.status == RoomStatus.MAINTENANCE
    due = next_date is not None and next_date <= today

    days_until = None
    if next_date is not None:
        days_until = math.ceil((next_date - today).days)

    days_since = None
    if last_date is not None:
        days_since = math.floor((today - last_date).days)

    if under_maintenance:
        label = "under_maintenance"
    elif due:
        label = "due_for_maintenance"
    else:
        label = "up_to_date"

    return MaintenanceStatus(
        needs_maintenance=under_maintenance or due,
        is_overdue=next_date is not None and next_date < today,
        days_until_maintenance=days_until,
        days_since_last_maintenance=days_since,
        status=label,
    )


def validate_room_assignment(room, tenant, lease_start: Optional[date] = None,
                             lease_end: Optional[date] = None) -> ValidationResult:
    """
    Check every assignment precondition and collect all failures so the
    caller can show them together.
    """
    result = ValidationResult()

    if room is None or not room.is_active:
        result.add_error("Room not found or inactive")

    if tenant is None or tenant.is_archived:
        result.add_error("Tenant not found or archived")

    if tenant is not None and tenant.room_id is not None and (room is None or tenant.room_id != room.id):
        result.add_error("Tenant is already assigned to another room")

    if room is not None:
        if room.occupancy_current >= room.capacity:
            result.add_error("Room is at full capacity")
        if room.status != RoomStatus.AVAILABLE:
            result.add_error(f"Room is currently {RoomStatus(room.status).value}")
        if tenant is not None and any(t.id == tenant.id for t in room.tenants):
            result.add_error("Tenant is already assigned to this room")

    if lease_start and lease_end and lease_end <= lease_start:
        result.add_error("Lease end date must be after start date")

    return result


def resolve_monthly_rent(tenant, room) -> Decimal:
    """Tenant's own rent when set, otherwise the room's base rent."""
    if tenant.monthly_rent is not None:
        return Decimal(tenant.monthly_rent)
    if room is not None and room.monthly_rent is not None:
        return Decimal(room.monthly_rent)
    return Decimal("0")


def resolve_security_deposit(tenant, room) -> Decimal:
    if tenant.security_deposit is not None:
        return Decimal(tenant.security_deposit)
    if room is not None and room.security_deposit is not None:
        return Decimal(room.security_deposit)
    return Decimal("0")


def calculate_room_revenue(room) -> Decimal:
    return sum((resolve_monthly_rent(tenant, room) for tenant in room.tenants), Decimal("0"))


def generate_room_summary(room, today: date) -> dict:
    return {
        "id": room.id,
        "room_number": room.room_number,
        "room_type": room.room_type.value if room.room_type else None,
        "floor": room.floor,
        "status": RoomStatus(room.status).value,
        "capacity": compute_capacity_status(room).to_dict(),
        "maintenance": compute_maintenance_status(room, today).to_dict(),
        "monthly_rent": float(room.monthly_rent or 0),
        "security_deposit": float(room.security_deposit or 0),
        "monthly_revenue": float(calculate_room_revenue(room)),
        "tenant_count": len(room.tenants),
        "tenants": [
            {
                "id": tenant.id,
                "name": tenant.full_name,
                "email": tenant.email,
                "status": tenant.tenant_status.value if tenant.tenant_status else None,
                "lease_start": tenant.lease_start_date.isoformat() if tenant.lease_start_date else None,
                "lease_end": tenant.lease_end_date.isoformat() if tenant.lease_end_date else None,
            }
            for tenant in room.tenants
        ],
    }
