import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.room_model import Room
from database.models.tenant_model import Tenant
from database.models.user_model import User
from enums.room_status import RoomStatus, RoomType
from schemas.room_schema import (
    RoomCreate,
    RoomUpdate,
    RoomStatusUpdate,
    RoomResponse,
    TenantAssignment,
)
from services.room_service import RoomService
from services.payment_service import PaymentService
from utils.dependencies import (
    get_current_user,
    staff_or_admin_required,
    admin_required,
    tenant_required,
)
from utils.exceptions import OccupancyInvariantError
from utils.room_utils import (
    compute_capacity_status,
    compute_maintenance_status,
    generate_room_summary,
)
from responses.success import data_response, success_response, created_response
from responses.error import (
    not_found_error,
    conflict_error,
    validation_error,
    internal_server_error,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms", tags=["Rooms"])
room_service = RoomService()
payment_service = PaymentService()


def room_payload(room: Room, today: date) -> dict:
    payload = RoomResponse.model_validate(room).model_dump(mode="json")
    payload["capacity_status"] = compute_capacity_status(room).to_dict()
    payload["maintenance_status"] = compute_maintenance_status(room, today).to_dict()
    return payload


@router.get("")
def list_rooms(
    status: Optional[RoomStatus] = None,
    room_type: Optional[RoomType] = None,
    floor: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    try:
        rooms = room_service.get_rooms(db, status, room_type, floor, skip, limit)
        today = date.today()
        return data_response([room_payload(room, today) for room in rooms])
    except Exception:
        logger.exception("Failed to list rooms")
        return internal_server_error("Failed to retrieve rooms")


@router.get("/available")
def list_available_rooms(
    room_type: Optional[RoomType] = None,
    floor: Optional[int] = None,
    max_rent: Optional[Decimal] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Active rooms whose status is available and that still have free beds.
    Open to every authenticated role.
    """
    rooms = room_service.get_available_rooms(db, room_type, floor, max_rent)
    today = date.today()
    return data_response({
        "rooms": [room_payload(room, today) for room in rooms],
        "count": len(rooms),
    })


@router.get("/stats")
def get_room_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    return data_response(room_service.get_occupancy_stats(db))


@router.get("/maintenance")
def get_rooms_needing_maintenance(
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    today = as_of or date.today()
    rooms = room_service.find_rooms_needing_maintenance(db, today)
    return data_response([room_payload(room, today) for room in rooms])


@router.get("/integrity")
def verify_room_integrity(
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    issues = room_service.verify_integrity(db)
    return data_response({"is_consistent": not issues, "issues": issues})


@router.post("/release-archived")
def release_archived_tenants(
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    try:
        released = room_service.release_archived_tenants(db)
        return success_response(f"Released {released} archived tenants", {"released": released})
    except OccupancyInvariantError:
        return internal_server_error("Operation failed, please retry")


@router.get("/my-room")
def get_my_room(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(tenant_required),
):
    if tenant.room_id is None:
        return not_found_error("You are not assigned to any room")
    room = room_service.get(db, tenant.room_id)
    return data_response(room_payload(room, date.today()))


@router.post("")
def create_room(
    room_in: RoomCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    try:
        room = room_service.create_room(db, room_in)
        return created_response("Room created successfully", room_payload(room, date.today()))
    except ValueError as ve:
        return conflict_error(str(ve))
    except Exception:
        logger.exception("Failed to create room")
        return internal_server_error("Failed to create room")


@router.get("/{room_id}")
def get_room(
    room_id: int,
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    room = room_service.get(db, room_id)
    if not room:
        return not_found_error(f"Room {room_id} not found")
    return data_response(room_payload(room, as_of or date.today()))


@router.get("/{room_id}/summary")
def get_room_summary(
    room_id: int,
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    room = room_service.get(db, room_id)
    if not room:
        return not_found_error(f"Room {room_id} not found")
    return data_response(generate_room_summary(room, as_of or date.today()))


@router.put("/{room_id}")
def update_room(
    room_id: int,
    room_in: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    room = room_service.get(db, room_id)
    if not room or not room.is_active:
        return not_found_error(f"Room {room_id} not found")

    result = room_service.update_room(db, room, room_in)
    if not result.is_valid:
        return validation_error(result.errors)
    return success_response("Room updated successfully", room_payload(result.room, date.today()))


@router.patch("/{room_id}/status")
def update_room_status(
    room_id: int,
    status_in: RoomStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    room = room_service.get(db, room_id)
    if not room or not room.is_active:
        return not_found_error(f"Room {room_id} not found")

    result = room_service.update_room_status(db, room, status_in.status, status_in.notes)
    if not result.is_valid:
        return validation_error(result.errors)
    return success_response("Room status updated successfully", room_payload(result.room, date.today()))


@router.patch("/{room_id}/deactivate")
def deactivate_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    room = room_service.get(db, room_id)
    if not room:
        return not_found_error(f"Room {room_id} not found")

    result = room_service.deactivate_room(db, room)
    if not result.is_valid:
        return validation_error(result.errors)
    return success_response("Room deactivated successfully")


@router.delete("/{room_id}")
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    room = room_service.get(db, room_id)
    if not room:
        return not_found_error(f"Room {room_id} not found")

    result = room_service.delete_room(db, room)
    if not result.is_valid:
        return validation_error(result.errors)
    return success_response("Room deleted successfully")


@router.post("/{room_id}/assign-tenant")
def assign_tenant(
    room_id: int,
    assignment: TenantAssignment,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    """
    Assign a tenant to a room. Every failed precondition is returned in
    data.errors. On success the tenant's security deposit obligation is
    created if it does not exist yet.
    """
    try:
        result = room_service.assign_tenant(
            db,
            room_id,
            assignment.tenant_id,
            assignment.lease_start_date,
            assignment.lease_end_date,
            assignment.monthly_rent,
            assignment.security_deposit,
        )
    except OccupancyInvariantError:
        return internal_server_error("Operation failed, please retry")

    if not result.is_valid:
        return validation_error(result.errors)

    tenant = db.query(Tenant).filter(Tenant.id == assignment.tenant_id).first()
    deposit = payment_service.ensure_deposit_obligation(db, tenant, date.today())
    room = room_service.get(db, room_id)

    return success_response(
        "Tenant assigned to room successfully",
        {
            "room": room_payload(room, date.today()),
            "deposit_payment_id": deposit.id if deposit else None,
        },
    )


@router.delete("/{room_id}/remove-tenant/{tenant_id}")
def remove_tenant(
    room_id: int,
    tenant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    """
    Remove a tenant from a room. Outstanding obligations stay on the tenant
    and their total is reported back.
    """
    today = date.today()
    outstanding = payment_service.outstanding_balance(db, tenant_id, today)

    try:
        result = room_service.remove_tenant(db, room_id, tenant_id)
    except OccupancyInvariantError:
        return internal_server_error("Operation failed, please retry")

    if not result.is_valid:
        return validation_error(result.errors)

    return success_response(
        "Tenant removed from room successfully",
        {
            "room": room_payload(result.room, today),
            "outstanding_balance": outstanding,
        },
    )
