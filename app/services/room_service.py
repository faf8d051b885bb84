import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.models.room_model import Room
from database.models.tenant_model import Tenant
from database.models.payment_model import Payment
from enums.room_status import RoomStatus, RoomType
from enums.tenant_status import TenantStatus
from schemas.room_schema import RoomCreate, RoomUpdate
from services.base_service import BaseService
from utils.exceptions import OccupancyInvariantError
from utils.room_utils import ValidationResult, validate_room_assignment

logger = logging.getLogger(__name__)


@dataclass
class OccupancyResult(ValidationResult):
    room: Optional[Room] = None


class RoomService(BaseService):
    """
    Occupancy manager. Every change to a room's tenant set, its occupancy
    counter or a tenant's room reference goes through assign_tenant or
    remove_tenant, which update both sides in one transaction.
    """

    def __init__(self):
        super().__init__(Room)

    def get_by_number(self, db: Session, room_number: str) -> Optional[Room]:
        return db.query(Room).filter(Room.room_number == room_number).first()

    def get_rooms(
        self,
        db: Session,
        status: Optional[RoomStatus] = None,
        room_type: Optional[RoomType] = None,
        floor: Optional[int] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Room]:
        query = db.query(Room).filter(Room.is_active == True)
        if status:
            query = query.filter(Room.status == status)
        if room_type:
            query = query.filter(Room.room_type == room_type)
        if floor is not None:
            query = query.filter(Room.floor == floor)
        return query.order_by(Room.room_number).offset(skip).limit(limit).all()

    def get_available_rooms(
        self,
        db: Session,
        room_type: Optional[RoomType] = None,
        floor: Optional[int] = None,
        max_rent: Optional[Decimal] = None,
    ) -> List[Room]:
        query = db.query(Room).filter(
            Room.is_active == True,
            Room.status == RoomStatus.AVAILABLE,
            Room.occupancy_current < Room.capacity,
        )
        if room_type:
            query = query.filter(Room.room_type == room_type)
        if floor is not None:
            query = query.filter(Room.floor == floor)
        if max_rent is not None:
            query = query.filter(Room.monthly_rent <= max_rent)
        return query.order_by(Room.room_number).all()

    def get_tenant_room(self, db: Session, tenant: Tenant) -> Optional[Room]:
        if tenant.room_id is None:
            return None
        return self.get(db, tenant.room_id)

    def create_room(self, db: Session, room_in: RoomCreate) -> Room:
        if self.get_by_number(db, room_in.room_number):
            raise ValueError(f"Room {room_in.room_number} already exists")
        room = self.create(db, room_in, occupancy_current=0, is_active=True)
        logger.info("Created room %s (capacity %s)", room.room_number, room.capacity)
        return room

    def update_room(self, db: Session, room: Room, room_in: RoomUpdate) -> OccupancyResult:
        result = OccupancyResult(room=room)
        update_data = room_in.model_dump(exclude_unset=True)

        new_number = update_data.get("room_number")
        if new_number and new_number != room.room_number and self.get_by_number(db, new_number):
            result.add_error(f"Room {new_number} already exists")

        new_capacity = update_data.get("capacity")
        if new_capacity is not None and new_capacity < room.occupancy_current:
            result.add_error(
                f"Capacity cannot be less than current occupancy ({room.occupancy_current})"
            )

        if not result.is_valid:
            return result

        for key, value in update_data.items():
            setattr(room, key, value)

        if new_capacity is not None:
            self._sync_status_with_capacity(room)

        db.commit()
        db.refresh(room)
        return result

    def update_room_status(
        self, db: Session, room: Room, status: RoomStatus, notes: Optional[str] = None
    ) -> OccupancyResult:
        result = OccupancyResult(room=room)
        is_full = room.occupancy_current >= room.capacity

        if status == RoomStatus.AVAILABLE and is_full:
            result.add_error("Cannot set room as available while it is at full capacity")
        if status == RoomStatus.OCCUPIED and not is_full:
            result.add_error("Room can only be marked occupied when it is at full capacity")

        if not result.is_valid:
            return result

        room.status = status
        if notes:
            room.notes = notes
        db.commit()
        db.refresh(room)
        logger.info("Room %s status set to %s", room.room_number, status.value)
        return result

    def deactivate_room(self, db: Session, room: Room) -> OccupancyResult:
        result = OccupancyResult(room=room)
        if room.tenants:
            result.add_error("Cannot deactivate room with assigned tenants")
            return result
        room.is_active = False
        db.commit()
        db.refresh(room)
        return result

    def delete_room(self, db: Session, room: Room) -> OccupancyResult:
        result = OccupancyResult()
        if room.tenants:
            result.add_error("Cannot delete room with assigned tenants")
        payment_count = db.query(func.count(Payment.id)).filter(Payment.room_id == room.id).scalar()
        if payment_count:
            result.add_error("Room has payment history; deactivate it instead")
        if not result.is_valid:
            return result

        db.delete(room)
        db.commit()
        logger.info("Deleted room %s", room.room_number)
        return result

    def assign_tenant(
        self,
        db: Session,
        room_id: int,
        tenant_id: int,
        lease_start: Optional[date] = None,
        lease_end: Optional[date] = None,
        monthly_rent: Optional[Decimal] = None,
        security_deposit: Optional[Decimal] = None,
    ) -> OccupancyResult:
        room = self.get_for_update(db, room_id)
        tenant = db.query(Tenant).filter(Tenant.id == tenant_id).with_for_update().first()

        validation = validate_room_assignment(room, tenant, lease_start, lease_end)
        if not validation.is_valid:
            db.rollback()
            return OccupancyResult(is_valid=False, errors=validation.errors, room=room)

        try:
            self._check_consistency(db, room)

            room.tenants.append(tenant)
            room.occupancy_current += 1
            if room.occupancy_current >= room.capacity:
                room.status = RoomStatus.OCCUPIED

            tenant.lease_start_date = lease_start
            tenant.lease_end_date = lease_end
            tenant.monthly_rent = monthly_rent
            tenant.security_deposit = security_deposit
            tenant.tenant_status = TenantStatus.ACTIVE

            db.flush()
            self._check_consistency(db, room)
            db.commit()
        except OccupancyInvariantError as e:
            db.rollback()
            logger.error("Assignment of tenant %s aborted: %s", tenant_id, e)
            raise
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Assignment of tenant %s to room %s failed", tenant_id, room_id)
            raise

        db.refresh(room)
        logger.info(
            "Assigned tenant %s to room %s (%s/%s)",
            tenant_id, room.room_number, room.occupancy_current, room.capacity,
        )
        return OccupancyResult(room=room)

    def remove_tenant(self, db: Session, room_id: int, tenant_id: int) -> OccupancyResult:
        room = self.get_for_update(db, room_id)
        tenant = db.query(Tenant).filter(Tenant.id == tenant_id).with_for_update().first()

        result = OccupancyResult(room=room)
        if room is None or not room.is_active:
            result.add_error("Room not found or inactive")
        if tenant is None:
            result.add_error("Tenant not found")
        if room is not None and tenant is not None and tenant.room_id != room.id:
            result.add_error("Tenant is not assigned to this room")
        if not result.is_valid:
            db.rollback()
            return result

        try:
            self._check_consistency(db, room)

            room.tenants.remove(tenant)
            room.occupancy_current -= 1
            # maintenance and unavailable are manual states and stay as they are
            if room.status == RoomStatus.OCCUPIED and room.occupancy_current < room.capacity:
                room.status = RoomStatus.AVAILABLE

            tenant.room = None
            tenant.lease_start_date = None
            tenant.lease_end_date = None
            tenant.monthly_rent = None
            tenant.security_deposit = None
            tenant.tenant_status = TenantStatus.INACTIVE

            db.flush()
            self._check_consistency(db, room)
            db.commit()
        except OccupancyInvariantError as e:
            db.rollback()
            logger.error("Removal of tenant %s aborted: %s", tenant_id, e)
            raise
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Removal of tenant %s from room %s failed", tenant_id, room_id)
            raise

        db.refresh(room)
        logger.info(
            "Removed tenant %s from room %s (%s/%s)",
            tenant_id, room.room_number, room.occupancy_current, room.capacity,
        )
        return result

    def get_occupancy_stats(self, db: Session) -> dict:
        rooms = db.query(Room).filter(Room.is_active == True).all()

        stats = {
            "total_rooms": len(rooms),
            "total_capacity": sum(room.capacity for room in rooms),
            "total_occupied": sum(room.occupancy_current for room in rooms),
        }
        for status in RoomStatus:
            stats[f"{status.value}_rooms"] = sum(1 for room in rooms if room.status == status)

        stats["occupancy_rate"] = (
            round(stats["total_occupied"] / stats["total_capacity"] * 100, 2)
            if stats["total_capacity"] > 0 else 0
        )
        stats["availability_rate"] = (
            round(stats["available_rooms"] / stats["total_rooms"] * 100, 2)
            if stats["total_rooms"] > 0 else 0
        )
        return stats

    def find_rooms_needing_maintenance(self, db: Session, today: date) -> List[Room]:
        return (
            db.query(Room)
            .filter(
                Room.is_active == True,
                (Room.status == RoomStatus.MAINTENANCE) | (Room.next_maintenance_date <= today),
            )
            .order_by(Room.room_number)
            .all()
        )

    def release_archived_tenants(self, db: Session) -> int:
        """Remove archived tenants who still hold a room."""
        stale = (
            db.query(Tenant.id, Tenant.room_id)
            .filter(Tenant.is_archived == True, Tenant.room_id.isnot(None))
            .all()
        )
        released = 0
        for tenant_id, room_id in stale:
            result = self.remove_tenant(db, room_id, tenant_id)
            if result.is_valid:
                released += 1
            else:
                logger.warning("Could not release archived tenant %s: %s", tenant_id, result.errors)
        logger.info("Released %s archived tenants from their rooms", released)
        return released

    def verify_integrity(self, db: Session) -> List[dict]:
        """Report room/tenant inconsistencies without repairing them."""
        issues = []
        for room in db.query(Room).order_by(Room.room_number).all():
            linked = len(room.tenants)
            if room.occupancy_current != linked:
                issues.append({
                    "type": "occupancy_mismatch",
                    "room_id": room.id,
                    "room_number": room.room_number,
                    "detail": f"counter is {room.occupancy_current}, {linked} tenants linked",
                })
            if linked > room.capacity:
                issues.append({
                    "type": "over_capacity",
                    "room_id": room.id,
                    "room_number": room.room_number,
                    "detail": f"{linked} tenants for capacity {room.capacity}",
                })
            if room.capacity and linked >= room.capacity and room.status == RoomStatus.AVAILABLE:
                issues.append({
                    "type": "full_room_available",
                    "room_id": room.id,
                    "room_number": room.room_number,
                    "detail": "room is full but marked available",
                })
            archived = [t.id for t in room.tenants if t.is_archived]
            if archived:
                issues.append({
                    "type": "archived_tenants_in_room",
                    "room_id": room.id,
                    "room_number": room.room_number,
                    "detail": f"archived tenants {archived}",
                })
        return issues

    def _sync_status_with_capacity(self, room: Room):
        is_full = room.occupancy_current >= room.capacity
        if is_full and room.status == RoomStatus.AVAILABLE:
            room.status = RoomStatus.OCCUPIED
        elif not is_full and room.status == RoomStatus.OCCUPIED:
            room.status = RoomStatus.AVAILABLE

    def _check_consistency(self, db: Session, room: Room):
        linked = (
            db.query(func.count(Tenant.id)).filter(Tenant.room_id == room.id).scalar()
        )
        if room.occupancy_current != linked:
            raise OccupancyInvariantError(
                room.id, f"occupancy counter {room.occupancy_current} != {linked} linked tenants"
            )
        if room.occupancy_current > room.capacity:
            raise OccupancyInvariantError(
                room.id, f"occupancy {room.occupancy_current} exceeds capacity {room.capacity}"
            )
        if any(tenant.room_id is not None and tenant.room_id != room.id for tenant in room.tenants):
            raise OccupancyInvariantError(room.id, "tenant set lists a tenant linked to another room")
