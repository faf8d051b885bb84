import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from database.models.tenant_model import Tenant as TenantModel
from enums.tenant_status import TenantStatus
from schemas.tenant_schema import TenantCreate, TenantUpdate
from services.base_service import BaseService
from services.room_service import RoomService

logger = logging.getLogger(__name__)


class TenantService(BaseService):
    def __init__(self):
        super().__init__(TenantModel)
        self.room_service = RoomService()

    def get_by_email(self, db: Session, email: str) -> Optional[TenantModel]:
        return db.query(self.model).filter(self.model.email == email.lower()).first()

    def get_tenants(
        self,
        db: Session,
        status: Optional[TenantStatus] = None,
        include_archived: bool = False,
        unassigned_only: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> List[TenantModel]:
        query = db.query(self.model)
        if not include_archived:
            query = query.filter(self.model.is_archived == False)
        if status:
            query = query.filter(self.model.tenant_status == status)
        if unassigned_only:
            query = query.filter(self.model.room_id.is_(None))
        return query.order_by(self.model.last_name, self.model.first_name).offset(skip).limit(limit).all()

    def create_tenant(self, db: Session, tenant_in: TenantCreate) -> TenantModel:
        if self.get_by_email(db, tenant_in.email):
            raise ValueError(f"Tenant with email {tenant_in.email} already exists")

        tenant = TenantModel(
            **tenant_in.model_dump(exclude={"email"}),
            email=tenant_in.email.lower(),
            tenant_status=TenantStatus.PENDING,
            is_archived=False,
        )
        tenant = self.create(db, tenant)
        logger.info("Registered tenant %s", tenant.id)
        return tenant

    def update_tenant(self, db: Session, tenant_id: int, tenant_in: TenantUpdate) -> Optional[TenantModel]:
        db_obj = self.get(db, tenant_id)
        if db_obj:
            return self.update(db, db_obj, tenant_in)
        return None

    def archive_tenant(self, db: Session, tenant_id: int) -> Optional[TenantModel]:
        """
        Archive a tenant. A tenant holding a room is removed from it first so
        the room's capacity is released; payment history stays attached.
        """
        tenant = self.get(db, tenant_id)
        if tenant is None:
            return None

        if tenant.room_id is not None:
            result = self.room_service.remove_tenant(db, tenant.room_id, tenant.id)
            if not result.is_valid:
                raise ValueError("; ".join(result.errors))
            tenant = self.get(db, tenant_id)

        tenant.is_archived = True
        tenant.tenant_status = TenantStatus.INACTIVE
        db.commit()
        db.refresh(tenant)
        logger.info("Archived tenant %s", tenant.id)
        return tenant
