import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from enums.tenant_status import TenantStatus
from schemas.tenant_schema import TenantCreate, TenantUpdate, TenantResponse
from services.tenant_service import TenantService
from utils.dependencies import staff_or_admin_required
from utils.exceptions import OccupancyInvariantError
from responses.success import data_response, success_response, created_response
from responses.error import (
    not_found_error,
    conflict_error,
    validation_error,
    internal_server_error,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["Tenants"])
tenant_service = TenantService()


@router.get("")
def list_tenants(
    status: Optional[TenantStatus] = None,
    include_archived: bool = False,
    unassigned_only: bool = False,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    tenants = tenant_service.get_tenants(db, status, include_archived, unassigned_only, skip, limit)
    return data_response([TenantResponse.model_validate(t) for t in tenants])


@router.post("")
def create_tenant(
    tenant_in: TenantCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    try:
        tenant = tenant_service.create_tenant(db, tenant_in)
        return created_response("Tenant created successfully", TenantResponse.model_validate(tenant))
    except ValueError as ve:
        return conflict_error(str(ve))
    except Exception:
        logger.exception("Failed to create tenant")
        return internal_server_error("Failed to create tenant")


@router.get("/{tenant_id}")
def get_tenant(
    tenant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    tenant = tenant_service.get(db, tenant_id)
    if not tenant:
        return not_found_error(f"Tenant {tenant_id} not found")
    return data_response(TenantResponse.model_validate(tenant))


@router.patch("/{tenant_id}")
def update_tenant(
    tenant_id: int,
    tenant_in: TenantUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    tenant = tenant_service.update_tenant(db, tenant_id, tenant_in)
    if not tenant:
        return not_found_error(f"Tenant {tenant_id} not found")
    return success_response("Tenant updated successfully", TenantResponse.model_validate(tenant))


@router.post("/{tenant_id}/archive")
def archive_tenant(
    tenant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_or_admin_required),
):
    """Archive a tenant, releasing the room they hold."""
    try:
        tenant = tenant_service.archive_tenant(db, tenant_id)
    except ValueError as ve:
        return validation_error([str(ve)])
    except OccupancyInvariantError:
        return internal_server_error("Operation failed, please retry")

    if not tenant:
        return not_found_error(f"Tenant {tenant_id} not found")
    return success_response("Tenant archived successfully", TenantResponse.model_validate(tenant))
