from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from database.models.tenant_model import Tenant
from enums.user_role import UserRole
from config import ALGORITHM, SECRET_KEY

# Tokens are issued by the external identity service; this app only verifies them
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/signin")


def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email = payload.get("sub")
        if email is None:
            raise HTTPException(status_code=401, detail="Invalid credentials")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid provided token")

    user = db.query(User).filter_by(email=email).first()
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="User account is disabled")

    return user


def staff_or_admin_required(current_user: User = Depends(get_current_user)):
    """Dependency to ensure the current user is staff or an administrator"""
    if current_user.role not in (UserRole.ADMIN, UserRole.STAFF):
        raise HTTPException(status_code=403, detail="Only staff or administrators can access this endpoint")
    return current_user


def admin_required(current_user: User = Depends(get_current_user)):
    """Dependency to ensure the current user is an administrator"""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Only administrators can access this endpoint")
    return current_user


def tenant_required(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Tenant:
    """Dependency resolving the tenant record behind a tenant-role caller"""
    if current_user.role != UserRole.TENANT:
        raise HTTPException(status_code=403, detail="This endpoint is for tenants only")

    tenant = db.query(Tenant).filter(Tenant.user_id == current_user.id).first()
    if tenant is None or tenant.is_archived:
        raise HTTPException(status_code=404, detail="Tenant profile not found")
    return tenant
