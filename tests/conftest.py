import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config import ALGORITHM, SECRET_KEY
from database.init import Base, get_db
from database.models import User, Room, Tenant, Payment
from enums.payment_method import PaymentMethod
from enums.payment_status import PaymentStatus
from enums.payment_type import PaymentType
from enums.room_status import RoomStatus
from enums.tenant_status import TenantStatus
from enums.user_role import UserRole
from main import app


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_room(db):
    counter = {"n": 100}

    def _make_room(capacity=2, monthly_rent="5000", security_deposit="0",
                   status=RoomStatus.AVAILABLE, **extra):
        counter["n"] += 1
        room = Room(
            room_number=extra.pop("room_number", str(counter["n"])),
            capacity=capacity,
            occupancy_current=0,
            status=status,
            monthly_rent=Decimal(monthly_rent),
            security_deposit=Decimal(security_deposit),
            is_active=extra.pop("is_active", True),
            **extra,
        )
        db.add(room)
        db.commit()
        db.refresh(room)
        return room

    return _make_room


@pytest.fixture
def make_tenant(db):
    counter = {"n": 0}

    def _make_tenant(first_name=None, **extra):
        counter["n"] += 1
        n = counter["n"]
        tenant = Tenant(
            first_name=first_name or f"Tenant{n}",
            last_name="Test",
            email=extra.pop("email", f"tenant{n}@example.com"),
            tenant_status=extra.pop("tenant_status", TenantStatus.PENDING),
            is_archived=extra.pop("is_archived", False),
            **extra,
        )
        db.add(tenant)
        db.commit()
        db.refresh(tenant)
        return tenant

    return _make_tenant


@pytest.fixture
def make_payment(db):
    def _make_payment(tenant, room, amount="5000", due_date=date(2025, 11, 5),
                      payment_type=PaymentType.RENT, status=PaymentStatus.PENDING, **extra):
        payment = Payment(
            tenant_id=tenant.id,
            room_id=room.id,
            amount=Decimal(amount),
            payment_type=payment_type,
            payment_method=extra.pop("payment_method", PaymentMethod.CASH),
            status=status,
            due_date=due_date,
            **extra,
        )
        db.add(payment)
        db.commit()
        db.refresh(payment)
        return payment

    return _make_payment


def _make_user(db, role, email):
    user = User(name=email.split("@")[0], email=email, role=role, is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_access_token(data: dict, expires_delta: timedelta = timedelta(minutes=30)):
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def _auth(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}


@pytest.fixture
def admin_headers(db):
    return _auth(_make_user(db, UserRole.ADMIN, "admin@example.com"))


@pytest.fixture
def staff_headers(db):
    return _auth(_make_user(db, UserRole.STAFF, "staff@example.com"))


@pytest.fixture
def tenant_user(db):
    return _make_user(db, UserRole.TENANT, "resident@example.com")


@pytest.fixture
def tenant_headers(tenant_user):
    return _auth(tenant_user)
