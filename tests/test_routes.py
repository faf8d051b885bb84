"""
HTTP tests for the room, tenant and payment routers.
"""
from datetime import date

from database.models import Payment, Room, Tenant
from enums.payment_status import PaymentStatus
from enums.room_status import RoomStatus


# ── authorization ────────────────────────────────────────────────────────────

class TestAuthorization:
    def test_missing_token(self, client):
        assert client.get("/rooms").status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/rooms", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_tenant_cannot_list_rooms(self, client, tenant_headers):
        assert client.get("/rooms", headers=tenant_headers).status_code == 403

    def test_staff_cannot_delete_rooms(self, client, make_room, staff_headers):
        room = make_room()
        assert client.delete(f"/rooms/{room.id}", headers=staff_headers).status_code == 403

    def test_available_rooms_open_to_tenants(self, client, make_room, tenant_headers):
        make_room()
        response = client.get("/rooms/available", headers=tenant_headers)
        assert response.status_code == 200
        assert response.json()["data"]["count"] == 1


# ── rooms ────────────────────────────────────────────────────────────────────

class TestRoomRoutes:
    def test_create_room(self, client, staff_headers):
        response = client.post(
            "/rooms",
            json={"room_number": "201", "capacity": 2, "monthly_rent": "5000", "room_type": "double"},
            headers=staff_headers,
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["occupancy_current"] == 0
        assert data["status"] == "available"
        assert data["capacity_status"]["remaining"] == 2

    def test_duplicate_room_number(self, client, make_room, staff_headers):
        make_room(room_number="201")
        response = client.post(
            "/rooms", json={"room_number": "201", "capacity": 2, "monthly_rent": "5000"}, headers=staff_headers
        )
        assert response.status_code == 409

    def test_new_room_cannot_be_occupied(self, client, staff_headers):
        response = client.post(
            "/rooms",
            json={"room_number": "202", "capacity": 2, "monthly_rent": "5000", "status": "occupied"},
            headers=staff_headers,
        )
        assert response.status_code == 422

    def test_get_room_with_maintenance_status(self, client, make_room, staff_headers):
        room = make_room(next_maintenance_date=date(2025, 11, 1))
        response = client.get(f"/rooms/{room.id}", params={"as_of": "2025-11-10"}, headers=staff_headers)
        assert response.status_code == 200
        maintenance = response.json()["data"]["maintenance_status"]
        assert maintenance["is_overdue"]
        assert maintenance["days_until_maintenance"] == -9

    def test_unknown_room(self, client, staff_headers):
        response = client.get("/rooms/999", headers=staff_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_assign_and_remove(self, db, client, make_room, make_tenant, staff_headers):
        room = make_room(capacity=1, security_deposit="2000")
        tenant = make_tenant()

        response = client.post(
            f"/rooms/{room.id}/assign-tenant",
            json={"tenant_id": tenant.id, "lease_start_date": "2025-10-05"},
            headers=staff_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["room"]["status"] == "occupied"
        assert data["room"]["tenants"][0]["id"] == tenant.id
        assert data["deposit_payment_id"] is not None

        response = client.delete(f"/rooms/{room.id}/remove-tenant/{tenant.id}", headers=staff_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["room"]["occupancy_current"] == 0
        assert data["room"]["status"] == "available"
        assert data["outstanding_balance"] == 2000

    def test_assignment_errors_are_listed(self, client, make_room, make_tenant, staff_headers):
        room = make_room(capacity=1)
        first, second = make_tenant(), make_tenant()
        client.post(f"/rooms/{room.id}/assign-tenant", json={"tenant_id": first.id}, headers=staff_headers)

        response = client.post(
            f"/rooms/{room.id}/assign-tenant", json={"tenant_id": second.id}, headers=staff_headers
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_failed"
        assert "Room is at full capacity" in body["data"]["errors"]

    def test_status_update_rules(self, client, make_room, staff_headers):
        room = make_room(capacity=2)
        response = client.patch(f"/rooms/{room.id}/status", json={"status": "occupied"}, headers=staff_headers)
        assert response.status_code == 400

        response = client.patch(f"/rooms/{room.id}/status", json={"status": "maintenance"}, headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "maintenance"

    def test_update_rejects_capacity_below_occupancy(self, client, make_room, make_tenant, staff_headers):
        room = make_room(capacity=2)
        for tenant in (make_tenant(), make_tenant()):
            client.post(f"/rooms/{room.id}/assign-tenant", json={"tenant_id": tenant.id}, headers=staff_headers)

        response = client.put(f"/rooms/{room.id}", json={"capacity": 1}, headers=staff_headers)
        assert response.status_code == 400

    def test_stats(self, client, make_room, staff_headers):
        make_room(capacity=2)
        response = client.get("/rooms/stats", headers=staff_headers)
        assert response.json()["data"]["total_capacity"] == 2

    def test_integrity_report(self, db, client, make_room, admin_headers):
        room = make_room()
        room.occupancy_current = 1
        db.commit()

        response = client.get("/rooms/integrity", headers=admin_headers)
        data = response.json()["data"]
        assert not data["is_consistent"]
        assert data["issues"][0]["type"] == "occupancy_mismatch"

    def test_delete_room(self, db, client, make_room, admin_headers):
        room = make_room()
        room_id = room.id
        assert client.delete(f"/rooms/{room_id}", headers=admin_headers).status_code == 200
        assert db.query(Room).filter(Room.id == room_id).first() is None

    def test_my_room(self, client, make_room, make_tenant, tenant_user, tenant_headers, staff_headers):
        room = make_room()
        tenant = make_tenant(user_id=tenant_user.id)
        client.post(f"/rooms/{room.id}/assign-tenant", json={"tenant_id": tenant.id}, headers=staff_headers)

        response = client.get("/rooms/my-room", headers=tenant_headers)
        assert response.status_code == 200
        assert response.json()["data"]["id"] == room.id

    def test_my_room_without_assignment(self, client, make_tenant, tenant_user, tenant_headers):
        make_tenant(user_id=tenant_user.id)
        assert client.get("/rooms/my-room", headers=tenant_headers).status_code == 404


# ── tenants ──────────────────────────────────────────────────────────────────

class TestTenantRoutes:
    def test_create_and_duplicate(self, client, staff_headers):
        payload = {"first_name": "Ana", "last_name": "Reyes", "email": "Ana@Example.com"}
        response = client.post("/tenants", json=payload, headers=staff_headers)
        assert response.status_code == 201
        assert response.json()["data"]["email"] == "ana@example.com"
        assert response.json()["data"]["tenant_status"] == "pending"

        assert client.post("/tenants", json=payload, headers=staff_headers).status_code == 409

    def test_archive_releases_room(self, db, client, make_room, make_tenant, staff_headers):
        room = make_room(capacity=1)
        tenant = make_tenant()
        client.post(f"/rooms/{room.id}/assign-tenant", json={"tenant_id": tenant.id}, headers=staff_headers)

        response = client.post(f"/tenants/{tenant.id}/archive", headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["data"]["is_archived"]

        db.expire_all()
        room = db.get(Room, room.id)
        assert room.occupancy_current == 0
        assert room.status == RoomStatus.AVAILABLE
        assert db.get(Tenant, tenant.id).room_id is None


# ── payments ─────────────────────────────────────────────────────────────────

class TestPaymentRoutes:
    def test_generate_monthly_twice(self, client, make_room, make_tenant, staff_headers):
        room = make_room(monthly_rent="5000")
        tenant = make_tenant()
        client.post(
            f"/rooms/{room.id}/assign-tenant",
            json={"tenant_id": tenant.id, "lease_start_date": "2025-10-05"},
            headers=staff_headers,
        )

        response = client.post("/payments/generate-monthly", json={"as_of": "2025-11-01"}, headers=staff_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["created"] == 1
        assert data["payments"][0]["amount"] == 5000
        assert data["payments"][0]["due_date"] == "2025-11-05"

        response = client.post("/payments/generate-monthly", json={"as_of": "2025-11-01"}, headers=staff_headers)
        assert response.json()["data"]["created"] == 0

    def test_mark_paid(self, db, client, make_room, make_tenant, make_payment, staff_headers):
        payment = make_payment(make_tenant(), make_room(), due_date=date(2025, 11, 5))
        response = client.put(
            f"/payments/{payment.id}/mark-paid",
            json={"payment_date": date.today().isoformat(), "payment_method": "cash"},
            headers=staff_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "paid"
        assert data["effective_status"] == "paid"
        assert data["receipt_number"].startswith("RCP-")

        db.expire_all()
        assert db.get(Payment, payment.id).status == PaymentStatus.PAID

    def test_mark_paid_needs_reference(self, client, make_room, make_tenant, make_payment, staff_headers):
        payment = make_payment(make_tenant(), make_room())
        response = client.put(
            f"/payments/{payment.id}/mark-paid",
            json={"payment_date": date.today().isoformat(), "payment_method": "bank_transfer"},
            headers=staff_headers,
        )
        assert response.status_code == 400
        assert response.json()["data"]["errors"] == ["Transaction reference is required for non-cash payments"]

    def test_mark_paid_unknown_payment(self, client, staff_headers):
        response = client.put(
            "/payments/999/mark-paid", json={"payment_date": date.today().isoformat()}, headers=staff_headers
        )
        assert response.status_code == 404

    def test_effective_status_in_listing(self, client, make_room, make_tenant, make_payment, staff_headers):
        make_payment(make_tenant(), make_room(), due_date=date(2025, 11, 5))
        response = client.get("/payments", headers=staff_headers)
        payment = response.json()["data"][0]
        assert payment["status"] == "pending"
        assert payment["effective_status"] == "overdue"

    def test_tenant_summary(self, client, make_room, make_tenant, make_payment, staff_headers):
        tenant = make_tenant()
        make_payment(tenant, make_room(), due_date=date(2025, 11, 5))
        response = client.get(
            f"/payments/tenant/{tenant.id}/summary", params={"as_of": "2025-11-10"}, headers=staff_headers
        )
        data = response.json()["data"]
        assert data["overdue_amount"] == 5000
        assert data["outstanding_amount"] == 5000

    def test_my_payments(self, client, make_room, make_tenant, make_payment, tenant_user, tenant_headers):
        tenant = make_tenant(user_id=tenant_user.id)
        make_payment(tenant, make_room())
        response = client.get("/payments/my-payments", headers=tenant_headers)
        assert response.status_code == 200
        assert len(response.json()["data"]["payments"]) == 1


# ── partial updates ──────────────────────────────────────────────────────────

class TestNullUpdates:
    def test_room_capacity_null_is_rejected(self, db, client, make_room, staff_headers):
        room = make_room(capacity=2)
        response = client.put(f"/rooms/{room.id}", json={"capacity": None}, headers=staff_headers)
        assert response.status_code == 422

        db.expire_all()
        assert db.get(Room, room.id).capacity == 2

    def test_room_nullable_field_can_be_cleared(self, db, client, make_room, staff_headers):
        room = make_room(next_maintenance_date=date(2025, 12, 1))
        response = client.put(f"/rooms/{room.id}", json={"next_maintenance_date": None}, headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["data"]["next_maintenance_date"] is None

    def test_payment_due_date_null_is_rejected(self, db, client, make_room, make_tenant, make_payment, staff_headers):
        payment = make_payment(make_tenant(), make_room(), due_date=date(2025, 11, 5))
        response = client.patch(f"/payments/{payment.id}", json={"due_date": None}, headers=staff_headers)
        assert response.status_code == 422

        db.expire_all()
        assert db.get(Payment, payment.id).due_date == date(2025, 11, 5)

    def test_tenant_status_null_is_rejected(self, db, client, make_tenant, staff_headers):
        tenant = make_tenant()
        response = client.patch(f"/tenants/{tenant.id}", json={"tenant_status": None}, headers=staff_headers)
        assert response.status_code == 422

        db.expire_all()
        assert db.get(Tenant, tenant.id).tenant_status is not None

    def test_paid_payment_due_date_is_locked(self, client, make_room, make_tenant, make_payment, staff_headers):
        payment = make_payment(
            make_tenant(), make_room(), due_date=date(2025, 11, 5),
            status=PaymentStatus.PAID, payment_date=date(2025, 11, 4),
        )
        response = client.patch(f"/payments/{payment.id}", json={"due_date": "2025-11-01"}, headers=staff_headers)
        assert response.status_code == 400
        assert response.json()["data"]["errors"] == ["Due date of a paid payment cannot be changed"]
