from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from frontdesk.main import app
from frontdesk.database import get_session
from frontdesk.dependencies import get_credential_verifier, get_identity_provider
from frontdesk.db.models import StaffProfile
from frontdesk.infrastructure.identity.jwt_verifier import JwtCredentialVerifier
from frontdesk.utils import create_jwt_token, utcnow
from fakes import FakeProvider

SECRET = "test-secret"


def auth(account_id):
    return {"Authorization": f"Bearer {create_jwt_token({'sub': account_id}, secret=SECRET)}"}


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def client(session, provider):
    session.add(StaffProfile(id="a1", email="admin@clinic.test", full_name="Ada Admin", role="admin",
                             created_at=datetime(2026, 1, 1), last_seen=utcnow() - timedelta(seconds=30)))
    session.add(StaffProfile(id="a2", email="boss@clinic.test", role="admin", created_at=datetime(2026, 1, 2)))
    session.add(StaffProfile(id="d1", email="lee@clinic.test", full_name="Dr. Lee", role="doctor", created_at=datetime(2026, 1, 3)))
    session.commit()
    for account_id in ("a1", "a2", "d1"):
        provider.accounts[account_id] = f"{account_id}@clinic.test"

    def _session():
        yield session

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_credential_verifier] = lambda: JwtCredentialVerifier(secret=SECRET)
    app.dependency_overrides[get_identity_provider] = lambda: provider
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").status_code == 200


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer not-a-jwt"}])
def test_unauthenticated_requests_are_denied_without_detail(client, headers):
    res = client.get("/api/patients", headers=headers)
    assert res.status_code == 401
    assert res.json() == {"success": False, "data": None, "error": "Unauthorized"}


def test_token_signed_with_other_secret_is_rejected(client):
    token = create_jwt_token({"sub": "a1"}, secret="someone-else")
    res = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


def test_account_without_directory_row_is_rejected(client):
    assert client.get("/api/me", headers=auth("stranger")).status_code == 401


def test_cookie_credential_is_accepted(client):
    client.cookies.set("access_token", create_jwt_token({"sub": "d1"}, secret=SECRET))
    res = client.get("/api/me")
    assert res.status_code == 200
    assert res.json()["role"] == "doctor"
    assert res.json()["is_admin"] is False


def test_staff_list_requires_admin(client):
    res = client.get("/api/admin/staff", headers=auth("d1"))
    assert res.status_code == 403
    assert res.json()["reason"] == "role-not-allowed"


def test_staff_list_for_admin(client):
    res = client.get("/api/admin/staff", headers=auth("a1"))
    assert res.status_code == 200
    staff = res.json()["staff"]
    assert [s["id"] for s in staff] == ["d1", "a2", "a1"]
    by_id = {s["id"]: s for s in staff}
    assert by_id["a1"]["online"] is True
    assert by_id["d1"]["online"] is False
    assert by_id["a2"]["status"] == "Invited"
    assert by_id["d1"]["status"] == "Active"


def test_invite_and_reinvite(client, session):
    first = client.post("/api/admin/invite", json={"email": "New@Clinic.test", "role": "nurse"}, headers=auth("a1"))
    assert first.status_code == 200
    user_id = first.json()["id"]
    second = client.post("/api/admin/invite", json={"email": "new@clinic.test", "role": "reception"}, headers=auth("a1"))
    assert second.json()["id"] == user_id
    rows = [s for s in client.get("/api/admin/staff", headers=auth("a1")).json()["staff"] if s["email"] == "new@clinic.test"]
    assert len(rows) == 1
    assert rows[0]["role"] == "reception"


def test_invite_rejects_unknown_role(client):
    res = client.post("/api/admin/invite", json={"email": "x@clinic.test", "role": "janitor"}, headers=auth("a1"))
    assert res.status_code == 400
    assert res.json()["field"] == "role"
    assert res.json()["error"] == "Invalid role"


def test_delete_rules(client, provider):
    assert client.delete("/api/admin/staff/a1", headers=auth("a1")).json()["reason"] == "self-delete"
    assert client.delete("/api/admin/staff/a2", headers=auth("a1")).json()["reason"] == "protected-admin"
    assert client.delete("/api/admin/staff/a2", headers=auth("d1")).json()["reason"] == "role-not-allowed"
    res = client.delete("/api/admin/staff/d1", headers=auth("a1"))
    assert res.status_code == 200
    assert res.json() == {"ok": True}
    assert ("delete", "d1") in provider.calls


def test_delete_upstream_failure_keeps_row(client, provider):
    provider.fail_delete = True
    res = client.delete("/api/admin/staff/d1", headers=auth("a1"))
    assert res.status_code == 502
    assert res.json()["error"] == "User not found"
    ids = [s["id"] for s in client.get("/api/admin/staff", headers=auth("a1")).json()["staff"]]
    assert "d1" in ids


def test_role_change_applies_on_next_request(client):
    res = client.put("/api/admin/staff/d1/role", json={"role": "admin"}, headers=auth("a1"))
    assert res.status_code == 200
    assert client.get("/api/me", headers=auth("d1")).json()["is_admin"] is True


def test_presence_ping(client, session):
    assert client.post("/api/presence/ping", headers=auth("d1")).json() == {"ok": True}
    session.expire_all()
    assert session.get(StaffProfile, "d1").last_seen is not None
    assert session.get(StaffProfile, "a2").last_seen is None


def test_book_and_list_appointments(client):
    earlier = client.post("/api/appointments", headers=auth("d1"), json={
        "patient": {"mode": "new", "patient_code": "H000001", "full_name": "John Roe", "sex": "M", "age": ""},
        "doctor_name": "Dr. Kim", "department": "General Medicine",
        "date": "2026-02-28", "time": "08:00", "status": "Confirmed",
    })
    assert earlier.status_code == 200

    res = client.post("/api/appointments", headers=auth("d1"), json={
        "patient": {"mode": "new", "patient_code": "H001240", "full_name": "Jane Doe", "sex": "F", "age": "34"},
        "doctor_name": "Dr. Lee", "department": "Cardiology",
        "date": "2026-03-01", "time": "09:30", "status": "Waiting",
    })
    assert res.status_code == 200
    booked = res.json()

    listed = client.get("/api/appointments", params={"status": "All", "sort": "time"}, headers=auth("d1")).json()["appointments"]
    assert [a["id"] for a in listed] == [earlier.json()["id"], booked["id"]]
    assert listed[1]["patient"]["full_name"] == "Jane Doe"
    assert listed[1]["patient_id"] == booked["patient_id"]

    waiting = client.get("/api/appointments", params={"status": "Waiting", "sort": "status"}, headers=auth("d1")).json()["appointments"]
    assert [a["status"] for a in waiting] == ["Waiting"]

    patients = client.get("/api/patients", params={"q": "doe"}, headers=auth("d1")).json()["patients"]
    assert [p["patient_code"] for p in patients] == ["H001240"]


def test_booking_validation_is_field_level(client):
    res = client.post("/api/appointments", headers=auth("d1"), json={
        "patient": {"mode": "new", "patient_code": "H1", "full_name": "Jane Doe", "age": "abc"},
        "doctor_name": "Dr. Lee", "department": "Cardiology", "date": "2026-03-01", "time": "09:30",
    })
    assert res.status_code == 400
    assert res.json()["field"] == "age"
    assert res.json()["error"] == "Age must be a number."


def test_create_then_select_existing_patient(client):
    created = client.post("/api/patients", json={"patient_code": "H7", "full_name": "Sok Dara", "sex": "M", "age": 40}, headers=auth("d1"))
    assert created.status_code == 200
    found = client.post("/api/patients", json={"existing_id": created.json()["id"]}, headers=auth("d1"))
    assert found.json()["id"] == created.json()["id"]
    missing = client.post("/api/patients", json={"existing_id": "nope"}, headers=auth("d1"))
    assert missing.status_code == 404


def test_patient_search_limit_is_capped(client):
    res = client.get("/api/patients", params={"limit": 101}, headers=auth("d1"))
    assert res.status_code == 400


def test_booking_with_another_patients_code_is_rejected(client):
    bob = client.post("/api/patients", json={"patient_code": "H9", "full_name": "Bob Stone", "sex": "M"}, headers=auth("d1"))
    assert bob.status_code == 200
    res = client.post("/api/appointments", headers=auth("d1"), json={
        "patient": {"mode": "new", "patient_code": "H9", "full_name": "Jane Doe", "sex": "F"},
        "doctor_name": "Dr. Lee", "department": "Cardiology", "date": "2026-03-01", "time": "09:30",
    })
    assert res.status_code == 400
    assert res.json()["field"] == "patient_code"
    assert res.json()["error"] == "Patient ID already exists."
    assert client.get("/api/appointments", headers=auth("d1")).json()["appointments"] == []


def bearer(payload):
    return {"Authorization": f"Bearer {jwt.encode({'aud': 'authenticated', **payload}, SECRET, algorithm='HS256')}"}


def test_token_without_expiry_is_rejected(client):
    assert client.get("/api/me", headers=bearer({"sub": "a1"})).status_code == 401


def test_token_without_subject_is_rejected(client):
    exp = datetime.now(timezone.utc) + timedelta(minutes=5)
    assert client.get("/api/me", headers=bearer({"exp": exp})).status_code == 401
