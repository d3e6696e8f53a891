from datetime import datetime, timedelta

import pytest
from sqlmodel import select

from frontdesk.db.models import Patient, StaffProfile
from frontdesk.application.ports.patient_repo import DuplicatePatientCode
from frontdesk.application.ports.record_query import RecordQuery
from frontdesk.application.services.patient_service import PatientService, NewPatient
from frontdesk.application.services.appointments_service import AppointmentsService
from frontdesk.application.services.presence import PresenceService
from frontdesk.infrastructure.persistence.sqlalchemy.repositories.patient_repository_sql import SqlPatientRepository
from frontdesk.infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from frontdesk.infrastructure.persistence.sqlalchemy.repositories.staff_repository_sql import SqlStaffRepository

BASE = datetime(2026, 1, 1, 8, 0)


def seed_patients(session, names):
    for i, name in enumerate(names):
        session.add(Patient(patient_code=f"H{i:05d}", full_name=name, sex="F", created_at=BASE + timedelta(minutes=i)))
    session.commit()


def test_search_empty_query_returns_most_recent_capped_page(session):
    seed_patients(session, [f"Patient {i}" for i in range(105)])
    rows = SqlPatientRepository(session).search(RecordQuery(search="", limit=500).normalized())
    assert len(rows) == 100
    assert rows[0].full_name == "Patient 104"
    assert all(a.created_at >= b.created_at for a, b in zip(rows, rows[1:]))


def test_search_is_case_insensitive_substring(session):
    seed_patients(session, ["Jane Doe", "John DOE", "Mary Major", "Doeson Lee"])
    rows = PatientService(repo=SqlPatientRepository(session)).search("doe")
    assert [p.full_name for p in rows] == ["Doeson Lee", "John DOE", "Jane Doe"]


def test_search_treats_wildcards_literally(session):
    seed_patients(session, ["100% Cotton", "Plain Name"])
    rows = SqlPatientRepository(session).search(RecordQuery(search="%").normalized())
    assert [p.full_name for p in rows] == ["100% Cotton"]


def test_duplicate_code_raises_and_session_recovers(session):
    repo = SqlPatientRepository(session)
    repo.create("H001240", "Jane Doe", "F", 34, None)
    with pytest.raises(DuplicatePatientCode):
        repo.create("H001240", "Jane Twin", "F", 34, None)
    assert repo.get_by_code("H001240").full_name == "Jane Doe"


def test_booking_end_to_end_against_store(session):
    patients = PatientService(repo=SqlPatientRepository(session))
    svc = AppointmentsService(repo=SqlAppointmentsRepository(session), patients=patients)
    prior = svc.book(NewPatient("H000001", "John Roe", "M", ""), "Dr. Kim", "General Medicine", "2026-02-28", "16:00", "Confirmed")
    booked = svc.book(NewPatient("H001240", "Jane Doe", "F", "34"), "Dr. Lee", "Cardiology", "2026-03-01", "09:30", "Waiting")

    assert len(patients.search("")) == 2
    listed = svc.list("All", "time")
    assert [a.id for a in listed] == [prior.id, booked.id]
    assert listed[1].patient.patient_code == "H001240"
    assert listed[1].patient.age == 34

    waiting = svc.list("Waiting", "status")
    assert [a.id for a in waiting] == [booked.id]


def test_status_update_returns_joined_patient(session):
    repo = SqlAppointmentsRepository(session)
    seed_patients(session, ["Jane Doe"])
    patient_id = SqlPatientRepository(session).get_by_code("H00000").id
    repo.create(patient_id, datetime(2026, 3, 1, 9, 30), "Dr. Lee", "Cardiology", "Waiting")
    assert len(repo.list_with_patients(cap=10)) == 1
    updated = repo.update_status(repo.list_with_patients(cap=10)[0].id, "Cancelled")
    assert updated.status == "Cancelled"
    assert updated.patient.full_name == "Jane Doe"


def test_staff_upsert_is_idempotent_by_account_id(session):
    repo = SqlStaffRepository(session)
    repo.upsert("acct-1", "sam@clinic.test", "reception")
    repo.upsert("acct-1", "sam@clinic.test", "doctor")
    rows = session.exec(select(StaffProfile)).all()
    assert len(rows) == 1
    assert rows[0].role == "doctor"


def test_staff_list_order_presence_and_delete(session):
    session.add(StaffProfile(id="a1", email="a@clinic.test", role="admin", created_at=BASE))
    session.add(StaffProfile(id="d1", email="d@clinic.test", role="doctor", created_at=BASE + timedelta(days=1)))
    session.commit()
    repo = SqlStaffRepository(session)
    assert [r.id for r in repo.list_recent_first()] == ["d1", "a1"]

    seen = datetime(2026, 3, 1, 9, 0)
    repo.touch_last_seen("d1", seen)
    assert repo.get_by_id("d1").last_seen == seen
    assert repo.get_by_id("a1").last_seen is None

    repo.delete("d1")
    assert repo.get_by_id("d1") is None


def test_clock_timestamps_are_stored_as_naive_utc(session):
    repo = SqlStaffRepository(session)
    repo.upsert("acct-2", "kim@clinic.test", "nurse")
    identity = repo.get_by_id("acct-2")
    assert identity.created_at.tzinfo is None

    seen_at = PresenceService(staff_repo=repo).ping(identity)
    session.expire_all()
    stored = repo.get_by_id("acct-2").last_seen
    assert stored == seen_at
    assert stored.tzinfo is None
