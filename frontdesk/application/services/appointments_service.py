from dataclasses import dataclass
from typing import List, Optional
from datetime import datetime
import logging

from ...exceptions import ValidationError, NotFound, ReferentialGap
from ..ports.appointments_repo import AppointmentsRepository, AppointmentDto
from .patient_service import PatientService, PatientSelector

logger = logging.getLogger(__name__)

STATUSES = ("Waiting", "Confirmed", "Cancelled")
STATUS_PRIORITY = {"Waiting": 0, "Confirmed": 1, "Cancelled": 2}
FILTERS = ("All",) + STATUSES
SORTS = ("time", "status")


def parse_starts_at(date_str: Optional[str], time_str: Optional[str]) -> datetime:
    if not date_str or not date_str.strip():
        raise ValidationError("date", "Please choose a date.")
    if not time_str or not time_str.strip():
        raise ValidationError("time", "Please choose a time.")
    try:
        day = datetime.strptime(date_str.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("date", "Invalid appointment date format. Use YYYY-MM-DD")
    try:
        at = datetime.strptime(time_str.strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError("time", "Invalid appointment time format. Use HH:MM")
    return datetime.combine(day, at)


def validate_status(status: Optional[str]) -> str:
    if status not in STATUSES:
        raise ValidationError("status", f"Invalid status. Must be one of: {list(STATUSES)}")
    return status


def arrange(rows: List[AppointmentDto], status_filter: str = "All", sort: str = "time") -> List[AppointmentDto]:
    """Filter by status, then order by time or by status priority."""
    if status_filter not in FILTERS:
        raise ValidationError("status", f"Invalid status filter. Must be one of: {list(FILTERS)}")
    if sort not in SORTS:
        raise ValidationError("sort", f"Invalid sort. Must be one of: {list(SORTS)}")

    filtered = rows if status_filter == "All" else [r for r in rows if r.status == status_filter]
    if sort == "time":
        return sorted(filtered, key=lambda r: r.starts_at)
    return sorted(filtered, key=lambda r: (STATUS_PRIORITY.get(r.status, len(STATUS_PRIORITY)), r.starts_at))


@dataclass
class AppointmentsService:
    repo: AppointmentsRepository
    patients: PatientService
    query_cap: int = 1000

    def book(self, selector: PatientSelector, doctor_name: Optional[str], department: Optional[str], date_str: Optional[str], time_str: Optional[str], status: Optional[str] = "Waiting") -> AppointmentDto:
        starts_at = parse_starts_at(date_str, time_str)
        doctor_name = (doctor_name or "").strip()
        if not doctor_name:
            raise ValidationError("doctor_name", "Doctor name is required.")
        department = (department or "").strip()
        if not department:
            raise ValidationError("department", "Department is required.")
        status = validate_status(status or "Waiting")

        # Step 1 must be committed, with a durable id, before step 2 starts
        patient = self.patients.find_or_create(selector)

        try:
            return self.repo.create(patient.id, starts_at, doctor_name, department, status)
        except Exception as e:
            # The patient row is intentionally left in place; reported, not rolled back
            logger.error(f"Appointment insert failed after patient {patient.id} was committed: {e}")
            raise ReferentialGap(patient.id, f"Patient saved but appointment was not created: {e}") from e

    def list(self, status_filter: str = "All", sort: str = "time") -> List[AppointmentDto]:
        return arrange(self.repo.list_with_patients(self.query_cap), status_filter, sort)

    def update_status(self, appointment_id: str, status: Optional[str]) -> AppointmentDto:
        status = validate_status(status)
        updated = self.repo.update_status(appointment_id, status)
        if updated is None:
            raise NotFound("Appointment not found")
        return updated
