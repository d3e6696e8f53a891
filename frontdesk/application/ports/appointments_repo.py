from dataclasses import dataclass
from typing import List, Optional
from datetime import datetime, date


@dataclass
class PatientSummary:
    id: str
    patient_code: str
    full_name: str
    sex: str
    age: Optional[int]


@dataclass
class AppointmentDto:
    id: str
    patient_id: str
    starts_at: datetime
    doctor_name: str
    department: str
    status: str
    created_at: datetime
    patient: Optional[PatientSummary] = None


class AppointmentsRepository:
    def create(self, patient_id: str, starts_at: datetime, doctor_name: str, department: str, status: str) -> AppointmentDto:
        ...

    def list_with_patients(self, cap: int) -> List[AppointmentDto]:
        ...

    def get_by_id(self, appointment_id: str) -> Optional[AppointmentDto]:
        ...

    def update_status(self, appointment_id: str, status: str) -> Optional[AppointmentDto]:
        ...
