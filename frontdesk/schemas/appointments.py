# frontdesk/schemas/appointments.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from ..application.ports.appointments_repo import AppointmentDto
from .patients import PatientSelectorIn

class AppointmentCreate(BaseModel):
    patient: PatientSelectorIn
    doctor_name: Optional[str] = None
    department: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD
    time: Optional[str] = None  # HH:MM
    status: Optional[str] = "Waiting"

class PatientSummaryResponse(BaseModel):
    id: str
    patient_code: str
    full_name: str
    sex: str
    age: Optional[int] = None

class AppointmentResponse(BaseModel):
    id: str
    patient_id: str
    starts_at: datetime
    doctor_name: str
    department: str
    status: str
    created_at: datetime
    patient: Optional[PatientSummaryResponse] = None

    @classmethod
    def from_dto(cls, a: AppointmentDto) -> "AppointmentResponse":
        summary = None
        if a.patient is not None:
            summary = PatientSummaryResponse(
                id=a.patient.id,
                patient_code=a.patient.patient_code,
                full_name=a.patient.full_name,
                sex=a.patient.sex,
                age=a.patient.age,
            )
        return cls(
            id=a.id,
            patient_id=a.patient_id,
            starts_at=a.starts_at,
            doctor_name=a.doctor_name,
            department=a.department,
            status=a.status,
            created_at=a.created_at,
            patient=summary,
        )

class AppointmentListResponse(BaseModel):
    appointments: List[AppointmentResponse] = Field(default_factory=list)

class AppointmentCreatedResponse(BaseModel):
    id: str
    patient_id: str

class StatusUpdateRequest(BaseModel):
    status: Optional[str] = None
