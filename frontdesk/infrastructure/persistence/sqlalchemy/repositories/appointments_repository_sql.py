from typing import List, Optional
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .....db.models import Appointment, Patient
from .....application.ports.appointments_repo import (
    AppointmentsRepository,
    AppointmentDto,
    PatientSummary,
)
from .....application.ports.record_query import RecordQuery
from ..query_gateway import SqlQueryGateway


class SqlAppointmentsRepository(AppointmentsRepository):
    def __init__(self, session: Session):
        self.session = session
        self.gateway = SqlQueryGateway(session)

    def _appt_to_dto(self, a: Appointment, p: Optional[Patient] = None) -> AppointmentDto:
        summary = None
        if p is not None:
            summary = PatientSummary(
                id=p.id,
                patient_code=p.patient_code,
                full_name=p.full_name,
                sex=p.sex,
                age=p.age,
            )
        return AppointmentDto(
            id=a.id,
            patient_id=a.patient_id,
            starts_at=a.starts_at,
            doctor_name=a.doctor_name,
            department=a.department,
            status=a.status,
            created_at=a.created_at,
            patient=summary,
        )

    def create(self, patient_id: str, starts_at: datetime, doctor_name: str, department: str, status: str) -> AppointmentDto:
        appt = Appointment(
            patient_id=patient_id,
            starts_at=starts_at,
            doctor_name=doctor_name,
            department=department,
            status=status,
        )
        self.session.add(appt)
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(appt)
        return self._appt_to_dto(appt)

    def list_with_patients(self, cap: int) -> List[AppointmentDto]:
        rows = self.gateway.page(
            select(Appointment, Patient).join(Patient, Appointment.patient_id == Patient.id),
            RecordQuery(limit=cap, descending=False),
            order_column=Appointment.starts_at,
            id_column=Appointment.id,
            cap=cap,
        )
        return [self._appt_to_dto(a, p) for a, p in rows]

    def get_by_id(self, appointment_id: str) -> Optional[AppointmentDto]:
        row = self.session.exec(
            select(Appointment, Patient)
            .join(Patient, Appointment.patient_id == Patient.id)
            .where(Appointment.id == appointment_id)
        ).first()
        return self._appt_to_dto(*row) if row else None

    def update_status(self, appointment_id: str, status: str) -> Optional[AppointmentDto]:
        a = self.session.exec(select(Appointment).where(Appointment.id == appointment_id)).first()
        if not a:
            return None
        a.status = status
        self.session.add(a)
        self.session.commit()
        return self.get_by_id(appointment_id)
