from typing import List, Optional
from datetime import date
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .....db.models import Patient
from .....application.ports.patient_repo import PatientRepository, PatientDto, DuplicatePatientCode
from .....application.ports.record_query import RecordQuery
from ..query_gateway import SqlQueryGateway


def patient_to_dto(p: Patient) -> PatientDto:
    return PatientDto(
        id=p.id,
        patient_code=p.patient_code,
        full_name=p.full_name,
        sex=p.sex,
        age=p.age,
        date_of_birth=p.date_of_birth,
        created_at=p.created_at,
    )


class SqlPatientRepository(PatientRepository):
    def __init__(self, session: Session):
        self.session = session
        self.gateway = SqlQueryGateway(session)

    def get_by_id(self, patient_id: str) -> Optional[PatientDto]:
        p = self.session.exec(select(Patient).where(Patient.id == patient_id)).first()
        return patient_to_dto(p) if p else None

    def get_by_code(self, patient_code: str) -> Optional[PatientDto]:
        p = self.session.exec(select(Patient).where(Patient.patient_code == patient_code)).first()
        return patient_to_dto(p) if p else None

    def create(self, patient_code: str, full_name: str, sex: str, age: Optional[int], date_of_birth: Optional[date]) -> PatientDto:
        p = Patient(
            patient_code=patient_code,
            full_name=full_name,
            sex=sex,
            age=age,
            date_of_birth=date_of_birth,
        )
        self.session.add(p)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicatePatientCode(patient_code) from e
        self.session.refresh(p)
        return patient_to_dto(p)

    def search(self, query: RecordQuery) -> List[PatientDto]:
        rows = self.gateway.page(
            select(Patient),
            query,
            order_column=Patient.created_at,
            id_column=Patient.id,
            search_column=Patient.full_name,
        )
        return [patient_to_dto(p) for p in rows]
