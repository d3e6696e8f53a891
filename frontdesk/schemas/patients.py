# frontdesk/schemas/patients.py
from pydantic import BaseModel
from typing import List, Literal, Optional, Union
from datetime import datetime, date

from ..application.ports.patient_repo import PatientDto
from ..application.services.patient_service import ExistingPatient, NewPatient, PatientSelector

class PatientSelectorIn(BaseModel):
    mode: Optional[Literal["existing", "new"]] = None
    existing_id: Optional[str] = None
    patient_code: Optional[str] = None
    full_name: Optional[str] = None
    sex: Optional[str] = "M"
    age: Optional[Union[int, str]] = None  # digits; "" means unknown
    date_of_birth: Optional[str] = None  # YYYY-MM-DD

    def to_selector(self) -> PatientSelector:
        mode = self.mode or ("existing" if self.existing_id else "new")
        if mode == "existing":
            return ExistingPatient(patient_id=self.existing_id)
        return NewPatient(
            patient_code=self.patient_code,
            full_name=self.full_name,
            sex=self.sex,
            age=self.age,
            date_of_birth=self.date_of_birth,
        )

class PatientResponse(BaseModel):
    id: str
    patient_code: str
    full_name: str
    sex: str
    age: Optional[int] = None
    date_of_birth: Optional[date] = None
    created_at: datetime

    @classmethod
    def from_dto(cls, p: PatientDto) -> "PatientResponse":
        return cls(
            id=p.id,
            patient_code=p.patient_code,
            full_name=p.full_name,
            sex=p.sex,
            age=p.age,
            date_of_birth=p.date_of_birth,
            created_at=p.created_at,
        )

class PatientListResponse(BaseModel):
    patients: List[PatientResponse]

class PatientCreatedResponse(BaseModel):
    id: str
