from dataclasses import dataclass
from typing import List, Optional, Protocol
from datetime import datetime, date

from .record_query import RecordQuery


@dataclass
class PatientDto:
    id: str
    patient_code: str
    full_name: str
    sex: str
    age: Optional[int]
    date_of_birth: Optional[date]
    created_at: datetime


class DuplicatePatientCode(Exception):
    """The store rejected an insert because the patient code is taken."""

    def __init__(self, patient_code: str):
        self.patient_code = patient_code
        super().__init__(f"Patient code already exists: {patient_code}")


class PatientRepository(Protocol):
    def get_by_id(self, patient_id: str) -> Optional[PatientDto]:
        ...

    def get_by_code(self, patient_code: str) -> Optional[PatientDto]:
        ...

    def create(self, patient_code: str, full_name: str, sex: str, age: Optional[int], date_of_birth: Optional[date]) -> PatientDto:
        ...

    def search(self, query: RecordQuery) -> List[PatientDto]:
        ...
