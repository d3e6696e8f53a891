from dataclasses import dataclass
from typing import List, Optional, Union
from datetime import datetime, date
import logging

from ...exceptions import ValidationError, NotFound
from ..ports.patient_repo import PatientRepository, PatientDto, DuplicatePatientCode
from ..ports.record_query import RecordQuery, MAX_PAGE_SIZE

logger = logging.getLogger(__name__)

SEXES = ("M", "F")


@dataclass
class ExistingPatient:
    patient_id: Optional[str]


@dataclass
class NewPatient:
    patient_code: Optional[str]
    full_name: Optional[str]
    sex: Optional[str] = "M"
    age: Union[int, str, None] = None
    date_of_birth: Optional[str] = None


PatientSelector = Union[ExistingPatient, NewPatient]


def parse_age(age: Union[int, str, None]) -> Optional[int]:
    if age is None:
        return None
    if isinstance(age, bool):
        raise ValidationError("age", "Age must be a number.")
    if isinstance(age, int):
        value = age
    else:
        text = str(age).strip()
        if text == "":
            return None
        try:
            value = int(text)
        except ValueError:
            raise ValidationError("age", "Age must be a number.")
    if value < 0:
        raise ValidationError("age", "Age must not be negative.")
    return value


def parse_date_of_birth(value: Optional[str]) -> Optional[date]:
    if value is None or value.strip() == "":
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("date_of_birth", "Invalid date_of_birth format. Use YYYY-MM-DD")


@dataclass
class PatientService:
    repo: PatientRepository
    page_size: int = MAX_PAGE_SIZE

    def find_or_create(self, selector: PatientSelector) -> PatientDto:
        if isinstance(selector, ExistingPatient):
            patient_id = (selector.patient_id or "").strip()
            if not patient_id:
                raise ValidationError("patient_id", "Please select a patient.")
            patient = self.repo.get_by_id(patient_id)
            if patient is None:
                raise NotFound("Patient not found")
            return patient

        code = (selector.patient_code or "").strip()
        if not code:
            raise ValidationError("patient_code", "Patient ID is required.")
        full_name = (selector.full_name or "").strip()
        if not full_name:
            raise ValidationError("full_name", "Patient name is required.")
        sex_given = bool((selector.sex or "").strip())
        sex = (selector.sex or "M").strip().upper()
        if sex not in SEXES:
            raise ValidationError("sex", "Sex must be M or F.")
        age = parse_age(selector.age)
        dob = parse_date_of_birth(selector.date_of_birth)

        try:
            return self.repo.create(code, full_name, sex, age, dob)
        except DuplicatePatientCode:
            # A concurrent booking may have registered the same person first
            existing = self.repo.get_by_code(code)
            if existing is None:
                raise
            same_person = existing.full_name.casefold() == full_name.casefold() and (
                not sex_given or existing.sex == sex
            )
            if not same_person:
                logger.warning(f"Patient code {code} is already registered to another patient")
                raise ValidationError("patient_code", "Patient ID already exists.")
            return existing

    def search(self, query: Optional[str] = "", limit: int = MAX_PAGE_SIZE) -> List[PatientDto]:
        page = RecordQuery(search=query or "", limit=limit, descending=True)
        return self.repo.search(page.normalized(cap=self.page_size))
