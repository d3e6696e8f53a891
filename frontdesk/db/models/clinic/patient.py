# frontdesk/db/models/clinic/patient.py
from typing import Optional, List
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, date
import uuid

from ....utils import utcnow

class Patient(SQLModel, table=True):
    __tablename__ = "patients"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    patient_code: str = Field(max_length=64, unique=True, index=True)
    full_name: str = Field(max_length=200, index=True)
    sex: str = Field(max_length=1)
    age: Optional[int] = Field(default=None)
    date_of_birth: Optional[date] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, index=True)

    # Relationships
    appointments: List["Appointment"] = Relationship(back_populates="patient")
