# frontdesk/db/models/clinic/appointment.py
from typing import Optional
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
import uuid

from ....utils import utcnow

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    patient_id: str = Field(foreign_key="patients.id", index=True)
    starts_at: datetime = Field(index=True)
    doctor_name: str = Field(max_length=200)
    department: str = Field(max_length=200)
    status: str = Field(default="Waiting", max_length=20)
    created_at: datetime = Field(default_factory=utcnow)

    # Relationships
    patient: Optional["Patient"] = Relationship(back_populates="appointments")
