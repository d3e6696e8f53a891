# frontdesk/db/models/staff/profile.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

from ....utils import utcnow

class StaffProfile(SQLModel, table=True):
    __tablename__ = "profiles"
    # Mirrors the external identity provider's account id
    id: str = Field(primary_key=True, max_length=64)
    email: str = Field(max_length=255, index=True)
    full_name: Optional[str] = Field(default=None, max_length=200)
    role: str = Field(max_length=20)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    last_seen: Optional[datetime] = Field(default=None)
