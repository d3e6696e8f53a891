# frontdesk/schemas/staff.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from ..application.ports.staff_repo import Identity
from ..application.services.presence import is_online, staff_status

class StaffResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str
    created_at: datetime
    last_seen: Optional[datetime] = None
    online: bool = False
    status: str

    @classmethod
    def from_identity(cls, identity: Identity, now: Optional[datetime] = None, **presence) -> "StaffResponse":
        return cls(
            id=identity.id,
            email=identity.email,
            name=identity.display_name,
            role=identity.role,
            created_at=identity.created_at,
            last_seen=identity.last_seen,
            online=is_online(identity.last_seen, now, **presence),
            status=staff_status(identity),
        )

class StaffListResponse(BaseModel):
    staff: List[StaffResponse]

class InviteRequest(BaseModel):
    email: Optional[str] = None
    role: Optional[str] = None

class InviteResponse(BaseModel):
    ok: bool = True
    id: str

class RoleChangeRequest(BaseModel):
    role: Optional[str] = None

class MeResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str
    is_admin: bool
