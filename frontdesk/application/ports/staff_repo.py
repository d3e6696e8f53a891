from dataclasses import dataclass
from typing import List, Optional, Protocol
from datetime import datetime

ROLES = ("admin", "doctor", "nurse", "reception")


@dataclass
class Identity:
    id: str
    email: str
    role: str
    display_name: Optional[str]
    created_at: datetime
    last_seen: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class StaffRepository(Protocol):
    def get_by_id(self, staff_id: str) -> Optional[Identity]:
        ...

    def list_recent_first(self) -> List[Identity]:
        ...

    def upsert(self, staff_id: str, email: str, role: str) -> Identity:
        ...

    def set_role(self, staff_id: str, role: str) -> Optional[Identity]:
        ...

    def delete(self, staff_id: str) -> None:
        ...

    def touch_last_seen(self, staff_id: str, seen_at: datetime) -> None:
        ...
