from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from ...utils import utcnow, as_naive_utc
from ..ports.staff_repo import StaffRepository, Identity

ONLINE_WINDOW = timedelta(seconds=120)


def is_online(last_seen: Optional[datetime], now: Optional[datetime] = None, window: timedelta = ONLINE_WINDOW) -> bool:
    if last_seen is None:
        return False
    now = as_naive_utc(now) if now is not None else utcnow()
    return now - as_naive_utc(last_seen) <= window


def staff_status(identity: Identity) -> str:
    # Invited accounts have no display name until the invitation is accepted
    return "Active" if identity.display_name else "Invited"


@dataclass
class PresenceService:
    staff_repo: StaffRepository
    clock: Callable[[], datetime] = utcnow

    def ping(self, identity: Identity) -> datetime:
        seen_at = self.clock()
        self.staff_repo.touch_last_seen(identity.id, seen_at)
        return seen_at
