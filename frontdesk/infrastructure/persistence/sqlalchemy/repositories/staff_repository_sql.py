from typing import List, Optional
from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .....db.models import StaffProfile
from .....application.ports.staff_repo import StaffRepository, Identity


class SqlStaffRepository(StaffRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_identity(self, profile: StaffProfile) -> Identity:
        return Identity(
            id=profile.id,
            email=profile.email,
            role=profile.role,
            display_name=profile.full_name,
            created_at=profile.created_at,
            last_seen=profile.last_seen,
        )

    def _get(self, staff_id: str) -> Optional[StaffProfile]:
        return self.session.exec(select(StaffProfile).where(StaffProfile.id == staff_id)).first()

    def get_by_id(self, staff_id: str) -> Optional[Identity]:
        profile = self._get(staff_id)
        return self._to_identity(profile) if profile else None

    def list_recent_first(self) -> List[Identity]:
        rows = self.session.exec(
            select(StaffProfile).order_by(StaffProfile.created_at.desc(), StaffProfile.id.desc())
        ).all()
        return [self._to_identity(r) for r in rows]

    def upsert(self, staff_id: str, email: str, role: str) -> Identity:
        profile = self._get(staff_id)
        if profile is None:
            profile = StaffProfile(id=staff_id, email=email, role=role)
            self.session.add(profile)
            try:
                self.session.commit()
            except IntegrityError:
                # Lost an insert race for the same account id; update the winner's row
                self.session.rollback()
                profile = self._get(staff_id)
                if profile is None:
                    raise
                profile.email = email
                profile.role = role
                self.session.add(profile)
                self.session.commit()
        else:
            profile.email = email
            profile.role = role
            self.session.add(profile)
            self.session.commit()
        self.session.refresh(profile)
        return self._to_identity(profile)

    def set_role(self, staff_id: str, role: str) -> Optional[Identity]:
        profile = self._get(staff_id)
        if not profile:
            return None
        profile.role = role
        self.session.add(profile)
        self.session.commit()
        self.session.refresh(profile)
        return self._to_identity(profile)

    def delete(self, staff_id: str) -> None:
        profile = self._get(staff_id)
        if not profile:
            return
        self.session.delete(profile)
        self.session.commit()

    def touch_last_seen(self, staff_id: str, seen_at: datetime) -> None:
        profile = self._get(staff_id)
        if not profile:
            return
        profile.last_seen = seen_at
        self.session.add(profile)
        self.session.commit()
