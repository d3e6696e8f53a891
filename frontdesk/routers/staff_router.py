from datetime import timedelta
from fastapi import APIRouter, Depends
import logging

from ..config import settings
from ..dependencies import get_current_identity, get_staff_service
from ..application.ports.staff_repo import Identity
from ..application.services.staff_service import StaffService
from ..schemas.common import ErrorResponse, OkResponse
from ..schemas.staff import (
    StaffResponse,
    StaffListResponse,
    InviteRequest,
    InviteResponse,
    RoleChangeRequest,
    MeResponse,
)
from ..utils import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Staff"],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)


def _to_response(identity: Identity, now=None) -> StaffResponse:
    window = timedelta(seconds=settings.PRESENCE_ONLINE_WINDOW_SECONDS)
    return StaffResponse.from_identity(identity, now, window=window)


@router.get("/me", response_model=MeResponse)
def whoami(current: Identity = Depends(get_current_identity)):
    return MeResponse(
        id=current.id,
        email=current.email,
        name=current.display_name,
        role=current.role,
        is_admin=current.is_admin,
    )


@router.get("/admin/staff", response_model=StaffListResponse)
def list_staff(
    current: Identity = Depends(get_current_identity),
    staff_service: StaffService = Depends(get_staff_service),
):
    now = utcnow()
    return StaffListResponse(staff=[_to_response(s, now) for s in staff_service.list(current)])


@router.get("/admin/staff/unreconciled", response_model=StaffListResponse)
def list_unreconciled_staff(
    current: Identity = Depends(get_current_identity),
    staff_service: StaffService = Depends(get_staff_service),
):
    now = utcnow()
    return StaffListResponse(staff=[_to_response(s, now) for s in staff_service.unreconciled(current)])


@router.post("/admin/invite", response_model=InviteResponse)
def invite_staff(
    payload: InviteRequest,
    current: Identity = Depends(get_current_identity),
    staff_service: StaffService = Depends(get_staff_service),
):
    identity = staff_service.invite(current, payload.email, payload.role)
    return InviteResponse(id=identity.id)


@router.delete("/admin/staff/{staff_id}", response_model=OkResponse)
def delete_staff(
    staff_id: str,
    current: Identity = Depends(get_current_identity),
    staff_service: StaffService = Depends(get_staff_service),
):
    staff_service.delete(current, staff_id)
    return OkResponse()


@router.put("/admin/staff/{staff_id}/role", response_model=StaffResponse)
def change_staff_role(
    staff_id: str,
    payload: RoleChangeRequest,
    current: Identity = Depends(get_current_identity),
    staff_service: StaffService = Depends(get_staff_service),
):
    return _to_response(staff_service.change_role(current, staff_id, payload.role))
