from fastapi import APIRouter, Depends

from ..dependencies import get_current_identity, get_presence_service
from ..application.ports.staff_repo import Identity
from ..application.services.authorization import Action, require
from ..application.services.presence import PresenceService
from ..schemas.common import ErrorResponse, OkResponse

router = APIRouter(prefix="/api/presence", tags=["Presence"], responses={401: {"model": ErrorResponse}})


@router.post("/ping", response_model=OkResponse)
def ping(
    current: Identity = Depends(get_current_identity),
    presence: PresenceService = Depends(get_presence_service),
):
    require(current, Action.PING_PRESENCE)
    presence.ping(current)
    return OkResponse()
