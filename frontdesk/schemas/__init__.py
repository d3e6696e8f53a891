from .common import ErrorResponse, OkResponse
from .staff import StaffResponse, StaffListResponse, InviteRequest, InviteResponse, RoleChangeRequest, MeResponse
from .patients import PatientSelectorIn, PatientResponse, PatientListResponse, PatientCreatedResponse
from .appointments import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentListResponse,
    AppointmentCreatedResponse,
    StatusUpdateRequest,
)

__all__ = [
    "ErrorResponse",
    "OkResponse",
    "StaffResponse",
    "StaffListResponse",
    "InviteRequest",
    "InviteResponse",
    "RoleChangeRequest",
    "MeResponse",
    "PatientSelectorIn",
    "PatientResponse",
    "PatientListResponse",
    "PatientCreatedResponse",
    "AppointmentCreate",
    "AppointmentResponse",
    "AppointmentListResponse",
    "AppointmentCreatedResponse",
    "StatusUpdateRequest",
]
