from fastapi import APIRouter, Depends, Query
import logging

from ..dependencies import get_current_identity, get_appointments_service
from ..application.ports.staff_repo import Identity
from ..application.services.authorization import Action, require
from ..application.services.appointments_service import AppointmentsService
from ..schemas.common import ErrorResponse
from ..schemas.appointments import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentListResponse,
    AppointmentCreatedResponse,
    StatusUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/appointments",
    tags=["Appointments"],
    responses={401: {"model": ErrorResponse}, 400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)


@router.get("", response_model=AppointmentListResponse)
def list_appointments(
    status: str = Query(default="All"),
    sort: str = Query(default="time"),
    current: Identity = Depends(get_current_identity),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    require(current, Action.READ_APPOINTMENTS)
    rows = appt_service.list(status_filter=status, sort=sort)
    return AppointmentListResponse(appointments=[AppointmentResponse.from_dto(a) for a in rows])


@router.post("", response_model=AppointmentCreatedResponse)
def book_appointment(
    payload: AppointmentCreate,
    current: Identity = Depends(get_current_identity),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    require(current, Action.CREATE_APPOINTMENT)
    appt = appt_service.book(
        payload.patient.to_selector(),
        payload.doctor_name,
        payload.department,
        payload.date,
        payload.time,
        payload.status,
    )
    logger.info(f"Appointment {appt.id} booked by {current.id} for patient {appt.patient_id}")
    return AppointmentCreatedResponse(id=appt.id, patient_id=appt.patient_id)


@router.put("/{appointment_id}/status", response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: str,
    payload: StatusUpdateRequest,
    current: Identity = Depends(get_current_identity),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    require(current, Action.UPDATE_APPOINTMENT_STATUS)
    return AppointmentResponse.from_dto(appt_service.update_status(appointment_id, payload.status))
