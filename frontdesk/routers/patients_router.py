from fastapi import APIRouter, Depends, Query

from ..dependencies import get_current_identity, get_patient_service
from ..application.ports.record_query import MAX_PAGE_SIZE
from ..application.ports.staff_repo import Identity
from ..application.services.authorization import Action, require
from ..application.services.patient_service import PatientService
from ..schemas.common import ErrorResponse
from ..schemas.patients import PatientSelectorIn, PatientResponse, PatientListResponse, PatientCreatedResponse

router = APIRouter(prefix="/api/patients", tags=["Patients"], responses={401: {"model": ErrorResponse}, 400: {"model": ErrorResponse}})


@router.get("", response_model=PatientListResponse)
def search_patients(
    q: str = Query(default=""),
    limit: int = Query(default=MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current: Identity = Depends(get_current_identity),
    patient_service: PatientService = Depends(get_patient_service),
):
    require(current, Action.READ_PATIENTS)
    rows = patient_service.search(q, limit)
    return PatientListResponse(patients=[PatientResponse.from_dto(p) for p in rows])


@router.post("", response_model=PatientCreatedResponse)
def create_or_find_patient(
    payload: PatientSelectorIn,
    current: Identity = Depends(get_current_identity),
    patient_service: PatientService = Depends(get_patient_service),
):
    require(current, Action.CREATE_PATIENT)
    patient = patient_service.find_or_create(payload.to_selector())
    return PatientCreatedResponse(id=patient.id)
