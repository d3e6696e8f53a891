# frontdesk/dependencies.py
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from .config import settings
from .database import get_session
from .exceptions import Unauthenticated
from .application.ports.credential_verifier import CredentialVerifier
from .application.ports.identity_provider import IdentityProvider
from .application.ports.staff_repo import Identity
from .application.services.identity_resolver import IdentityResolver
from .application.services.staff_service import StaffService
from .application.services.presence import PresenceService
from .application.services.patient_service import PatientService
from .application.services.appointments_service import AppointmentsService
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.identity.jwt_verifier import JwtCredentialVerifier
from .infrastructure.identity.supabase_provider import SupabaseIdentityProvider
from .infrastructure.persistence.sqlalchemy.repositories.staff_repository_sql import SqlStaffRepository
from .infrastructure.persistence.sqlalchemy.repositories.patient_repository_sql import SqlPatientRepository
from .infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository

logger = logging.getLogger(__name__)

# Auth scheme
oauth2_scheme = HTTPBearer(auto_error=False)

_identity_provider: Optional[IdentityProvider] = None


def get_identity_provider() -> IdentityProvider:
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = SupabaseIdentityProvider(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            timeout=settings.IDENTITY_PROVIDER_TIMEOUT,
        )
    return _identity_provider


def get_credential_verifier() -> CredentialVerifier:
    return JwtCredentialVerifier()


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> Identity:
    token = None
    if credentials and credentials.credentials:
        token = credentials.credentials
    else:
        # Fallback to cookie
        token = request.cookies.get("access_token")
    resolver = IdentityResolver(verifier=verifier, staff_repo=SqlStaffRepository(session))
    try:
        return resolver.resolve(token)
    except Unauthenticated:
        raise
    except Exception as e:
        logger.error(f"Identity resolution failed: {e}")
        raise Unauthenticated() from e


def get_staff_service(
    session: Session = Depends(get_session),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> StaffService:
    return StaffService(
        repo=SqlStaffRepository(session),
        provider=provider,
        audit=StdAuditLogger(),
        invite_redirect_url=settings.invite_redirect_url,
    )


def get_presence_service(session: Session = Depends(get_session)) -> PresenceService:
    return PresenceService(staff_repo=SqlStaffRepository(session))


def get_patient_service(session: Session = Depends(get_session)) -> PatientService:
    return PatientService(repo=SqlPatientRepository(session), page_size=settings.PATIENT_PAGE_SIZE)


def get_appointments_service(
    session: Session = Depends(get_session),
    patients: PatientService = Depends(get_patient_service),
) -> AppointmentsService:
    return AppointmentsService(
        repo=SqlAppointmentsRepository(session),
        patients=patients,
        query_cap=settings.APPOINTMENT_QUERY_CAP,
    )
