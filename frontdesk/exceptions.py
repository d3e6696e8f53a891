import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class APIException(HTTPException):
    def __init__(self, status_code: int, detail: str, **extra: Any):
        super().__init__(status_code=status_code, detail=detail)
        self.extra: Dict[str, Any] = extra


class Unauthenticated(APIException):
    """No valid caller credential. Never carries detail."""

    def __init__(self):
        super().__init__(status_code=401, detail="Unauthorized")


class Forbidden(APIException):
    """Authenticated but not permitted; `reason` names the rule that denied."""

    MESSAGES = {
        "role-not-allowed": "Forbidden: admin only",
        "self-delete": "You cannot delete your own account.",
        "protected-admin": "Cannot delete another admin.",
    }

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(status_code=403, detail=self.MESSAGES.get(reason, "Forbidden"), reason=reason)


class ValidationError(APIException):
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(status_code=400, detail=message, field=field)


class NotFound(APIException):
    def __init__(self, detail: str):
        super().__init__(status_code=404, detail=detail)


class UpstreamError(APIException):
    """The store or the identity provider failed; not retried here."""

    def __init__(self, detail: str, reconcile: bool = False):
        self.reconcile = reconcile
        extra = {"reconcile": True} if reconcile else {}
        super().__init__(status_code=502, detail=detail, **extra)


class ReferentialGap(APIException):
    """The appointment insert failed after its patient was already committed."""

    def __init__(self, patient_id: str, detail: str):
        self.patient_id = patient_id
        super().__init__(status_code=502, detail=detail, patient_id=patient_id)


def create_error_response(error_message: str, **extra: Any) -> dict:
    """Create a standardized error response"""
    body = {
        "success": False,
        "data": None,
        "error": error_message,
    }
    body.update(extra)
    return body


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render domain and HTTP errors in the common envelope"""
    extra = exc.extra if isinstance(exc, APIException) else {}
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail), **extra),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Surface the first offending field of a malformed request body"""
    errors = exc.errors()
    first: Optional[dict] = errors[0] if errors else None
    field = ".".join(str(p) for p in first["loc"][1:]) if first else ""
    message = first["msg"] if first else "Invalid request"
    return JSONResponse(
        status_code=400,
        content=create_error_response(message, field=field),
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Store error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=502,
        content=create_error_response(str(exc.__cause__ or exc)),
    )
