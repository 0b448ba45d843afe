"""Error taxonomy and the response envelope mapper.

Repository and service code raise the domain errors below; the handlers
registered by ``register_error_handlers`` turn every outcome into the
uniform ``{success, error, message?, details?}`` envelope.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong"


class CandidateTrackerError(Exception):
    """Base class for errors that map to an API envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.error)
        self.message = message

    def to_payload(self, expose_details: bool = True) -> Dict[str, Any]:
        """
        Build the error envelope.

        ``expose_details`` only matters for errors that may carry internal
        store text (``OperationFailed``); caller-facing errors ignore it.
        """
        return build_error_payload(self.error, self.message)


class ValidationFailed(CandidateTrackerError):
    """One or more caller-fixable field violations."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"

    def __init__(self, violations: Sequence[Any]):
        super().__init__()
        self.violations = list(violations)

    def to_payload(self, expose_details: bool = True) -> Dict[str, Any]:
        details = [_violation_dict(v) for v in self.violations]
        return build_error_payload(self.error, details=details)


class RecordNotFound(CandidateTrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Candidate not found"

    def __init__(self, candidate_id: Any = None):
        super().__init__()
        self.candidate_id = candidate_id


class DuplicateEmail(CandidateTrackerError):
    """The normalized email is already held by another candidate."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Email already exists"

    def __init__(self, message: str = "A candidate with this email already exists"):
        super().__init__(message)


class ConstraintViolation(CandidateTrackerError):
    """A store-level invariant rejected the write."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Constraint violation"


class OperationFailed(CandidateTrackerError):
    """Unexpected store failure while performing ``action`` on a candidate."""

    def __init__(self, action: str, message: Optional[str] = None, subject: str = "candidate"):
        super().__init__(message)
        self.action = action
        self.error = f"Failed to {action} {subject}"

    def to_payload(self, expose_details: bool = True) -> Dict[str, Any]:
        message = self.message if expose_details and self.message else GENERIC_FAILURE_MESSAGE
        return build_error_payload(self.error, message)


def build_error_payload(
    error: str,
    message: Optional[str] = None,
    details: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"success": False, "error": error}
    if message is not None:
        payload["message"] = message
    if details is not None:
        payload["details"] = details
    return payload


def _violation_dict(violation: Any) -> Dict[str, Any]:
    if isinstance(violation, dict):
        return {"field": violation["field"], "message": violation["message"]}
    return {"field": violation.field, "message": violation.message}


def _expose_details(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.expose_error_details)


async def candidate_error_handler(request: Request, exc: CandidateTrackerError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_payload(expose_details=_expose_details(request)),
    )


async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies get the same envelope as field violations."""
    details = []
    for error in exc.errors():
        if error.get("type") == "json_invalid":
            # loc is ("body", <char offset>)
            details.append({"field": "body", "message": "Request body must be valid JSON"})
            continue
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query")]
        field = loc[-1] if loc else "body"
        details.append({"field": field, "message": error.get("msg", "Invalid value")})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=build_error_payload(ValidationFailed.error, details=details),
    )


async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error = "Route not found"
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        error = "Method not allowed"
    else:
        error = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_payload(error),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if _expose_details(request) else GENERIC_FAILURE_MESSAGE
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_payload("Internal server error", message),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CandidateTrackerError, candidate_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
