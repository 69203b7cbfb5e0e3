# fleetflow/errors.py
"""Domain errors and their HTTP mapping.

Services raise these; the handlers registered in ``fleetflow.main`` turn them
into responses shaped like ``{"detail": {"message", "details", "example"}}``.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def create_error_response(
    message: str,
    details: Optional[str] = None,
    example: Optional[str] = None
) -> Dict[str, Any]:
    """Create a detailed error response"""
    response = {
        "message": message,
        "details": details if details else message
    }
    if example:
        response["example"] = example
    return response


class FleetFlowError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[str] = None, example: Optional[str] = None):
        super().__init__(details or message)
        self.message = message
        self.details = details
        self.example = example

    def to_response(self) -> Dict[str, Any]:
        return create_error_response(self.message, self.details, self.example)


class ValidationError(FleetFlowError):
    """A precondition failed before anything was written."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(FleetFlowError):
    status_code = status.HTTP_404_NOT_FOUND


class OperationFailed(FleetFlowError):
    """A write, or a sequence of writes, failed part way.

    ``compensated`` is True when every write already applied was reverted,
    False when some record may still hold the partial update.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[str] = None, compensated: bool = True):
        example = None if compensated else "Some records may be partially updated; re-check them before retrying"
        super().__init__(message, details, example)
        self.compensated = compensated

    def to_response(self) -> Dict[str, Any]:
        response = super().to_response()
        response["compensated"] = self.compensated
        return response


class AuthError(FleetFlowError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDenied(FleetFlowError):
    status_code = status.HTTP_403_FORBIDDEN


async def fleetflow_error_handler(request: Request, exc: FleetFlowError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.to_response()},
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # the offending input is left out; it may not be JSON serializable (NaN)
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": create_error_response("Invalid request", details)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FleetFlowError, fleetflow_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
