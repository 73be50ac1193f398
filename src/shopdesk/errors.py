"""
shopdesk.errors

Application error taxonomy and its HTTP rendering.

Responsibilities:
- Define errors carrying a stable machine-readable code and HTTP status.
- Render them as `{"code", "message"}` JSON bodies via a FastAPI handler.
- Log every rendered failure with structlog (code, status, cause).
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from shopdesk.observability.logging import get_logger

log = get_logger(__name__)


class AppError(Exception):
    code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class Unauthorized(AppError):
    """No usable credential, or the credential names no known user."""

    code = "UNAUTHORIZED"
    status_code = HTTP_401_UNAUTHORIZED


class PermissionDenied(AppError):
    """Known identity without the required permission (or with a dangling role)."""

    code = "PERMISSION_DENIED"
    status_code = HTTP_403_FORBIDDEN


class TenantRequired(AppError):
    code = "TENANT_REQUIRED"
    status_code = HTTP_400_BAD_REQUEST


class DirectoryUnavailable(AppError):
    """The backing store failed while answering a lookup."""

    code = "DIRECTORY_UNAVAILABLE"
    status_code = HTTP_503_SERVICE_UNAVAILABLE


class NotFound(AppError):
    code = "NOT_FOUND"
    status_code = HTTP_404_NOT_FOUND


class Conflict(AppError):
    code = "CONFLICT"
    status_code = HTTP_409_CONFLICT


class ValidationFailed(AppError):
    code = "VALIDATION_ERROR"
    status_code = HTTP_400_BAD_REQUEST


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    # Server-side failures are errors; caller-input problems are warnings.
    emit = log.error if exc.status_code >= 500 else log.warning
    emit(
        "request_failed",
        code=exc.code,
        status=exc.status_code,
        detail=exc.message,
        cause=repr(exc.cause) if exc.cause is not None else None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "message": exc.message},
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]


# --- Module Notes -----------------------------------------------------------
# None of these errors are retried by the service; they describe caller input or
# caller state. Only DirectoryUnavailable reflects an infrastructure problem.
