"""Domain exceptions and the JSON error envelope returned by the API."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException


class NotFoundError(LookupError):
    """Raised when a record id does not exist in the current workspace."""


class SyncError(Exception):
    """A remote write failed and the local change was rolled back."""

    def __init__(self, action: str, error: Exception) -> None:
        super().__init__(f"{action} could not be saved: {error}")
        self.action = action
        self.error = error


class BackupFormatError(ValueError):
    """A backup file was rejected; ``str(exc)`` is the message shown to the user."""


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else _reason(exc.status_code)
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        code="http_error",
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorEnvelope(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code="validation_error",
        message="Validation failed",
        details={"errors": exc.errors()},
    )


async def invalid_input_handler(request: Request, exc: ValueError):
    return ErrorEnvelope(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code="invalid_input",
        message=str(exc),
    )


async def not_found_handler(request: Request, exc: NotFoundError):
    return ErrorEnvelope(status_code=status.HTTP_404_NOT_FOUND, code="not_found", message=str(exc))


async def sync_error_handler(request: Request, exc: SyncError):
    return ErrorEnvelope(
        status_code=status.HTTP_502_BAD_GATEWAY,
        code="sync_failed",
        message=str(exc),
        details={"action": exc.action},
    )


async def backup_error_handler(request: Request, exc: BackupFormatError):
    return ErrorEnvelope(status_code=status.HTTP_400_BAD_REQUEST, code="invalid_backup", message=str(exc))


def register_exception_handlers(app) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(BackupFormatError, backup_error_handler)
    app.add_exception_handler(ValueError, invalid_input_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(SyncError, sync_error_handler)
