"""Error taxonomy for the schedule API and its HTTP mapping."""

from __future__ import annotations

import logging
from enum import Enum

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    NO_ACTIVE_SCHEDULE = "no-active-schedule"
    PLAYER_NOT_FOUND = "player-not-found"
    LAYOUT_NOT_FOUND = "layout-not-found"
    SCHEDULE_NOT_FOUND = "schedule-not-found"
    ASSIGNMENT_NOT_FOUND = "assignment-not-found"
    SITE_NOT_FOUND = "site-not-found"
    INVALID_SCHEDULE = "invalid-schedule"
    INVALID_ASSIGNMENT = "invalid-assignment"
    FORBIDDEN = "forbidden"
    PLAYER_MISMATCH = "player-mismatch"
    REPOSITORY_UNAVAILABLE = "repository-unavailable"


class SignageError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.retry_after = retry_after


class NotFoundError(SignageError):
    status_code = status.HTTP_404_NOT_FOUND


class ScheduleValidationError(SignageError):
    """Rejected administrative write; never reaches the resolver."""

    status_code = 422
    default_code = ErrorCode.INVALID_SCHEDULE


class ForbiddenError(SignageError):
    status_code = status.HTTP_403_FORBIDDEN
    default_code = ErrorCode.FORBIDDEN


class TransientInfraError(SignageError):
    """The backing store could not be reached; callers should retry later."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_code = ErrorCode.REPOSITORY_UNAVAILABLE


async def _handle_signage_error(request: Request, exc: SignageError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.debug("%s %s -> %s (%s)", request.method, request.url.path, exc.status_code, exc.code)

    headers = {"Retry-After": str(exc.retry_after)} if exc.retry_after else None
    code = exc.code.value if exc.code else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": code},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SignageError, _handle_signage_error)  # type: ignore[arg-type]
