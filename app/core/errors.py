"""Domain errors and their HTTP mapping.

Services raise these; route handlers never build error responses themselves.
The exception handlers registered in main.py turn them into JSON bodies of the
form ``{"error": CODE, "message": text, **details}`` with camelCase detail keys.
"""

import logging
from enum import Enum
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_SCHEDULE = "INVALID_SCHEDULE"
    SCHEDULE_CONFLICT = "SCHEDULE_CONFLICT"
    SEAT_UNAVAILABLE = "SEAT_UNAVAILABLE"
    SEAT_NOT_FOUND = "SEAT_NOT_FOUND"
    NO_SEATS_SELECTED = "NO_SEATS_SELECTED"
    UNAUTHORIZED = "UNAUTHORIZED"
    CANCELLATION_WINDOW = "CANCELLATION_WINDOW"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    STORAGE_ERROR = "STORAGE_ERROR"


class DomainError(Exception):
    """Base domain error with code, user-safe message and HTTP status."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        # Detail keys follow the camelCase used by request and response bodies
        body = {to_camel(key): value for key, value in self.details.items()}
        return {"error": self.code.value, "message": self.message, **body}


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------


class NotFoundError(DomainError):
    code = ErrorCode.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: Any = None, message: str | None = None) -> None:
        super().__init__(
            message or f"{entity.capitalize()} not found",
            entity=entity,
            entity_id=str(entity_id) if entity_id is not None else None,
        )
        self.entity = entity


class SessionNotFoundError(NotFoundError):
    def __init__(self, session_id: Any) -> None:
        super().__init__("session", session_id, f"Session with ID {session_id} not found")


class HallNotFoundError(NotFoundError):
    def __init__(self, hall_id: Any, session_id: Any = None) -> None:
        message = (
            f"Hall for session {session_id} not found" if session_id is not None
            else f"Hall with ID {hall_id} not found"
        )
        super().__init__("hall", hall_id, message)


class ReservationNotFoundError(NotFoundError):
    def __init__(self, reservation_id: Any) -> None:
        super().__init__("reservation", reservation_id, "Reservation not found")


class PrerequisiteNotFoundError(NotFoundError):
    """A user, session or hall needed to book does not exist."""


# ---------------------------------------------------------------------------
# Validation / business rules
# ---------------------------------------------------------------------------


class ValidationError(DomainError):
    code = ErrorCode.VALIDATION_ERROR


class InvalidScheduleError(ValidationError):
    code = ErrorCode.INVALID_SCHEDULE

    def __init__(self, message: str = "End time must be after start time") -> None:
        super().__init__(message)


class ScheduleConflictError(DomainError):
    code = ErrorCode.SCHEDULE_CONFLICT
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, conflicting_session_id: Any, start_time: Any, end_time: Any) -> None:
        super().__init__(
            f"Hall is already booked from {start_time} to {end_time}",
            conflicting_session_id=str(conflicting_session_id),
        )


class NoSeatsSelectedError(DomainError):
    code = ErrorCode.NO_SEATS_SELECTED

    def __init__(self) -> None:
        super().__init__("No seats selected")


class SeatNotFoundError(DomainError):
    code = ErrorCode.SEAT_NOT_FOUND

    def __init__(self, seat_ids: list[str]) -> None:
        super().__init__(
            f"The following seats do not exist in this hall: {', '.join(seat_ids)}",
            missing_seats=seat_ids,
        )
        self.seat_ids = seat_ids


class SeatUnavailableError(DomainError):
    code = ErrorCode.SEAT_UNAVAILABLE
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, seat_numbers: list[str]) -> None:
        super().__init__(
            "The following seats are already booked or pending for this session: "
            f"{', '.join(seat_numbers)}",
            unavailable_seats=seat_numbers,
        )
        self.seat_numbers = seat_numbers


class UnauthorizedError(DomainError):
    code = ErrorCode.UNAUTHORIZED
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Only the owner of the reservation or an admin can do this") -> None:
        super().__init__(message)


class CancellationWindowError(DomainError):
    code = ErrorCode.CANCELLATION_WINDOW

    def __init__(self, window_hours: int) -> None:
        super().__init__(
            f"Reservations can only be deleted more than {window_hours} hours "
            "before the session starts"
        )


class InvalidStatusTransitionError(DomainError):
    code = ErrorCode.INVALID_STATUS_TRANSITION
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            f"Cannot move a reservation from '{current}' to '{requested}'",
            current_status=current,
            requested_status=requested,
        )


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------


class StorageError(DomainError):
    code = ErrorCode.STORAGE_ERROR
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self) -> None:
        super().__init__("The request could not be completed, please retry")


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, DomainError)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": ErrorCode.VALIDATION_ERROR.value,
            "message": "Request validation failed",
            "fields": jsonable_encoder(exc.errors()),
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "INTERNAL_ERROR", "message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
