"""Cancellation policy: who may delete a reservation, and until when."""

import logging
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import (
    CancellationWindowError,
    ReservationNotFoundError,
    SessionNotFoundError,
    UnauthorizedError,
)
from app.db.session import unit_of_work
from app.models.movie_session import MovieSession
from app.models.reservation import Reservation, ReservationStatus
from app.utils.clock import as_utc, utcnow

logger = logging.getLogger(__name__)


def can_manage_reservation(reservation: Reservation, user_id: UUID, role: str) -> bool:
    return reservation.user_id == user_id or role == settings.ADMIN_ROLE


def delete_reservation(
    db: Session,
    reservation_id: UUID,
    requesting_user_id: UUID,
    requesting_role: str,
    now: datetime | None = None,
) -> int:
    """
    Delete a reservation and give its seats back to the session.

    The reservation and session rows are both locked, so two concurrent
    deletes of the same reservation release its seats once. Returns the
    number of seats released.

    Raises:
        ReservationNotFoundError: the reservation does not exist.
        UnauthorizedError: the caller neither owns it nor is an admin.
        SessionNotFoundError: its session no longer exists.
        CancellationWindowError: the session starts within the cancellation window.
    """
    now = as_utc(now) if now else utcnow()
    window = timedelta(hours=settings.CANCELLATION_WINDOW_HOURS)

    with unit_of_work(db):
        reservation = (
            db.query(Reservation)
            .filter(Reservation.id == reservation_id)
            .with_for_update()
            .first()
        )
        if not reservation:
            raise ReservationNotFoundError(reservation_id)

        if not can_manage_reservation(reservation, requesting_user_id, requesting_role):
            logger.warning(
                "User %s (%s) may not delete reservation %s",
                requesting_user_id, requesting_role, reservation_id,
            )
            raise UnauthorizedError()

        session = (
            db.query(MovieSession)
            .filter(MovieSession.id == reservation.session_id)
            .with_for_update()
            .first()
        )
        if not session:
            raise SessionNotFoundError(reservation.session_id)

        if as_utc(session.start_time) - now < window:
            raise CancellationWindowError(settings.CANCELLATION_WINDOW_HOURS)

        # Failed/completed reservations already gave their seats back
        released = len(reservation.seats) if ReservationStatus(reservation.status).holds_seats else 0
        db.delete(reservation)
        session.available_seats += released

    logger.info(
        "Reservation %s deleted by user %s, %d seat(s) released in session %s",
        reservation_id, requesting_user_id, released, session.id,
    )
    return released
