"""Seat availability for a session, derived from live reservations.

The views built here are for display. Booking never trusts them: the
reservation manager recomputes the booked set inside its own transaction.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from app.core.errors import HallNotFoundError, SessionNotFoundError
from app.domain.value_objects import SeatSnapshot
from app.models.hall import Hall
from app.models.movie_session import MovieSession
from app.models.reservation import HOLDING_STATUSES, Reservation, ReservationSeat
from app.models.seat import Seat


@dataclass(frozen=True)
class SeatAvailability:
    seat: Seat
    is_available: bool


@dataclass(frozen=True)
class SeatLayout:
    session_id: UUID
    hall: Hall
    seats: list[SeatAvailability]


def booked_seat_ids(db: Session, session_id: UUID) -> set[UUID]:
    """Seat ids held by pending or confirmed reservations of the session."""
    rows = (
        db.query(ReservationSeat.original_seat_id)
        .join(Reservation, Reservation.id == ReservationSeat.reservation_id)
        .filter(
            Reservation.session_id == session_id,
            Reservation.status.in_(HOLDING_STATUSES),
        )
        .all()
    )
    return {seat_id for (seat_id,) in rows}


def _row_major(seats: list[Seat]) -> list[Seat]:
    return sorted(seats, key=lambda s: (s.row, s.column, s.seat_number))


def resolve_availability(db: Session, session_id: UUID) -> SeatLayout:
    """
    Merge the session's hall layout with the booked set.

    Raises:
        SessionNotFoundError: the session does not exist.
        HallNotFoundError: the session points at a hall that no longer exists.
    """
    session = db.get(MovieSession, session_id)
    if not session:
        raise SessionNotFoundError(session_id)

    hall = (
        db.query(Hall)
        .options(selectinload(Hall.seats))
        .filter(Hall.id == session.hall_id)
        .first()
    )
    if not hall:
        raise HallNotFoundError(session.hall_id, session_id=session.id)

    booked = booked_seat_ids(db, session.id)
    return SeatLayout(
        session_id=session.id,
        hall=hall,
        seats=[
            SeatAvailability(seat=seat, is_available=seat.id not in booked)
            for seat in _row_major(hall.seats)
        ],
    )


def reserved_seats(db: Session, session_id: UUID) -> list[SeatSnapshot]:
    """Flat list of the seat snapshots currently holding seats in the session."""
    if not db.get(MovieSession, session_id):
        raise SessionNotFoundError(session_id)

    rows = (
        db.query(ReservationSeat)
        .join(Reservation, Reservation.id == ReservationSeat.reservation_id)
        .filter(
            Reservation.session_id == session_id,
            Reservation.status.in_(HOLDING_STATUSES),
        )
        .order_by(ReservationSeat.row, ReservationSeat.column)
        .all()
    )
    return [r.to_snapshot() for r in rows]
