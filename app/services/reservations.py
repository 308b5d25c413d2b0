"""Reservation transaction manager.

Every write here runs inside one ``unit_of_work`` and starts by locking the
session row (``SELECT ... FOR UPDATE``). That lock is the per-session token:
while one booking for a session is between its seat check and its insert, no
other booking or status change for the same session can interleave.
"""

import logging
from decimal import Decimal
from typing import Mapping, Sequence
from uuid import UUID

from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.errors import (
    InvalidStatusTransitionError,
    NoSeatsSelectedError,
    PrerequisiteNotFoundError,
    ReservationNotFoundError,
    SeatNotFoundError,
    SeatUnavailableError,
    SessionNotFoundError,
    ValidationError,
)
from app.db.session import unit_of_work
from app.domain.value_objects import SeatSnapshot, SnackSelection
from app.models.cinema import Snack
from app.models.hall import Hall
from app.models.movie_session import MovieSession
from app.models.reservation import (
    PurchasedSnack,
    Reservation,
    ReservationSeat,
    ReservationStatus,
)
from app.models.user import User
from app.services.availability import booked_seat_ids
from app.utils.codes import make_unique_reservation_code

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _lock_session(db: Session, session_id: UUID) -> MovieSession | None:
    return (
        db.query(MovieSession)
        .filter(MovieSession.id == session_id)
        .with_for_update()
        .first()
    )


def load_prerequisites(db: Session, user_id: UUID, session_id: UUID) -> tuple[User, MovieSession, Hall]:
    """Load the user, the (locked) session and its hall, or say which one is missing."""
    user = db.get(User, user_id)
    if not user:
        raise PrerequisiteNotFoundError("user", user_id)

    session = _lock_session(db, session_id)
    if not session:
        raise PrerequisiteNotFoundError("session", session_id)

    hall = (
        db.query(Hall)
        .options(selectinload(Hall.seats))
        .filter(Hall.id == session.hall_id)
        .first()
    )
    if not hall:
        raise PrerequisiteNotFoundError(
            "hall", session.hall_id, "Hall associated with the session doesn't exist"
        )
    return user, session, hall


def select_seats(db: Session, session: MovieSession, hall: Hall, seat_ids: Sequence[UUID]) -> list[SeatSnapshot]:
    """
    Check every requested seat against the hall and the live booked set.

    All offending seats are reported together so the client can deselect
    them in one go. Seats missing from the hall are reported first.
    """
    if not seat_ids:
        raise NoSeatsSelectedError()
    if len(set(seat_ids)) != len(seat_ids):
        raise ValidationError("The same seat was selected more than once")

    hall_seats = {seat.id: seat for seat in hall.seats}
    missing = [str(seat_id) for seat_id in seat_ids if seat_id not in hall_seats]
    if missing:
        raise SeatNotFoundError(missing)

    booked = booked_seat_ids(db, session.id)
    unavailable = [hall_seats[seat_id].seat_number for seat_id in seat_ids if seat_id in booked]
    if unavailable:
        logger.warning(
            "Rejected booking for session %s: seats %s already held",
            session.id, ", ".join(unavailable),
        )
        raise SeatUnavailableError(unavailable)

    return [SeatSnapshot.from_seat(hall_seats[seat_id]) for seat_id in seat_ids]


def select_snacks(db: Session, cinema_id: UUID, purchased_snacks: Mapping[str, int] | None) -> list[SnackSelection]:
    """
    Price a snack order against the cinema's catalog.

    Unknown or malformed snack ids and non-positive quantities are dropped,
    not rejected: clients may be working from a stale menu.
    """
    if not purchased_snacks:
        return []

    catalog = {
        snack.id: snack
        for snack in db.query(Snack).filter(Snack.cinema_id == cinema_id).all()
    }
    selections = []
    for raw_id, quantity in purchased_snacks.items():
        if not quantity or quantity <= 0:
            logger.warning("Snack %s ordered with quantity %s, dropping it", raw_id, quantity)
            continue
        try:
            snack_id = raw_id if isinstance(raw_id, UUID) else UUID(str(raw_id))
        except ValueError:
            snack_id = None
        snack = catalog.get(snack_id)
        if snack is None:
            logger.warning("Snack %s not found in cinema %s, dropping it", raw_id, cinema_id)
            continue
        selections.append(
            SnackSelection(
                snack_id=snack.id,
                name=snack.name,
                price=Decimal(str(snack.price)),
                quantity=int(quantity),
            )
        )
    return selections


def compute_total(seats: Sequence[SeatSnapshot], snacks: Sequence[SnackSelection]) -> Decimal:
    return sum((s.price for s in seats), Decimal("0")) + sum((s.subtotal for s in snacks), Decimal("0"))


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def create_reservation(
    db: Session,
    user_id: UUID,
    session_id: UUID,
    seat_ids: Sequence[UUID],
    purchased_snacks: Mapping[str, int] | None = None,
    status: ReservationStatus = ReservationStatus.PENDING,
) -> Reservation:
    """
    Book seats for a user in a session, all or nothing.

    Raises:
        ValidationError: status is not pending/confirmed, or a seat is repeated.
        PrerequisiteNotFoundError: the user, session or hall does not exist.
        NoSeatsSelectedError: seat_ids is empty.
        SeatNotFoundError: some seat ids are not part of the session's hall.
        SeatUnavailableError: some seats are already held in this session.
        StorageError: the database aborted the transaction.
    """
    status = ReservationStatus(status)
    if not status.holds_seats:
        raise ValidationError(f"A reservation cannot be created with status '{status.value}'")

    with unit_of_work(db):
        user, session, hall = load_prerequisites(db, user_id, session_id)
        seats = select_seats(db, session, hall, list(seat_ids))
        snacks = select_snacks(db, session.cinema_id, purchased_snacks)

        reservation = Reservation(
            session_id=session.id,
            total_price=compute_total(seats, snacks),
            status=status,
            reservation_code=make_unique_reservation_code(db),
        )
        reservation.seats = [ReservationSeat.from_snapshot(s, i) for i, s in enumerate(seats)]
        reservation.purchased_snacks = [PurchasedSnack.from_selection(s, i) for i, s in enumerate(snacks)]
        user.reservations.append(reservation)

        session.available_seats -= len(seats)
        db.add(reservation)
        db.flush()
        # Server-side timestamps, loaded before the commit
        db.refresh(reservation, attribute_names=["created_at", "updated_at"])

    logger.info(
        "Reservation %s (%s) created for user %s in session %s: %d seat(s), total %s",
        reservation.id, reservation.reservation_code, user_id, session_id,
        len(seats), reservation.total_price,
    )
    return reservation


def list_user_reservations(
    db: Session,
    user_id: UUID,
    status: ReservationStatus | None = None,
) -> list[Reservation]:
    """The user's reservations, newest first, with session, movie and hall loaded."""
    query = (
        db.query(Reservation)
        .options(
            joinedload(Reservation.session).joinedload(MovieSession.movie),
            joinedload(Reservation.session).joinedload(MovieSession.hall),
            selectinload(Reservation.seats),
            selectinload(Reservation.purchased_snacks),
        )
        .filter(Reservation.user_id == user_id)
    )
    if status:
        query = query.filter(Reservation.status == ReservationStatus(status))
    return query.order_by(Reservation.created_at.desc()).all()


def update_reservation_status(
    db: Session,
    reservation_id: UUID,
    new_status: ReservationStatus,
) -> Reservation:
    """
    Move a reservation along its state machine.

    Leaving the held states (to failed or completed) gives the seats back to
    the session's counter in the same transaction.

    Raises:
        ReservationNotFoundError: the reservation does not exist.
        SessionNotFoundError: its session no longer exists.
        InvalidStatusTransitionError: the move is not allowed from the current status.
    """
    new_status = ReservationStatus(new_status)

    with unit_of_work(db):
        reservation = (
            db.query(Reservation)
            .options(selectinload(Reservation.seats), selectinload(Reservation.purchased_snacks))
            .filter(Reservation.id == reservation_id)
            .with_for_update()
            .first()
        )
        if not reservation:
            raise ReservationNotFoundError(reservation_id)

        current = ReservationStatus(reservation.status)
        if not current.can_transition_to(new_status):
            raise InvalidStatusTransitionError(current.value, new_status.value)

        session = _lock_session(db, reservation.session_id)
        if not session:
            raise SessionNotFoundError(reservation.session_id)

        if current.holds_seats and not new_status.holds_seats:
            session.available_seats += len(reservation.seats)
        reservation.status = new_status
        db.flush()
        db.refresh(reservation, attribute_names=["updated_at"])

    logger.info("Reservation %s moved from %s to %s", reservation_id, current.value, new_status.value)
    return reservation
