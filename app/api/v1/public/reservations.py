from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_user
from app.core.config import settings
from app.core.errors import UnauthorizedError
from app.models.user import User
from app.models.reservation import Reservation, ReservationStatus
from app.schemas.common import ErrorResponse, NotFoundResponse, SeatsUnavailableResponse
from app.schemas.reservation import (
    ReservationCreate,
    Reservation as ReservationSchema,
    ReservationSummary,
    PurchasedSnackResponse,
)
from app.schemas.seat import ReservedSeat
from app.services.cancellation import delete_reservation as cancel_reservation
from app.services.reservations import create_reservation as book_seats, list_user_reservations
from app.utils.clock import as_utc

router = APIRouter(prefix="/reservations", tags=["Reservations"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def serialize_reservation(reservation: Reservation) -> ReservationSchema:
    """Convert a Reservation ORM object to its schema representation."""
    return ReservationSchema(
        id=reservation.id,
        user_id=reservation.user_id,
        session_id=reservation.session_id,
        seats=[
            ReservedSeat(
                original_seat_id=s.original_seat_id,
                row=s.row,
                column=s.column,
                seat_number=s.seat_number,
                type=s.type,
                price=s.price,
            )
            for s in reservation.seat_snapshots
        ],
        purchased_snacks=[
            PurchasedSnackResponse(
                snack_id=ps.snack_id,
                name=ps.name,
                price=ps.price,
                quantity=ps.quantity,
            )
            for ps in reservation.purchased_snacks
        ],
        total_price=reservation.total_price,
        status=reservation.status,
        reservation_code=reservation.reservation_code,
        created_at=as_utc(reservation.created_at) if reservation.created_at else None,
        updated_at=as_utc(reservation.updated_at) if reservation.updated_at else None,
    )


def _serialize_summary(reservation: Reservation) -> ReservationSummary:
    session = reservation.session
    return ReservationSummary(
        **serialize_reservation(reservation).model_dump(),
        movie_title=session.movie.title if session and session.movie else None,
        hall_name=session.hall.name if session and session.hall else None,
        session_start_time=as_utc(session.start_time) if session else None,
    )


# ---------------------------------------------------------------------------
# POST /reservations - book seats
# ---------------------------------------------------------------------------


@router.post(
    "/",
    response_model=ReservationSchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": NotFoundResponse},
        409: {"model": SeatsUnavailableResponse},
    },
)
def create_reservation(
    data: ReservationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Book one or more seats in a session.

    - Seats are re-checked against live reservations inside the booking transaction.
    - If any seat is taken, nothing is booked and the 409 body lists every taken seat.
    - Snacks unknown to the cinema, or with quantity <= 0, are ignored.
    - Only admins may book on behalf of another user.
    """
    user_id = data.user_id or current_user.id
    if user_id != current_user.id and current_user.role != settings.ADMIN_ROLE:
        raise UnauthorizedError("You can only create reservations for yourself")

    reservation = book_seats(
        db,
        user_id=user_id,
        session_id=data.session_id,
        seat_ids=[seat.original_seat_id for seat in data.seats],
        purchased_snacks=data.purchased_snacks,
        status=data.status,
    )
    return serialize_reservation(reservation)


# ---------------------------------------------------------------------------
# GET /reservations - reservation history
# ---------------------------------------------------------------------------


@router.get("/", response_model=List[ReservationSummary])
def list_reservations(
    status: Optional[ReservationStatus] = Query(
        None, description="Filter by status: pending, confirmed, failed, completed"
    ),
    user_id: Optional[UUID] = Query(None, description="Admins only: whose reservations to list"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return a user's reservations, newest first. Defaults to the authenticated user."""
    target = user_id or current_user.id
    if target != current_user.id and current_user.role != settings.ADMIN_ROLE:
        raise UnauthorizedError("You can only list your own reservations")
    return [_serialize_summary(r) for r in list_user_reservations(db, target, status)]


# ---------------------------------------------------------------------------
# DELETE /reservations/{id}
# ---------------------------------------------------------------------------


@router.delete(
    "/{reservation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": NotFoundResponse},
    },
)
def delete_reservation(
    reservation_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Cancel a reservation and free its seats.
    - Only the owner or an admin may cancel.
    - Not allowed within 24 hours of the session start.
    """
    cancel_reservation(db, reservation_id, current_user.id, current_user.role)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
