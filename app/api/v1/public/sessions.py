from datetime import date
from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.common import NotFoundResponse
from app.schemas.seat import (
    HallLayout,
    ReservedSeat,
    SeatLayoutResponse,
    SeatWithAvailability,
)
from app.services.availability import reserved_seats, resolve_availability
from app.services.scheduler import available_dates

router = APIRouter(prefix="/sessions", tags=["Sessions"])


# ---------------------------------------------------------------------------
# Show dates (date picker)
# ---------------------------------------------------------------------------


@router.get("/available-dates", response_model=List[date])
def get_available_dates(
    movie_id: UUID = Query(..., alias="movieId"),
    cinema_id: UUID = Query(..., alias="cinemaId"),
    db: Session = Depends(get_db),
):
    """Sorted YYYY-MM-DD days, today (UTC) onwards, with sessions of the movie in the cinema."""
    return available_dates(db, movie_id, cinema_id)


# ---------------------------------------------------------------------------
# Seat layout (seat selection screen)
# ---------------------------------------------------------------------------


@router.get(
    "/{session_id}/seat-layout",
    response_model=SeatLayoutResponse,
    responses={404: {"model": NotFoundResponse}},
)
def get_seat_layout(session_id: UUID, db: Session = Depends(get_db)):
    """
    Return the hall layout for a session with every seat tagged available or not.
    Seats are ordered row by row. Display only: bookings re-check at commit time.
    """
    layout = resolve_availability(db, session_id)
    hall = layout.hall
    return SeatLayoutResponse(
        session_id=layout.session_id,
        hall_id=hall.id,
        hall_name=hall.name,
        hall_layout=HallLayout(rows=hall.layout_rows, columns=hall.layout_columns),
        seats=[
            SeatWithAvailability(
                id=entry.seat.id,
                row=entry.seat.row,
                column=entry.seat.column,
                seat_number=entry.seat.seat_number,
                type=entry.seat.type,
                price=entry.seat.price,
                is_available=entry.is_available,
            )
            for entry in layout.seats
        ],
    )


# ---------------------------------------------------------------------------
# Reserved seats
# ---------------------------------------------------------------------------


@router.get(
    "/{session_id}/reserved-seats",
    response_model=List[ReservedSeat],
    responses={404: {"model": NotFoundResponse}},
)
def get_reserved_seats(session_id: UUID, db: Session = Depends(get_db)):
    """Flat list of seat snapshots held by pending or confirmed reservations."""
    return [
        ReservedSeat(
            original_seat_id=snapshot.original_seat_id,
            row=snapshot.row,
            column=snapshot.column,
            seat_number=snapshot.seat_number,
            type=snapshot.type,
            price=snapshot.price,
        )
        for snapshot in reserved_seats(db, session_id)
    ]
