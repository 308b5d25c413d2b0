from typing import List
from pydantic import UUID4
from decimal import Decimal

from app.domain.value_objects import SeatType
from app.schemas.common import CamelModel


# Seat - base fields shared by layout entries and reservation snapshots
class SeatBase(CamelModel):
    row: int
    column: int
    seat_number: str
    type: SeatType
    price: Decimal


# --- Seat layout (GET /sessions/{id}/seat-layout) ---

class SeatWithAvailability(SeatBase):
    id: UUID4
    is_available: bool


class HallLayout(CamelModel):
    rows: int
    columns: int


class SeatLayoutResponse(CamelModel):
    session_id: UUID4
    hall_id: UUID4
    hall_name: str
    hall_layout: HallLayout
    seats: List[SeatWithAvailability]


# --- Seat snapshot (reservations, GET /sessions/{id}/reserved-seats) ---

class ReservedSeat(SeatBase):
    original_seat_id: UUID4
