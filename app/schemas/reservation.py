from typing import Dict, List, Optional
from pydantic import UUID4
from decimal import Decimal
from datetime import datetime

from app.models.reservation import ReservationStatus
from app.schemas.common import CamelModel
from app.schemas.seat import ReservedSeat


# Reservation - Create (POST /reservations)
class SeatSelection(CamelModel):
    original_seat_id: UUID4


class ReservationCreate(CamelModel):
    # Defaults to the authenticated user
    user_id: Optional[UUID4] = None
    session_id: UUID4
    seats: List[SeatSelection]
    # snack id -> quantity; unknown ids and quantities <= 0 are dropped
    purchased_snacks: Optional[Dict[str, int]] = None
    status: ReservationStatus = ReservationStatus.PENDING


# Reservation - status change (PATCH /reservations/{id}/status)
class ReservationStatusUpdate(CamelModel):
    status: ReservationStatus


class PurchasedSnackResponse(CamelModel):
    snack_id: UUID4
    name: str
    price: Decimal
    quantity: int


# Reservation - Full response (POST /reservations, PATCH /reservations/{id}/status)
class Reservation(CamelModel):
    id: UUID4
    user_id: UUID4
    session_id: UUID4
    seats: List[ReservedSeat]
    purchased_snacks: List[PurchasedSnackResponse] = []
    total_price: Decimal
    status: ReservationStatus
    reservation_code: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Reservation - history entry (GET /reservations)
class ReservationSummary(Reservation):
    movie_title: Optional[str] = None
    hall_name: Optional[str] = None
    session_start_time: Optional[datetime] = None
