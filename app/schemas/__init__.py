from app.schemas.common import (
    CamelModel, ErrorResponse, NotFoundResponse, SeatsUnavailableResponse, ScheduleConflictResponse,
)
from app.schemas.session import Session, SessionCreate
from app.schemas.seat import (
    SeatWithAvailability, HallLayout, SeatLayoutResponse, ReservedSeat,
)
from app.schemas.reservation import (
    Reservation, ReservationCreate, ReservationStatusUpdate, ReservationSummary,
    SeatSelection, PurchasedSnackResponse,
)
from app.schemas.movie import PopularMovie
