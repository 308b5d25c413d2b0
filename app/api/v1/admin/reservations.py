from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_admin_user
from app.api.v1.public.reservations import serialize_reservation
from app.models.user import User
from app.schemas.common import ErrorResponse, NotFoundResponse
from app.schemas.reservation import Reservation as ReservationSchema, ReservationStatusUpdate
from app.services.reservations import update_reservation_status

router = APIRouter(prefix="/reservations", tags=["Admin - Reservations"])


@router.patch(
    "/{reservation_id}/status",
    response_model=ReservationSchema,
    responses={404: {"model": NotFoundResponse}, 409: {"model": ErrorResponse}},
)
def change_reservation_status(
    reservation_id: UUID,
    data: ReservationStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """
    Move a reservation along pending -> confirmed -> completed, or to failed.
    Failing or completing a reservation frees its seats.
    """
    reservation = update_reservation_status(db, reservation_id, data.status)
    return serialize_reservation(reservation)
