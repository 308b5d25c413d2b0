from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_admin_user
from app.models.user import User
from app.schemas.common import ErrorResponse, NotFoundResponse, ScheduleConflictResponse
from app.schemas.session import SessionCreate, Session as SessionSchema
from app.services.scheduler import create_session as schedule_session
from app.utils.clock import as_utc

router = APIRouter(prefix="/sessions", tags=["Admin - Sessions"])


@router.post(
    "/",
    response_model=SessionSchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": NotFoundResponse},
        409: {"model": ScheduleConflictResponse},
    },
)
def create_session(
    data: SessionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """
    Schedule a movie in a hall.
    - 400 if endTime is not after startTime.
    - 409 if the hall already has a session overlapping [startTime, endTime).
      Sessions that only touch (one ends when the other starts) are fine.
    """
    session = schedule_session(
        db,
        cinema_id=data.cinema_id,
        hall_id=data.hall_id,
        movie_id=data.movie_id,
        start_time=data.start_time,
        end_time=data.end_time,
    )
    return SessionSchema(
        id=session.id,
        cinema_id=session.cinema_id,
        hall_id=session.hall_id,
        movie_id=session.movie_id,
        start_time=as_utc(session.start_time),
        end_time=as_utc(session.end_time),
        available_seats=session.available_seats,
    )
