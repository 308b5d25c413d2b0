"""Session scheduling: one hall can only screen one session at a time."""

import logging
from datetime import date, datetime
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.errors import (
    InvalidScheduleError,
    NotFoundError,
    ScheduleConflictError,
    ValidationError,
)
from app.db.session import unit_of_work
from app.models.cinema import Cinema
from app.models.hall import Hall
from app.models.movie import Movie
from app.models.movie_session import MovieSession
from app.utils.clock import as_utc, utcnow

logger = logging.getLogger(__name__)


def find_overlapping_session(
    db: Session,
    hall_id: UUID,
    start_time: datetime,
    end_time: datetime,
) -> MovieSession | None:
    """
    Return a session in the hall whose [start, end) interval overlaps the given one.

    Half-open intervals: a session ending exactly when the new one starts
    does not conflict.
    """
    return (
        db.query(MovieSession)
        .filter(
            MovieSession.hall_id == hall_id,
            MovieSession.start_time < end_time,
            MovieSession.end_time > start_time,
        )
        .order_by(MovieSession.start_time)
        .first()
    )


def create_session(
    db: Session,
    cinema_id: UUID,
    hall_id: UUID,
    movie_id: UUID,
    start_time: datetime,
    end_time: datetime,
) -> MovieSession:
    """
    Schedule a movie in a hall.

    The hall row is locked for the whole check-then-insert, so two requests
    for the same hall cannot both see a free slot and both insert.

    Raises:
        InvalidScheduleError: start_time is not before end_time.
        NotFoundError: the cinema, hall or movie does not exist.
        ValidationError: the hall belongs to another cinema.
        ScheduleConflictError: the hall is already booked for part of the interval.
    """
    start_time = as_utc(start_time)
    end_time = as_utc(end_time)
    if start_time >= end_time:
        raise InvalidScheduleError()

    with unit_of_work(db):
        hall = db.query(Hall).filter(Hall.id == hall_id).with_for_update().first()
        if not hall:
            raise NotFoundError("hall", hall_id)
        if not db.get(Cinema, cinema_id):
            raise NotFoundError("cinema", cinema_id)
        if not db.get(Movie, movie_id):
            raise NotFoundError("movie", movie_id)
        if hall.cinema_id != cinema_id:
            raise ValidationError(f"Hall {hall.name} does not belong to cinema {cinema_id}")

        conflict = find_overlapping_session(db, hall_id, start_time, end_time)
        if conflict:
            logger.warning(
                "Rejected session for hall %s: overlaps session %s", hall_id, conflict.id
            )
            raise ScheduleConflictError(conflict.id, conflict.start_time, conflict.end_time)

        session = MovieSession(
            cinema_id=cinema_id,
            hall_id=hall_id,
            movie_id=movie_id,
            start_time=start_time,
            end_time=end_time,
            available_seats=len(hall.seats),
        )
        db.add(session)
        db.flush()

    logger.info(
        "Scheduled session %s in hall %s from %s to %s",
        session.id, hall_id, start_time, end_time,
    )
    return session


def available_dates(
    db: Session,
    movie_id: UUID,
    cinema_id: UUID,
    now: datetime | None = None,
) -> list[date]:
    """
    Days, from today (UTC) on, on which the movie has sessions in the cinema.

    Sorted and unique; feeds the date picker in front of the session list.
    """
    now = as_utc(now) if now else utcnow()
    start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    rows = (
        db.query(MovieSession.start_time)
        .filter(
            MovieSession.movie_id == movie_id,
            MovieSession.cinema_id == cinema_id,
            MovieSession.start_time >= start_of_today,
        )
        .distinct()
        .all()
    )
    return sorted({as_utc(start_time).date() for (start_time,) in rows})
