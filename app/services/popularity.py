from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.cache import Cache
from app.core.config import settings
from app.models.movie import Movie
from app.models.movie_session import MovieSession
from app.models.reservation import Reservation


@dataclass(frozen=True)
class PopularMovie:
    id: UUID
    title: str
    genre: str | None
    reservation_count: int


def rank_popular_movies(db: Session, limit: int) -> list[PopularMovie]:
    """Movies ordered by how many reservations their sessions have, most first."""
    reservation_count = func.count(Reservation.id).label("reservation_count")
    rows = (
        db.query(Movie.id, Movie.title, Movie.genre, reservation_count)
        .join(MovieSession, MovieSession.movie_id == Movie.id)
        .join(Reservation, Reservation.session_id == MovieSession.id)
        .group_by(Movie.id, Movie.title, Movie.genre)
        .order_by(reservation_count.desc(), Movie.title)
        .limit(limit)
        .all()
    )
    return [
        PopularMovie(id=row.id, title=row.title, genre=row.genre, reservation_count=row.reservation_count)
        for row in rows
    ]


def popular_movies(db: Session, cache: Cache, limit: int = 3) -> list[PopularMovie]:
    return cache.get_or_compute(
        f"popular-movies:{limit}",
        settings.POPULAR_MOVIES_CACHE_TTL_SECONDS,
        lambda: rank_popular_movies(db, limit),
    )
