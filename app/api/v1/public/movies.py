from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_cache
from app.core.cache import Cache
from app.schemas.movie import PopularMovie
from app.services.popularity import popular_movies

router = APIRouter(prefix="/movies", tags=["Movies"])


@router.get("/popular", response_model=List[PopularMovie])
def get_popular_movies(
    limit: int = Query(3, ge=1, le=20),
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
):
    """Movies with the most reservations, most first. Served from cache for a few minutes."""
    return [
        PopularMovie(
            id=movie.id,
            title=movie.title,
            genre=movie.genre,
            reservation_count=movie.reservation_count,
        )
        for movie in popular_movies(db, cache, limit)
    ]
