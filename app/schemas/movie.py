from typing import Optional
from pydantic import UUID4

from app.schemas.common import CamelModel


# Popular movies (GET /movies/popular)
class PopularMovie(CamelModel):
    id: UUID4
    title: str
    genre: Optional[str] = None
    reservation_count: int
