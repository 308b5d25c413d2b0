from pydantic import UUID4
from datetime import datetime

from app.schemas.common import CamelModel


# Session - Create (POST /sessions)
class SessionCreate(CamelModel):
    cinema_id: UUID4
    hall_id: UUID4
    movie_id: UUID4
    start_time: datetime
    end_time: datetime


class Session(SessionCreate):
    id: UUID4
    available_seats: int
