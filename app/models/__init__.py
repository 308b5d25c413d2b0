from app.models.user import User
from app.models.cinema import Cinema, Snack
from app.models.hall import Hall
from app.models.seat import Seat
from app.domain.value_objects import SeatType
from app.models.movie import Movie
from app.models.movie_session import MovieSession
from app.models.reservation import (
    Reservation, ReservationSeat, PurchasedSnack, ReservationStatus, HOLDING_STATUSES,
)
