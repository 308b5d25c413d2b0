import uuid
from sqlalchemy.orm import Session
from app.core.config import settings
from app.models.reservation import Reservation


def generate_reservation_code(length: int | None = None) -> str:
    """Short human-facing code: the leading characters of a random UUID4, uppercased."""
    length = length or settings.RESERVATION_CODE_LENGTH
    return uuid.uuid4().hex[:length].upper()


def make_unique_reservation_code(db: Session) -> str:
    """Generate a reservation code, drawing again on the rare collision."""
    code = generate_reservation_code()
    while db.query(Reservation.id).filter(Reservation.reservation_code == code).first() is not None:
        code = generate_reservation_code()
    return code
