from app.domain.value_objects import SeatSnapshot, SeatType, SnackSelection

__all__ = [
    "SeatSnapshot",
    "SeatType",
    "SnackSelection",
]
