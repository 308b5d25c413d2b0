"""Immutable values captured when a reservation is booked.

A reservation never points at live seat or snack rows for its pricing: it
keeps copies taken at booking time, so later edits to a hall or a snack menu
cannot change what a past booking cost.
"""

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Self
from uuid import UUID

if TYPE_CHECKING:
    from app.models.seat import Seat


class SeatType(str, enum.Enum):
    REGULAR = "regular"
    VIP = "vip"
    COUPLE = "couple"


@dataclass(frozen=True)
class SeatSnapshot:
    """Seat identity, position and price as they were when booked."""

    original_seat_id: UUID
    row: int
    column: int
    seat_number: str
    type: SeatType
    price: Decimal

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError("Seat price cannot be negative")

    @classmethod
    def from_seat(cls, seat: "Seat") -> Self:
        return cls(
            original_seat_id=seat.id,
            row=seat.row,
            column=seat.column,
            seat_number=seat.seat_number,
            type=SeatType(seat.type),
            price=Decimal(str(seat.price)),
        )


@dataclass(frozen=True)
class SnackSelection:
    """A validated snack line: catalog price times a positive quantity."""

    snack_id: UUID
    name: str
    price: Decimal
    quantity: int

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError("Snack quantity must be positive")
        if self.price < 0:
            raise ValueError("Snack price cannot be negative")

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity
