import uuid
from decimal import Decimal
from sqlalchemy import Column, String, Integer, ForeignKey, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.core.errors import ValidationError
from app.domain.value_objects import SeatType
from app.models.seat import Seat

MAX_LAYOUT_SIZE = 50

class Hall(Base):
    __tablename__ = "halls"
    __table_args__ = (
        CheckConstraint(f"layout_rows BETWEEN 1 AND {MAX_LAYOUT_SIZE}", name="ck_halls_layout_rows"),
        CheckConstraint(f"layout_columns BETWEEN 1 AND {MAX_LAYOUT_SIZE}", name="ck_halls_layout_columns"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    cinema_id = Column(Uuid, ForeignKey("cinemas.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    layout_rows = Column(Integer, nullable=False)
    layout_columns = Column(Integer, nullable=False)

    # Relationships
    cinema = relationship("Cinema", back_populates="halls")
    seats = relationship("Seat", back_populates="hall", cascade="all, delete-orphan")
    sessions = relationship("MovieSession", back_populates="hall", cascade="all, delete-orphan")

    @property
    def layout(self) -> dict:
        return {"rows": self.layout_rows, "columns": self.layout_columns}

    def add_seat(self, row: int, column: int, seat_number: str, type, price) -> Seat:
        """Append a seat after checking it fits the layout and its number is free."""
        if not 1 <= row <= self.layout_rows:
            raise ValidationError(f"Seat {seat_number}: row {row} is outside 1..{self.layout_rows}")
        if not 1 <= column <= self.layout_columns:
            raise ValidationError(f"Seat {seat_number}: column {column} is outside 1..{self.layout_columns}")
        if any(s.seat_number == seat_number for s in self.seats):
            raise ValidationError(f"Seat number {seat_number} already exists in hall {self.name}")
        price = Decimal(str(price))
        if price < 0:
            raise ValidationError(f"Seat {seat_number}: price cannot be negative")

        seat = Seat(row=row, column=column, seat_number=seat_number, type=SeatType(type), price=price)
        self.seats.append(seat)
        return seat
