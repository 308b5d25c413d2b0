import uuid
import enum
from sqlalchemy import Column, String, DateTime, func, DECIMAL, Integer, ForeignKey, Uuid, Enum as SAEnum, CheckConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.domain.value_objects import SeatSnapshot, SeatType, SnackSelection

class ReservationStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    COMPLETED = "completed"

    @property
    def holds_seats(self) -> bool:
        return self in HOLDING_STATUSES

    def can_transition_to(self, target: "ReservationStatus") -> bool:
        return target in ALLOWED_TRANSITIONS[self]

# Reservations in these states make up a session's booked set
HOLDING_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)

ALLOWED_TRANSITIONS = {
    ReservationStatus.PENDING: frozenset({ReservationStatus.CONFIRMED, ReservationStatus.FAILED}),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.COMPLETED, ReservationStatus.FAILED}),
    ReservationStatus.FAILED: frozenset(),
    ReservationStatus.COMPLETED: frozenset(),
}

class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (CheckConstraint("total_price >= 0", name="ck_reservations_total_price"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    session_id = Column(Uuid, ForeignKey("sessions.id"), nullable=False, index=True)
    total_price = Column(DECIMAL(10, 2), nullable=False)
    status = Column(
        SAEnum(ReservationStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ReservationStatus.PENDING,
        index=True,
    )
    reservation_code = Column(String(20), unique=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="reservations")
    session = relationship("MovieSession", back_populates="reservations")
    seats = relationship(
        "ReservationSeat",
        back_populates="reservation",
        cascade="all, delete-orphan",
        order_by="ReservationSeat.position",
    )
    purchased_snacks = relationship(
        "PurchasedSnack",
        back_populates="reservation",
        cascade="all, delete-orphan",
        order_by="PurchasedSnack.position",
    )

    @property
    def seat_snapshots(self) -> list[SeatSnapshot]:
        return [s.to_snapshot() for s in self.seats]

class ReservationSeat(Base):
    """Seat snapshot copied into a reservation at booking time. Not a live seat reference."""

    __tablename__ = "reservation_seats"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    reservation_id = Column(Uuid, ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    original_seat_id = Column(Uuid, nullable=False, index=True)
    row = Column(Integer, nullable=False)
    column = Column(Integer, nullable=False)
    seat_number = Column(String(10), nullable=False)
    seat_type = Column(SAEnum(SeatType, native_enum=False), nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)

    reservation = relationship("Reservation", back_populates="seats")

    @classmethod
    def from_snapshot(cls, snapshot: SeatSnapshot, position: int) -> "ReservationSeat":
        return cls(
            position=position,
            original_seat_id=snapshot.original_seat_id,
            row=snapshot.row,
            column=snapshot.column,
            seat_number=snapshot.seat_number,
            seat_type=snapshot.type,
            price=snapshot.price,
        )

    def to_snapshot(self) -> SeatSnapshot:
        return SeatSnapshot(
            original_seat_id=self.original_seat_id,
            row=self.row,
            column=self.column,
            seat_number=self.seat_number,
            type=SeatType(self.seat_type),
            price=self.price,
        )

class PurchasedSnack(Base):
    __tablename__ = "reservation_snacks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    reservation_id = Column(Uuid, ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    snack_id = Column(Uuid, nullable=False)
    name = Column(String(100), nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)

    reservation = relationship("Reservation", back_populates="purchased_snacks")

    @classmethod
    def from_selection(cls, selection: SnackSelection, position: int) -> "PurchasedSnack":
        return cls(
            position=position,
            snack_id=selection.snack_id,
            name=selection.name,
            price=selection.price,
            quantity=selection.quantity,
        )
