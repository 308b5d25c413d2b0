import uuid
from sqlalchemy import Column, String, Integer, DECIMAL, ForeignKey, Uuid, Enum as SAEnum, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.domain.value_objects import SeatType

class Seat(Base):
    __tablename__ = "seats"
    __table_args__ = (
        UniqueConstraint("hall_id", "seat_number", name="uq_seats_hall_seat_number"),
        CheckConstraint("price >= 0", name="ck_seats_price_non_negative"),
        CheckConstraint('"row" >= 1 AND "column" >= 1', name="ck_seats_position_positive"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    hall_id = Column(Uuid, ForeignKey("halls.id"), nullable=False, index=True)
    row = Column(Integer, nullable=False)
    column = Column(Integer, nullable=False)
    seat_number = Column(String(10), nullable=False)
    type = Column(SAEnum(SeatType, native_enum=False), nullable=False, default=SeatType.REGULAR)
    price = Column(DECIMAL(10, 2), nullable=False)

    hall = relationship("Hall", back_populates="seats")
