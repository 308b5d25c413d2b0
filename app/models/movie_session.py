import uuid
from sqlalchemy import Column, DateTime, Integer, ForeignKey, Uuid, CheckConstraint, Index, func
from sqlalchemy.orm import relationship
from app.db.session import Base

class MovieSession(Base):
    """A scheduled screening of a movie in a hall over [start_time, end_time)."""

    __tablename__ = "sessions"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_sessions_interval"),
        CheckConstraint("available_seats >= 0", name="ck_sessions_available_seats"),
        Index("ix_sessions_hall_start", "hall_id", "start_time"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    cinema_id = Column(Uuid, ForeignKey("cinemas.id"), nullable=False, index=True)
    hall_id = Column(Uuid, ForeignKey("halls.id"), nullable=False)
    movie_id = Column(Uuid, ForeignKey("movies.id"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    available_seats = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    cinema = relationship("Cinema")
    hall = relationship("Hall", back_populates="sessions")
    movie = relationship("Movie", back_populates="sessions")
    reservations = relationship("Reservation", back_populates="session", cascade="all, delete-orphan")
