import uuid
from sqlalchemy import Column, String, DateTime, Integer, Uuid, func
from sqlalchemy.orm import relationship
from app.db.session import Base

class Movie(Base):
    __tablename__ = "movies"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    genre = Column(String(50), nullable=True, index=True)
    duration_minutes = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    sessions = relationship("MovieSession", back_populates="movie", cascade="all, delete-orphan")
