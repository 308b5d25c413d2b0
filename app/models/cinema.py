import uuid
from sqlalchemy import Column, String, DateTime, DECIMAL, ForeignKey, Text, Uuid, CheckConstraint, func
from sqlalchemy.orm import relationship
from app.db.session import Base

class Cinema(Base):
    __tablename__ = "cinemas"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    halls = relationship("Hall", back_populates="cinema", cascade="all, delete-orphan")
    snacks = relationship("Snack", back_populates="cinema", cascade="all, delete-orphan")

class Snack(Base):
    __tablename__ = "snacks"
    __table_args__ = (CheckConstraint("price >= 0", name="ck_snacks_price_non_negative"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    cinema_id = Column(Uuid, ForeignKey("cinemas.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(DECIMAL(10, 2), nullable=False)

    cinema = relationship("Cinema", back_populates="snacks")
