"""Pytest configuration and shared fixtures."""

import os

# Keep the app's module-level engine away from Postgres; tests bind their own
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.api.deps import get_cache
from app.core.cache import NullCache
from app.core.security import create_access_token
from app.db.base import Base
from app.db.session import build_engine, get_db
from app.main import app
from app.models import Cinema, Hall, Movie, MovieSession, Snack, User
from app.utils.clock import utcnow


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'cinema.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture
def cinema(db):
    cinema = Cinema(name="Odeon Central", city="Lisbon")
    db.add(cinema)
    db.commit()
    return cinema


@pytest.fixture
def hall(db, cinema):
    """2x2 hall: A1 regular 10, A2 vip 15, B1 regular 10, B2 couple 20."""
    hall = Hall(cinema_id=cinema.id, name="Hall 1", layout_rows=2, layout_columns=2)
    hall.add_seat(1, 1, "A1", "regular", 10)
    hall.add_seat(1, 2, "A2", "vip", 15)
    hall.add_seat(2, 1, "B1", "regular", 10)
    hall.add_seat(2, 2, "B2", "couple", 20)
    db.add(hall)
    db.commit()
    return hall


@pytest.fixture
def seats(hall):
    return {seat.seat_number: seat for seat in hall.seats}


@pytest.fixture
def snacks(db, cinema):
    popcorn = Snack(cinema_id=cinema.id, name="Popcorn", price=Decimal("5.00"))
    soda = Snack(cinema_id=cinema.id, name="Soda", price=Decimal("3.50"))
    db.add_all([popcorn, soda])
    db.commit()
    return {"popcorn": popcorn, "soda": soda}


@pytest.fixture
def movie(db):
    movie = Movie(title="Arrival", genre="sci-fi", duration_minutes=116)
    db.add(movie)
    db.commit()
    return movie


@pytest.fixture
def schedule(db, hall, movie):
    """Insert a session directly, bypassing the scheduler's checks."""

    def _schedule(start, duration=timedelta(hours=2), for_movie=None, in_hall=None):
        target = in_hall or hall
        session = MovieSession(
            cinema_id=target.cinema_id,
            hall_id=target.id,
            movie_id=(for_movie or movie).id,
            start_time=start,
            end_time=start + duration,
            available_seats=len(target.seats),
        )
        db.add(session)
        db.commit()
        return session

    return _schedule


@pytest.fixture
def movie_session(schedule):
    return schedule(utcnow() + timedelta(days=3))


@pytest.fixture
def drop_hall(db, engine):
    """Delete a hall row outside the ORM, leaving its sessions pointing at nothing."""

    def _drop(hall):
        db.commit()
        raw = engine.raw_connection()
        try:
            cursor = raw.cursor()
            cursor.execute("PRAGMA foreign_keys=OFF")
            cursor.execute("DELETE FROM seats WHERE hall_id = ?", (hall.id.hex,))
            cursor.execute("DELETE FROM halls WHERE id = ?", (hall.id.hex,))
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            raw.close()
        db.expire_all()

    return _drop


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def _make_user(db, email, full_name, role="user"):
    user = User(email=email, full_name=full_name, role=role)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def user(db):
    return _make_user(db, "ana@example.com", "Ana Costa")


@pytest.fixture
def other_user(db):
    return _make_user(db, "rui@example.com", "Rui Lopes")


@pytest.fixture
def admin(db):
    return _make_user(db, "admin@example.com", "Box Office", role="admin")


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = NullCache
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token(user.id, user.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers
