"""Tests for the cancellation policy."""

from datetime import timedelta
from uuid import uuid4

import pytest

from app.core.errors import CancellationWindowError, ReservationNotFoundError, UnauthorizedError
from app.models import MovieSession, Reservation, ReservationSeat, ReservationStatus
from app.services.cancellation import can_manage_reservation, delete_reservation
from app.services.reservations import create_reservation, update_reservation_status
from app.utils.clock import as_utc


@pytest.fixture
def booking(db, user, movie_session, seats):
    return create_reservation(db, user.id, movie_session.id, [seats["A1"].id, seats["A2"].id])


@pytest.fixture
def starts_at(movie_session):
    return as_utc(movie_session.start_time)


def available_seats(db, session_id) -> int:
    db.expire_all()
    return db.get(MovieSession, session_id).available_seats


class TestDeleteReservation:
    def test_owner_deletes_and_seats_return(self, db, user, movie_session, booking, starts_at):
        released = delete_reservation(db, booking.id, user.id, user.role, now=starts_at - timedelta(days=2))

        assert released == 2
        assert available_seats(db, movie_session.id) == 4
        assert db.get(Reservation, booking.id) is None
        assert db.query(ReservationSeat).count() == 0

    def test_admin_may_delete_any_reservation(self, db, admin, booking, starts_at):
        released = delete_reservation(db, booking.id, admin.id, admin.role, now=starts_at - timedelta(days=2))
        assert released == 2

    def test_other_user_is_refused(self, db, other_user, movie_session, booking, starts_at):
        with pytest.raises(UnauthorizedError):
            delete_reservation(db, booking.id, other_user.id, other_user.role, now=starts_at - timedelta(days=2))

        assert db.get(Reservation, booking.id) is not None
        assert available_seats(db, movie_session.id) == 2

    def test_inside_window_is_refused(self, db, user, movie_session, booking, starts_at):
        with pytest.raises(CancellationWindowError):
            delete_reservation(
                db, booking.id, user.id, user.role,
                now=starts_at - timedelta(hours=23, minutes=59),
            )

        assert db.get(Reservation, booking.id) is not None
        assert available_seats(db, movie_session.id) == 2

    def test_admin_is_also_bound_by_window(self, db, admin, booking, starts_at):
        with pytest.raises(CancellationWindowError):
            delete_reservation(db, booking.id, admin.id, admin.role, now=starts_at - timedelta(hours=1))

    def test_just_outside_window(self, db, user, movie_session, booking, starts_at):
        released = delete_reservation(
            db, booking.id, user.id, user.role,
            now=starts_at - timedelta(hours=24, minutes=1),
        )

        assert released == 2
        assert available_seats(db, movie_session.id) == 4

    def test_exactly_at_window_edge(self, db, user, booking, starts_at):
        assert delete_reservation(db, booking.id, user.id, user.role, now=starts_at - timedelta(hours=24)) == 2

    def test_after_session_started(self, db, user, booking, starts_at):
        with pytest.raises(CancellationWindowError):
            delete_reservation(db, booking.id, user.id, user.role, now=starts_at + timedelta(minutes=5))

    def test_failed_reservation_releases_nothing(self, db, user, movie_session, booking, starts_at):
        update_reservation_status(db, booking.id, ReservationStatus.FAILED)

        released = delete_reservation(db, booking.id, user.id, user.role, now=starts_at - timedelta(days=2))

        assert released == 0
        assert available_seats(db, movie_session.id) == 4

    def test_default_clock(self, db, user, booking):
        # movie_session starts three days from now
        assert delete_reservation(db, booking.id, user.id, user.role) == 2

    def test_unknown_reservation(self, db, user):
        with pytest.raises(ReservationNotFoundError):
            delete_reservation(db, uuid4(), user.id, user.role)


class TestCanManageReservation:
    def test_owner_and_admin(self, booking, user, other_user, admin):
        assert can_manage_reservation(booking, user.id, user.role)
        assert can_manage_reservation(booking, admin.id, admin.role)
        assert not can_manage_reservation(booking, other_user.id, other_user.role)
