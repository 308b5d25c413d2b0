"""Concurrent writers against one session: no double booking, no double release.

Each worker uses its own database session, the way separate requests do.
"""

import threading
from datetime import datetime, timedelta, timezone

from app.core.errors import ReservationNotFoundError, ScheduleConflictError, SeatUnavailableError
from app.models import MovieSession, ReservationSeat
from app.services.cancellation import delete_reservation
from app.services.reservations import create_reservation
from app.services.scheduler import create_session

WORKERS = 8


def run_concurrently(session_factory, work, count=WORKERS):
    """Start ``count`` threads at once; each calls work(db, index). Returns outcomes in index order."""
    barrier = threading.Barrier(count)
    outcomes = [None] * count

    def worker(index):
        db = session_factory()
        try:
            barrier.wait()
            outcomes[index] = ("ok", work(db, index))
        except Exception as exc:  # recorded for the assertions below
            outcomes[index] = ("error", exc)
        finally:
            db.close()

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return outcomes


def test_same_seats_are_booked_once(session_factory, user, other_user, movie_session, seats):
    users = [user.id, other_user.id]
    seat_ids = [seats["A1"].id, seats["A2"].id]
    session_id = movie_session.id

    outcomes = run_concurrently(
        session_factory,
        lambda db, i: create_reservation(db, users[i % 2], session_id, seat_ids).id,
    )

    succeeded = [value for kind, value in outcomes if kind == "ok"]
    failed = [value for kind, value in outcomes if kind == "error"]
    assert len(succeeded) == 1
    assert len(failed) == WORKERS - 1
    assert all(isinstance(exc, SeatUnavailableError) for exc in failed)
    assert all(exc.seat_numbers == ["A1", "A2"] for exc in failed)

    db = session_factory()
    try:
        assert db.query(ReservationSeat).count() == 2
        assert db.get(MovieSession, session_id).available_seats == 2
    finally:
        db.close()


def test_disjoint_seats_all_succeed(session_factory, user, movie_session, seats):
    seat_ids = [seats[number].id for number in ("A1", "A2", "B1", "B2")]
    session_id = movie_session.id

    outcomes = run_concurrently(
        session_factory,
        lambda db, i: create_reservation(db, user.id, session_id, [seat_ids[i]]).id,
        count=len(seat_ids),
    )

    assert [kind for kind, _ in outcomes] == ["ok"] * 4
    db = session_factory()
    try:
        assert db.get(MovieSession, session_id).available_seats == 0
    finally:
        db.close()


def test_double_delete_releases_once(session_factory, db, user, movie_session, seats):
    reservation = create_reservation(db, user.id, movie_session.id, [seats["A1"].id, seats["A2"].id])
    reservation_id, session_id, user_id = reservation.id, movie_session.id, user.id
    db.close()

    outcomes = run_concurrently(
        session_factory,
        lambda worker_db, i: delete_reservation(worker_db, reservation_id, user_id, "user"),
        count=2,
    )

    kinds = sorted(kind for kind, _ in outcomes)
    assert kinds == ["error", "ok"]
    assert any(isinstance(value, ReservationNotFoundError) for _, value in outcomes)
    check = session_factory()
    try:
        assert check.get(MovieSession, session_id).available_seats == 4
    finally:
        check.close()


def test_overlapping_sessions_are_scheduled_once(session_factory, cinema, hall, movie):
    start = datetime(2031, 6, 1, 20, 0, tzinfo=timezone.utc)
    cinema_id, hall_id, movie_id = cinema.id, hall.id, movie.id

    outcomes = run_concurrently(
        session_factory,
        lambda db, i: create_session(
            db, cinema_id, hall_id, movie_id,
            start + timedelta(minutes=10 * i),
            start + timedelta(hours=2, minutes=10 * i),
        ).id,
        count=4,
    )

    succeeded = [value for kind, value in outcomes if kind == "ok"]
    assert len(succeeded) == 1
    assert all(isinstance(value, ScheduleConflictError) for kind, value in outcomes if kind == "error")
