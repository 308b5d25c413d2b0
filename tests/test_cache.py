"""Tests for the read-path cache and the popular-movies ranking it fronts."""

from datetime import timedelta

import pytest

from app.core.cache import NullCache, TTLCache
from app.models import Movie
from app.services.popularity import popular_movies, rank_popular_movies
from app.services.reservations import create_reservation


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class Counter:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        return self.calls


class TestTTLCache:
    def test_value_is_reused_until_ttl_passes(self):
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        compute = Counter()

        assert cache.get_or_compute("k", 10, compute) == 1
        clock.advance(9)
        assert cache.get_or_compute("k", 10, compute) == 1
        clock.advance(1)
        assert cache.get_or_compute("k", 10, compute) == 2

    def test_keys_are_independent(self):
        cache = TTLCache(clock=FakeClock())
        assert cache.get_or_compute("a", 10, lambda: "a") == "a"
        assert cache.get_or_compute("b", 10, lambda: "b") == "b"

    def test_invalidate_one_key(self):
        cache = TTLCache(clock=FakeClock())
        compute = Counter()
        cache.get_or_compute("a", 10, compute)
        cache.get_or_compute("b", 10, compute)

        cache.invalidate("a")

        assert cache.get_or_compute("a", 10, compute) == 3
        assert cache.get_or_compute("b", 10, compute) == 2

    def test_invalidate_everything(self):
        cache = TTLCache(clock=FakeClock())
        compute = Counter()
        cache.get_or_compute("a", 10, compute)

        cache.invalidate()

        assert cache.get_or_compute("a", 10, compute) == 2

    def test_failed_compute_is_not_cached(self):
        cache = TTLCache(clock=FakeClock())

        def boom():
            raise RuntimeError("database down")

        with pytest.raises(RuntimeError):
            cache.get_or_compute("k", 10, boom)
        assert cache.get_or_compute("k", 10, lambda: "ok") == "ok"


class TestNullCache:
    def test_always_recomputes(self):
        cache = NullCache()
        compute = Counter()
        cache.get_or_compute("k", 10, compute)
        assert cache.get_or_compute("k", 10, compute) == 2


@pytest.fixture
def second_movie(db):
    movie = Movie(title="Dune", genre="sci-fi", duration_minutes=155)
    db.add(movie)
    db.commit()
    return movie


class TestPopularMovies:
    def test_ranked_by_reservation_count(self, db, user, other_user, movie, second_movie, movie_session, seats, schedule):
        dune = schedule(movie_session.end_time + timedelta(hours=1), for_movie=second_movie)
        create_reservation(db, user.id, movie_session.id, [seats["A1"].id])
        create_reservation(db, other_user.id, movie_session.id, [seats["A2"].id])
        create_reservation(db, user.id, dune.id, [seats["A1"].id])

        ranking = rank_popular_movies(db, limit=3)

        assert [(m.title, m.reservation_count) for m in ranking] == [("Arrival", 2), ("Dune", 1)]

    def test_ties_are_ordered_by_title(self, db, user, movie, second_movie, movie_session, seats, schedule):
        dune = schedule(movie_session.end_time, for_movie=second_movie)
        create_reservation(db, user.id, dune.id, [seats["B1"].id])
        create_reservation(db, user.id, movie_session.id, [seats["B1"].id])

        assert [m.title for m in rank_popular_movies(db, limit=3)] == ["Arrival", "Dune"]

    def test_limit(self, db, user, movie, second_movie, movie_session, seats, schedule):
        dune = schedule(movie_session.end_time, for_movie=second_movie)
        create_reservation(db, user.id, dune.id, [seats["B1"].id])
        create_reservation(db, user.id, dune.id, [seats["B2"].id])
        create_reservation(db, user.id, movie_session.id, [seats["B1"].id])

        assert [m.title for m in rank_popular_movies(db, limit=1)] == ["Dune"]

    def test_served_from_cache_until_expiry(self, db, user, movie, movie_session, seats):
        clock = FakeClock()
        cache = TTLCache(clock=clock)

        assert popular_movies(db, cache, limit=3) == []

        create_reservation(db, user.id, movie_session.id, [seats["A1"].id])
        assert popular_movies(db, cache, limit=3) == []

        clock.advance(301)
        assert [m.title for m in popular_movies(db, cache, limit=3)] == ["Arrival"]
