"""Read-path caching.

Caches are plain objects handed to the code that needs them (through the
``get_cache`` dependency for routes), never module globals, so tests can
swap in a ``NullCache`` or a ``TTLCache`` with a fake clock.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Protocol, TypeVar

T = TypeVar("T")


class Cache(Protocol):
    def get_or_compute(self, key: str, ttl: float, compute: Callable[[], T]) -> T: ...

    def invalidate(self, key: str | None = None) -> None: ...


@dataclass
class _Entry:
    value: Any
    expires_at: float


class TTLCache:
    """In-process cache: key -> value, recomputed once the entry's TTL has passed."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def get_or_compute(self, key: str, ttl: float, compute: Callable[[], T]) -> T:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and now < entry.expires_at:
                return entry.value

        # Computed outside the lock; two concurrent misses may both compute
        value = compute()
        with self._lock:
            self._entries[key] = _Entry(value=value, expires_at=now + ttl)
        return value

    def invalidate(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)


class NullCache:
    """Cache that never stores anything."""

    def get_or_compute(self, key: str, ttl: float, compute: Callable[[], T]) -> T:
        return compute()

    def invalidate(self, key: str | None = None) -> None:
        pass
