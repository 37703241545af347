"""Rolling-window request limiter for the content generation endpoints.

Limits are global per key (for example ``ai-writer-improve``), not per caller.
The shipped counter store lives in process memory: it resets on restart and
is not shared between instances. A deployment with several workers should
provide a CounterStore backed by a shared key-value store with expiry.
"""

import time
from collections import deque
from typing import Protocol

import structlog

logger = structlog.get_logger()

DEFAULT_WINDOW_SECONDS = 60.0


class CounterStore(Protocol):
    """Protocol for recording hits inside a rolling window."""

    def count_recent(self, key: str, window_start: float) -> int: ...

    def record_hit(self, key: str, at: float) -> None: ...


class InMemoryCounterStore:
    """Per-key deques of hit timestamps, pruned lazily on read."""

    def __init__(self) -> None:
        self._hits: dict[str, deque[float]] = {}

    def count_recent(self, key: str, window_start: float) -> int:
        hits = self._hits.get(key)
        if hits is None:
            return 0
        while hits and hits[0] <= window_start:
            hits.popleft()
        return len(hits)

    def record_hit(self, key: str, at: float) -> None:
        self._hits.setdefault(key, deque()).append(at)


class RateLimiter:
    """Allow at most ``limit`` hits per key in any rolling ``window_seconds`` span."""

    def __init__(
        self,
        limit: int,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        store: CounterStore | None = None,
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self._limit = limit
        self._window = window_seconds
        self._store = store or InMemoryCounterStore()

    @property
    def limit(self) -> int:
        return self._limit

    def hit(self, key: str) -> bool:
        """Record a request for ``key``. Return False (and record nothing) when over budget."""
        now = time.monotonic()
        if self._store.count_recent(key, now - self._window) >= self._limit:
            logger.warning("rate limit exceeded", key=key, limit=self._limit)
            return False
        self._store.record_hit(key, now)
        return True
