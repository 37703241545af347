"""Tests for the rolling-window rate limiter."""

from unittest.mock import patch

import pytest

from shared.ratelimit import InMemoryCounterStore, RateLimiter

T0 = 1_700_000_000.0


def _hits_at(limiter: RateLimiter, key: str, times: list[float]) -> list[bool]:
    results = []
    with patch("shared.ratelimit.time") as mock_time:
        for t in times:
            mock_time.monotonic.return_value = t
            results.append(limiter.hit(key))
    return results


class TestRateLimiter:
    def test_twentieth_allowed_twenty_first_rejected(self):
        limiter = RateLimiter(limit=20, window_seconds=60)

        results = _hits_at(limiter, "ai-writer-improve", [T0 + i for i in range(21)])

        assert all(results[:20])
        assert results[20] is False

    def test_allows_again_after_window_rolls_over(self):
        limiter = RateLimiter(limit=20, window_seconds=60)
        _hits_at(limiter, "ai-writer-improve", [T0] * 20)

        assert _hits_at(limiter, "ai-writer-improve", [T0 + 59.999]) == [False]
        assert _hits_at(limiter, "ai-writer-improve", [T0 + 60.001]) == [True]

    def test_window_is_rolling_not_fixed(self):
        limiter = RateLimiter(limit=2, window_seconds=60)
        _hits_at(limiter, "k", [T0, T0 + 30])

        # The first hit leaves the window at T0+60; the second is still inside.
        assert _hits_at(limiter, "k", [T0 + 61, T0 + 62]) == [True, False]

    def test_keys_are_independent(self):
        limiter = RateLimiter(limit=1, window_seconds=60)

        assert _hits_at(limiter, "ai-writer-improve", [T0, T0]) == [True, False]
        assert _hits_at(limiter, "ai-writer-shorten", [T0]) == [True]

    def test_rejected_hits_do_not_extend_the_window(self):
        limiter = RateLimiter(limit=1, window_seconds=60)
        _hits_at(limiter, "k", [T0, T0 + 10, T0 + 20])

        assert _hits_at(limiter, "k", [T0 + 60.5]) == [True]

    def test_limit_must_be_positive(self):
        with pytest.raises(ValueError, match="at least 1"):
            RateLimiter(limit=0)

    def test_uses_supplied_store(self):
        store = InMemoryCounterStore()
        limiter = RateLimiter(limit=5, store=store)

        _hits_at(limiter, "k", [T0])

        assert store.count_recent("k", T0 - 1) == 1

    def test_wall_clock_changes_do_not_reset_window(self):
        limiter = RateLimiter(limit=1, window_seconds=60)

        with patch("shared.ratelimit.time") as mock_time:
            mock_time.monotonic.return_value = T0
            mock_time.time.return_value = T0
            assert limiter.hit("k") is True

            # Wall clock jumps forward an hour; the monotonic clock moved one second.
            mock_time.time.return_value = T0 + 3600
            mock_time.monotonic.return_value = T0 + 1
            assert limiter.hit("k") is False
