from __future__ import annotations

import pytest

from conftest import FakeClock

from core.config import RateLimitConfig
from core.rate_limit import (
    DAY,
    HOUR,
    FixedWindowRateLimiter,
    SlidingWindowRateLimiter,
    build_rate_limiter,
)


def _send(limiter, now: float) -> bool:
    if not limiter.allow(now):
        return False
    limiter.record(now)
    return True


@pytest.mark.parametrize("strategy", ["sliding", "fixed"])
def test_hourly_ceiling(strategy: str) -> None:
    limiter = build_rate_limiter(RateLimitConfig(strategy=strategy, hourly=3, daily=100), FakeClock(0))

    assert [_send(limiter, t) for t in (0, 10, 20, 30)] == [True, True, True, False]
    assert limiter.rejected == 1
    # A denied attempt leaves the counts untouched.
    assert limiter.snapshot()["hourly"] == 3


@pytest.mark.parametrize("strategy", ["sliding", "fixed"])
def test_daily_ceiling(strategy: str) -> None:
    limiter = build_rate_limiter(RateLimitConfig(strategy=strategy, hourly=100, daily=2), FakeClock(0))

    assert _send(limiter, 0)
    assert _send(limiter, 1)
    assert not _send(limiter, 2 * HOUR)


def test_sliding_entry_expires_exactly_one_window_later() -> None:
    limiter = SlidingWindowRateLimiter(RateLimitConfig(hourly=1, daily=100), FakeClock(0))
    assert _send(limiter, 100)
    assert not limiter.allow(100 + HOUR - 0.001)
    assert limiter.allow(100 + HOUR)


def test_sliding_daily_window_trails() -> None:
    limiter = SlidingWindowRateLimiter(RateLimitConfig(hourly=100, daily=2), FakeClock(0))
    _send(limiter, 0)
    _send(limiter, 5 * HOUR)

    assert not limiter.allow(DAY - 1)
    assert limiter.allow(DAY)
    assert limiter.snapshot()["daily"] == 1


def test_fixed_resets_only_after_more_than_a_window() -> None:
    limiter = FixedWindowRateLimiter(RateLimitConfig(hourly=1, daily=100), FakeClock(0))
    assert _send(limiter, 10)
    assert not limiter.allow(HOUR)
    assert limiter.allow(HOUR + 0.5)
    assert limiter.hourly == 0
    assert limiter.last_hour_reset == HOUR + 0.5


def test_fixed_allows_burst_across_reset() -> None:
    limiter = FixedWindowRateLimiter(RateLimitConfig(hourly=2, daily=100), FakeClock(0))
    sent = [_send(limiter, t) for t in (HOUR - 2, HOUR - 1, HOUR + 1, HOUR + 2)]
    assert sent == [True, True, True, True]


def test_uses_clock_when_no_time_given() -> None:
    clock = FakeClock(0)
    limiter = SlidingWindowRateLimiter(RateLimitConfig(hourly=1, daily=100), clock)
    limiter.record()
    assert not limiter.allow()
    clock.advance(HOUR)
    assert limiter.allow()


def test_unknown_strategy() -> None:
    with pytest.raises(ValueError):
        build_rate_limiter(RateLimitConfig(strategy="token-bucket"))
