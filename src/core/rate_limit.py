"""Outbound volume ceilings (per hour and per day).

Two interchangeable strategies are provided:

- ``sliding``: keeps send timestamps and prunes anything at least one window
  old on every check. Exact: at no instant do more than ``hourly`` sends sit
  inside any trailing 3600s span.
- ``fixed``: a counter per window, zeroed once *more than* one window has
  elapsed since the last reset. Cheaper, but up to twice the ceiling can pass
  around a reset boundary.

A rate-limited attempt only bumps ``rejected``; no other state changes.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import Callable, Optional, Protocol

from core.config import RateLimitConfig

LOGGER = logging.getLogger(__name__)

HOUR = 3600.0
DAY = 86400.0


class RateLimiter(Protocol):
    rejected: int

    def allow(self, now: Optional[float] = None) -> bool:
        ...

    def record(self, now: Optional[float] = None) -> None:
        ...

    def snapshot(self) -> dict:
        ...


class SlidingWindowRateLimiter:
    """Exact trailing-window limiter backed by timestamp queues."""

    def __init__(self, config: RateLimitConfig, clock: Callable[[], float] = time.time) -> None:
        self._config = config
        self._clock = clock
        self._hour: deque[float] = deque()
        self._day: deque[float] = deque()
        self.rejected = 0

    def _prune(self, now: float) -> None:
        while self._hour and now - self._hour[0] >= HOUR:
            self._hour.popleft()
        while self._day and now - self._day[0] >= DAY:
            self._day.popleft()

    def allow(self, now: Optional[float] = None) -> bool:
        now = self._clock() if now is None else now
        self._prune(now)
        if len(self._hour) < self._config.hourly and len(self._day) < self._config.daily:
            return True
        self.rejected += 1
        LOGGER.warning(
            "Rate limit: %s/%sh, %s/%sd",
            len(self._hour),
            self._config.hourly,
            len(self._day),
            self._config.daily,
        )
        return False

    def record(self, now: Optional[float] = None) -> None:
        now = self._clock() if now is None else now
        self._hour.append(now)
        self._day.append(now)

    def snapshot(self) -> dict:
        return {
            "strategy": "sliding",
            "hourly": len(self._hour),
            "daily": len(self._day),
            "hourly_limit": self._config.hourly,
            "daily_limit": self._config.daily,
            "rejected": self.rejected,
        }


class FixedWindowRateLimiter:
    """Counter-with-reset limiter; windows start when the limiter is built."""

    def __init__(self, config: RateLimitConfig, clock: Callable[[], float] = time.time) -> None:
        self._config = config
        self._clock = clock
        started = clock()
        self.hourly = 0
        self.daily = 0
        self.last_hour_reset = started
        self.last_day_reset = started
        self.rejected = 0

    def _roll(self, now: float) -> None:
        if now - self.last_hour_reset > HOUR:
            LOGGER.info("Hourly reset: %s msgs sent", self.hourly)
            self.hourly = 0
            self.last_hour_reset = now
        if now - self.last_day_reset > DAY:
            LOGGER.info("Daily reset: %s msgs sent", self.daily)
            self.daily = 0
            self.last_day_reset = now

    def allow(self, now: Optional[float] = None) -> bool:
        now = self._clock() if now is None else now
        self._roll(now)
        if self.hourly < self._config.hourly and self.daily < self._config.daily:
            return True
        self.rejected += 1
        LOGGER.warning(
            "Rate limit: %s/%sh, %s/%sd",
            self.hourly,
            self._config.hourly,
            self.daily,
            self._config.daily,
        )
        return False

    def record(self, now: Optional[float] = None) -> None:
        now = self._clock() if now is None else now
        self._roll(now)
        self.hourly += 1
        self.daily += 1

    def snapshot(self) -> dict:
        return {
            "strategy": "fixed",
            "hourly": self.hourly,
            "daily": self.daily,
            "hourly_limit": self._config.hourly,
            "daily_limit": self._config.daily,
            "rejected": self.rejected,
        }


def build_rate_limiter(config: RateLimitConfig, clock: Callable[[], float] = time.time) -> RateLimiter:
    if config.strategy == "sliding":
        return SlidingWindowRateLimiter(config, clock)
    if config.strategy == "fixed":
        return FixedWindowRateLimiter(config, clock)
    raise ValueError(f"Unsupported rate limit strategy: {config.strategy}")
