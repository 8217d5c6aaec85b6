"""Failure-triggered delivery suspension."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from core.config import BreakerConfig

LOGGER = logging.getLogger(__name__)


class CircuitBreaker:
    """Closed/open breaker with a fixed cool-down.

    Failures count up; each success counts down by one (never below zero), so
    isolated failures between successes never trip it. Reaching
    ``max_failures`` opens the breaker until ``reopen_at``; the first read of
    the state after that instant closes it again with a zero count.
    """

    def __init__(self, config: BreakerConfig, clock: Callable[[], float] = time.time) -> None:
        self._config = config
        self._clock = clock
        self.failure_count = 0
        self.reopen_at: Optional[float] = None
        self.trips = 0

    @property
    def is_open(self) -> bool:
        self.poll()
        return self.reopen_at is not None

    def poll(self) -> None:
        """Close the breaker if its cool-down has elapsed."""

        if self.reopen_at is not None and self._clock() >= self.reopen_at:
            self.reopen_at = None
            self.failure_count = 0
            LOGGER.info("Circuit breaker reset")

    def record_failure(self) -> None:
        self.failure_count += 1
        if self.failure_count >= self._config.max_failures and self.reopen_at is None:
            self.reopen_at = self._clock() + self._config.reset_after
            self.trips += 1
            LOGGER.error("Circuit breaker open, pausing %ss", int(self._config.reset_after))

    def record_success(self) -> None:
        if self.failure_count > 0:
            self.failure_count -= 1

    def snapshot(self) -> dict:
        return {
            "is_open": self.is_open,
            "failure_count": self.failure_count,
            "reopen_at": self.reopen_at,
            "trips": self.trips,
        }
