"""Fixed-interval background jobs for one relay identity.

Each job runs on its own asyncio task, independent of message traffic. Tasks
are cancelled on shutdown, after which dirty fingerprints are flushed once
more synchronously.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from core.state import RelayState

LOGGER = logging.getLogger(__name__)

BREAKER_POLL_INTERVAL = 1.0


class MaintenanceTicker:
    def __init__(self, state: RelayState) -> None:
        self._state = state
        self._tasks: list[asyncio.Task] = []

    def jobs(self) -> list[tuple[str, float, Callable[[], object]]]:
        state = self._state
        cache = state.config.cache
        return [
            ("cooldown-sweep", cache.sweep_interval, state.cooldowns.sweep),
            ("pending-sweep", cache.sweep_interval, state.pending.sweep),
            ("fingerprint-flush", cache.flush_interval, state.committed.flush_if_dirty),
            ("breaker-poll", BREAKER_POLL_INTERVAL, state.breaker.poll),
        ]

    def run_once(self) -> dict[str, object]:
        """Run every job a single time, returning each job's result."""

        return {name: job() for name, _, job in self.jobs()}

    async def _every(self, name: str, interval: float, job: Callable[[], object]) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                job()
            except Exception:
                LOGGER.exception("Maintenance job %s failed", name)

    def start(self) -> None:
        if self._tasks:
            return
        for name, interval, job in self.jobs():
            self._tasks.append(asyncio.create_task(self._every(name, interval, job), name=name))
        LOGGER.info("Started %s maintenance jobs", len(self._tasks))

    async def stop(self, flush: bool = True) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        if flush:
            self._state.committed.flush_if_dirty()
