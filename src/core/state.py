"""Mutable relay state for a single bot identity.

Every component gets this object by reference instead of reaching for module
globals, so two identities in one process never share dedup sets, cooldowns
or breaker state.
"""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from core.breaker import CircuitBreaker
from core.config import RelayConfig
from core.dedup import CommittedFingerprintStore, PendingFingerprintLock, ReplayIdWindow
from core.ports import FingerprintFilePort
from core.rate_limit import RateLimiter, build_rate_limiter
from core.stats import RelayStats

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class SendCooldownMap:
    """Per-destination timestamp of the last send attempt."""

    def __init__(self, cooldown: float, clock: Clock = time.time) -> None:
        self._cooldown = cooldown
        self._clock = clock
        self._last_send: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._last_send)

    def is_ready(self, group_id: str) -> bool:
        last = self._last_send.get(group_id)
        return last is None or self._clock() - last >= self._cooldown

    def mark(self, group_id: str) -> None:
        self._last_send[group_id] = self._clock()

    def clear(self, group_id: str) -> None:
        self._last_send.pop(group_id, None)

    def sweep(self) -> int:
        now = self._clock()
        stale = [gid for gid, ts in self._last_send.items() if now - ts >= self._cooldown]
        for group_id in stale:
            del self._last_send[group_id]
        return len(stale)


@dataclass
class RelayState:
    """All shared mutable state, owned by one bot lifecycle."""

    config: RelayConfig
    committed: CommittedFingerprintStore
    pending: PendingFingerprintLock
    replay_ids: ReplayIdWindow
    cooldowns: SendCooldownMap
    rate_limiter: RateLimiter
    breaker: CircuitBreaker
    stats: RelayStats = field(default_factory=RelayStats)
    clock: Clock = time.time
    sleep: Sleep = asyncio.sleep
    rng: random.Random = field(default_factory=random.Random)
    last_reconnect: Optional[float] = None
    needs_settling: bool = True

    @classmethod
    def build(
        cls,
        config: RelayConfig,
        fingerprint_file: Optional[FingerprintFilePort] = None,
        clock: Clock = time.time,
        sleep: Sleep = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ) -> "RelayState":
        return cls(
            config=config,
            committed=CommittedFingerprintStore(config.cache, fingerprint_file, clock),
            pending=PendingFingerprintLock(config.gate.pending_stale_after, clock),
            replay_ids=ReplayIdWindow(config.gate.replay_capacity),
            cooldowns=SendCooldownMap(config.pacing.group_cooldown, clock),
            rate_limiter=build_rate_limiter(config.rate_limit, clock),
            breaker=CircuitBreaker(config.breaker, clock),
            clock=clock,
            sleep=sleep,
            rng=rng or random.Random(),
        )

    def mark_reconnected(self) -> None:
        """Start the strict-age window and re-arm the settling delay."""

        if self.last_reconnect is not None:
            self.stats.reconnects += 1
        self.last_reconnect = self.clock()
        self.needs_settling = True

    def in_reconnect_window(self) -> bool:
        if self.last_reconnect is None:
            return False
        return self.clock() - self.last_reconnect < self.config.gate.reconnect_window
