"""Deduplication helpers (core domain).

Fingerprints are keyed on normalized content plus a coarse bucket of the
message's own timestamp, so the same request reposted across several groups
within a few minutes is relayed once.
"""

from __future__ import annotations

import logging
import re
import time
from collections import deque
from datetime import datetime
from typing import Callable, Optional

from core.config import CacheConfig
from core.ports import FingerprintFilePort

LOGGER = logging.getLogger(__name__)

BUCKET_MS = 5 * 60 * 1000
MAX_NORMALIZED_CHARS = 300
PHONE_TOKEN = "PHONE"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text)


def normalize_for_fingerprint(text: str) -> str:
    """Normalize text for deterministic fingerprinting.

    Long digit runs collapse to a single token so ``98765-43210`` and
    ``9876543210`` produce the same key.
    """

    lowered = _collapse_whitespace(text.lower())
    stripped = re.sub(r"[^\w\s]", "", lowered)
    return re.sub(r"\d{10,}", PHONE_TOKEN, stripped).strip()[:MAX_NORMALIZED_CHARS]


def hash32(value: str) -> int:
    """Signed 32-bit polynomial string hash (``h = 31*h + ord(c)``)."""

    result = 0
    for char in value:
        result = (result * 31 + ord(char)) & 0xFFFFFFFF
    if result >= 0x80000000:
        result -= 0x100000000
    return result


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def to_millis(date: datetime) -> int:
    return int(date.timestamp() * 1000)


def time_bucket(timestamp_ms: int) -> int:
    return timestamp_ms // BUCKET_MS


def compute_fingerprint(text: str, timestamp_ms: int) -> str:
    """Return ``fp-<hash>-<bucket>`` for a message text and its origin time."""

    if not text:
        return ""
    text_hash = _to_base36(abs(hash32(normalize_for_fingerprint(text))))
    return f"fp-{text_hash}-{time_bucket(timestamp_ms)}"


class CommittedFingerprintStore:
    """Fingerprints of messages that were delivered at least once.

    Entries keep insertion order (oldest first) so overflow trimming and the
    capped save both work on recency without sorting.
    """

    def __init__(
        self,
        config: CacheConfig,
        file: Optional[FingerprintFilePort] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._file = file
        self._clock = clock
        self._entries: dict[str, int] = {}
        self.dirty = False

    def __contains__(self, fingerprint: str) -> bool:
        return fingerprint in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def load(self) -> int:
        """Load persisted entries that are still within the TTL."""

        if self._file is None:
            return 0
        try:
            entries = self._file.load()
        except (OSError, ValueError):
            LOGGER.warning("Fingerprint load failed, starting empty", exc_info=True)
            return 0

        cutoff = self._now_ms() - int(self._config.fingerprint_ttl * 1000)
        loaded = 0
        for fingerprint, timestamp_ms in entries:
            if timestamp_ms > cutoff:
                self._entries.pop(fingerprint, None)
                self._entries[fingerprint] = timestamp_ms
                loaded += 1
        LOGGER.info("Loaded %s fingerprints (ttl %ss)", loaded, int(self._config.fingerprint_ttl))
        return loaded

    def commit(self, fingerprint: str) -> None:
        self._entries.pop(fingerprint, None)
        self._entries[fingerprint] = self._now_ms()
        self.dirty = True

    def trim_overflow(self) -> int:
        """Drop the oldest entries down to the target ratio in one pass."""

        limit = self._config.max_fingerprints
        if len(self._entries) <= limit:
            return 0
        target = int(limit * self._config.cleanup_target_ratio)
        to_delete = len(self._entries) - target
        for fingerprint in list(self._entries)[:to_delete]:
            del self._entries[fingerprint]
        self.dirty = True
        LOGGER.info("Fingerprint cleanup: deleted %s, remaining %s", to_delete, len(self._entries))
        return to_delete

    def recent(self) -> list[tuple[str, int]]:
        """The most recent entries, capped at the save limit."""

        items = list(self._entries.items())
        return items[-self._config.save_cap :] if self._config.save_cap else []

    def flush_if_dirty(self) -> bool:
        """Write the capped snapshot once if anything changed since last write."""

        if not self.dirty or self._file is None:
            return False
        entries = self.recent()
        try:
            self._file.save(entries)
        except OSError:
            # Dirty flag stays set so the next tick retries.
            LOGGER.warning("Fingerprint save failed", exc_info=True)
            return False
        self.dirty = False
        LOGGER.info("Fingerprints saved (%s entries)", len(entries))
        return True


class PendingFingerprintLock:
    """Fingerprints reserved by events that are still mid-pipeline."""

    def __init__(self, stale_after: float, clock: Callable[[], float] = time.time) -> None:
        self._stale_after = stale_after
        self._clock = clock
        self._acquired: dict[str, float] = {}

    def __contains__(self, fingerprint: str) -> bool:
        return fingerprint in self._acquired

    def __len__(self) -> int:
        return len(self._acquired)

    def acquire(self, fingerprint: str) -> None:
        self._acquired[fingerprint] = self._clock()

    def release(self, fingerprint: str) -> None:
        self._acquired.pop(fingerprint, None)

    def sweep(self) -> int:
        """Expire reservations that were never resolved."""

        cutoff = self._clock() - self._stale_after
        stale = [fp for fp, acquired_at in self._acquired.items() if acquired_at < cutoff]
        for fingerprint in stale:
            del self._acquired[fingerprint]
        if stale:
            LOGGER.warning("Cleaned %s stale pending fingerprints", len(stale))
        return len(stale)


class ReplayIdWindow:
    """Bounded FIFO of recently seen event ids."""

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._order: deque[str] = deque()
        self._ids: set[str] = set()

    def __contains__(self, event_id: str) -> bool:
        return event_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def add(self, event_id: str) -> None:
        if event_id in self._ids:
            return
        self._order.append(event_id)
        self._ids.add(event_id)
        while len(self._order) > self._capacity:
            self._ids.discard(self._order.popleft())

    def seen_before(self, event_id: str) -> bool:
        """Return True for a repeat id; otherwise remember it and return False."""

        if event_id in self._ids:
            return True
        self.add(event_id)
        return False
