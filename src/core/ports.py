"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for delivery and persistence adapters so
that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Iterable, Protocol


class SenderPort(Protocol):
    """Outbound capability: deliver text to one group, raise on failure."""

    async def send(self, target: str, text: str) -> None:
        ...


class FingerprintFilePort(Protocol):
    """Wholesale load/save of committed fingerprints.

    Entries are ``(fingerprint, timestamp_ms)`` pairs, oldest first.
    """

    def load(self) -> list[tuple[str, int]]:
        ...

    def save(self, entries: Iterable[tuple[str, int]]) -> None:
        ...
