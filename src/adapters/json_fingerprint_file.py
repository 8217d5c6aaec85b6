"""JSON file adapter for committed fingerprints.

Implements the core FingerprintFilePort. The file holds a JSON array of
``{"fingerprint": str, "timestamp": int}`` objects (milliseconds) and is
rewritten wholesale on every flush.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Iterable

LOGGER = logging.getLogger(__name__)


def fingerprint_filename(bot_id: str, bot_phone: str) -> str:
    """Stable per-identity filename, e.g. ``fingerprints_bot-taxi_9876543210.json``."""

    phone = "".join(ch for ch in bot_phone or "" if ch.isdigit()) or "noPhone"
    return f"fingerprints_{bot_id or 'unknown'}_{phone}.json"


def legacy_fingerprint_filename(bot_phone: str) -> str:
    phone = "".join(ch for ch in bot_phone or "" if ch.isdigit()) or "noPhone"
    return f"fingerprints_{phone}.json"


def migrate_legacy_file(legacy_path: str, path: str) -> bool:
    """Rename the phone-only file to the per-identity name, once."""

    if not os.path.exists(legacy_path) or os.path.exists(path):
        return False
    try:
        os.replace(legacy_path, path)
    except OSError:
        LOGGER.warning("Fingerprint migration failed: %s", legacy_path, exc_info=True)
        return False
    LOGGER.info("Migrated fingerprint file: %s -> %s", legacy_path, path)
    return True


class JsonFingerprintFile:
    """Atomic whole-file JSON persistence."""

    def __init__(self, path: str) -> None:
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> list[tuple[str, int]]:
        """Return ``(fingerprint, timestamp_ms)`` pairs; creates an empty file if missing."""

        if not os.path.exists(self._path):
            self.save([])
            LOGGER.info("Created fingerprint file: %s", self._path)
            return []

        with open(self._path, "r", encoding="utf-8") as handle:
            data = json.load(handle)

        entries: list[tuple[str, int]] = []
        for item in data if isinstance(data, list) else []:
            if not isinstance(item, dict):
                continue
            fingerprint = item.get("fingerprint")
            timestamp = item.get("timestamp")
            if isinstance(fingerprint, str) and isinstance(timestamp, (int, float)):
                entries.append((fingerprint, int(timestamp)))
        return entries

    def save(self, entries: Iterable[tuple[str, int]]) -> None:
        payload = [{"fingerprint": fp, "timestamp": ts} for fp, ts in entries]
        directory = os.path.dirname(self._path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self._path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as handle:
            json.dump(payload, handle)
        os.replace(tmp_path, self._path)
