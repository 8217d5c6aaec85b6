"""Logging setup driven by the ``logging`` block of config.json.

Several relay identities often share one log directory or one terminal, so
every line carries the bot id. Secrets listed under ``redact.patterns`` (env
variable names) and the bot's own phone number are masked before any handler
writes the line.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Iterable

LOG_FORMAT = "%(asctime)s %(levelname)s [%(bot_id)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MASK = "***"


class BotIdFilter(logging.Filter):
    """Stamp ``record.bot_id`` so the format string can use it."""

    def __init__(self, bot_id: str) -> None:
        super().__init__()
        self._bot_id = bot_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.bot_id = self._bot_id
        return True


class SecretMaskFilter(logging.Filter):
    """Replace known secret values in the rendered message."""

    def __init__(self, secrets: Iterable[str]) -> None:
        super().__init__()
        # Longest first, so a phone number is masked before its suffix.
        self._secrets = sorted({secret for secret in secrets if secret}, key=len, reverse=True)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        masked = message
        for secret in self._secrets:
            masked = masked.replace(secret, MASK)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def secret_values(config: dict, bot_phone: str = "") -> list[str]:
    """Values to mask: configured env secrets plus both spellings of the bot phone."""

    redact = (config or {}).get("redact", {})
    if not redact.get("enabled", False):
        return []
    values = [os.getenv(name, "") for name in redact.get("patterns", [])]
    if bot_phone:
        values.append(bot_phone)
        values.append("".join(ch for ch in bot_phone if ch.isdigit()))
    return [value for value in values if value]


def _log_path(file_cfg: dict, bot_id: str, project_root: str) -> str:
    path = file_cfg.get("path") or os.path.join("logs", f"{bot_id}.log")
    if not os.path.isabs(path):
        path = os.path.join(project_root, path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return path


def build_handlers(config: dict, bot_id: str, project_root: str, bot_phone: str = "") -> list[logging.Handler]:
    """Console and rotating-file handlers, each tagged and masked."""

    handlers: list[logging.Handler] = []
    if config.get("console", True):
        handlers.append(logging.StreamHandler())

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        handlers.append(
            RotatingFileHandler(
                _log_path(file_cfg, bot_id, project_root),
                maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
                backupCount=int(file_cfg.get("backup_count", 5)),
                encoding="utf-8",
            )
        )

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    tag = BotIdFilter(bot_id)
    mask = SecretMaskFilter(secret_values(config, bot_phone))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(tag)
        handler.addFilter(mask)
    return handlers


def configure_logging(config: dict, bot_id: str, project_root: str, bot_phone: str = "") -> None:
    config = config or {}
    if not config.get("enabled", False):
        return

    level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)
    handlers = build_handlers(config, bot_id, project_root, bot_phone)
    if not handlers:
        return
    for handler in handlers:
        handler.setLevel(level)

    logging.basicConfig(level=level, handlers=handlers)
    # Telethon is chatty at INFO about every reconnect attempt.
    logging.getLogger("telethon").setLevel(max(level, logging.WARNING))
