"""Application entry point for the ride-request relay."""

from __future__ import annotations

import argparse
import logging
import os
from typing import Any, Optional

from art import tprint

import settings
from adapters.json_fingerprint_file import (
    JsonFingerprintFile,
    fingerprint_filename,
    legacy_fingerprint_filename,
    migrate_legacy_file,
)
from adapters.stats_report import print_stats
from client import build_client
from core.source_keys import build_source_key, canonical_key
from core.state import RelayState
from get_session import authorize
from log_setup import configure_logging
from runner import RelayRunner

NAME = "RIDE RELAY"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _fingerprint_file() -> JsonFingerprintFile:
    directory = settings.FINGERPRINT_DIR
    path = os.path.join(directory, fingerprint_filename(settings.BOT_ID, settings.BOT_PHONE))
    migrate_legacy_file(os.path.join(directory, legacy_fingerprint_filename(settings.BOT_PHONE)), path)
    return JsonFingerprintFile(path)


def _log_topology(logger: logging.Logger) -> None:
    topology = settings.TOPOLOGY
    logger.info("Source groups: %s", len(topology.source_group_ids))
    logger.info("Free group: %s", topology.free_group_id)
    logger.info("Paid groups: %s", len(topology.paid_group_ids))
    logger.info("City groups: %s (%s)", len(topology.city_group_ids), ", ".join(topology.configured_cities))
    for city in topology.configured_cities:
        logger.info("  %s -> %s", city, topology.city_group(city) or "NO GROUP CONFIGURED")
    logger.info(
        "Keywords: %s, ignore terms: %s, blocked numbers: %s",
        len(settings.FILTERS.keywords),
        len(settings.FILTERS.ignore_terms),
        len(settings.FILTERS.blocked_numbers),
    )


def _run() -> None:
    _print_banner()
    configure_logging(settings.LOGGING, settings.BOT_ID, settings.PROJECT_ROOT, settings.BOT_PHONE)
    logger = logging.getLogger(__name__)

    logger.info("Starting relay %s", settings.BOT_ID)
    _log_topology(logger)

    state = RelayState.build(settings.RELAY_CONFIG, fingerprint_file=_fingerprint_file())
    state.committed.load()

    client = build_client(settings.BOT_ID)
    runner = RelayRunner(
        client,
        state,
        key_aliases=settings.GROUP_KEY_ALIASES,
        max_reconnect_attempts=settings.MAX_RECONNECT_ATTEMPTS,
        backoff_base=settings.BACKOFF_BASE,
        backoff_cap=settings.BACKOFF_CAP,
    )
    runner.install_signal_handlers(client.loop)

    try:
        client.loop.run_until_complete(runner.run())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        client.loop.run_until_complete(runner.shutdown())
    finally:
        print_stats(runner.processor.snapshot())


def _group_role(source_key: str) -> str:
    topology = settings.TOPOLOGY
    key = canonical_key(source_key, settings.GROUP_KEY_ALIASES)
    if key in topology.source_group_ids:
        return "source"
    if key == topology.free_group_id:
        return "free"
    if key in topology.paid_group_ids:
        return "paid"
    for city, group_id in topology.city_group_ids.items():
        if group_id == key:
            return f"city:{city}"
    return "unmonitored"


def _dialog_title(dialog: Any) -> str:
    entity = getattr(dialog, "entity", None)
    title = getattr(entity, "title", None) or getattr(dialog, "name", None)
    return str(title or getattr(entity, "id", None) or "unknown")


async def _list_group_dialogs(client) -> None:
    rows = []
    async for dialog in client.iter_dialogs():
        if not (dialog.is_group or dialog.is_channel) or dialog.is_user:
            continue
        entity = getattr(dialog, "entity", None)
        source_key = build_source_key(getattr(entity, "username", None), dialog.id)
        rows.append((_group_role(source_key), _dialog_title(dialog), source_key))

    if not rows:
        print("No group dialogs found.")
        return

    # Configured groups first, then everything else by title.
    order = {"source": 0, "free": 1, "paid": 2}
    rows.sort(key=lambda row: (order.get(row[0], 3 if row[0].startswith("city:") else 4), row[1].lower()))
    for index, (role, title, source_key) in enumerate(rows, start=1):
        print(f"{index}. {role} | {title} | {source_key}")


def _discover() -> None:
    _print_banner()
    client = build_client(settings.BOT_ID)

    async def _run_discover() -> None:
        await client.connect()
        if not await client.is_user_authorized():
            print("Authorization required. Starting login...")
            await authorize(client)
        await _list_group_dialogs(client)
        await client.disconnect()

    client.loop.run_until_complete(_run_discover())


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="ride-relay")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start relaying")
    subparsers.add_parser(
        "discover",
        help="List group dialogs with their keys and configured roles.",
    )

    args = parser.parse_args(argv)
    if args.command == "discover":
        _discover()
        return
    _run()


if __name__ == "__main__":
    main()
