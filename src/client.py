"""Telegram client factory for the relay.

The client's lifecycle (connect, authorize, run until disconnected) is driven
explicitly from app.py so reconnects and shutdown are easy to follow.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from telethon import TelegramClient


def build_client(session_name: str = "") -> TelegramClient:
    """Create a Telethon client from environment variables.

    API_ID/API_HASH come from ``.env``. Each bot identity gets its own
    ``.session`` file, named after SESSION_NAME or the bot id.
    """

    load_dotenv()

    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")
    session = os.getenv("SESSION_NAME") or session_name or "relay"

    # Fail fast on missing credentials to avoid an ambiguous login prompt.
    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")

    logging.getLogger(__name__).info("Initializing Telegram client (session=%s)", session)

    return TelegramClient(session, int(api_id), api_hash)
