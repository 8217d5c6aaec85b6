"""Telegram delivery adapter.

Implements the core SenderPort by posting plain text into a group through
the user client.
"""

from __future__ import annotations

from typing import Any

from core.source_keys import parse_chat_id


class TelegramGroupSender:
    """Send text to groups addressed by ``@username`` or ``chat_id:<id>`` keys."""

    def __init__(self, client) -> None:
        self._client = client
        self._entities: dict[str, Any] = {}

    async def _resolve(self, target: str) -> Any:
        if target in self._entities:
            return self._entities[target]
        chat_id = parse_chat_id(target)
        entity = await self._client.get_entity(chat_id if chat_id is not None else target)
        self._entities[target] = entity
        return entity

    async def send(self, target: str, text: str) -> None:
        """Send the text as-is; any Telethon error propagates to the scheduler."""

        entity = await self._resolve(target)
        await self._client.send_message(entity, text, link_preview=False)
