"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

from typing import Any, Optional

from telethon.tl.custom import Message

from core.models import InboundEvent
from core.source_keys import build_source_key, canonical_key


def source_key_from_message(message: Message) -> str:
    """Group key for the chat a message was posted in."""

    chat = getattr(message, "chat", None)
    return build_source_key(getattr(chat, "username", None), message.chat_id)


async def _sender_phone(message: Message) -> Optional[str]:
    get_sender = getattr(message, "get_sender", None)
    if get_sender is None:
        return None
    sender: Any = await get_sender()
    phone = getattr(sender, "phone", None)
    return str(phone) if phone else None


async def build_event(message: Message, key_aliases: Optional[dict[str, str]] = None) -> InboundEvent:
    """Build a core InboundEvent from a Telethon Message."""

    group_key = canonical_key(source_key_from_message(message), key_aliases or {})
    return InboundEvent(
        # Telegram message ids are only unique per chat.
        event_id=f"{group_key}:{message.id}",
        source_group_id=group_key,
        date=message.date,
        sender_id=str(getattr(message, "sender_id", "") or ""),
        text=message.raw_text or "",
        is_self=bool(getattr(message, "out", False)),
        is_group=bool(getattr(message, "is_group", False)),
        sender_phone=await _sender_phone(message),
    )
