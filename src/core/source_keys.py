"""Helpers for working with group keys.

Groups are named either ``@username`` or ``chat_id:<id>``. Telegram exposes
the same group under several numeric ids (peer id, chat id, channel id), so
configured keys are expanded to every equivalent form and incoming keys are
mapped back to the configured spelling.
"""

from __future__ import annotations

from typing import Iterable, Optional

CHAT_ID_PREFIX = "chat_id:"


def build_source_key(username: Optional[str], chat_id: int) -> str:
    """Normalize a group key using the single rule enforced across the app."""

    if isinstance(username, str) and username:
        return f"@{username.lower()}"
    return f"{CHAT_ID_PREFIX}{chat_id}"


def parse_chat_id(source_key: str) -> Optional[int]:
    if not source_key.startswith(CHAT_ID_PREFIX):
        return None
    try:
        return int(source_key[len(CHAT_ID_PREFIX) :])
    except ValueError:
        return None


def _expand_chat_id_variants(raw_chat_id: int) -> set[int]:
    """Return equivalent chat id variants (peer id, chat id, channel id)."""

    variants: set[int] = {raw_chat_id}
    if raw_chat_id < 0:
        raw_text = str(raw_chat_id)
        if raw_text.startswith("-100"):
            # Channel/supergroup peer id: -100<channel_id>
            channel_part = raw_text[4:]
            if channel_part.isdigit():
                variants.add(int(channel_part))
        else:
            variants.add(abs(raw_chat_id))
        return variants

    # raw_chat_id is positive: add PeerChat and PeerChannel-style ids.
    variants.add(-raw_chat_id)
    variants.add(-1000000000000 - raw_chat_id)
    return variants


def expand_source_key_variants(source_key: str) -> set[str]:
    """Expand a group key to include equivalent chat_id variants."""

    if source_key.startswith("@"):
        return {source_key.lower()}
    raw_chat_id = parse_chat_id(source_key)
    if raw_chat_id is None:
        return {source_key}
    return {f"{CHAT_ID_PREFIX}{variant}" for variant in _expand_chat_id_variants(raw_chat_id)}


def build_key_aliases(configured_keys: Iterable[str]) -> dict[str, str]:
    """Map every variant of each configured key back to that configured key."""

    aliases: dict[str, str] = {}
    for key in configured_keys:
        if not key:
            continue
        for variant in expand_source_key_variants(key):
            # Explicit spellings win over derived variants of another key.
            if variant == key:
                aliases[variant] = key
            else:
                aliases.setdefault(variant, key)
    return aliases


def canonical_key(source_key: str, aliases: dict[str, str]) -> str:
    return aliases.get(source_key, source_key)
