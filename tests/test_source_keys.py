from __future__ import annotations

from core.source_keys import (
    build_key_aliases,
    build_source_key,
    canonical_key,
    expand_source_key_variants,
    parse_chat_id,
)


def test_build_source_key_prefers_username() -> None:
    assert build_source_key("RideGroup", -100123) == "@ridegroup"
    assert build_source_key(None, -100123) == "chat_id:-100123"
    assert build_source_key("", 42) == "chat_id:42"


def test_parse_chat_id() -> None:
    assert parse_chat_id("chat_id:-100123") == -100123
    assert parse_chat_id("chat_id:abc") is None
    assert parse_chat_id("@group") is None


def test_expand_chat_id_variants_positive() -> None:
    variants = expand_source_key_variants("chat_id:123")
    assert "chat_id:123" in variants
    assert "chat_id:-123" in variants
    assert "chat_id:-1000000000123" in variants


def test_expand_chat_id_variants_negative_100() -> None:
    variants = expand_source_key_variants("chat_id:-100987654321")
    assert "chat_id:-100987654321" in variants
    assert "chat_id:987654321" in variants


def test_expand_username_is_lowercased() -> None:
    assert expand_source_key_variants("@RideGroup") == {"@ridegroup"}


def test_aliases_map_variants_back_to_configured_key() -> None:
    aliases = build_key_aliases(["chat_id:-100987654321", "@RideGroup", ""])

    assert canonical_key("chat_id:987654321", aliases) == "chat_id:-100987654321"
    assert canonical_key("chat_id:-100987654321", aliases) == "chat_id:-100987654321"
    assert canonical_key("@ridegroup", aliases) == "@RideGroup"
    assert canonical_key("chat_id:5", aliases) == "chat_id:5"


def test_explicit_key_wins_over_derived_variant() -> None:
    aliases = build_key_aliases(["chat_id:123", "chat_id:-123"])
    assert aliases["chat_id:-123"] == "chat_id:-123"
    assert aliases["chat_id:123"] == "chat_id:123"
