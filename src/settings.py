"""Static configuration for the relay.

All user-editable settings (groups, keyword filters, pacing, limits) live in a
single JSON file for quick edits without touching Python. Secrets stay in
``.env``.
"""

import json
import os

from dotenv import load_dotenv

from core.config import (
    BreakerConfig,
    CacheConfig,
    FilterConfig,
    GateConfig,
    GroupTopology,
    PacingConfig,
    RateLimitConfig,
    RelayConfig,
)
from core.source_keys import build_key_aliases

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# RELAY_CONFIG lets several bot identities share one checkout.
CONFIG_PATH = os.getenv("RELAY_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _as_list(value) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [item for item in value if isinstance(item, str) and item]


def _normalize_blocked_numbers(raw) -> tuple[str, ...]:
    # Spaces inside numbers are common in hand-edited lists.
    return tuple(number.replace(" ", "") for number in _as_list(raw) if number.strip())


def _build_topology(groups: dict) -> GroupTopology:
    free_group = groups.get("free")
    if not free_group:
        raise RuntimeError("groups.free is required")
    cities = {
        city: group_id
        for city, group_id in (groups.get("cities") or {}).items()
        if isinstance(group_id, str)
    }
    return GroupTopology(
        source_group_ids=frozenset(_as_list(groups.get("sources"))),
        free_group_id=free_group,
        paid_group_ids=tuple(_as_list(groups.get("paid"))),
        city_group_ids=cities,
    )


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Bot identity. BOT_NAME from the environment wins so one config file can be
# reused under a process manager.
_bot = _CONFIG.get("bot", {})
BOT_ID = os.getenv("BOT_NAME") or _bot.get("id", "relay")
BOT_PHONE = str(_bot.get("phone", ""))

TOPOLOGY = _build_topology(_CONFIG.get("groups", {}))

# Every configured key plus its equivalent chat_id spellings, mapped back to
# the configured form so incoming events match the topology.
GROUP_KEY_ALIASES = build_key_aliases(
    [
        *TOPOLOGY.source_group_ids,
        TOPOLOGY.free_group_id,
        *TOPOLOGY.paid_group_ids,
        *TOPOLOGY.city_group_ids.values(),
    ]
)

_filters = _CONFIG.get("filters", {})
FILTERS = FilterConfig(
    keywords=tuple(_as_list(_filters.get("keywords"))),
    ignore_terms=tuple(_as_list(_filters.get("ignore"))),
    blocked_numbers=_normalize_blocked_numbers(_filters.get("blocked_numbers")),
)

RELAY_CONFIG = RelayConfig(
    topology=TOPOLOGY,
    filters=FILTERS,
    gate=GateConfig(bot_phone=BOT_PHONE, **_CONFIG.get("gate", {})),
    pacing=PacingConfig(**_CONFIG.get("pacing", {})),
    rate_limit=RateLimitConfig(**_CONFIG.get("rate_limit", {})),
    breaker=BreakerConfig(**_CONFIG.get("breaker", {})),
    cache=CacheConfig(**_CONFIG.get("cache", {})),
)

# Fingerprints persist next to the project unless a directory is configured.
FINGERPRINT_DIR = _CONFIG.get("fingerprint_dir") or PROJECT_ROOT

# Reconnect backoff for full disconnects (Telethon retries short drops itself).
_connection = _CONFIG.get("connection", {})
MAX_RECONNECT_ATTEMPTS = int(_connection.get("max_reconnect_attempts", 10))
BACKOFF_BASE = float(_connection.get("backoff_base", 3.0))
BACKOFF_CAP = float(_connection.get("backoff_cap", 60.0))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
