"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional


@dataclass(frozen=True)
class GroupTopology:
    """Which groups are read from and which groups are written to."""

    source_group_ids: frozenset[str]
    free_group_id: str
    paid_group_ids: tuple[str, ...]
    city_group_ids: Mapping[str, str]

    @property
    def configured_cities(self) -> list[str]:
        return list(self.city_group_ids.keys())

    def city_group(self, city: str) -> Optional[str]:
        group_id = self.city_group_ids.get(city)
        if not group_id or not group_id.strip():
            return None
        return group_id


@dataclass(frozen=True)
class FilterConfig:
    """Keyword lists used by the classifier."""

    keywords: tuple[str, ...]
    ignore_terms: tuple[str, ...]
    blocked_numbers: tuple[str, ...]


@dataclass(frozen=True)
class GateConfig:
    """Intake gate thresholds (seconds unless noted)."""

    bot_phone: str = ""
    max_message_age: float = 300.0
    reconnect_strict_age: float = 10.0
    reconnect_window: float = 30.0
    min_text_length: int = 10
    replay_capacity: int = 200
    pending_stale_after: float = 60.0


@dataclass(frozen=True)
class PacingConfig:
    """Human-like pacing used by the delivery scheduler and processor."""

    typing_per_char: float = 0.004
    typing_min: float = 1.0
    typing_max: float = 1.8
    between_min: float = 0.8
    between_max: float = 1.5
    between_weight: float = 0.65
    pause_chance: float = 0.15
    pause_min: float = 1.5
    pause_max: float = 3.0
    send_timeout: float = 15.0
    retry_pause: float = 1.0
    group_cooldown: float = 1.0
    settling_min: float = 5.0
    settling_max: float = 15.0
    processing_min: float = 2.0
    processing_max: float = 7.0


@dataclass(frozen=True)
class RateLimitConfig:
    strategy: str = "sliding"
    hourly: int = 100
    daily: int = 1000


@dataclass(frozen=True)
class BreakerConfig:
    max_failures: int = 10
    reset_after: float = 60.0


@dataclass(frozen=True)
class CacheConfig:
    """Fingerprint cache sizing and persistence cadence."""

    max_fingerprints: int = 2000
    cleanup_target_ratio: float = 0.8
    fingerprint_ttl: float = 7200.0
    save_cap: int = 1000
    flush_interval: float = 30.0
    sweep_interval: float = 30.0


@dataclass(frozen=True)
class RelayConfig:
    """Everything the core needs, bundled for a single bot identity."""

    topology: GroupTopology
    filters: FilterConfig
    gate: GateConfig = field(default_factory=GateConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    breaker: BreakerConfig = field(default_factory=BreakerConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
