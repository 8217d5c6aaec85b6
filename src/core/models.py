"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class InboundEvent:
    """One incoming chat message, as handed over by the network adapter."""

    event_id: str
    source_group_id: str
    date: datetime
    sender_id: str
    text: str
    is_self: bool = False
    is_group: bool = True
    sender_phone: Optional[str] = None


class RoutePath(str, Enum):
    """Path A relays from a source group, path B from the free group."""

    A = "A"
    B = "B"


class Rejection(str, Enum):
    """Distinct reasons an event stops before (or during) routing."""

    NOT_GROUP = "not_group"
    FROM_SELF = "from_self"
    TOO_OLD = "too_old"
    RECONNECT_AGE = "reconnect_age"
    REPLAY = "replay"
    EMPTY = "empty"
    BOT_SENDER = "bot_sender"
    TOO_SHORT = "too_short"
    NOT_MONITORED = "not_monitored"
    DUPLICATE = "duplicate"
    RACE = "race"
    BLOCKED_NUMBER = "blocked_number"
    NOT_REQUEST = "not_request"
    NO_PHONE = "no_phone"
    RATE_LIMITED = "rate_limited"
    CIRCUIT_OPEN = "circuit_open"


@dataclass(frozen=True)
class GateDecision:
    """Outcome of the intake gate for a single event."""

    rejection: Optional[Rejection] = None
    path: Optional[RoutePath] = None
    fingerprint: Optional[str] = None

    @property
    def admitted(self) -> bool:
        return self.rejection is None


@dataclass(frozen=True)
class DeliveryResult:
    success_count: int
    total_attempted: int


@dataclass(frozen=True)
class RouteOutcome:
    """What the router reports back once an admitted event is handled."""

    path: RoutePath
    city: Optional[str] = None
    success_count: int = 0
    total_attempted: int = 0
    rejection: Optional[Rejection] = None

    @property
    def delivered(self) -> bool:
        return self.success_count > 0


class EventState(str, Enum):
    """Terminal states of one event's trip through the pipeline."""

    REJECTED = "rejected"
    COMMITTED = "committed"
    RELEASED = "released"


@dataclass(frozen=True)
class EventResult:
    state: EventState
    rejection: Optional[Rejection] = None
    path: Optional[RoutePath] = None
    outcome: Optional[RouteOutcome] = None
