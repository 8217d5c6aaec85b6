"""Intake gate: ordered admission checks for one inbound event.

The order matters and is kept stable:

1) group-only scope
2) self-sent events
3) message age
4) stricter age right after a reconnect (stacked on top of 3)
5) replay ids (protocol re-deliveries of the same event)
6) empty text
7) messages sent from this identity's own phone
8) minimum length
9) topology: source group (path A) or free group (path B)
10) fingerprint dedup with an optimistic pending lock

The first failing check decides the rejection reason.
"""

from __future__ import annotations

import logging

from core.classifier import digits_only
from core.dedup import compute_fingerprint, to_millis
from core.models import GateDecision, InboundEvent, Rejection, RoutePath
from core.state import RelayState

LOGGER = logging.getLogger(__name__)


def normalize_phone(phone: str) -> str:
    """Last ten digits, so ``+91 98765 43210`` equals ``9876543210``."""

    return digits_only(phone)[-10:]


class IntakeGate:
    def __init__(self, state: RelayState) -> None:
        self._state = state

    def evaluate(self, event: InboundEvent) -> GateDecision:
        state = self._state
        config = state.config.gate
        topology = state.config.topology

        if not event.is_group:
            return GateDecision(rejection=Rejection.NOT_GROUP)

        if event.is_self:
            return GateDecision(rejection=Rejection.FROM_SELF)

        age = state.clock() - event.date.timestamp()
        if age > config.max_message_age:
            LOGGER.warning("Old message dropped: %ss old (max %ss)", int(age), int(config.max_message_age))
            return GateDecision(rejection=Rejection.TOO_OLD)

        if state.in_reconnect_window() and age > config.reconnect_strict_age:
            return GateDecision(rejection=Rejection.RECONNECT_AGE)

        if state.replay_ids.seen_before(event.event_id):
            return GateDecision(rejection=Rejection.REPLAY)

        text = event.text or ""
        if not text.strip():
            return GateDecision(rejection=Rejection.EMPTY)

        own_phone = normalize_phone(config.bot_phone)
        if own_phone and event.sender_phone and normalize_phone(event.sender_phone) == own_phone:
            return GateDecision(rejection=Rejection.BOT_SENDER)

        if len(text) < config.min_text_length:
            return GateDecision(rejection=Rejection.TOO_SHORT)

        if event.source_group_id in topology.source_group_ids:
            path = RoutePath.A
        elif event.source_group_id == topology.free_group_id:
            path = RoutePath.B
        else:
            return GateDecision(rejection=Rejection.NOT_MONITORED)

        fingerprint = compute_fingerprint(text, to_millis(event.date))
        if fingerprint in state.committed:
            return GateDecision(rejection=Rejection.DUPLICATE, path=path, fingerprint=fingerprint)
        # A twin of this message is still being paced out; it has not
        # committed yet, so the committed check alone would let this one in.
        if fingerprint in state.pending:
            return GateDecision(rejection=Rejection.RACE, path=path, fingerprint=fingerprint)

        state.pending.acquire(fingerprint)
        return GateDecision(path=path, fingerprint=fingerprint)

    def complete(self, fingerprint: str, delivered: bool) -> None:
        """Commit on at least one delivery, otherwise just drop the reservation."""

        state = self._state
        state.pending.release(fingerprint)
        if delivered:
            state.committed.commit(fingerprint)
            state.stats.committed += 1
        else:
            state.stats.released += 1
