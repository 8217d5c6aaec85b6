"""Core message processing pipeline.

This module is integration-agnostic. It only relies on the sender port and the
per-identity ``RelayState``, enabling other chat networks or adapters without
changes here.

One event moves through:
Received -> gate -> Rejected | Admitted -> routed -> scheduled -> Committed | Released
"""

from __future__ import annotations

import logging

from core.gate import IntakeGate
from core.models import EventResult, EventState, InboundEvent, Rejection
from core.ports import SenderPort
from core.router import Router
from core.scheduler import DeliveryScheduler
from core.state import RelayState

LOGGER = logging.getLogger(__name__)


class MessageProcessor:
    """Orchestrates intake, routing, paced delivery and dedup commit."""

    def __init__(self, state: RelayState, sender: SenderPort) -> None:
        self._state = state
        self._gate = IntakeGate(state)
        self._router = Router(state, DeliveryScheduler(state, sender))

    @property
    def state(self) -> RelayState:
        return self._state

    async def _human_delays(self) -> None:
        state = self._state
        pacing = state.config.pacing

        # First admitted message after (re)connecting waits a little longer.
        if state.needs_settling:
            state.needs_settling = False
            settle = state.rng.uniform(pacing.settling_min, pacing.settling_max)
            LOGGER.info("Settling delay: %.1fs (first message after connect)", settle)
            await state.sleep(settle)

        processing = state.rng.uniform(pacing.processing_min, pacing.processing_max)
        LOGGER.debug("Processing delay: %.1fs", processing)
        await state.sleep(processing)

    async def handle(self, event: InboundEvent) -> EventResult:
        """Process one inbound event through the core pipeline."""

        state = self._state
        state.stats.received += 1

        decision = self._gate.evaluate(event)
        if not decision.admitted:
            state.stats.reject(decision.rejection)
            LOGGER.debug("Rejected %s: %s", event.event_id, decision.rejection.value)
            return EventResult(state=EventState.REJECTED, rejection=decision.rejection, path=decision.path)

        state.stats.admitted += 1
        fingerprint = decision.fingerprint
        LOGGER.info("MSG %s | %s | %s | %s", event.event_id, decision.path.value, event.source_group_id, event.text[:40])

        await self._human_delays()

        if state.breaker.is_open:
            LOGGER.warning("Circuit breaker open, message dropped")
            state.stats.reject(Rejection.CIRCUIT_OPEN)
            self._gate.complete(fingerprint, delivered=False)
            return EventResult(state=EventState.RELEASED, rejection=Rejection.CIRCUIT_OPEN, path=decision.path)

        try:
            outcome = await self._router.route(event.text, decision.path)
        except Exception:
            LOGGER.exception("Routing error for %s", event.event_id)
            state.stats.routing_errors += 1
            self._gate.complete(fingerprint, delivered=False)
            return EventResult(state=EventState.RELEASED, path=decision.path)

        if outcome.rejection is not None:
            state.stats.reject(outcome.rejection)

        self._gate.complete(fingerprint, delivered=outcome.delivered)
        final = EventState.COMMITTED if outcome.delivered else EventState.RELEASED
        return EventResult(state=final, rejection=outcome.rejection, path=decision.path, outcome=outcome)

    def snapshot(self) -> dict:
        """Plain-dict view of counters and limiter state for reporting."""

        state = self._state
        return {
            "stats": state.stats.as_dict(),
            "rate_limiter": state.rate_limiter.snapshot(),
            "circuit_breaker": state.breaker.snapshot(),
            "cache": {
                "committed": len(state.committed),
                "pending": len(state.pending),
                "replay_ids": len(state.replay_ids),
                "cooldowns": len(state.cooldowns),
                "dirty": state.committed.dirty,
            },
            "reconnect_window_active": state.in_reconnect_window(),
        }
