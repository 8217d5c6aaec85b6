"""Sequential, human-paced delivery to a list of target groups."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Sequence

from core.config import PacingConfig
from core.models import DeliveryResult
from core.ports import SenderPort
from core.state import RelayState

LOGGER = logging.getLogger(__name__)


def typing_delay(text_length: int, pacing: PacingConfig) -> float:
    """Length-scaled pause before the first send, clamped to the typing band."""

    raw = text_length * pacing.typing_per_char
    return min(max(raw, pacing.typing_min), pacing.typing_max)


def weighted_delay(rng: random.Random, low: float, high: float, weight: float) -> float:
    """Draw from ``[low, high]`` biased toward the lower end.

    With probability ``weight`` the draw lands in the lower ``weight`` share of
    the range, otherwise in the remaining upper share.
    """

    span = high - low
    if rng.random() < weight:
        return low + rng.random() * span * weight
    return low + span * weight + rng.random() * span * (1 - weight)


def gap_before_next(rng: random.Random, pacing: PacingConfig) -> tuple[float, bool]:
    """Return ``(seconds, is_hesitation)`` for the wait before a later send."""

    if rng.random() < pacing.pause_chance:
        return rng.uniform(pacing.pause_min, pacing.pause_max), True
    return weighted_delay(rng, pacing.between_min, pacing.between_max, pacing.between_weight), False


class DeliveryScheduler:
    """Deliver one text to several groups, one at a time."""

    def __init__(self, state: RelayState, sender: SenderPort) -> None:
        self._state = state
        self._sender = sender

    async def _send_with_timeout(self, target: str, text: str) -> None:
        await asyncio.wait_for(self._sender.send(target, text), self._state.config.pacing.send_timeout)

    async def _attempt(self, target: str, text: str) -> bool:
        state = self._state
        try:
            await self._send_with_timeout(target, text)
            return True
        except asyncio.TimeoutError:
            state.stats.send_retries += 1
            LOGGER.warning("Send to %s timed out, retrying once", target)
        except Exception as exc:
            LOGGER.error("Send to %s failed: %s", target, exc)
            return False

        await state.sleep(state.config.pacing.retry_pause)
        try:
            await self._send_with_timeout(target, text)
            LOGGER.info("Send to %s ok on retry", target)
            return True
        except Exception as exc:
            LOGGER.error("Send to %s failed on retry: %r", target, exc)
            return False

    async def deliver(self, targets: Sequence[str], text: str) -> DeliveryResult:
        state = self._state
        pacing = state.config.pacing

        if state.breaker.is_open:
            LOGGER.warning("Circuit breaker open, aborting send")
            return DeliveryResult(success_count=0, total_attempted=0)

        ready = [target for target in targets if state.cooldowns.is_ready(target)]
        if not ready:
            LOGGER.warning("All targets in cooldown")
            return DeliveryResult(success_count=0, total_attempted=0)

        LOGGER.info("Sending sequentially to %s target(s)", len(ready))
        started = state.clock()
        successes = 0
        attempted = 0

        for index, target in enumerate(ready):
            if state.breaker.is_open:
                LOGGER.warning("Circuit breaker opened mid-send, stopping")
                break

            if index == 0:
                delay = typing_delay(len(text), pacing)
                LOGGER.debug("Typing: %.1fs", delay)
            else:
                delay, hesitation = gap_before_next(state.rng, pacing)
                if hesitation:
                    state.stats.human_pauses += 1
                LOGGER.debug("%s: %.1fs", "Pause" if hesitation else "Gap", delay)
            await state.sleep(delay)

            state.cooldowns.mark(target)
            attempted += 1
            if await self._attempt(target, text):
                state.breaker.record_success()
                state.stats.send_successes += 1
                successes += 1
            else:
                state.breaker.record_failure()
                state.stats.send_failures += 1
                # Let a later message reach this group without waiting out the cooldown.
                state.cooldowns.clear(target)

        LOGGER.info("Delivered %s/%s in %.1fs", successes, attempted, state.clock() - started)
        return DeliveryResult(success_count=successes, total_attempted=attempted)
