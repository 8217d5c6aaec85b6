from __future__ import annotations

import asyncio
import random

import pytest

from conftest import FakeSender, make_config

from core.config import PacingConfig
from core.scheduler import DeliveryScheduler, gap_before_next, typing_delay, weighted_delay

TEXT = "Need taxi from Delhi to Chandigarh, call 98765 43210"


class HangingSender(FakeSender):
    """Hangs on the first ``hangs`` calls, then delivers."""

    def __init__(self, hangs: int) -> None:
        super().__init__()
        self.hangs = hangs
        self.calls = 0

    async def send(self, target: str, text: str) -> None:
        self.calls += 1
        if self.calls <= self.hangs:
            await asyncio.sleep(3600)
        await super().send(target, text)


def test_typing_delay_is_clamped() -> None:
    pacing = PacingConfig()
    assert typing_delay(10, pacing) == 1.0
    assert typing_delay(300, pacing) == pytest.approx(1.2)
    assert typing_delay(5000, pacing) == 1.8


def test_weighted_delay_stays_in_range_and_favours_low_end() -> None:
    rng = random.Random(3)
    draws = [weighted_delay(rng, 0.8, 1.5, 0.65) for _ in range(5000)]
    assert all(0.8 <= draw <= 1.5 for draw in draws)
    low_share = sum(draw < 0.8 + 0.7 * 0.65 for draw in draws) / len(draws)
    assert 0.6 < low_share < 0.7


def test_gap_before_next_hesitation_band() -> None:
    rng = random.Random(11)
    pacing = PacingConfig()
    gaps = [gap_before_next(rng, pacing) for _ in range(2000)]
    pauses = [delay for delay, hesitation in gaps if hesitation]
    assert all(1.5 <= delay <= 3.0 for delay in pauses)
    assert all(0.8 <= delay <= 1.5 for delay, hesitation in gaps if not hesitation)
    assert 0.1 < len(pauses) / len(gaps) < 0.2


def test_delivers_in_order_with_pacing(make_state, sleep) -> None:
    state = make_state()
    sender = FakeSender()
    scheduler = DeliveryScheduler(state, sender)

    result = asyncio.run(scheduler.deliver(["g1", "g2", "g3"], TEXT))

    assert (result.success_count, result.total_attempted) == (3, 3)
    assert [target for target, _ in sender.sent] == ["g1", "g2", "g3"]
    assert sleep.delays[0] == 1.0
    assert len(sleep.delays) == 3
    assert all(0.8 <= delay <= 3.0 for delay in sleep.delays[1:])
    assert state.stats.send_successes == 3


def test_targets_in_cooldown_are_skipped(make_state) -> None:
    state = make_state()
    sender = FakeSender()
    scheduler = DeliveryScheduler(state, sender)
    state.cooldowns.mark("g1")

    result = asyncio.run(scheduler.deliver(["g1"], TEXT))
    assert (result.success_count, result.total_attempted) == (0, 0)

    result = asyncio.run(scheduler.deliver(["g1", "g2"], TEXT))
    assert sender.sent == [("g2", TEXT)]


def test_failure_clears_cooldown(make_state) -> None:
    state = make_state()
    sender = FakeSender(failing={"g1"})
    scheduler = DeliveryScheduler(state, sender)

    result = asyncio.run(scheduler.deliver(["g1", "g2"], TEXT))

    assert (result.success_count, result.total_attempted) == (1, 2)
    assert state.cooldowns.is_ready("g1")
    assert state.stats.send_failures == 1
    assert state.breaker.failure_count == 0


def test_breaker_trips_then_recovers(make_state, clock) -> None:
    state = make_state()
    sender = FakeSender()
    sender.fail_all = True
    scheduler = DeliveryScheduler(state, sender)
    targets = [f"g{index}" for index in range(12)]

    result = asyncio.run(scheduler.deliver(targets, TEXT))
    assert (result.success_count, result.total_attempted) == (0, 10)
    assert state.breaker.is_open

    sender.fail_all = False
    result = asyncio.run(scheduler.deliver(targets, TEXT))
    assert (result.success_count, result.total_attempted) == (0, 0)
    assert sender.sent == []

    clock.advance(60)
    result = asyncio.run(scheduler.deliver(["g0"], TEXT))
    assert result.success_count == 1


def test_timeout_is_retried_once(make_state, sleep) -> None:
    state = make_state(make_config(pacing=PacingConfig(send_timeout=0.01)))
    sender = HangingSender(hangs=1)
    scheduler = DeliveryScheduler(state, sender)

    result = asyncio.run(scheduler.deliver(["g1"], TEXT))

    assert result.success_count == 1
    assert sender.calls == 2
    assert state.stats.send_retries == 1
    assert sleep.delays[-1] == 1.0


def test_second_timeout_counts_as_failure(make_state) -> None:
    state = make_state(make_config(pacing=PacingConfig(send_timeout=0.01)))
    sender = HangingSender(hangs=2)
    scheduler = DeliveryScheduler(state, sender)

    result = asyncio.run(scheduler.deliver(["g1"], TEXT))

    assert (result.success_count, result.total_attempted) == (0, 1)
    assert sender.calls == 2
    assert state.breaker.failure_count == 1
    assert len(state.cooldowns) == 0
