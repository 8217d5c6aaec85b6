from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Callable, Optional

import pytest

from core.config import FilterConfig, GroupTopology, RelayConfig
from core.models import InboundEvent
from core.state import RelayState

SOURCE = "chat_id:-1001"
FREE = "chat_id:-1002"
PAID = "chat_id:-1003"
DELHI = "chat_id:-1004"
CHANDIGARH = "chat_id:-1005"

REQUEST = "Need taxi from Delhi to Chandigarh, call 98765 43210"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Awaitable stand-in for asyncio.sleep that moves the fake clock."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        self.clock.advance(delay)


class FakeSender:
    def __init__(self, failing: Optional[set[str]] = None) -> None:
        self.sent: list[tuple[str, str]] = []
        self.failing = failing if failing is not None else set()
        self.fail_all = False

    async def send(self, target: str, text: str) -> None:
        if self.fail_all or target in self.failing:
            raise RuntimeError(f"cannot write to {target}")
        self.sent.append((target, text))


class FakeFingerprintFile:
    def __init__(self, entries: Optional[list[tuple[str, int]]] = None) -> None:
        self.entries = list(entries or [])
        self.saves: list[list[tuple[str, int]]] = []
        self.fail_save = False

    def load(self) -> list[tuple[str, int]]:
        return list(self.entries)

    def save(self, entries) -> None:
        if self.fail_save:
            raise OSError("disk full")
        self.saves.append(list(entries))


def make_topology(**overrides) -> GroupTopology:
    values = dict(
        source_group_ids=frozenset({SOURCE}),
        free_group_id=FREE,
        paid_group_ids=(PAID,),
        city_group_ids={"Delhi": DELHI, "Chandigarh": CHANDIGARH, "Mohali": ""},
    )
    values.update(overrides)
    return GroupTopology(**values)


def make_config(**overrides) -> RelayConfig:
    values = dict(
        topology=make_topology(),
        filters=FilterConfig(
            keywords=("taxi", "cab"),
            ignore_terms=("available",),
            blocked_numbers=("9999999999",),
        ),
    )
    values.update(overrides)
    return RelayConfig(**values)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleep(clock: FakeClock) -> RecordingSleep:
    return RecordingSleep(clock)


@pytest.fixture
def make_state(clock: FakeClock, sleep: RecordingSleep) -> Callable[..., RelayState]:
    def _make(config: Optional[RelayConfig] = None, fingerprint_file=None, seed: int = 7) -> RelayState:
        return RelayState.build(
            config or make_config(),
            fingerprint_file=fingerprint_file,
            clock=clock,
            sleep=sleep,
            rng=random.Random(seed),
        )

    return _make


@pytest.fixture
def make_event(clock: FakeClock) -> Callable[..., InboundEvent]:
    counter = {"next": 1}

    def _make(
        text: str = REQUEST,
        *,
        source: str = SOURCE,
        age: float = 0.0,
        event_id: Optional[str] = None,
        date: Optional[datetime] = None,
        **fields,
    ) -> InboundEvent:
        if event_id is None:
            event_id = f"{source}:{counter['next']}"
            counter["next"] += 1
        if date is None:
            date = datetime.fromtimestamp(clock() - age, tz=timezone.utc)
        return InboundEvent(
            event_id=event_id,
            source_group_id=source,
            date=date,
            sender_id="42",
            text=text,
            **fields,
        )

    return _make
