from __future__ import annotations

import asyncio

from core.dispatch import MessageDispatcher


class SlowProcessor:
    """Yields to the loop mid-event and tracks how many events overlap."""

    def __init__(self, fail_on: tuple[str, ...] = ()) -> None:
        self.order: list[str] = []
        self.active = 0
        self.max_active = 0
        self.fail_on = fail_on

    async def handle(self, event) -> None:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            for _ in range(3):
                await asyncio.sleep(0)
            if event in self.fail_on:
                raise RuntimeError(event)
            self.order.append(event)
        finally:
            self.active -= 1


async def _drain(dispatcher: MessageDispatcher) -> None:
    consumer = asyncio.create_task(dispatcher.run())
    await dispatcher.join()
    dispatcher.stop()
    await consumer


def test_events_are_handled_one_at_a_time_in_order() -> None:
    processor = SlowProcessor()

    async def scenario() -> None:
        dispatcher = MessageDispatcher(processor)
        assert dispatcher.submit(["e1", "e2"]) == 2
        assert dispatcher.submit(["e3"]) == 1
        assert dispatcher.backlog == 3
        await _drain(dispatcher)

    asyncio.run(scenario())

    assert processor.order == ["e1", "e2", "e3"]
    assert processor.max_active == 1


def test_non_new_batches_are_ignored() -> None:
    processor = SlowProcessor()

    async def scenario() -> int:
        dispatcher = MessageDispatcher(processor)
        queued = dispatcher.submit(["old"], delivery_type="history")
        dispatcher.submit(["fresh"])
        await _drain(dispatcher)
        return queued

    assert asyncio.run(scenario()) == 0
    assert processor.order == ["fresh"]


def test_failing_event_does_not_stop_consumer() -> None:
    processor = SlowProcessor(fail_on=("bad",))

    async def scenario() -> int:
        dispatcher = MessageDispatcher(processor)
        dispatcher.submit(["e1", "bad", "e2"])
        await _drain(dispatcher)
        return dispatcher.handled

    assert asyncio.run(scenario()) == 2
    assert processor.order == ["e1", "e2"]
