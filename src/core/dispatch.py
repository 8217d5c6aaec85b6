"""Single-consumer event queue in front of the processor.

Events from one inbound batch (and across batches) are handled strictly one
after another: event N+1 starts only when event N's whole pipeline, pacing
included, has finished. The chat adapter only enqueues.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Union

from core.models import InboundEvent
from core.processor import MessageProcessor

LOGGER = logging.getLogger(__name__)

NEW_MESSAGES = "new"

_STOP = object()


class MessageDispatcher:
    def __init__(self, processor: MessageProcessor) -> None:
        self._processor = processor
        self._queue: "asyncio.Queue[Union[InboundEvent, object]]" = asyncio.Queue()
        self.handled = 0

    def submit(self, events: Iterable[InboundEvent], delivery_type: str = NEW_MESSAGES) -> int:
        """Enqueue a batch; batches that are not fresh deliveries are ignored."""

        if delivery_type != NEW_MESSAGES:
            return 0
        queued = 0
        for event in events:
            self._queue.put_nowait(event)
            queued += 1
        return queued

    @property
    def backlog(self) -> int:
        return self._queue.qsize()

    async def run(self) -> None:
        """Consume until ``stop()`` is called."""

        while True:
            event = await self._queue.get()
            try:
                if event is _STOP:
                    return
                await self._processor.handle(event)
                self.handled += 1
            except Exception:
                # One bad event must not stop the consumer.
                LOGGER.exception("Error handling message")
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        await self._queue.join()

    def stop(self) -> None:
        self._queue.put_nowait(_STOP)
