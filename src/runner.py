"""Lifecycle of one relay identity on a connected Telegram client.

``RelayRunner.run`` serves until a stop is requested (SIGINT/SIGTERM or
``request_stop``) or the reconnect budget runs out, and always finishes with
``shutdown``: consumer stopped, maintenance cancelled, dirty fingerprints
flushed, client disconnected.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import Optional

from telethon import events

from adapters.telegram_mapper import build_event
from adapters.telegram_sender import TelegramGroupSender
from core.dispatch import MessageDispatcher
from core.maintenance import MaintenanceTicker
from core.processor import MessageProcessor
from core.state import RelayState
from get_session import authorize

LOGGER = logging.getLogger(__name__)


class RelayRunner:
    """Owns the client, the processing queue and the background jobs."""

    def __init__(
        self,
        client,
        state: RelayState,
        key_aliases: Optional[dict[str, str]] = None,
        max_reconnect_attempts: int = 10,
        backoff_base: float = 3.0,
        backoff_cap: float = 60.0,
    ) -> None:
        self._client = client
        self._state = state
        self._key_aliases = key_aliases or {}
        self._max_reconnect_attempts = max_reconnect_attempts
        self._backoff_base = backoff_base
        self._backoff_cap = backoff_cap
        self.processor = MessageProcessor(state, TelegramGroupSender(client))
        self._dispatcher = MessageDispatcher(self.processor)
        self._ticker = MaintenanceTicker(state)
        self._consumer: Optional[asyncio.Task] = None
        self._stop_requested = asyncio.Event()
        self._shut_down = False

    def _register_handler(self) -> None:
        # The handler only maps and enqueues; all filtering happens in the
        # core processor, one event at a time.
        @self._client.on(events.NewMessage(incoming=True))
        async def handler(event) -> None:
            try:
                inbound = await build_event(event.message, self._key_aliases)
                self._dispatcher.submit([inbound])
            except Exception:
                LOGGER.exception("Error while mapping message")

    def request_stop(self) -> None:
        self._stop_requested.set()

    def install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Turn SIGINT and SIGTERM into a graceful stop."""

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._on_signal, sig)
            except NotImplementedError:
                # Windows event loops: Ctrl+C still arrives as KeyboardInterrupt.
                LOGGER.debug("Signal handlers unavailable for %s", sig.name)

    def _on_signal(self, sig: signal.Signals) -> None:
        LOGGER.info("Received %s, stopping", sig.name)
        self.request_stop()

    def _backoff(self, attempts: int) -> float:
        return min(self._backoff_base * 2 ** (attempts - 1), self._backoff_cap)

    async def serve(self) -> None:
        await self._client.connect()
        await authorize(self._client)

        self._register_handler()
        self._ticker.start()
        self._consumer = asyncio.create_task(self._dispatcher.run(), name="relay-consumer")

        attempts = 0
        while True:
            if attempts:
                if attempts > self._max_reconnect_attempts:
                    raise RuntimeError("Max reconnect attempts reached")
                delay = self._backoff(attempts)
                LOGGER.warning("Reconnecting in %.1fs (attempt %s)", delay, attempts)
                await asyncio.sleep(delay)

            try:
                if not self._client.is_connected():
                    await self._client.connect()
            except OSError:
                LOGGER.warning("Connection attempt failed", exc_info=True)
                attempts += 1
                continue

            attempts = 0
            self._state.mark_reconnected()
            LOGGER.info("Client connected. Listening for incoming messages...")
            await self._client.run_until_disconnected()
            LOGGER.warning("Disconnected")
            attempts = 1

    async def run(self) -> None:
        """Serve until stopped, then shut down; serve errors are re-raised."""

        serving = asyncio.create_task(self.serve(), name="relay-serve")
        stopping = asyncio.create_task(self._stop_requested.wait(), name="relay-stop")
        try:
            await asyncio.wait({serving, stopping}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (serving, stopping):
                task.cancel()
            await asyncio.gather(serving, stopping, return_exceptions=True)
            await self.shutdown()

        if not serving.cancelled() and serving.exception() is not None:
            raise serving.exception()

    async def shutdown(self) -> None:
        if self._shut_down:
            return
        self._shut_down = True

        self._dispatcher.stop()
        if self._consumer is not None and not self._consumer.done():
            self._consumer.cancel()
            await asyncio.gather(self._consumer, return_exceptions=True)
        await self._ticker.stop(flush=True)
        if self._client.is_connected():
            await self._client.disconnect()
        LOGGER.info("Relay stopped")
