"""
Push-socket acquisition strategy.

Alternative to endpoint polling: the data source pushes JSON records over
a websocket and every message goes through ``TelemetryCore.ingest``.
Unlike polling, a lost connection is retried with exponential backoff and
abandoned after a fixed number of attempts.
"""

import asyncio
import json
import logging
from typing import Any, Callable, Optional

import websockets
from websockets.exceptions import WebSocketException

from ..config import SocketConfig, ConnectionStatus, DEFAULT_CONFIG
from .core import TelemetryCore

logger = logging.getLogger(__name__)


class SocketAcquisition:

    def __init__(
        self,
        core: TelemetryCore,
        config: SocketConfig = None,
        connect: Callable[[str], Any] = None
    ):
        self.core = core
        self.config = config or DEFAULT_CONFIG.socket
        self._connect = connect or websockets.connect

        self._reconnect_attempts = 0
        self._stopped = False
        self._task: Optional[asyncio.Task] = None
        self._messages_received = 0
        self._messages_rejected = 0

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    @property
    def messages_received(self) -> int:
        return self._messages_received

    @property
    def messages_rejected(self) -> int:
        return self._messages_rejected

    def next_delay(self) -> Optional[float]:
        """
        Advance the attempt counter and return the wait before reconnecting.

        Returns:
            Delay in seconds, or None once the attempt budget is spent
        """
        if self._reconnect_attempts >= self.config.max_reconnect_attempts:
            return None
        self._reconnect_attempts += 1
        return min(
            self.config.base_delay * (2 ** self._reconnect_attempts),
            self.config.max_delay
        )

    def _on_open(self):
        logger.info(f"Websocket connected to {self.config.url}")
        self._reconnect_attempts = 0
        self.core.set_status(ConnectionStatus.CONNECTED)

    def _on_message(self, message):
        try:
            record = json.loads(message)
        except ValueError as e:
            self._messages_rejected += 1
            logger.error(f"Error parsing websocket message: {e}")
            return

        if not isinstance(record, dict):
            self._messages_rejected += 1
            logger.error(f"Websocket message is not an object: {type(record).__name__}")
            return

        self._messages_received += 1
        self.core.ingest(record)

    async def run(self):
        """Connect, consume messages and reconnect until the budget is spent."""
        while not self._stopped:
            try:
                async with self._connect(self.config.url) as ws:
                    self._on_open()
                    async for message in ws:
                        self._on_message(message)
            except (OSError, asyncio.TimeoutError, WebSocketException) as e:
                logger.error(f"Websocket error: {e!r}")
                self.core.set_status(ConnectionStatus.ERROR)

            if self._stopped:
                break

            logger.info("Websocket disconnected")
            self.core.set_status(ConnectionStatus.DISCONNECTED)

            delay = self.next_delay()
            if delay is None:
                logger.warning("Max reconnection attempts reached, giving up")
                break

            logger.info(
                f"Reconnecting in {delay:.1f}s "
                f"({self._reconnect_attempts}/{self.config.max_reconnect_attempts})"
            )
            await asyncio.sleep(delay)

    def start(self):
        if self._task is None:
            self._task = asyncio.create_task(self.run())

    async def stop(self):
        self._stopped = True
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
