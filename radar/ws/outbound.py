"""Outbound message channels for per-connection single-writer sending.

Every message for one WebSocket connection is written by exactly one
writer coroutine, so websocket.send() is never called concurrently. The
queue is bounded and producers never wait on it: when a slow client lets
its queue fill up, further messages for that client are dropped.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

from websockets.asyncio.server import ServerConnection

from .utils import is_websocket_closed
from radar.logger import logger


class OutboundChannel:
    """Per-connection outbound channel with a single writer task."""

    def __init__(
        self,
        websocket: ServerConnection,
        *,
        maxsize: int = 256,
        name: str | None = None,
    ) -> None:
        self.websocket = websocket
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=maxsize)
        self._writer_task: asyncio.Task | None = None
        self._closed = False
        self.name = name or "outbound"
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        if self._writer_task is None or self._writer_task.done():
            self._writer_task = asyncio.create_task(self._writer(), name=f"{self.name}-writer")

    def enqueue(self, event: dict[str, Any]) -> bool:
        """Queue an event for sending without waiting.

        Returns False when the event was dropped (channel closed or full).
        """
        if self._closed:
            return False
        try:
            self.queue.put_nowait(event)
            return True
        except asyncio.QueueFull:
            self.dropped += 1
            logger.debug(f"{self.name}: queue full, dropped {event.get('type', 'unknown')}")
            return False

    async def close(self) -> None:
        self._closed = True
        if self._writer_task is not None:
            self._writer_task.cancel()
            try:
                await self._writer_task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.debug(f"Error awaiting writer task close: {e}")
        # Drain queue best-effort
        while not self.queue.empty():
            self.queue.get_nowait()
            self.queue.task_done()

    async def _writer(self) -> None:
        """Single writer that sends all events on this connection."""
        try:
            while not self._closed:
                event = await self.queue.get()
                try:
                    if is_websocket_closed(self.websocket):
                        logger.debug("WebSocket closed; dropping outbound event")
                    else:
                        await self.websocket.send(json.dumps(event))
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    # Upstream closes the connection; keep draining until then
                    logger.error(f"Outbound send failed: {e}")
                finally:
                    self.queue.task_done()
        except asyncio.CancelledError:
            pass
