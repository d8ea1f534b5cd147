"""WebSocket server for the radar relay."""

import asyncio
import contextlib
import uuid
from datetime import datetime
from typing import Any

from websockets.asyncio.server import ServerConnection, serve
from websockets.exceptions import ConnectionClosed
from websockets.exceptions import WebSocketException

from radar.config import settings
from radar.core.registry import ParticipantRegistry
from radar.core.router import MessageRouter
from radar.logger import logger
from .outbound import OutboundChannel
from .utils import close_websocket_safely


class RadarWebSocketServer:
    """Radar WebSocket server.

    Owns the websocket side of every connection (socket and outbound
    channel) and acts as the router's transport. Participant state lives in
    the registry only.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        registry: ParticipantRegistry | None = None,
    ):
        self.host = host if host is not None else settings.host
        self.port = port if port is not None else settings.port
        self.registry = registry or ParticipantRegistry()
        self.router = MessageRouter(self.registry, self)
        self.connections: dict[str, ServerConnection] = {}
        self.outbounds: dict[str, OutboundChannel] = {}
        self.running = False
        self.started_at: datetime | None = None
        self.shutdown_event = asyncio.Event()

    async def send(self, connection_id: str, message: dict[str, Any]) -> None:
        """Queue a message for one connection; unknown or closed connections are skipped."""
        outbound = self.outbounds.get(connection_id)
        if outbound is None:
            logger.debug(f"No outbound channel for {connection_id}; skipped {message.get('type')}")
            return
        outbound.enqueue(message)

    async def handle_connection(self, websocket: ServerConnection):
        """Handle a WebSocket connection from open to close"""
        connection_id = str(uuid.uuid4())
        self.connections[connection_id] = websocket

        outbound = OutboundChannel(
            websocket,
            maxsize=settings.outbound_queue_size,
            name=f"conn-{connection_id}",
        )
        outbound.start()
        self.outbounds[connection_id] = outbound

        logger.info(f"New WebSocket connection: {connection_id}")

        try:
            await self.router.connect(connection_id)

            async for message in websocket:
                try:
                    await self.router.handle_frame(connection_id, message)
                except Exception as e:
                    logger.exception(f"Error handling message from {connection_id}: {e}")

        except ConnectionClosed:
            logger.info(f"WebSocket connection closed: {connection_id}")
        except WebSocketException as e:
            logger.error(f"WebSocket error for {connection_id}: {e}")
        finally:
            await self._cleanup_connection(connection_id)

    async def _cleanup_connection(self, connection_id: str) -> None:
        """Release the registry entry, announce departure and stop the writer"""
        self.connections.pop(connection_id, None)
        outbound = self.outbounds.pop(connection_id, None)

        await self.router.disconnect(connection_id)

        if outbound is not None:
            with contextlib.suppress(Exception):
                await outbound.close()
        logger.info(f"Cleaned up connection {connection_id}")

    async def start_server(self) -> None:
        """Start WebSocket server and serve until shutdown"""
        if self.running:
            logger.warning("Server is already running")
            return

        self.running = True
        self.started_at = datetime.now()
        try:
            async with serve(
                self.handle_connection,
                self.host,
                self.port,
                ping_interval=settings.ping_interval,
                ping_timeout=settings.ping_timeout,
                max_size=settings.max_message_size,
            ):
                logger.info(f"Radar server running on ws://{self.host}:{self.port}")
                await self.shutdown_event.wait()
        except Exception as e:
            logger.exception(f"Server error: {e}")
            raise
        finally:
            self.running = False
            logger.info("Server stopped")

    def get_status(self) -> dict[str, Any]:
        """Get server status"""
        uptime = (datetime.now() - self.started_at).total_seconds() if self.started_at else 0
        return {
            "running": self.running,
            "host": self.host,
            "port": self.port,
            "total_connections": len(self.connections),
            "participants": len(self.registry),
            "server_time": datetime.now().isoformat(),
            "uptime": uptime,
            "outbound_queues": {cid: ch.queue.qsize() for cid, ch in self.outbounds.items()},
        }

    async def shutdown(self) -> None:
        """Gracefully shutdown server"""
        logger.info("Shutting down server...")
        self.running = False

        for websocket in list(self.connections.values()):
            await close_websocket_safely(websocket)

        for outbound in list(self.outbounds.values()):
            with contextlib.suppress(Exception):
                await outbound.close()

        self.shutdown_event.set()
        logger.info("Server shutdown complete")
