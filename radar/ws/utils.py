"""WebSocket connection helpers."""

from websockets.asyncio.server import ServerConnection
from websockets.protocol import State

from radar.logger import logger


def is_websocket_closed(websocket: ServerConnection) -> bool:
    """True once the connection is closing or closed."""
    return websocket.state in (State.CLOSING, State.CLOSED)


async def close_websocket_safely(websocket: ServerConnection) -> None:
    """Close a WebSocket connection, ignoring errors.

    Args:
        websocket: The WebSocket connection to close
    """
    try:
        if not is_websocket_closed(websocket):
            await websocket.close()
    except Exception as e:
        logger.debug(f"Error closing websocket: {e}")
