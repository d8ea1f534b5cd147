"""WebSocket transport for the radar relay."""

from .outbound import OutboundChannel
from .server import RadarWebSocketServer
from .utils import close_websocket_safely
from .utils import is_websocket_closed

__all__ = [
    "OutboundChannel",
    "RadarWebSocketServer",
    "close_websocket_safely",
    "is_websocket_closed",
]
