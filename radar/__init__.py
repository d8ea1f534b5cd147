"""
Signal Radar - real-time presence and messaging relay

Connected signals share profile and location updates, and exchange
private chat, group chat and pings over WebSocket.
"""

__version__ = "0.1.0"

from .config import settings
from .core import Participant, ParticipantRegistry, MessageRouter
from .logger import logger

__all__ = [
    "MessageRouter",
    "Participant",
    "ParticipantRegistry",
    "logger",
    "settings",
]
