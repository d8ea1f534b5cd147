from .models import Coords, Participant
from .registry import ParticipantRegistry
from .router import MessageRouter, Transport

__all__ = ["Coords", "MessageRouter", "Participant", "ParticipantRegistry", "Transport"]
