"""Registry of connected participants."""

from collections.abc import Callable
from threading import Lock
from typing import Dict, List, Optional

from radar.logger import logger
from .models import Participant, now_ms


class ParticipantRegistry:
    """Authoritative map of connection id -> Participant.

    Every operation runs under one lock and hands out copies, so callers
    never hold a live record beyond the call.
    """

    def __init__(self):
        self._lock = Lock()
        self._participants: Dict[str, Participant] = {}

    def create(self, connection_id: str) -> Participant:
        """Register a fresh participant with default profile for a connection."""
        participant = Participant()
        with self._lock:
            self._participants[connection_id] = participant
            snapshot = participant.model_copy(deep=True)
        logger.debug(f"Registered participant {snapshot.id} for connection {connection_id}")
        return snapshot

    def get(self, connection_id: str) -> Optional[Participant]:
        """Get the participant for a connection, or None if not registered."""
        with self._lock:
            participant = self._participants.get(connection_id)
            return participant.model_copy(deep=True) if participant else None

    def update(
        self,
        connection_id: str,
        mutator: Callable[[Participant], None],
    ) -> Optional[Participant]:
        """Apply ``mutator`` to a participant and refresh its last-seen time.

        Returns the updated snapshot, or None when the connection is gone.
        """
        with self._lock:
            participant = self._participants.get(connection_id)
            if participant is None:
                return None
            mutator(participant)
            participant.last_seen = now_ms()
            return participant.model_copy(deep=True)

    def touch(self, connection_id: str) -> Optional[Participant]:
        """Refresh last-seen time only."""
        return self.update(connection_id, lambda participant: None)

    def remove(self, connection_id: str) -> Optional[Participant]:
        """Remove and return a participant; None if already removed."""
        with self._lock:
            participant = self._participants.pop(connection_id, None)
        if participant is not None:
            logger.debug(f"Removed participant {participant.id} (connection {connection_id})")
        return participant

    def list(self) -> List[Participant]:
        """Snapshot of all participants in registration order."""
        with self._lock:
            return [p.model_copy(deep=True) for p in self._participants.values()]

    def connection_ids(self) -> List[str]:
        with self._lock:
            return list(self._participants.keys())

    def find_connections(self, participant_id: str) -> List[str]:
        """Connection ids whose participant carries ``participant_id``."""
        with self._lock:
            return [
                cid for cid, p in self._participants.items()
                if p.id == participant_id
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._participants)

    def __contains__(self, connection_id: object) -> bool:
        with self._lock:
            return connection_id in self._participants
