"""Pytest configuration and shared fixtures."""

from typing import Any

import pytest

from radar.core.registry import ParticipantRegistry
from radar.core.router import MessageRouter


class RecordingTransport:
    """Transport double that records every delivery per connection."""

    def __init__(self):
        self.sent: list[tuple[str, dict[str, Any]]] = []
        self.failing: set[str] = set()

    async def send(self, connection_id: str, message: dict[str, Any]) -> None:
        if connection_id in self.failing:
            raise ConnectionError(f"{connection_id} is gone")
        self.sent.append((connection_id, message))

    def messages_for(self, connection_id: str, msg_type: str | None = None) -> list[dict[str, Any]]:
        return [
            m for cid, m in self.sent
            if cid == connection_id and (msg_type is None or m["type"] == msg_type)
        ]

    def recipients_of(self, msg_type: str) -> list[str]:
        return [cid for cid, m in self.sent if m["type"] == msg_type]

    def clear(self) -> None:
        self.sent.clear()


@pytest.fixture
def registry() -> ParticipantRegistry:
    """Create an empty participant registry."""
    return ParticipantRegistry()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def router(registry: ParticipantRegistry, transport: RecordingTransport) -> MessageRouter:
    """Create a router wired to the recording transport."""
    return MessageRouter(registry, transport)
