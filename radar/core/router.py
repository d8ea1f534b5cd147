"""Message router: validation, state mutation and delivery scope."""

from typing import Any, Dict, Iterable, List, Optional, Protocol

from radar.logger import logger
from .events import (
    ChatGroup,
    ChatPrivate,
    Ping,
    Rejected,
    ServerEvents,
    UpdateLocation,
    UpdateProfile,
    create_event,
    decode_frame,
    decode_message,
)
from .models import Participant, now_ms
from .registry import ParticipantRegistry

MAX_TEXT_LENGTH = 500


class Transport(Protocol):
    """Delivery capability supplied by the transport layer."""

    async def send(self, connection_id: str, message: Dict[str, Any]) -> None:
        ...


class MessageRouter:
    """Routes inbound frames and connection lifecycle events.

    Holds no state of its own; everything lives in the registry.
    """

    def __init__(self, registry: ParticipantRegistry, transport: Transport):
        self.registry = registry
        self.transport = transport

        self.handlers = {
            UpdateProfile: self._handle_update_profile,
            UpdateLocation: self._handle_update_location,
            ChatPrivate: self._handle_chat_private,
            ChatGroup: self._handle_chat_group,
            Ping: self._handle_ping,
        }

    # ==================== Lifecycle ====================

    async def connect(self, connection_id: str) -> Participant:
        """Register a new connection, welcome it and announce it to everyone."""
        participant = self.registry.create(connection_id)

        await self._deliver(
            [connection_id],
            create_event(
                ServerEvents.WELCOME,
                {
                    "selfId": participant.id,
                    "users": [p.to_public() for p in self.registry.list()],
                },
            ),
        )
        await self._broadcast(
            create_event(ServerEvents.USER_JOINED, {"user": participant.to_public()})
        )
        logger.info(f"Signal {participant.id} joined | Connected: {len(self.registry)}")
        return participant

    async def disconnect(self, connection_id: str) -> Optional[Participant]:
        """Drop a connection; announces departure only on the first call."""
        participant = self.registry.remove(connection_id)
        if participant is None:
            return None

        await self._broadcast(create_event(ServerEvents.USER_LEFT, {"id": participant.id}))
        logger.info(f"Signal {participant.id} left | Connected: {len(self.registry)}")
        return participant

    # ==================== Inbound ====================

    async def handle_frame(self, connection_id: str, raw: str | bytes) -> None:
        """Handle one raw inbound frame from a connection."""
        frame = decode_frame(raw)
        if frame is None:
            logger.debug(f"Dropped malformed frame from {connection_id}")
            return

        sender = self.registry.touch(connection_id)
        if sender is None:
            logger.debug(f"Dropped frame from unregistered connection {connection_id}")
            return

        message = decode_message(frame)
        if isinstance(message, Rejected):
            logger.debug(f"Rejected frame from {sender.id}: {message.reason}")
            return

        await self.handlers[type(message)](connection_id, sender, message)

    async def _handle_update_profile(
        self, connection_id: str, sender: Participant, message: UpdateProfile
    ) -> None:
        updated = self.registry.update(
            connection_id,
            lambda p: p.apply_profile(message.name, message.bio, message.color),
        )
        if updated is not None:
            await self._broadcast_user_updated(updated)

    async def _handle_update_location(
        self, connection_id: str, sender: Participant, message: UpdateLocation
    ) -> None:
        def set_coords(p: Participant) -> None:
            p.coords = message.coords.model_copy()

        updated = self.registry.update(connection_id, set_coords)
        if updated is not None:
            await self._broadcast_user_updated(updated)

    async def _handle_chat_private(
        self, connection_id: str, sender: Participant, message: ChatPrivate
    ) -> None:
        recipients = [connection_id]
        recipients.extend(
            cid for cid in self.registry.find_connections(message.to)
            if cid != connection_id
        )
        await self._deliver(
            recipients,
            create_event(
                ServerEvents.CHAT_PRIVATE,
                {
                    "from": sender.id,
                    "to": message.to,
                    "text": message.text[:MAX_TEXT_LENGTH],
                    "ts": now_ms(),
                },
            ),
        )

    async def _handle_chat_group(
        self, connection_id: str, sender: Participant, message: ChatGroup
    ) -> None:
        await self._broadcast(
            create_event(
                ServerEvents.CHAT_GROUP,
                {"from": sender.id, "text": message.text[:MAX_TEXT_LENGTH], "ts": now_ms()},
            )
        )

    async def _handle_ping(
        self, connection_id: str, sender: Participant, message: Ping
    ) -> None:
        # NOTE: delivered to every connection although the ping names a target.
        # Likely unintended; clients currently filter on payload.to.
        await self._broadcast(
            create_event(
                ServerEvents.PING,
                {"from": sender.id, "to": message.to, "ts": now_ms()},
            )
        )

    # ==================== Delivery ====================

    async def _broadcast_user_updated(self, participant: Participant) -> None:
        await self._broadcast(
            create_event(ServerEvents.USER_UPDATED, {"user": participant.to_public()})
        )

    async def _broadcast(self, event: Dict[str, Any]) -> None:
        await self._deliver(self.registry.connection_ids(), event)

    async def _deliver(self, connection_ids: Iterable[str], event: Dict[str, Any]) -> None:
        """Best-effort send to each connection; one failure never stops the rest."""
        delivered: List[str] = []
        for cid in connection_ids:
            try:
                await self.transport.send(cid, event)
                delivered.append(cid)
            except Exception as e:
                logger.debug(f"Delivery of {event.get('type')} to {cid} failed: {e}")
        logger.debug(f"Delivered {event.get('type')} to {len(delivered)} connection(s)")
