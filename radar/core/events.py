"""Wire protocol: message type tags, inbound variants and envelopes."""

import json
import math
from typing import Any, Union

from pydantic import BaseModel
from pydantic import Field

from .models import Coords


class Envelope(BaseModel):
    """Wire envelope shared by inbound and outbound messages."""

    type: str = Field(..., description="Message type")
    payload: dict[str, Any] = Field(default_factory=dict, description="Message body")


class ClientEvents:
    """Inbound message types"""

    UPDATE_PROFILE = "update-profile"
    UPDATE_LOCATION = "update-location"
    CHAT_PRIVATE = "chat-private"
    CHAT_GROUP = "chat-group"
    PING = "ping"


class ServerEvents:
    """Outbound message types"""

    WELCOME = "welcome"
    USER_JOINED = "user-joined"
    USER_UPDATED = "user-updated"
    USER_LEFT = "user-left"
    CHAT_PRIVATE = ClientEvents.CHAT_PRIVATE
    CHAT_GROUP = ClientEvents.CHAT_GROUP
    PING = ClientEvents.PING


# ==================== Inbound variants ====================


class UpdateProfile(BaseModel):
    name: str | None = None
    bio: str | None = None
    color: str | None = None


class UpdateLocation(BaseModel):
    coords: Coords


class ChatPrivate(BaseModel):
    to: str
    text: str


class ChatGroup(BaseModel):
    text: str


class Ping(BaseModel):
    to: str


class Rejected(BaseModel):
    """Outcome for a frame that does not decode to a known, valid message."""

    reason: str


InboundMessage = Union[UpdateProfile, UpdateLocation, ChatPrivate, ChatGroup, Ping]


def _reject_constant(value: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {value}")


def decode_frame(raw: str | bytes) -> dict[str, Any] | None:
    """Parse a raw frame into a JSON object.

    Returns None for anything that is not a strict-JSON object.
    """
    try:
        data = json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, TypeError):
        return None
    return data if isinstance(data, dict) else None


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def decode_message(frame: dict[str, Any]) -> InboundMessage | Rejected:
    """Turn a parsed frame into a typed inbound variant.

    Never raises; anything unusable comes back as ``Rejected``.
    """
    msg_type = frame.get("type")
    payload = frame.get("payload")
    if not isinstance(payload, dict):
        payload = {}

    if msg_type == ClientEvents.UPDATE_PROFILE:
        # Non-string fields are ignored one by one, the update still goes out
        return UpdateProfile(**{
            key: payload[key]
            for key in ("name", "bio", "color")
            if isinstance(payload.get(key), str)
        })

    if msg_type == ClientEvents.UPDATE_LOCATION:
        coords = payload.get("coords")
        if not isinstance(coords, dict):
            return Rejected(reason="coords missing")
        latitude = coords.get("latitude")
        longitude = coords.get("longitude")
        if not (_is_number(latitude) and _is_number(longitude)):
            return Rejected(reason="coords not numeric")
        return UpdateLocation(coords=Coords(latitude=latitude, longitude=longitude))

    if msg_type == ClientEvents.CHAT_PRIVATE:
        to, text = payload.get("to"), payload.get("text")
        if not (_non_empty_str(to) and _non_empty_str(text)):
            return Rejected(reason="chat-private needs to and text")
        return ChatPrivate(to=to, text=text)

    if msg_type == ClientEvents.CHAT_GROUP:
        text = payload.get("text")
        if not _non_empty_str(text):
            return Rejected(reason="chat-group needs text")
        return ChatGroup(text=text)

    if msg_type == ClientEvents.PING:
        to = payload.get("to")
        if not _non_empty_str(to):
            return Rejected(reason="ping needs to")
        return Ping(to=to)

    return Rejected(reason=f"unknown type: {msg_type!r}")


def create_event(event_type: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
    """Create an outbound envelope"""
    return Envelope(type=event_type, payload=payload or {}).model_dump()
