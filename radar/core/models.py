"""Data models for connected participants."""

import random
import string
import time
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

DEFAULT_NAME = "New Signal"
DEFAULT_BIO = ""
DEFAULT_COLOR = "#3bff99"

MAX_NAME_LENGTH = 40
MAX_BIO_LENGTH = 160

_ID_ALPHABET = string.digits + string.ascii_lowercase


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def generate_participant_id() -> str:
    # Non-cryptographic; collisions are improbable enough for a presence feed
    return "u_" + "".join(random.choices(_ID_ALPHABET, k=7))


class Coords(BaseModel):
    """A complete latitude/longitude pair."""

    latitude: float
    longitude: float


class Participant(BaseModel):
    """State of one connected signal."""

    id: str = Field(default_factory=generate_participant_id)
    name: str = DEFAULT_NAME
    bio: str = DEFAULT_BIO
    color: str = DEFAULT_COLOR
    coords: Optional[Coords] = None
    last_seen: int = Field(default_factory=now_ms, alias="lastSeen")

    model_config = {"populate_by_name": True}

    def apply_profile(
        self,
        name: Optional[str] = None,
        bio: Optional[str] = None,
        color: Optional[str] = None,
    ) -> None:
        """Set the given profile fields, clipping name and bio."""
        if name is not None:
            self.name = name[:MAX_NAME_LENGTH]
        if bio is not None:
            self.bio = bio[:MAX_BIO_LENGTH]
        if color is not None:
            self.color = color

    def to_public(self) -> Dict[str, Any]:
        """Wire projection: id, name, bio, color, coords, lastSeen."""
        return self.model_dump(by_alias=True)
