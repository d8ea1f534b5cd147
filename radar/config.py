import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv(".env")


class Settings(BaseModel):
    host: str = Field(default_factory=lambda: os.getenv("RADAR_HOST", "0.0.0.0"))
    port: int = Field(
        default_factory=lambda: int(os.getenv("PORT", "3000")),
        description="Listen port"
    )
    log_level: str = Field(default_factory=lambda: os.getenv("RADAR_LOG_LEVEL", "INFO"))

    # WebSocket transport
    max_message_size: int = Field(
        default_factory=lambda: int(os.getenv("RADAR_MAX_MESSAGE_SIZE", str(64 * 1024))),
        description="Largest inbound frame accepted, in bytes"
    )
    outbound_queue_size: int = Field(
        default_factory=lambda: int(os.getenv("RADAR_OUTBOUND_QUEUE", "256")),
        description="Per-connection outbound queue bound; overflow is dropped"
    )
    ping_interval: float = Field(default = 30.0, description = "Keepalive ping interval in seconds")
    ping_timeout: float = Field(default = 10.0, description = "Keepalive pong timeout in seconds")


# Create singleton instance
settings = Settings()
