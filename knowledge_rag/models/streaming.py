"""
Streaming event schemas for chat.

Defines event types and payloads for server-sent chat streaming.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class StreamEventType(str, Enum):
    """Server-to-client event types for streaming chat."""

    SOURCES = "sources"
    TOKEN = "token"
    COMPLETE = "complete"
    ERROR = "error"


class StreamEvent(BaseModel):
    """
    Base streaming event model.

    Attributes:
        event: Event type identifier
        data: Event-specific payload
    """

    event: StreamEventType
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {"event": self.event.value, "data": self.data}
