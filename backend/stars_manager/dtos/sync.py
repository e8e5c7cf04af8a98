"""Sync DTOs: progress events pushed over the websocket and one-shot results."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ProgressEventType(str, Enum):
    START = "start"
    INFO = "info"
    PROGRESS = "progress"
    ERROR = "error"
    COMPLETE = "complete"


class ProgressEvent(BaseModel):
    """
    One progress message for the client.

    Percentages never decrease within a sync run. The event is informational
    only; it carries no retry or resume semantics.
    """

    type: ProgressEventType
    message: str
    progress: int = Field(default=0, ge=0, le=100)
    current: Optional[int] = None
    total: Optional[int] = None

    def to_message(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)

    @property
    def is_terminal(self) -> bool:
        return self.type in (ProgressEventType.COMPLETE, ProgressEventType.ERROR)


class SyncResponse(BaseModel):
    message: str = "Sync complete"
    count: int
