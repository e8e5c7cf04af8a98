"""Data Transfer Objects (DTOs) for API requests and responses"""

from .auth import GithubUser, TokenLoginRequest, UserResponse
from .repository import (
    CategoryOption,
    CategoryUpdateRequest,
    DescriptionUpdateRequest,
    MessageResponse,
    StatsResponse,
    TagUpdateRequest,
)
from .sync import ProgressEvent, ProgressEventType, SyncResponse

__all__ = [
    "GithubUser",
    "TokenLoginRequest",
    "UserResponse",
    "CategoryOption",
    "CategoryUpdateRequest",
    "DescriptionUpdateRequest",
    "MessageResponse",
    "StatsResponse",
    "TagUpdateRequest",
    "ProgressEvent",
    "ProgressEventType",
    "SyncResponse",
]
