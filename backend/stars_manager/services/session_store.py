"""
Redis-backed login sessions.

Keys:
- session:<id> - JSON SessionData, expires after SESSION_TTL_SECONDS
"""

from __future__ import annotations

import logging
import secrets
import string
from typing import Optional

import redis
from pydantic import BaseModel, ValidationError

from stars_manager.config import settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "session:"
_ALPHABET = string.ascii_letters + string.digits


class SessionData(BaseModel):
    access_token: str
    login: str
    avatar_url: str = ""


def generate_session_id(length: int = 32) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


class SessionStore:
    def __init__(self, redis_client: redis.Redis, ttl_seconds: int | None = None):
        self._redis = redis_client
        self.ttl_seconds = ttl_seconds or settings.SESSION_TTL_SECONDS

    def create(self, data: SessionData) -> str:
        session_id = generate_session_id()
        self._redis.set(
            f"{KEY_PREFIX}{session_id}", data.model_dump_json(), ex=self.ttl_seconds
        )
        logger.info(f"Created session for {data.login}")
        return session_id

    def get(self, session_id: str) -> Optional[SessionData]:
        if not session_id:
            return None
        raw = self._redis.get(f"{KEY_PREFIX}{session_id}")
        if not raw:
            return None
        try:
            return SessionData.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable session: {e}")
            self.delete(session_id)
            return None

    def delete(self, session_id: str) -> None:
        if session_id:
            self._redis.delete(f"{KEY_PREFIX}{session_id}")
