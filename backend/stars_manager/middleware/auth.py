"""Authentication dependencies for FastAPI."""
from __future__ import annotations

from typing import Optional

from fastapi import Cookie, Depends, Header, HTTPException, WebSocket, status

from stars_manager.config import settings
from stars_manager.core.redis import get_redis
from stars_manager.services.session_store import SessionData, SessionStore


def get_session_store() -> SessionStore:
    """Injected so tests can swap in their own store."""
    return SessionStore(get_redis())


def _extract_session_id(
    session_id: Optional[str], authorization: Optional[str]
) -> Optional[str]:
    if session_id:
        return session_id
    if authorization and authorization.startswith("Bearer "):
        return authorization.replace("Bearer ", "", 1)
    return None


async def get_current_session(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
    authorization: Optional[str] = Header(None),
    store: SessionStore = Depends(get_session_store),
) -> SessionData:
    """Resolve the signed-in user from the session cookie or a Bearer header.

    Raises:
        HTTPException: 401 if there is no live session
    """
    token = _extract_session_id(session_id, authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Please login.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    session = store.get(token)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired. Please login again.",
        )
    return session


def get_websocket_session(
    websocket: WebSocket,
    store: SessionStore = Depends(get_session_store),
) -> Optional[SessionData]:
    """Websocket variant: returns None instead of raising."""
    token = _extract_session_id(
        websocket.cookies.get(settings.SESSION_COOKIE_NAME),
        websocket.headers.get("authorization"),
    )
    if not token:
        return None
    return store.get(token)
