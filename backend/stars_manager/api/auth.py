from typing import Optional

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status

from stars_manager.config import settings
from stars_manager.dtos import MessageResponse, TokenLoginRequest, UserResponse
from stars_manager.middleware.auth import get_current_session, get_session_store
from stars_manager.services.github.exceptions import GithubStatusError
from stars_manager.services.session_store import SessionData, SessionStore
from stars_manager.services.star_sync_service import (
    StarsClientFactory,
    get_stars_client_factory,
)

router = APIRouter()


@router.post("/auth/token-login", response_model=MessageResponse)
async def token_login(
    payload: TokenLoginRequest,
    response: Response,
    store: SessionStore = Depends(get_session_store),
    client_factory: StarsClientFactory = Depends(get_stars_client_factory),
):
    """Sign in with a GitHub personal access token."""
    try:
        async with client_factory(payload.token) as client:
            user = await client.get_authenticated_user()
    except GithubStatusError as e:
        if e.status_code == status.HTTP_401_UNAUTHORIZED:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid GitHub token"
            )
        raise

    session_id = store.create(
        SessionData(access_token=payload.token, login=user.login, avatar_url=user.avatar_url)
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        max_age=settings.SESSION_TTL_SECONDS,
        httponly=True,
        path="/",
    )
    return MessageResponse(message="Login successful")


@router.post("/auth/logout", response_model=MessageResponse)
def logout(
    response: Response,
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
    store: SessionStore = Depends(get_session_store),
):
    if session_id:
        store.delete(session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return MessageResponse(message="Logged out")


@router.get("/user", response_model=UserResponse)
def get_user(session: SessionData = Depends(get_current_session)):
    return UserResponse(login=session.login, avatar_url=session.avatar_url)
