from typing import List

from fastapi import APIRouter, Depends, Path
from pymongo.database import Database

from stars_manager.database.mongo import get_db
from stars_manager.dtos import (
    CategoryOption,
    CategoryUpdateRequest,
    DescriptionUpdateRequest,
    MessageResponse,
    StatsResponse,
    TagUpdateRequest,
)
from stars_manager.entities.starred_repo import StarredRepo
from stars_manager.middleware.auth import get_current_session
from stars_manager.services.annotation_service import AnnotationService, list_categories
from stars_manager.services.session_store import SessionData
from stars_manager.services.star_sync_service import (
    StarsClientFactory,
    StarSyncService,
    get_stars_client_factory,
)

router = APIRouter()


@router.get("/repos", response_model=List[StarredRepo])
async def list_starred_repos(
    db: Database = Depends(get_db),
    session: SessionData = Depends(get_current_session),
    client_factory: StarsClientFactory = Depends(get_stars_client_factory),
):
    """List the user's starred repositories with their annotations.

    Users that never synced get a one-shot sync first.
    """
    return await StarSyncService(db, client_factory).list_repos(session)


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    db: Database = Depends(get_db),
    session: SessionData = Depends(get_current_session),
):
    return StarSyncService(db).get_stats(session)


@router.get("/categories", response_model=List[CategoryOption])
def get_categories():
    return list_categories()


@router.post("/repos/{repo_id}/tag", response_model=MessageResponse)
def update_tag(
    payload: TagUpdateRequest,
    repo_id: int = Path(..., description="GitHub repository ID"),
    db: Database = Depends(get_db),
    session: SessionData = Depends(get_current_session),
):
    AnnotationService(db).update_tag(session.login, repo_id, payload.tag)
    return MessageResponse(message="Updated")


@router.post("/repos/{repo_id}/category", response_model=MessageResponse)
def update_category(
    payload: CategoryUpdateRequest,
    repo_id: int = Path(..., description="GitHub repository ID"),
    db: Database = Depends(get_db),
    session: SessionData = Depends(get_current_session),
):
    AnnotationService(db).update_category(session.login, repo_id, payload.category)
    return MessageResponse(message="Updated")


@router.post("/repos/{repo_id}/description", response_model=MessageResponse)
def update_description(
    payload: DescriptionUpdateRequest,
    repo_id: int = Path(..., description="GitHub repository ID"),
    db: Database = Depends(get_db),
    session: SessionData = Depends(get_current_session),
):
    AnnotationService(db).update_description(session.login, repo_id, payload.description)
    return MessageResponse(message="Updated")
