from fastapi import APIRouter, Depends, status
from pymongo.database import Database

from stars_manager.database.mongo import get_db
from stars_manager.dtos import SyncResponse
from stars_manager.middleware.auth import get_current_session
from stars_manager.services.session_store import SessionData
from stars_manager.services.star_sync_service import (
    StarsClientFactory,
    StarSyncService,
    get_stars_client_factory,
)

router = APIRouter()


@router.post("/sync", response_model=SyncResponse, status_code=status.HTTP_200_OK)
async def sync_starred_repos(
    db: Database = Depends(get_db),
    session: SessionData = Depends(get_current_session),
    client_factory: StarsClientFactory = Depends(get_stars_client_factory),
):
    """Sync starred repositories from GitHub without progress reporting."""
    count = await StarSyncService(db, client_factory).sync_or_raise(session)
    return SyncResponse(message="Sync complete", count=count)
