"""Service layer around the sync engine for the HTTP and websocket routes."""

import logging
from typing import Callable, List, Optional

from fastapi import HTTPException, status
from pymongo.database import Database

from stars_manager.config import settings
from stars_manager.dtos.repository import StatsResponse
from stars_manager.entities.starred_repo import StarredRepo
from stars_manager.services.github.exceptions import GithubError, GithubRateLimitError
from stars_manager.services.github.stars_client import GitHubStarsClient
from stars_manager.services.session_store import SessionData
from stars_manager.services.snapshot_store import SnapshotNotFoundError, SnapshotStore
from stars_manager.services.sync.orchestrator import SyncOrchestrator
from stars_manager.services.sync.progress import ProgressSink
from stars_manager.services.sync.state import SyncPhase, SyncState

logger = logging.getLogger(__name__)

StarsClientFactory = Callable[[str], GitHubStarsClient]


def get_stars_client_factory() -> StarsClientFactory:
    """FastAPI dependency; tests override it to use a mock transport."""
    return GitHubStarsClient


class StarSyncService:
    def __init__(self, db: Database, client_factory: Optional[StarsClientFactory] = None):
        self.store = SnapshotStore(db)
        self.client_factory = client_factory or GitHubStarsClient
        self.orchestrator = SyncOrchestrator(self.store, page_size=settings.GITHUB_PAGE_SIZE)

    async def sync(
        self, session: SessionData, sink: Optional[ProgressSink] = None
    ) -> SyncState:
        try:
            client = self.client_factory(session.access_token)
        except GithubError as e:
            return self.orchestrator.reject(session.login, e, sink)

        async with client:
            return await self.orchestrator.run(session.login, client, sink)

    async def sync_or_raise(self, session: SessionData) -> int:
        """One-shot sync: the merged count, or an HTTPException describing the failure."""
        state = await self.sync(session)
        if state.succeeded:
            return state.merged_count or 0

        if state.failed_phase == SyncPhase.PERSISTING:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        elif isinstance(state.error.__cause__, GithubRateLimitError):
            status_code = status.HTTP_429_TOO_MANY_REQUESTS
        else:
            status_code = status.HTTP_502_BAD_GATEWAY
        raise HTTPException(status_code=status_code, detail=f"Sync failed: {state.error}")

    async def list_repos(self, session: SessionData) -> List[StarredRepo]:
        """The stored snapshot; syncs first when the user has none yet."""
        try:
            return self.store.load_snapshot_with_annotations(session.login)
        except SnapshotNotFoundError:
            logger.info(f"No local snapshot for {session.login}, syncing from GitHub")

        await self.sync_or_raise(session)
        return self.store.load_snapshot_with_annotations(session.login)

    def get_stats(self, session: SessionData) -> StatsResponse:
        try:
            repos = self.store.load_snapshot_with_annotations(session.login)
        except SnapshotNotFoundError:
            repos = []

        last_sync = self.store.load_sync_timestamp(session.login)
        return StatsResponse(
            total_repos=len(repos),
            analyzed_repos=sum(1 for repo in repos if repo.tag or repo.category),
            last_sync=last_sync.isoformat() if last_sync else "",
        )
