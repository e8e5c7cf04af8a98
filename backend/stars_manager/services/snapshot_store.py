"""
Local snapshot store: the persisted starred collection plus annotations.

The snapshot keeps remote fields; annotation records are the source of
truth for tag, category and AI description and are overlaid on load.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional

from pymongo.database import Database
from pymongo.errors import PyMongoError

from stars_manager.entities.starred_repo import StarredRepo
from stars_manager.repositories import (
    RepoAnnotationRepository,
    StarredRepoRepository,
    SyncMetaRepository,
)

logger = logging.getLogger(__name__)

# One lock per process around every read and the persist step of a sync.
_store_lock = threading.RLock()


class SnapshotStoreError(Exception):
    """The snapshot could not be read or written."""


class SnapshotNotFoundError(SnapshotStoreError):
    """The user has never synced."""


class SnapshotStore:
    lock = _store_lock

    def __init__(self, db: Database):
        self.repo_repo = StarredRepoRepository(db)
        self.annotation_repo = RepoAnnotationRepository(db)
        self.sync_meta_repo = SyncMetaRepository(db)

    def load_snapshot_with_annotations(self, owner_login: str) -> List[StarredRepo]:
        with self.lock:
            try:
                if not self.sync_meta_repo.has_snapshot(owner_login):
                    raise SnapshotNotFoundError(f"No snapshot stored for {owner_login}")
                repos = self.repo_repo.find_by_owner(owner_login)
                annotations = self.annotation_repo.find_map_by_owner(owner_login)
            except PyMongoError as e:
                logger.error(f"Failed to load snapshot for {owner_login}: {e}")
                raise SnapshotStoreError(f"Failed to load snapshot: {e}") from e

        result = []
        for repo in repos:
            annotation = annotations.get(repo.id)
            if annotation is None:
                result.append(repo.without_local_fields())
            else:
                result.append(
                    repo.with_local_fields(
                        tag=annotation.tag,
                        category=annotation.category,
                        ai_description=annotation.ai_description,
                    )
                )
        return result

    def save_snapshot(self, owner_login: str, repos: List[StarredRepo]) -> None:
        """Replace the stored snapshot; annotations of dropped repos go with them.

        An empty list is a valid snapshot: the sync_meta marker, not document
        presence, decides whether the owner has one.
        """
        with self.lock:
            try:
                self.repo_repo.replace_snapshot(owner_login, repos)
                self.sync_meta_repo.mark_snapshot_saved(
                    owner_login, len(repos), datetime.now(timezone.utc)
                )
                pruned = self.annotation_repo.delete_except(
                    owner_login, [repo.id for repo in repos]
                )
            except PyMongoError as e:
                logger.error(f"Failed to save snapshot for {owner_login}: {e}")
                raise SnapshotStoreError(f"Failed to save snapshot: {e}") from e
        if pruned:
            logger.info(f"Pruned {pruned} annotations of unstarred repositories for {owner_login}")

    def save_sync_timestamp(self, owner_login: str) -> None:
        with self.lock:
            try:
                self.sync_meta_repo.set_last_sync(owner_login, datetime.now(timezone.utc))
            except PyMongoError as e:
                logger.error(f"Failed to save sync time for {owner_login}: {e}")
                raise SnapshotStoreError(f"Failed to save sync time: {e}") from e

    def load_sync_timestamp(self, owner_login: str) -> Optional[datetime]:
        with self.lock:
            return self.sync_meta_repo.get_last_sync(owner_login)
