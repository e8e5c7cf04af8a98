"""
Sync orchestration: estimate -> collect -> merge -> persist.

The orchestrator owns one SyncState per run. Every hard failure ends the
run with a single `error` event; nothing is written to the store unless the
in-memory merge finished.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from stars_manager.entities.starred_repo import StarredRepo
from stars_manager.services.snapshot_store import SnapshotNotFoundError, SnapshotStoreError
from stars_manager.services.sync.collector import DetailCollector
from stars_manager.services.sync.estimator import CountEstimator
from stars_manager.services.sync.exceptions import PersistenceError, SyncError
from stars_manager.services.sync.merge import merge_snapshots
from stars_manager.services.sync.progress import (
    NullProgressSink,
    ProgressSink,
    SyncProgressReporter,
)
from stars_manager.services.sync.protocols import SnapshotStorage, StarredSource
from stars_manager.services.sync.state import SyncPhase, SyncState

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    def __init__(self, store: SnapshotStorage, page_size: int = 100):
        self._store = store
        self.page_size = page_size

    async def run(
        self,
        owner_login: str,
        source: StarredSource,
        sink: Optional[ProgressSink] = None,
    ) -> SyncState:
        """
        Run one full sync for `owner_login`.

        Never raises for sync failures; inspect the returned state instead.
        """
        state = SyncState()
        reporter = SyncProgressReporter(state, sink or NullProgressSink())
        reporter.start()
        logger.info(f"Starting starred sync for {owner_login}")

        try:
            merged_count = await self._run_phases(owner_login, source, state, reporter)
        except SyncError as e:
            self._fail(owner_login, state, reporter, e)
        except Exception as e:
            logger.exception(f"Unexpected error during {state.phase.value} for {owner_login}")
            self._fail(owner_login, state, reporter, SyncError(str(e), phase=state.phase))
        else:
            state.complete(merged_count)
            reporter.complete(merged_count)
            logger.info(f"Starred sync complete for {owner_login}: {merged_count} repositories")
        return state

    def reject(
        self,
        owner_login: str,
        error: Exception,
        sink: Optional[ProgressSink] = None,
    ) -> SyncState:
        """Fail a run that could not start, e.g. when no client could be built."""
        state = SyncState()
        reporter = SyncProgressReporter(state, sink or NullProgressSink())
        sync_error = SyncError(f"Could not start sync: {error}")
        sync_error.__cause__ = error
        self._fail(owner_login, state, reporter, sync_error)
        return state

    async def _run_phases(
        self,
        owner_login: str,
        source: StarredSource,
        state: SyncState,
        reporter: SyncProgressReporter,
    ) -> int:
        state.advance(SyncPhase.ESTIMATING)
        reporter.info("Fetching starred repository list...", 5)
        total = await CountEstimator(source, self.page_size).estimate()
        state.set_total(total)
        reporter.info(
            f"Found {total} starred repositories, fetching details...", 10, total=total
        )

        state.advance(SyncPhase.COLLECTING)
        remote = await DetailCollector(source, self.page_size).collect(
            total, reporter.item_processed
        )
        reporter.info(
            f"Fetched details for {len(remote)} repositories", 80, total=len(remote)
        )

        state.advance(SyncPhase.MERGING)
        prior = self._load_prior(owner_login)
        reporter.info("Loaded local repository data", 85)
        reporter.info("Merging repository data", 90)
        merged = merge_snapshots(remote, prior, on_merged=reporter.item_merged)

        state.advance(SyncPhase.PERSISTING)
        reporter.info("Saving data", 95)
        try:
            self._store.save_snapshot(owner_login, merged)
            self._store.save_sync_timestamp(owner_login)
        except SnapshotStoreError as e:
            raise PersistenceError(f"Failed to save repositories: {e}") from e

        return len(merged)

    def _load_prior(self, owner_login: str) -> List[StarredRepo]:
        try:
            return self._store.load_snapshot_with_annotations(owner_login)
        except SnapshotNotFoundError:
            logger.info(f"No local snapshot for {owner_login}, starting fresh")
        except SnapshotStoreError as e:
            # Annotation records are kept separately and survive this
            logger.warning(f"Could not load local snapshot for {owner_login}: {e}")
        return []

    @staticmethod
    def _fail(
        owner_login: str,
        state: SyncState,
        reporter: SyncProgressReporter,
        error: SyncError,
    ) -> None:
        state.fail(error)
        logger.error(
            f"Starred sync for {owner_login} failed during {state.failed_phase.value}: {error}"
        )
        reporter.error(str(error))
