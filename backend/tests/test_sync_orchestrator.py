"""End-to-end tests of a sync run against in-memory collaborators."""

import asyncio

import pytest

from conftest import (
    FakeStarredSource,
    InMemorySnapshotStore,
    RecordingProgressSink,
    client_factory_for,
    github_transport,
    make_repo,
)
from stars_manager.dtos.sync import ProgressEventType
from stars_manager.services.github.exceptions import (
    GithubConfigurationError,
    GithubRetryableError,
)
from stars_manager.services.sync.exceptions import (
    CollectionError,
    EstimationError,
    PersistenceError,
)
from stars_manager.services.sync.orchestrator import SyncOrchestrator
from stars_manager.services.sync.state import SyncPhase

OWNER = "octocat"


class _FailsOnSecondListing(FakeStarredSource):
    """Lets the estimate through, then fails page 2 during collection."""

    async def list_starred_page(self, page, per_page):
        if page == 2 and self.page_calls.count(2) >= 1:
            self.page_calls.append(page)
            raise GithubRetryableError("page 2 unreachable")
        return await super().list_starred_page(page, per_page)


def _assert_well_formed(events):
    progresses = [e.progress for e in events]
    assert progresses == sorted(progresses), "progress went backwards"
    assert events[0].type == ProgressEventType.START
    terminal = [e for e in events if e.type in (ProgressEventType.COMPLETE, ProgressEventType.ERROR)]
    assert terminal == [events[-1]]


class TestSyncOrchestrator:
    """Tests for SyncOrchestrator.run."""

    @pytest.mark.asyncio
    async def test_first_sync(self):
        """A user with no snapshot gets every starred repository stored."""
        store = InMemorySnapshotStore()
        sink = RecordingProgressSink()
        source = FakeStarredSource([make_repo(i) for i in range(1, 251)])

        state = await SyncOrchestrator(store, page_size=100).run(OWNER, source, sink)

        assert state.succeeded
        assert state.merged_count == 250
        assert state.total == 250
        assert state.processed == 250
        assert len(store.snapshots[OWNER]) == 250
        assert OWNER in store.sync_times
        _assert_well_formed(sink.events)
        assert sink.events[-1].type == ProgressEventType.COMPLETE
        assert sink.events[-1].progress == 100
        collect_events = [e for e in sink.events if e.type == ProgressEventType.PROGRESS and e.progress <= 80]
        assert len(collect_events) == 250

    @pytest.mark.asyncio
    async def test_resync_keeps_local_fields_and_drops_unstarred(self):
        store = InMemorySnapshotStore(
            {
                OWNER: [
                    make_repo(1, tag="keep", category="tools", stargazers_count=1),
                    make_repo(99, tag="gone"),
                ]
            }
        )
        source = FakeStarredSource([make_repo(1, stargazers_count=777), make_repo(2)])

        state = await SyncOrchestrator(store).run(OWNER, source, RecordingProgressSink())

        assert state.succeeded
        saved = {r.id: r for r in store.snapshots[OWNER]}
        assert set(saved) == {1, 2}
        assert saved[1].tag == "keep"
        assert saved[1].category == "tools"
        assert saved[1].stargazers_count == 777
        assert saved[2].tag == ""

    @pytest.mark.asyncio
    async def test_progress_milestones(self):
        """The fixed milestones appear in order."""
        sink = RecordingProgressSink()
        source = FakeStarredSource([make_repo(i) for i in range(1, 4)])

        await SyncOrchestrator(InMemorySnapshotStore()).run(OWNER, source, sink)

        infos = [e.progress for e in sink.events if e.type == ProgressEventType.INFO]
        assert infos == [5, 10, 80, 85, 90, 95]

    @pytest.mark.asyncio
    async def test_empty_collection_completes(self):
        store = InMemorySnapshotStore({OWNER: [make_repo(1, tag="x")]})
        sink = RecordingProgressSink()

        state = await SyncOrchestrator(store).run(OWNER, FakeStarredSource([]), sink)

        assert state.succeeded
        assert state.merged_count == 0
        assert store.snapshots[OWNER] == []
        assert sink.events[-1].type == ProgressEventType.COMPLETE

    @pytest.mark.asyncio
    async def test_detail_failures_do_not_fail_the_run(self):
        store = InMemorySnapshotStore()
        source = FakeStarredSource([make_repo(1), make_repo(2)], failing_details=[1])

        state = await SyncOrchestrator(store).run(OWNER, source, RecordingProgressSink())

        assert state.succeeded
        saved = {r.id: r for r in store.snapshots[OWNER]}
        assert saved[1].languages == []
        assert saved[2].languages == ["Python", "Shell"]

    @pytest.mark.asyncio
    async def test_estimation_failure(self):
        """Nothing is persisted and a single error event ends the stream."""
        store = InMemorySnapshotStore()
        sink = RecordingProgressSink()
        source = FakeStarredSource([make_repo(1)], failing_pages=[1])

        state = await SyncOrchestrator(store).run(OWNER, source, sink)

        assert state.phase == SyncPhase.ERROR
        assert state.failed_phase == SyncPhase.ESTIMATING
        assert isinstance(state.error, EstimationError)
        assert store.save_calls == 0
        assert OWNER not in store.sync_times
        _assert_well_formed(sink.events)
        assert sink.events[-1].type == ProgressEventType.ERROR
        assert sink.events[-1].progress == 5

    @pytest.mark.asyncio
    async def test_collection_failure(self):
        store = InMemorySnapshotStore({OWNER: [make_repo(1, tag="x")]})
        sink = RecordingProgressSink()
        source = _FailsOnSecondListing([make_repo(i) for i in range(1, 16)])

        state = await SyncOrchestrator(store, page_size=10).run(OWNER, source, sink)

        assert state.failed_phase == SyncPhase.COLLECTING
        assert isinstance(state.error, CollectionError)
        assert store.save_calls == 0
        assert [r.tag for r in store.snapshots[OWNER]] == ["x"]
        _assert_well_formed(sink.events)

        # Let the surviving page worker finish
        await asyncio.sleep(0.01)

    @pytest.mark.asyncio
    async def test_persistence_failure(self):
        store = InMemorySnapshotStore()
        store.fail_on_save = True
        sink = RecordingProgressSink()

        state = await SyncOrchestrator(store).run(
            OWNER, FakeStarredSource([make_repo(1)]), sink
        )

        assert state.failed_phase == SyncPhase.PERSISTING
        assert isinstance(state.error, PersistenceError)
        assert OWNER not in store.sync_times
        assert sink.events[-1].type == ProgressEventType.ERROR
        assert sink.events[-1].progress == 95

    @pytest.mark.asyncio
    async def test_unreadable_prior_snapshot_starts_fresh(self):
        """A store read failure other than not-found is treated as no prior data."""
        store = InMemorySnapshotStore()
        store.fail_on_load = True

        state = await SyncOrchestrator(store).run(
            OWNER, FakeStarredSource([make_repo(1)]), RecordingProgressSink()
        )

        assert state.succeeded
        assert [r.id for r in store.snapshots[OWNER]] == [1]

    @pytest.mark.asyncio
    async def test_runs_without_a_sink(self):
        state = await SyncOrchestrator(InMemorySnapshotStore()).run(
            OWNER, FakeStarredSource([make_repo(1)])
        )

        assert state.succeeded

    @pytest.mark.asyncio
    async def test_undecodable_detail_degrades_the_item(self):
        """A detail body that does not decode keeps the listing data for that item."""
        store = InMemorySnapshotStore()
        factory = client_factory_for(github_transport([1, 2], malformed_details=[1]))

        async with factory("gho_test") as client:
            state = await SyncOrchestrator(store).run(OWNER, client, RecordingProgressSink())

        assert state.succeeded
        saved = {r.id: r for r in store.snapshots[OWNER]}
        assert sorted(saved) == [1, 2]
        assert saved[1].languages == []
        assert saved[2].languages == ["Python", "Shell"]

    def test_reject_reports_a_single_error(self):
        store = InMemorySnapshotStore()
        sink = RecordingProgressSink()
        error = GithubConfigurationError("GitHub token is required to call the API")

        state = SyncOrchestrator(store).reject(OWNER, error, sink)

        assert state.phase == SyncPhase.ERROR
        assert state.failed_phase == SyncPhase.IDLE
        assert state.error.__cause__ is error
        assert [e.type for e in sink.events] == [ProgressEventType.ERROR]
        assert "Could not start sync" in sink.events[0].message
        assert store.save_calls == 0
