"""Tests for snapshot merging."""

from conftest import make_repo
from stars_manager.services.sync.merge import merge_snapshots


class TestMergeSnapshots:
    """Tests for merge_snapshots."""

    def test_remote_fields_win(self):
        """Remote data replaces whatever the prior snapshot said."""
        prior = [make_repo(1, stargazers_count=5, description="old")]
        remote = [make_repo(1, stargazers_count=500, description="new")]

        merged = merge_snapshots(remote, prior)

        assert merged[0].stargazers_count == 500
        assert merged[0].description == "new"

    def test_local_fields_survive(self):
        """Tag, category and AI description carry over for known repositories."""
        prior = [make_repo(1, tag="favourite", category="tools", ai_description="A CLI")]
        remote = [make_repo(1)]

        merged = merge_snapshots(remote, prior)

        assert merged[0].tag == "favourite"
        assert merged[0].category == "tools"
        assert merged[0].ai_description == "A CLI"

    def test_new_repositories_start_empty(self):
        merged = merge_snapshots([make_repo(2, tag="leaked")], [make_repo(1, tag="x")])

        assert merged[0].tag == ""
        assert merged[0].category == ""

    def test_unstarred_repositories_are_dropped(self):
        """Only ids present remotely remain, in remote order."""
        prior = [make_repo(1), make_repo(2), make_repo(3)]
        remote = [make_repo(3), make_repo(1)]

        merged = merge_snapshots(remote, prior)

        assert [r.id for r in merged] == [3, 1]

    def test_duplicate_remote_ids_kept_once(self):
        merged = merge_snapshots([make_repo(1), make_repo(2), make_repo(1)], [])

        assert [r.id for r in merged] == [1, 2]

    def test_empty_remote_gives_empty_snapshot(self):
        assert merge_snapshots([], [make_repo(1, tag="x")]) == []

    def test_callback_sees_every_item(self):
        calls = []

        merge_snapshots(
            [make_repo(1), make_repo(2), make_repo(3)], [],
            on_merged=lambda current, total: calls.append((current, total)),
        )

        assert calls == [(1, 3), (2, 3), (3, 3)]
