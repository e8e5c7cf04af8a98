"""Collaborators the sync engine depends on."""

from __future__ import annotations

from typing import List, Protocol

from stars_manager.entities.starred_repo import StarredRepo


class StarredSource(Protocol):
    """The remote paginated source (GitHubStarsClient in production)."""

    async def list_starred_page(self, page: int, per_page: int) -> List[StarredRepo]: ...

    async def get_repository_detail(self, owner: str, name: str) -> StarredRepo: ...


class SnapshotStorage(Protocol):
    """The local snapshot store (SnapshotStore in production)."""

    def load_snapshot_with_annotations(self, owner_login: str) -> List[StarredRepo]: ...

    def save_snapshot(self, owner_login: str, repos: List[StarredRepo]) -> None: ...

    def save_sync_timestamp(self, owner_login: str) -> None: ...
