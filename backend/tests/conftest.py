"""Shared fixtures: in-memory collaborators and a mock GitHub API."""

import asyncio
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

import httpx

from stars_manager.entities.starred_repo import StarredRepo
from stars_manager.services.github.exceptions import GithubRetryableError
from stars_manager.services.github.stars_client import GitHubStarsClient
from stars_manager.services.session_store import SessionData
from stars_manager.services.snapshot_store import SnapshotNotFoundError, SnapshotStoreError

API_URL = "https://api.github.test"


def make_repo(repo_id: int, **overrides) -> StarredRepo:
    fields = {
        "id": repo_id,
        "name": f"repo{repo_id}",
        "html_url": f"https://github.com/owner{repo_id}/repo{repo_id}",
        "stargazers_count": repo_id * 10,
        "description": f"Repository number {repo_id}",
        "language": "Python",
        "topics": ["cli"],
    }
    fields.update(overrides)
    return StarredRepo(**fields)


def github_payload(repo_id: int) -> dict:
    """The JSON GitHub returns for one starred repository."""
    return {
        "id": repo_id,
        "name": f"repo{repo_id}",
        "full_name": f"owner{repo_id}/repo{repo_id}",
        "html_url": f"https://github.com/owner{repo_id}/repo{repo_id}",
        "stargazers_count": repo_id * 10,
        "description": f"Repository number {repo_id}",
        "language": "Python",
        "topics": ["cli"],
    }


class FakeStarredSource:
    """In-memory remote source with failure injection."""

    def __init__(
        self,
        repos: List[StarredRepo],
        failing_pages: Iterable[int] = (),
        failing_details: Iterable[int] = (),
        delay: float = 0.0,
    ):
        self.repos = repos
        self.failing_pages: Set[int] = set(failing_pages)
        self.failing_details: Set[int] = set(failing_details)
        self.delay = delay
        self.page_calls: List[int] = []
        self.detail_calls: List[str] = []

    async def list_starred_page(self, page: int, per_page: int) -> List[StarredRepo]:
        self.page_calls.append(page)
        if self.delay:
            await asyncio.sleep(self.delay)
        if page in self.failing_pages:
            raise GithubRetryableError(f"page {page} unreachable")
        start = (page - 1) * per_page
        return [
            repo.model_copy(update={"languages": []})
            for repo in self.repos[start : start + per_page]
        ]

    async def get_repository_detail(self, owner: str, name: str) -> StarredRepo:
        self.detail_calls.append(f"{owner}/{name}")
        await asyncio.sleep(0)
        for repo in self.repos:
            if repo.html_url.endswith(f"/{owner}/{name}"):
                if repo.id in self.failing_details:
                    raise GithubRetryableError(f"{owner}/{name} unreachable")
                return repo.model_copy(
                    update={
                        "languages": ["Python", "Shell"],
                        "readme_url": f"{repo.html_url}#readme",
                        # Whatever local fields the source might carry must not survive
                        "tag": "from-remote",
                    }
                )
        raise AssertionError(f"unexpected detail call {owner}/{name}")


class InMemorySnapshotStore:
    """Same contract as SnapshotStore: any save, even of nothing, marks the owner as synced."""

    def __init__(self, snapshots: Optional[Dict[str, List[StarredRepo]]] = None):
        self.snapshots: Dict[str, List[StarredRepo]] = {}
        self.saved_owners: Set[str] = set()
        for owner_login, repos in (snapshots or {}).items():
            self.seed(owner_login, repos)
        self.sync_times: Dict[str, datetime] = {}
        self.fail_on_save = False
        self.fail_on_load = False
        self.save_calls = 0

    def load_snapshot_with_annotations(self, owner_login: str) -> List[StarredRepo]:
        if self.fail_on_load:
            raise SnapshotStoreError("database unavailable")
        if owner_login not in self.saved_owners:
            raise SnapshotNotFoundError(owner_login)
        return list(self.snapshots.get(owner_login, []))

    def save_snapshot(self, owner_login: str, repos: List[StarredRepo]) -> None:
        self.save_calls += 1
        if self.fail_on_save:
            raise SnapshotStoreError("disk full")
        self.seed(owner_login, repos)

    def seed(self, owner_login: str, repos: List[StarredRepo]) -> None:
        self.snapshots[owner_login] = list(repos)
        self.saved_owners.add(owner_login)

    def save_sync_timestamp(self, owner_login: str) -> None:
        self.sync_times[owner_login] = datetime.now(timezone.utc)

    def load_sync_timestamp(self, owner_login: str) -> Optional[datetime]:
        return self.sync_times.get(owner_login)


class RecordingProgressSink:
    def __init__(self) -> None:
        self.events = []

    def send(self, event) -> None:
        self.events.append(event)


class InMemorySessionStore:
    def __init__(self) -> None:
        self.sessions: Dict[str, SessionData] = {}

    def create(self, data: SessionData) -> str:
        session_id = f"sid-{len(self.sessions) + 1}"
        self.sessions[session_id] = data
        return session_id

    def get(self, session_id: str) -> Optional[SessionData]:
        return self.sessions.get(session_id)

    def delete(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)


def github_transport(
    repo_ids: List[int],
    failing_pages: Iterable[int] = (),
    failing_details: Iterable[int] = (),
    malformed_details: Iterable[int] = (),
    user_status: int = 200,
    calls: Optional[List[str]] = None,
) -> httpx.MockTransport:
    """A mock of the GitHub endpoints the sync engine uses; `calls` collects request paths."""
    failing_pages = set(failing_pages)
    failing_details = set(failing_details)
    malformed_details = set(malformed_details)
    by_full_name = {f"owner{i}/repo{i}": i for i in repo_ids}

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if calls is not None:
            calls.append(path)
        if path == "/user":
            if user_status != 200:
                return httpx.Response(user_status, json={"message": "Bad credentials"})
            return httpx.Response(
                200, json={"login": "octocat", "avatar_url": "https://avatars.test/octocat"}
            )
        if path == "/user/starred":
            page = int(request.url.params["page"])
            per_page = int(request.url.params["per_page"])
            if page in failing_pages:
                raise httpx.ConnectError("connection refused", request=request)
            chunk = repo_ids[(page - 1) * per_page : page * per_page]
            return httpx.Response(200, json=[github_payload(i) for i in chunk])
        if path.startswith("/repos/"):
            parts = path.split("/")
            repo_id = by_full_name.get(f"{parts[2]}/{parts[3]}")
            if repo_id is None:
                return httpx.Response(404, json={"message": "Not Found"})
            if repo_id in failing_details:
                raise httpx.ReadTimeout("timed out", request=request)
            if len(parts) == 5 and parts[4] == "languages":
                return httpx.Response(200, json={"Shell": 10, "Python": 500})
            if repo_id in malformed_details:
                return httpx.Response(200, json={"message": "unexpected body"})
            return httpx.Response(200, json=github_payload(repo_id))
        return httpx.Response(404, json={"message": "Not Found"})

    return httpx.MockTransport(handler)


def client_factory_for(transport: httpx.MockTransport):
    def factory(token: str) -> GitHubStarsClient:
        return GitHubStarsClient(
            token, api_url=API_URL, backoff_seconds=0, transport=transport
        )

    return factory
