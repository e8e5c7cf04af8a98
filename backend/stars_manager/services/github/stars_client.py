"""Async client for the starred-repository endpoints of the GitHub REST API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from stars_manager.config import settings
from stars_manager.dtos.auth import GithubUser
from stars_manager.entities.starred_repo import StarredRepo
from stars_manager.services.github.exceptions import (
    GithubConfigurationError,
    GithubError,
    GithubRateLimitError,
    GithubStatusError,
)
from stars_manager.services.github.fetcher import RetryingFetcher

API_HEADERS = {
    "Accept": "application/vnd.github.v3+json",
}

logger = logging.getLogger(__name__)


def split_full_name(html_url: str) -> Optional[Tuple[str, str]]:
    """
    Derive (owner, name) from a canonical repository URL.

    >>> split_full_name("https://github.com/psf/requests")
    ('psf', 'requests')
    """
    trimmed = (html_url or "").strip().rstrip("/")
    if trimmed.endswith(".git"):
        trimmed = trimmed[: -len(".git")]
    parts = [part for part in trimmed.split("/") if part]
    if len(parts) < 2:
        return None
    return parts[-2], parts[-1]


class GitHubStarsClient:
    def __init__(
        self,
        token: str,
        api_url: str | None = None,
        timeout: float | None = None,
        retry_attempts: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize GitHubStarsClient.

        Args:
            token: GitHub access token of the signed-in user
            api_url: GitHub API URL (defaults to api.github.com)
            timeout: Per-attempt timeout in seconds
            retry_attempts: Attempts per call before giving up
            backoff_seconds: Linear backoff unit between attempts
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        if not token:
            raise GithubConfigurationError("GitHub token is required to call the API")
        self._token = token

        self._api_url = (api_url or settings.GITHUB_API_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._api_url,
            timeout=timeout or settings.GITHUB_REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        )
        self._fetcher = RetryingFetcher(
            self._client,
            attempts=retry_attempts or settings.GITHUB_RETRY_ATTEMPTS,
            backoff_seconds=(
                settings.GITHUB_RETRY_BACKOFF_SECONDS
                if backoff_seconds is None
                else backoff_seconds
            ),
        )

    async def __aenter__(self) -> "GitHubStarsClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        headers = {"Authorization": f"token {self._token}"}
        headers.update(API_HEADERS)
        return headers

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        if response.status_code in (403, 429) and "rate limit" in response.text.lower():
            retry_after = response.headers.get("Retry-After")
            try:
                wait_seconds = float(retry_after) if retry_after else None
            except ValueError:
                wait_seconds = None
            raise GithubRateLimitError(
                "GitHub rate limit reached", retry_after=wait_seconds
            )
        if not response.is_success:
            raise GithubStatusError(
                f"GitHub returned {response.status_code} for {response.request.url.path}",
                status_code=response.status_code,
            )
        return response

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._fetcher.request(
            "GET", path, headers=self._headers(), params=params
        )
        self._handle_response(response)
        try:
            return response.json()
        except ValueError as exc:
            raise GithubError(f"Invalid JSON from GitHub for {path}") from exc

    async def list_starred_page(self, page: int, per_page: int) -> List[StarredRepo]:
        """Return one page of the user's starred repositories (basic fields only)."""
        items = await self._get_json(
            "/user/starred", params={"page": page, "per_page": per_page}
        )
        if not isinstance(items, list):
            raise GithubError(f"Unexpected starred page payload on page {page}")
        try:
            return [
                StarredRepo.model_validate(_basic_fields(item)) for item in items
            ]
        except (ValueError, TypeError) as exc:
            raise GithubError(f"Failed to decode starred page {page}: {exc}") from exc

    async def get_repository_detail(self, owner: str, name: str) -> StarredRepo:
        """Fetch full repository detail, including its language list."""
        full_name = f"{owner}/{name}"
        data = await self._get_json(f"/repos/{full_name}")
        if not isinstance(data, dict):
            raise GithubError(f"Unexpected repository payload for {full_name}")

        try:
            repo = StarredRepo.model_validate(_basic_fields(data))
        except (ValueError, TypeError) as exc:
            raise GithubError(f"Failed to decode repository {full_name}: {exc}") from exc
        languages = await self._list_languages(full_name)
        return repo.model_copy(
            update={
                "languages": languages,
                "readme_url": f"{repo.html_url}#readme",
            }
        )

    async def _list_languages(self, full_name: str) -> List[str]:
        """Language names, largest first; failures leave the list empty."""
        try:
            stats = await self._get_json(f"/repos/{full_name}/languages")
        except GithubError as e:
            logger.warning(f"Failed to fetch languages for {full_name}: {e}")
            return []
        if not isinstance(stats, dict):
            return []
        return [lang for lang, _ in sorted(stats.items(), key=lambda kv: -kv[1])]

    async def get_authenticated_user(self) -> GithubUser:
        data = await self._get_json("/user")
        return GithubUser.model_validate(data)


def _basic_fields(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": item.get("id"),
        "name": item.get("name"),
        "html_url": item.get("html_url"),
        "stargazers_count": item.get("stargazers_count") or 0,
        "description": item.get("description"),
        "language": item.get("language"),
        "topics": item.get("topics") or [],
    }
