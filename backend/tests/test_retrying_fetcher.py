"""Tests for the retrying HTTP fetcher."""

import httpx
import pytest

from stars_manager.services.github.exceptions import GithubRetryableError
from stars_manager.services.github.fetcher import RetryingFetcher


def _flaky_client(failures: int, final_status: int = 200):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        if len(calls) <= failures:
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(final_status, json={"ok": True})

    client = httpx.AsyncClient(
        base_url="https://api.github.test", transport=httpx.MockTransport(handler)
    )
    return client, calls


class _SleepRecorder:
    def __init__(self):
        self.waits = []

    async def __call__(self, seconds: float) -> None:
        self.waits.append(seconds)


class TestRetryingFetcher:
    """Retry behaviour of RetryingFetcher."""

    @pytest.mark.asyncio
    async def test_recovers_after_transport_failures(self):
        """Two timeouts followed by a success return the successful response."""
        client, calls = _flaky_client(failures=2)
        sleep = _SleepRecorder()
        fetcher = RetryingFetcher(client, attempts=3, backoff_seconds=1.0, sleep=sleep)

        response = await fetcher.request("GET", "/user/starred")

        assert response.status_code == 200
        assert len(calls) == 3
        await client.aclose()

    @pytest.mark.asyncio
    async def test_backoff_grows_linearly(self):
        """Waits between attempts are 1x then 2x the backoff unit."""
        client, _ = _flaky_client(failures=5)
        sleep = _SleepRecorder()
        fetcher = RetryingFetcher(client, attempts=3, backoff_seconds=1.0, sleep=sleep)

        with pytest.raises(GithubRetryableError):
            await fetcher.request("GET", "/user/starred")

        assert sleep.waits == [1.0, 2.0]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_gives_up_after_configured_attempts(self):
        """Exhausted retries raise GithubRetryableError chained to the transport error."""
        client, calls = _flaky_client(failures=10)
        fetcher = RetryingFetcher(client, attempts=3, backoff_seconds=0, sleep=_SleepRecorder())

        with pytest.raises(GithubRetryableError) as exc_info:
            await fetcher.request("GET", "/repos/psf/requests")

        assert len(calls) == 3
        assert isinstance(exc_info.value.__cause__, httpx.TransportError)
        await client.aclose()

    @pytest.mark.asyncio
    async def test_error_status_is_not_retried(self):
        """A 500 response is handed back after a single attempt."""
        client, calls = _flaky_client(failures=0, final_status=500)
        fetcher = RetryingFetcher(client, attempts=3, backoff_seconds=0, sleep=_SleepRecorder())

        response = await fetcher.request("GET", "/user/starred")

        assert response.status_code == 500
        assert len(calls) == 1
        await client.aclose()

    def test_rejects_zero_attempts(self):
        """At least one attempt is required."""
        with pytest.raises(ValueError):
            RetryingFetcher(httpx.AsyncClient(), attempts=0)
