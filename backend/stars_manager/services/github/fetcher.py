"""
Retrying wrapper around a single outbound HTTP call.

Transport failures (timeouts, refused or dropped connections) are retried
with a linearly increasing pause: 1x, 2x, 3x the backoff unit. A response
that arrives with a non-success status is returned as-is; deciding what a
404 or 500 means is left to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from stars_manager.services.github.exceptions import GithubRetryableError

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 3
DEFAULT_BACKOFF_SECONDS = 1.0


class RetryingFetcher:
    """Stateless apart from the shared client; safe to use from many tasks."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        attempts: int = DEFAULT_ATTEMPTS,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self._client = client
        self.attempts = attempts
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Perform the call, retrying transport failures.

        Raises:
            GithubRetryableError: every attempt failed at the transport level.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_incrementing(
                start=self.backoff_seconds, increment=self.backoff_seconds
            ),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=self._log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._client.request(
                        method, url, headers=headers, params=params
                    )
        except httpx.TransportError as exc:
            logger.warning(
                f"{method} {url} failed after {self.attempts} attempts: {exc!r}"
            )
            raise GithubRetryableError(
                f"{method} {url} failed after {self.attempts} attempts: {exc}"
            ) from exc
        return response

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.debug(
            f"Attempt {retry_state.attempt_number} failed ({exc!r}), "
            f"retrying in {retry_state.next_action.sleep if retry_state.next_action else 0}s"
        )
