"""Serial pre-pass that counts the user's starred repositories."""

from __future__ import annotations

import logging

from stars_manager.services.github.exceptions import GithubError
from stars_manager.services.sync.exceptions import EstimationError
from stars_manager.services.sync.protocols import StarredSource

logger = logging.getLogger(__name__)


class CountEstimator:
    """
    Walks the starred list page by page until a short page shows up.

    A full page is never taken to be the last one: a collection of exactly
    `page_size` items needs a second, empty page to confirm the end.
    """

    def __init__(self, source: StarredSource, page_size: int = 100):
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._source = source
        self.page_size = page_size

    async def estimate(self) -> int:
        total = 0
        page = 1
        while True:
            try:
                repos = await self._source.list_starred_page(page, self.page_size)
            except GithubError as e:
                logger.error(f"Failed to list starred page {page}: {e}")
                raise EstimationError(
                    f"Failed to list starred repositories (page {page}): {e}"
                ) from e

            total += len(repos)
            if len(repos) < self.page_size:
                break
            page += 1

        logger.debug(f"Counted {total} starred repositories over {page} page(s)")
        return total
