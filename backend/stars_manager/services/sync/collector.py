"""
Concurrent detail collection.

One worker task per page of the starred list. A worker lists its page, then
enriches the page's repositories one at a time with a detail call. Detail
failures degrade to the basic list fields; a page that cannot be listed
aborts the whole phase. The first page failure wins, the other workers are
left to finish on their own and their results are discarded.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Callable, List, Set

from stars_manager.entities.starred_repo import StarredRepo
from stars_manager.services.github.exceptions import GithubError
from stars_manager.services.github.stars_client import split_full_name
from stars_manager.services.sync.exceptions import CollectionError
from stars_manager.services.sync.protocols import StarredSource

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class DetailCollector:
    def __init__(self, source: StarredSource, page_size: int = 100):
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._source = source
        self.page_size = page_size
        # Workers still running after an abort; kept referenced until done.
        self._stragglers: Set[asyncio.Task] = set()

    def page_count(self, total: int) -> int:
        return math.ceil(total / self.page_size) if total > 0 else 0

    async def collect(self, total: int, on_item: ProgressCallback) -> List[StarredRepo]:
        """
        Fetch every page concurrently and return all repositories.

        Order across pages follows completion order, not page order.

        Raises:
            CollectionError: a page could not be listed or decoded.
        """
        pages = self.page_count(total)
        if pages == 0:
            return []

        tasks = [
            asyncio.create_task(
                self._collect_page(page, on_item), name=f"starred-page-{page}"
            )
            for page in range(1, pages + 1)
        ]

        collected: List[StarredRepo] = []
        try:
            for finished in asyncio.as_completed(tasks):
                try:
                    collected.extend(await finished)
                except GithubError as e:
                    raise CollectionError(f"Failed to fetch starred repositories: {e}") from e
        except BaseException:
            self._detach(tasks)
            raise

        logger.debug(f"Collected {len(collected)} repositories from {pages} page(s)")
        return collected

    def _detach(self, tasks: List[asyncio.Task]) -> None:
        for task in tasks:
            if task.done():
                _discard_outcome(task)
                continue
            self._stragglers.add(task)
            task.add_done_callback(self._straggler_done)

    def _straggler_done(self, task: asyncio.Task) -> None:
        self._stragglers.discard(task)
        _discard_outcome(task)

    async def _collect_page(self, page: int, on_item: ProgressCallback) -> List[StarredRepo]:
        try:
            basics = await self._source.list_starred_page(page, self.page_size)
        except GithubError as e:
            logger.error(f"Failed to list starred page {page}: {e}")
            raise

        detailed: List[StarredRepo] = []
        for basic in basics:
            detailed.append(await self._enrich(basic))
            on_item(1)

        logger.debug(f"Page {page}: {len(detailed)} repositories")
        return detailed

    async def _enrich(self, basic: StarredRepo) -> StarredRepo:
        full_name = split_full_name(basic.html_url)
        if full_name is None:
            logger.warning(f"Cannot parse repository URL {basic.html_url!r}, using basic fields")
            return _degraded(basic)

        owner, name = full_name
        try:
            detail = await self._source.get_repository_detail(owner, name)
        except GithubError as e:
            logger.warning(f"Detail fetch failed for {owner}/{name}, using basic fields: {e}")
            return _degraded(basic)
        # New or existing is decided later by the merge
        return detail.without_local_fields()


def _degraded(basic: StarredRepo) -> StarredRepo:
    return basic.model_copy(update={"languages": []}).without_local_fields()


def _discard_outcome(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Ignoring result of aborted worker {task.get_name()}: {exc!r}")
