"""
Progress reporting for sync runs.

Percent bands:
    0-10   estimating the total
    10-80  fetching repository details (one step per repository)
    80-95  loading the local snapshot and merging
    95-100 saving and completion

Many collector workers report into one SyncProgressReporter. The counter
update, the percentage computation and the hand-off to the sink happen under
one lock, so the emitted percentages never go backwards. Sinks must not
block: the websocket sink only enqueues, and a single sender task owns the
socket.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Awaitable, Callable, Optional, Protocol

from stars_manager.dtos.sync import ProgressEvent, ProgressEventType
from stars_manager.services.sync.state import SyncState

logger = logging.getLogger(__name__)

COLLECT_START = 10
COLLECT_END = 80
MERGE_START = 90
MERGE_END = 95


def collection_percentage(processed: int, total: int) -> int:
    """floor(10 + processed / total * 70), clamped to 80."""
    if total <= 0:
        return COLLECT_START
    span = COLLECT_END - COLLECT_START
    return min(COLLECT_START + (processed * span) // total, COLLECT_END)


def merge_percentage(current: int, total: int) -> int:
    if total <= 0:
        return MERGE_END
    span = MERGE_END - MERGE_START
    return min(MERGE_START + (current * span) // total, MERGE_END)


class ProgressSink(Protocol):
    def send(self, event: ProgressEvent) -> None: ...


class NullProgressSink:
    """Used by the one-shot sync, which has nobody to report to."""

    def send(self, event: ProgressEvent) -> None:
        logger.debug(f"sync progress {event.progress}%: {event.message}")


class QueuedProgressSink:
    """
    Single-writer sink: producers enqueue, one task writes to the transport.

    Delivery is best effort. Once a write fails, later events are dropped and
    the failure never reaches the sync logic.
    """

    def __init__(self, send: Callable[[dict], Awaitable[None]]):
        self._send = send
        self._queue: "asyncio.Queue[Optional[ProgressEvent]]" = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None
        self.failed = False

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._drain(), name="sync-progress-sender")

    def send(self, event: ProgressEvent) -> None:
        self._queue.put_nowait(event)

    async def close(self) -> None:
        """Flush everything queued so far, then stop the sender."""
        self._queue.put_nowait(None)
        if self._task is not None:
            await self._task

    async def _drain(self) -> None:
        while True:
            event = await self._queue.get()
            if event is None:
                return
            if self.failed:
                continue
            try:
                await self._send(event.to_message())
            except Exception as e:
                logger.debug(f"Dropping sync progress, client went away: {e!r}")
                self.failed = True


class SyncProgressReporter:
    def __init__(self, state: SyncState, sink: ProgressSink):
        self._state = state
        self._sink = sink
        self._lock = threading.Lock()
        self._last_progress = 0
        self._closed = False

    @property
    def last_progress(self) -> int:
        return self._last_progress

    def start(self) -> None:
        self._publish(ProgressEventType.START, "Starting repository sync", 0)

    def info(self, message: str, progress: int, total: Optional[int] = None) -> None:
        self._publish(ProgressEventType.INFO, message, progress, total=total)

    def item_processed(self, count: int = 1) -> None:
        """Called by collector workers after each repository, enriched or not."""
        with self._lock:
            self._state.processed += count
            processed = self._state.processed
            total = self._state.total or 0
            self._publish_locked(
                ProgressEventType.PROGRESS,
                f"Fetching repository details ({processed}/{total})",
                collection_percentage(processed, total),
                current=processed,
                total=total,
            )

    def item_merged(self, current: int, total: int) -> None:
        """Reports roughly every tenth merged repository, plus the last one."""
        if current % (total // 10 + 1) != 0 and current != total:
            return
        self._publish(
            ProgressEventType.PROGRESS,
            f"Merging repository {current}/{total}",
            merge_percentage(current, total),
            current=current,
            total=total,
        )

    def complete(self, count: int) -> None:
        self._publish(
            ProgressEventType.COMPLETE,
            f"Sync complete, {count} repositories processed",
            100,
            total=count,
        )

    def error(self, message: str) -> None:
        with self._lock:
            self._publish_locked(ProgressEventType.ERROR, message, self._last_progress)

    def _publish(
        self,
        event_type: ProgressEventType,
        message: str,
        progress: int,
        current: Optional[int] = None,
        total: Optional[int] = None,
    ) -> None:
        with self._lock:
            self._publish_locked(event_type, message, progress, current, total)

    def _publish_locked(
        self,
        event_type: ProgressEventType,
        message: str,
        progress: int,
        current: Optional[int] = None,
        total: Optional[int] = None,
    ) -> None:
        if self._closed:
            return
        progress = max(progress, self._last_progress)
        self._last_progress = progress
        event = ProgressEvent(
            type=event_type,
            message=message,
            progress=progress,
            current=current,
            total=total,
        )
        self._sink.send(event)
        if event.is_terminal:
            self._closed = True
