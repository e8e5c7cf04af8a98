"""
WebSocket API for live sync progress.

Events sent (JSON):
- {"type": "start", "progress": 0, "message": "..."}
- {"type": "info", "progress": 5..95, "message": "...", "total"?: N}
- {"type": "progress", "progress": 10..95, "current": n, "total": N, ...}
- {"type": "complete", "progress": 100, "total": N, ...}
- {"type": "error", "message": "..."}

The connection closes after `complete` or `error`. The stream is one-way;
nothing the client sends is read.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, status
from pymongo.database import Database

from stars_manager.database.mongo import get_db
from stars_manager.dtos.sync import ProgressEvent, ProgressEventType
from stars_manager.middleware.auth import get_websocket_session
from stars_manager.services.session_store import SessionData
from stars_manager.services.star_sync_service import (
    StarsClientFactory,
    StarSyncService,
    get_stars_client_factory,
)
from stars_manager.services.sync.progress import QueuedProgressSink

logger = logging.getLogger(__name__)

router = APIRouter(tags=["WebSocket"])


@router.websocket("/ws/sync-progress")
async def sync_progress_websocket(
    websocket: WebSocket,
    session: Optional[SessionData] = Depends(get_websocket_session),
    db: Database = Depends(get_db),
    client_factory: StarsClientFactory = Depends(get_stars_client_factory),
):
    """Run a sync and stream its progress to the client."""
    await websocket.accept()

    if session is None:
        logger.warning("Sync websocket opened without a session")
        await websocket.send_json(
            ProgressEvent(
                type=ProgressEventType.ERROR,
                message="Session not found, please login again",
            ).to_message()
        )
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    sink = QueuedProgressSink(websocket.send_json)
    sink.start()
    try:
        state = await StarSyncService(db, client_factory).sync(session, sink)
    finally:
        await sink.close()

    logger.info(
        f"Sync websocket for {session.login} finished: {state.phase.value}"
        + (" (client disconnected early)" if sink.failed else "")
    )
    if not sink.failed:
        await websocket.close()
