# src/vibe_gallery/api/v1/endpoints/live.py
"""WebSocket streams re-sending the full leaderboard or gallery on every change."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from vibe_gallery.schemas.submission import SubmissionResponse
from vibe_gallery.services.views import MAX_LEADERBOARD_LIMIT, SnapshotStream

from ..dependencies import LiveViewsDep

router = APIRouter(prefix="/live", tags=["live"])
logger = logging.getLogger(__name__)


async def _pump(websocket: WebSocket, stream: SnapshotStream[list[SubmissionResponse]]) -> None:
    """Forward snapshots until either side goes away."""

    async def watch_disconnect() -> None:
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    return
        finally:
            await stream.aclose()

    watcher = asyncio.create_task(watch_disconnect())
    try:
        async with stream:
            async for snapshot in stream:
                await websocket.send_json([item.model_dump(mode="json") for item in snapshot])
    except WebSocketDisconnect:
        logger.debug("Live client disconnected")
    finally:
        watcher.cancel()


@router.websocket("/leaderboard")
async def leaderboard_stream(
    websocket: WebSocket,
    views: LiveViewsDep,
    limit: int | None = Query(None, ge=1, le=MAX_LEADERBOARD_LIMIT),
) -> None:
    await websocket.accept()
    stream: SnapshotStream[list[SubmissionResponse]] = SnapshotStream(
        lambda callback: views.subscribe_leaderboard(callback, limit)
    )
    await _pump(websocket, stream)


@router.websocket("/gallery")
async def gallery_stream(websocket: WebSocket, views: LiveViewsDep) -> None:
    await websocket.accept()
    stream: SnapshotStream[list[SubmissionResponse]] = SnapshotStream(views.subscribe_gallery)
    await _pump(websocket, stream)
