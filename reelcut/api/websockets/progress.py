"""WebSocket handler for real-time export progress."""

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from reelcut.api.dependencies import export_event_bus
from reelcut.pipeline.event_bus import ExportEventBus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/exports/{export_id}")
async def export_progress(
    websocket: WebSocket,
    export_id: str,
    bus: ExportEventBus = Depends(export_event_bus),
) -> None:
    """Forward an export's events until it completes or fails."""
    await websocket.accept()
    subscription = bus.subscribe(export_id)
    logger.info("[ws] Client connected for export=%s", export_id)
    try:
        async for event in subscription:
            await websocket.send_json(event.model_dump(mode="json"))
        await websocket.close()
    except WebSocketDisconnect:
        logger.info("[ws] Client disconnected from export=%s", export_id)
    finally:
        subscription.close()
