from __future__ import annotations

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from algoz.core.dependencies import get_realtime_hub
from algoz.core.settings import settings
from algoz.services.realtime_hub import ConnectionHub

router = APIRouter(tags=["realtime"])


@router.websocket(settings.ws_path)
async def realtime_ws(
    websocket: WebSocket,
    hub: ConnectionHub = Depends(get_realtime_hub),
) -> None:
    await hub.accept(websocket)
    try:
        while True:
            event = await websocket.receive()
            if event["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(code=event.get("code", 1000))
            raw = event.get("text")
            if raw is None:
                raw = event.get("bytes") or b""
            await hub.on_message(websocket, raw)
    except WebSocketDisconnect:
        return
    finally:
        hub.disconnect(websocket)
