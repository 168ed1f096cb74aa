"""
Realtime channel for dashboards (manager, police, hospital) and driver devices.

/ws - every frame is JSON ``{"event": <name>, "data": {...}}``
    server -> client:
        connected                 registration confirmed (first frame)
        receive_emergency         new emergency with driver, vehicle, nearby facilities
        receive_location          a driver device's position
        stop_alarm                emergency acknowledged; stop local alarms for the pair
        receive_acknowledgement   acknowledgment message plus the full record
    client -> server:
        location_update           relayed to everyone as receive_location

Emergencies are only raised and acknowledged over HTTP.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect

from app.domain import events
from app.infrastructure.realtime.hub import ConnectionHub, get_broadcaster

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    client: str = Query(default=""),
    hub: ConnectionHub = Depends(get_broadcaster),
):
    await websocket.accept()
    connection_id = await hub.connect(websocket, client)
    await websocket.send_text(json.dumps({"event": "connected", "data": {"connectionId": connection_id}}))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                logger.debug(f"Ignoring non-JSON frame from [{connection_id}]")
                continue
            if not isinstance(message, dict):
                continue

            event = message.get("event")
            data = message.get("data")
            if event == events.LOCATION_UPDATE and isinstance(data, dict):
                await hub.publish(events.RECEIVE_LOCATION, data)
            else:
                logger.debug(f"Ignoring realtime event {event!r} from [{connection_id}]")
    except WebSocketDisconnect:
        pass
    finally:
        await hub.disconnect(connection_id)
