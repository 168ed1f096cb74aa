"""
In-process registry of realtime client sockets.

Every connected client receives every event: there are no rooms or topics,
clients filter by driver number, vehicle number or emergency id themselves.
Delivery is best-effort and at most once per socket per publish; a socket
that fails a send is dropped. Nothing is queued for offline clients, they
catch up through the periodic emergency list poll.
"""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Protocol

logger = logging.getLogger(__name__)


class TextSocket(Protocol):
    async def send_text(self, data: str) -> None: ...


@dataclass
class ClientConnection:
    """A connected dashboard or driver device."""
    ws: TextSocket
    connection_id: str
    client: str = ""
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ConnectionHub:
    def __init__(self) -> None:
        self._clients: Dict[str, ClientConnection] = {}
        self._lock = asyncio.Lock()

    async def connect(self, ws: TextSocket, client: str = "") -> str:
        """Register a socket. Returns its connection id."""
        connection_id = uuid.uuid4().hex[:8]
        async with self._lock:
            self._clients[connection_id] = ClientConnection(ws=ws, connection_id=connection_id, client=client)
            count = len(self._clients)
        logger.info(f"Realtime client connected [{connection_id}] {client} (total: {count})")
        return connection_id

    async def disconnect(self, connection_id: str) -> None:
        async with self._lock:
            removed = self._clients.pop(connection_id, None)
            count = len(self._clients)
        if removed:
            logger.info(f"Realtime client disconnected [{connection_id}] (total: {count})")

    @property
    def connection_count(self) -> int:
        return len(self._clients)

    async def publish(self, event: str, payload: Mapping[str, Any]) -> int:
        """
        Send ``{"event": event, "data": payload}`` to every connected client.
        Returns how many sockets accepted the frame.
        """
        async with self._lock:
            clients: List[ClientConnection] = list(self._clients.values())

        if not clients:
            return 0

        # Serialize once
        message_json = json.dumps({"event": event, "data": payload}, default=str)

        failed = []
        delivered = 0
        for conn in clients:
            try:
                await conn.ws.send_text(message_json)
                delivered += 1
            except Exception as e:
                logger.warning(f"Failed to send {event} to [{conn.connection_id}]: {e}")
                failed.append(conn.connection_id)

        if failed:
            async with self._lock:
                for conn_id in failed:
                    self._clients.pop(conn_id, None)

        return delivered


hub = ConnectionHub()

def get_broadcaster() -> ConnectionHub:
    return hub
