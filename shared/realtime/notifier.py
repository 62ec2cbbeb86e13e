"""
Best-effort broadcast to connected WebSocket clients.

There is no acknowledgement, retry, or replay: a client connected after an
event was sent never sees it, and a client whose send fails is dropped.
"""
from typing import Any, Dict, Set

import structlog
from fastapi import WebSocket

from shared.observability.metrics import ecomm_notification_clients, ecomm_notifications_sent_total

logger = structlog.get_logger(__name__)


class Notifier:

    def __init__(self):
        self._connections: Set[WebSocket] = set()

    @property
    def client_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.add(websocket)
        ecomm_notification_clients.set(self.client_count)
        logger.info("notification_client_connected", clients=self.client_count)

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)
        ecomm_notification_clients.set(self.client_count)
        logger.info("notification_client_disconnected", clients=self.client_count)

    async def broadcast(self, event: str, payload: Dict[str, Any]) -> int:
        """Sends the event to every connected client; returns how many got it."""
        message = {"event": event, "payload": payload}
        delivered = 0
        for websocket in list(self._connections):
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning("notification_send_failed", error=str(e))
                self.disconnect(websocket)

        ecomm_notifications_sent_total.labels(event=event).inc()
        logger.info("notification_broadcast", notification_event=event, delivered=delivered)
        return delivered

    async def close(self) -> None:
        for websocket in list(self._connections):
            try:
                await websocket.close()
            except Exception as e:
                logger.debug("notification_close_failed", error=str(e))
            self.disconnect(websocket)
