from typing import Any, Dict

import structlog
from fastapi import BackgroundTasks
from pydantic import BaseModel

from .notifier import Notifier

logger = structlog.get_logger(__name__)

NOTIFICATION_EVENT = "notification"


class NotificationEvent(BaseModel):
    type: str
    title: str
    message: str
    data: Dict[str, Any] = {}


class EventPublisher:
    """
    Outbound event channel for the service layer.

    Services call publish() only after their write has committed. Delivery
    runs as a background task once the response is on its way, so a slow or
    failing notifier can neither delay the response nor undo the write.
    """

    def __init__(self, notifier: Notifier, background_tasks: BackgroundTasks):
        self._notifier = notifier
        self._background_tasks = background_tasks

    def publish(self, event: NotificationEvent) -> None:
        self._background_tasks.add_task(self._deliver, event)

    async def _deliver(self, event: NotificationEvent) -> None:
        try:
            await self._notifier.broadcast(NOTIFICATION_EVENT, event.model_dump(mode="json"))
        except Exception:
            logger.exception("notification_delivery_failed", notification_type=event.type)
