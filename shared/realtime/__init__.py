from fastapi import BackgroundTasks, Request

from .events import NOTIFICATION_EVENT, EventPublisher, NotificationEvent
from .notifier import Notifier


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_event_publisher(request: Request, background_tasks: BackgroundTasks) -> EventPublisher:
    """Dependency binding the app's notifier to this request's background tasks."""
    return EventPublisher(request.app.state.notifier, background_tasks)


__all__ = [
    "NOTIFICATION_EVENT",
    "EventPublisher",
    "NotificationEvent",
    "Notifier",
    "get_event_publisher",
    "get_notifier",
]
