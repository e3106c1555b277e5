"""
Notification events raised by provisioning.

Events are serialized to JSON and handed to the notification worker through
an Azure Storage queue. ``BackgroundEventDispatcher`` decouples the caller
from delivery: routing happens on a worker thread and a full buffer drops the
event instead of blocking the request.
"""

import queue
import threading
import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from azure.storage.queue import QueueClient
from pydantic import BaseModel, ConfigDict, Field

from ..config import get_config
from ..context.tenant_context import tenant_context
from ..exceptions import ErrorCode, ServiceError
from ..utils.logger import get_logger


class ChannelEventType(str, Enum):
    ADMIN_CREATED = "admin_created"
    USER_CREATED = "user_created"


class ActionCategory(str, Enum):
    SYSTEM_NOTIFICATIONS = "system_notifications"


class ChannelEvent(BaseModel):
    """One notification-worthy occurrence within a tenant."""

    type: ChannelEventType
    tenant_id: str
    category: ActionCategory = ActionCategory.SYSTEM_NOTIFICATIONS
    context: Dict[str, Any] = Field(default_factory=dict)
    data: Dict[str, Any] = Field(default_factory=dict)
    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(frozen=True)


@runtime_checkable
class EventRouter(Protocol):
    def route_event(self, event: ChannelEvent) -> None: ...


class QueueEventRouter:
    """
    Sends events to the notifications queue.

    Without a connection string the event is only logged, which keeps local
    development and tests free of Azure.
    """

    def __init__(self, connection_string: Optional[str] = None, queue_name: Optional[str] = None):
        queue_config = get_config().queue
        self.connection_string = (
            connection_string if connection_string is not None else queue_config.connection_string
        )
        self.queue_name = queue_name or queue_config.notification_queue_name
        self.logger = get_logger()

    def route_event(self, event: ChannelEvent) -> None:
        """
        Deliver ``event``.

        Raises:
            ServiceError: QUEUE_ERROR if the queue cannot be reached
        """
        log_extra = {
            "event_type": event.type.value,
            "event_id": event.event_id,
            "tenant_id": event.tenant_id,
            "queue_name": self.queue_name,
        }

        if not self.connection_string:
            self.logger.info("Notification event (no queue configured)", extra=log_extra)
            return

        message = event.model_dump_json()
        try:
            queue_client = QueueClient.from_connection_string(
                conn_str=self.connection_string, queue_name=self.queue_name
            )
            try:
                queue_client.send_message(message)
            except Exception as e:
                if "QueueNotFound" not in str(e) and "does not exist" not in str(e):
                    raise
                self.logger.debug(f"Queue {self.queue_name} not found, creating it...")
                queue_client.create_queue()
                queue_client.send_message(message)
        except Exception as e:
            raise ServiceError(
                f"Failed to route event {event.type.value}: {str(e)}",
                error_code=ErrorCode.QUEUE_ERROR,
                operation="route_event",
                cause=e,
                **log_extra,
            )

        self.logger.info("Notification event queued", extra=log_extra)


_STOP = object()


class BackgroundEventDispatcher:
    """
    Non-blocking ``EventRouter`` wrapper.

    ``route_event`` only enqueues. A daemon worker thread, started on first
    use, routes events through the wrapped router and logs failures.
    """

    def __init__(self, router: EventRouter, max_pending: Optional[int] = None):
        self.router = router
        self.max_pending = max_pending or get_config().queue.max_pending_events
        self.logger = get_logger()
        self.dropped = 0
        self._queue: "queue.Queue[Any]" = queue.Queue(maxsize=self.max_pending)
        self._worker: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._closed = False

    def _ensure_worker(self) -> None:
        with self._lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(
                    target=self._run, name="event-dispatcher", daemon=True
                )
                self._worker.start()

    def route_event(self, event: ChannelEvent) -> None:
        if self._closed:
            self.logger.warning(
                "Dispatcher closed, event dropped",
                extra={"event_type": event.type.value, "event_id": event.event_id},
            )
            self.dropped += 1
            return

        self._ensure_worker()
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            self.dropped += 1
            self.logger.warning(
                "Notification buffer full, event dropped",
                extra={
                    "event_type": event.type.value,
                    "event_id": event.event_id,
                    "max_pending": self.max_pending,
                },
            )

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                with tenant_context(item.tenant_id):
                    self.router.route_event(item)
            except Exception as e:
                self.logger.warning(
                    f"Event routing failed: {str(e)}",
                    extra={"event_type": item.type.value, "event_id": item.event_id},
                )
            finally:
                self._queue.task_done()

    def drain(self) -> None:
        """Block until every queued event has been routed."""
        if self._worker is not None:
            self._queue.join()

    def close(self, timeout: float = 5.0) -> None:
        """Route what is queued, then stop the worker."""
        self._closed = True
        if self._worker is None:
            return
        self._queue.put(_STOP)
        self._worker.join(timeout)


_event_router: Optional[EventRouter] = None


def get_event_router() -> EventRouter:
    """Process-wide router: queue delivery on a background worker."""
    global _event_router
    if _event_router is None:
        _event_router = BackgroundEventDispatcher(QueueEventRouter())
    return _event_router


def set_event_router(router: Optional[EventRouter]) -> None:
    global _event_router
    _event_router = router
