"""
EventEmitter - publish/subscribe bus for client lifecycle events.

Every event name is a ClientEvent member and carries a typed payload:

    network:online / network:offline   NetworkStatusEvent
    request:start                      RequestStartEvent
    request:success                    RequestSuccessEvent
    request:error                      RequestErrorEvent
    queue:success                      QueueSuccessEvent
    queue:failed                       QueueFailedEvent
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from loguru import logger

if TYPE_CHECKING:
    from portfolio_client.services.errors import APIClientError, QueueExhaustedError
    from portfolio_client.services.offline_queue import QueuedRequest


class ClientEvent(str, Enum):
    """Recognized client events."""

    NETWORK_ONLINE = "network:online"
    NETWORK_OFFLINE = "network:offline"
    REQUEST_START = "request:start"
    REQUEST_SUCCESS = "request:success"
    REQUEST_ERROR = "request:error"
    QUEUE_SUCCESS = "queue:success"
    QUEUE_FAILED = "queue:failed"


@dataclass(frozen=True)
class NetworkStatusEvent:
    online: bool
    queued: int


@dataclass(frozen=True)
class RequestStartEvent:
    request_id: str
    method: str
    url: str


@dataclass(frozen=True)
class RequestSuccessEvent:
    request_id: str
    method: str
    url: str
    status_code: int
    duration: float  # seconds


@dataclass(frozen=True)
class RequestErrorEvent:
    request_id: str
    method: str
    url: str
    error: "APIClientError"
    duration: float


@dataclass(frozen=True)
class QueueSuccessEvent:
    request: "QueuedRequest"


@dataclass(frozen=True)
class QueueFailedEvent:
    request: "QueuedRequest"
    error: "QueueExhaustedError"


EventHandler = Callable[[Any], None]


class EventEmitter:
    """
    Synchronous pub/sub with per-handler fault isolation.

    Usage:
        events = EventEmitter()
        events.on(ClientEvent.QUEUE_FAILED, lambda e: notify(e.request.id))
        events.emit(ClientEvent.QUEUE_FAILED, QueueFailedEvent(...))
    """

    def __init__(self) -> None:
        self._handlers: dict[ClientEvent, list[EventHandler]] = {}

    def on(self, event: ClientEvent | str, handler: EventHandler) -> None:
        """Register a handler. Handlers run in registration order."""
        self._handlers.setdefault(ClientEvent(event), []).append(handler)

    def off(self, event: ClientEvent | str, handler: EventHandler) -> bool:
        """Remove the first registration of handler. Returns True if found."""
        handlers = self._handlers.get(ClientEvent(event))
        if handlers and handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def emit(self, event: ClientEvent, payload: Any = None) -> None:
        """Deliver payload to every handler; a failing handler is logged and skipped."""
        for handler in list(self._handlers.get(event, ())):
            try:
                handler(payload)
            except Exception as e:
                logger.error(f"Handler {handler!r} for '{event.value}' failed: {e}")

    def listener_count(self, event: ClientEvent | str) -> int:
        return len(self._handlers.get(ClientEvent(event), ()))

    def clear(self) -> None:
        self._handlers.clear()
