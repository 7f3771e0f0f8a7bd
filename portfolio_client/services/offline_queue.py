"""
OfflineRequestQueue - mutating requests deferred while the client is offline.

Lifecycle of a queued request:
- ENQUEUED: waiting for the next drain
- REPLAYING: being sent during a drain
- SUCCEEDED: replay worked, request removed (queue:success)
- ENQUEUED again: replay failed with budget left, retry_count + 1, back at the tail
- DISCARDED: replay failed with no budget left, removed (queue:failed)

A drain replays a snapshot of the queue sequentially in enqueue order.
Requeued requests, and anything enqueued during a drain, wait for the next one.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable
from uuid import uuid4

from loguru import logger

from portfolio_client.services.errors import APIClientError, QueueExhaustedError
from portfolio_client.services.events import (
    ClientEvent,
    EventEmitter,
    QueueFailedEvent,
    QueueSuccessEvent,
)

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


@dataclass
class QueuedRequest:
    """A mutating request waiting for connectivity."""

    url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    files: Any = None
    form: dict[str, Any] | None = None
    id: str = field(default_factory=lambda: uuid4().hex)
    enqueued_at: float = field(default_factory=time.time)
    retry_count: int = 0


Sender = Callable[[QueuedRequest], Awaitable[Any]]


@dataclass
class DrainResult:
    """Outcome counts for one drain cycle."""

    succeeded: int = 0
    requeued: int = 0
    discarded: int = 0

    @property
    def attempted(self) -> int:
        return self.succeeded + self.requeued + self.discarded


class OfflineRequestQueue:
    """In-process FIFO of deferred requests with a bounded retry budget."""

    def __init__(
        self,
        events: EventEmitter,
        max_retries: int = 3,
        debug: bool = False,
    ):
        self._events = events
        self._max_retries = max_retries
        self._debug = debug
        self._requests: list[QueuedRequest] = []
        self._draining = False

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def is_draining(self) -> bool:
        return self._draining

    def enqueue(self, request: QueuedRequest) -> QueuedRequest:
        """Append a request. Only mutating methods are accepted."""
        if request.method not in MUTATING_METHODS:
            raise ValueError(f"{request.method} requests are never queued")
        self._requests.append(request)
        self._log(f"ENQUEUE: {request.method} {request.url} ({request.id})")
        return request

    async def drain(self, sender: Sender) -> DrainResult:
        """
        Replay the current snapshot in order.

        Args:
            sender: Coroutine function performing the network call; any
                APIClientError it raises counts as a failed attempt

        Returns:
            DrainResult with per-outcome counts
        """
        result = DrainResult()
        if self._draining or not self._requests:
            return result

        self._draining = True
        batch, self._requests = self._requests, []
        self._log(f"DRAIN: replaying {len(batch)} requests")

        try:
            for index, request in enumerate(batch):
                try:
                    await sender(request)
                except APIClientError as e:
                    if request.retry_count < self._max_retries:
                        request.retry_count += 1
                        self._requests.append(request)
                        result.requeued += 1
                        self._log(
                            f"REQUEUE: {request.method} {request.url} "
                            f"(retry {request.retry_count}/{self._max_retries})"
                        )
                    else:
                        result.discarded += 1
                        logger.warning(
                            f"Dropping queued {request.method} {request.url} "
                            f"after {request.retry_count} retries: {e}"
                        )
                        self._events.emit(
                            ClientEvent.QUEUE_FAILED,
                            QueueFailedEvent(
                                request=request,
                                error=QueueExhaustedError(request, e),
                            ),
                        )
                    continue
                except BaseException:
                    # Interrupted: keep the unsent remainder at the head
                    self._requests[:0] = batch[index:]
                    raise

                result.succeeded += 1
                self._events.emit(ClientEvent.QUEUE_SUCCESS, QueueSuccessEvent(request=request))
        finally:
            self._draining = False

        self._log(
            f"DRAIN DONE: {result.succeeded} ok, {result.requeued} requeued, "
            f"{result.discarded} dropped"
        )
        return result

    def clear(self) -> int:
        """Drop every queued request. Returns how many were removed."""
        count = len(self._requests)
        self._requests.clear()
        if count:
            self._log(f"CLEAR: {count} requests removed")
        return count

    def snapshot(self) -> list[QueuedRequest]:
        return list(self._requests)

    def __len__(self) -> int:
        return len(self._requests)

    def _log(self, message: str) -> None:
        if self._debug:
            logger.debug(f"[OfflineQueue] {message}")
