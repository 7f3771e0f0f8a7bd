from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from portfolio_client.services.client import APIClient
from portfolio_client.services.config import ClientConfig, resolve_config
from portfolio_client.services.events import ClientEvent

BASE_URL = "https://api.example.com/api"


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class EventRecorder:
    """Subscribes to every client event and keeps (event, payload) pairs."""

    def __init__(self, client: APIClient) -> None:
        self.events: list[tuple[ClientEvent, Any]] = []
        for event in ClientEvent:
            client.on(event, self._recorder(event))

    def _recorder(self, event: ClientEvent) -> Callable[[Any], None]:
        def record(payload: Any) -> None:
            self.events.append((event, payload))

        return record

    def names(self) -> list[str]:
        return [event.value for event, _ in self.events]

    def of(self, event: ClientEvent) -> list[Any]:
        return [payload for name, payload in self.events if name == event]


def envelope(data: Any = None, **extra: Any) -> dict[str, Any]:
    body = {
        "success": True,
        "data": data,
        "timestamp": "2024-01-01T00:00:00Z",
        "requestId": "req-1",
    }
    body.update(extra)
    return body


def body_of(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None


def make_config(**overrides: Any) -> ClientConfig:
    return resolve_config(ClientConfig(), base_url=BASE_URL, **overrides)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def make_client(clock: FakeClock):
    def factory(
        handler: Callable[[httpx.Request], Any],
        *,
        online: bool = True,
        **overrides: Any,
    ) -> APIClient:
        return APIClient(
            make_config(**overrides),
            transport=httpx.MockTransport(handler),
            online=online,
            clock=clock,
        )

    return factory
