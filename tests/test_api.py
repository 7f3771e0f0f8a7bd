from __future__ import annotations

from datetime import datetime

import httpx
import pytest
from pydantic import ValidationError

from conftest import BASE_URL, body_of, envelope
from portfolio_client.api import (
    AnalyticsEventInput,
    AnalyticsQuery,
    ContactMessageInput,
    LoginCredentials,
    PortfolioAPI,
    RegisterData,
)
from portfolio_client.services.errors import RequestQueuedError
from portfolio_client.services.types import QueryParams


class Router:
    """Answers by (method, path) and records every request."""

    def __init__(self, routes: dict[tuple[str, str], dict] | None = None) -> None:
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        payload = self.routes.get((request.method, path), envelope({"ok": True}))
        return httpx.Response(200, json=payload)

    def last(self) -> httpx.Request:
        return self.requests[-1]


def login_payload(token="access-1", refresh="refresh-1"):
    return envelope({"user": {"id": "u1"}, "token": token, "refreshToken": refresh})


@pytest.fixture()
def router() -> Router:
    return Router(
        {
            ("POST", "/auth/login"): login_payload(),
            ("POST", "/auth/register"): login_payload("access-r", "refresh-r"),
            ("POST", "/auth/refresh"): envelope(
                {"accessToken": "access-2", "refreshToken": "refresh-2"}
            ),
        }
    )


@pytest.fixture()
def api(make_client, router) -> PortfolioAPI:
    return PortfolioAPI(make_client(router))


@pytest.mark.asyncio
async def test_login_stores_tokens_and_later_calls_are_authenticated(api, router):
    await api.auth.login(LoginCredentials(email="me@example.com", password="pw"))

    assert body_of(router.last()) == {"email": "me@example.com", "password": "pw"}
    assert api.client.auth.access_token == "access-1"

    await api.auth.me()
    assert router.last().headers["Authorization"] == "Bearer access-1"


@pytest.mark.asyncio
async def test_register_uses_camel_case_body(api, router):
    await api.auth.register(
        RegisterData(
            email="new@example.com",
            password="password1",
            confirm_password="password1",
            first_name="Ada",
            accept_terms=True,
        )
    )

    body = body_of(router.last())
    assert body["confirmPassword"] == "password1"
    assert body["firstName"] == "Ada"
    assert body["acceptTerms"] is True
    assert api.client.auth.refresh_token == "refresh-r"


def test_register_rejects_mismatched_passwords():
    with pytest.raises(ValidationError):
        RegisterData(
            email="new@example.com",
            password="password1",
            confirm_password="password2",
            accept_terms=True,
        )


@pytest.mark.asyncio
async def test_refresh_replaces_token_pair(api, router):
    await api.auth.login(LoginCredentials(email="me@example.com", password="pw"))

    await api.auth.refresh()

    assert body_of(router.last()) == {"refreshToken": "refresh-1"}
    assert router.last().headers["Authorization"] == "Bearer access-1"
    assert api.client.auth.access_token == "access-2"
    assert api.client.auth.refresh_token == "refresh-2"


@pytest.mark.asyncio
async def test_refresh_without_session(api):
    with pytest.raises(ValueError):
        await api.auth.refresh()


@pytest.mark.asyncio
async def test_logout_clears_tokens_and_cache(api, router):
    await api.auth.login(LoginCredentials(email="me@example.com", password="pw"))
    await api.portfolios.get("p1")

    await api.auth.logout()

    assert not api.client.auth.is_authenticated
    assert len(api.client.cache) == 0
    assert router.last().url.path == "/api/auth/logout"


@pytest.mark.asyncio
async def test_me_is_never_cached(api, router):
    await api.auth.me()
    await api.auth.me()

    assert len(router.requests) == 2


@pytest.mark.asyncio
async def test_portfolio_paths(api, router):
    await api.portfolios.get("p1")
    await api.portfolios.get_by_slug("jane-doe")
    await api.portfolios.create({"title": "Mine"})
    await api.portfolios.update("p1", {"title": "Renamed"})
    await api.portfolios.publish("p1")
    await api.portfolios.unpublish("p1")
    await api.portfolios.delete("p1")

    calls = [(r.method, r.url.path) for r in router.requests]
    assert calls == [
        ("GET", "/api/portfolios/p1"),
        ("GET", "/api/portfolios/slug/jane-doe"),
        ("POST", "/api/portfolios"),
        ("PATCH", "/api/portfolios/p1"),
        ("POST", "/api/portfolios/p1/publish"),
        ("POST", "/api/portfolios/p1/unpublish"),
        ("DELETE", "/api/portfolios/p1"),
    ]


@pytest.mark.asyncio
async def test_project_list_query_params(api, router):
    await api.projects.list(
        QueryParams(
            page=2,
            page_size=20,
            order="desc",
            include=["tags", "images"],
            filter={"category": "web"},
        )
    )

    params = router.last().url.params
    assert params["page"] == "2"
    assert params["pageSize"] == "20"
    assert params["order"] == "desc"
    assert params["include"] == "tags,images"
    assert params["filter[category]"] == "web"


@pytest.mark.asyncio
async def test_project_actions(api, router):
    await api.projects.featured(limit=3)
    await api.projects.like("x1")
    await api.projects.share("x1", platform="linkedin")

    assert router.requests[0].url.params["limit"] == "3"
    assert router.requests[1].url.path == "/api/projects/x1/like"
    assert body_of(router.requests[2]) == {"platform": "linkedin"}


@pytest.mark.asyncio
async def test_analytics_report_params(api, router):
    await api.analytics.overview(
        AnalyticsQuery(start_date=datetime(2024, 1, 1), granularity="day")
    )

    params = router.last().url.params
    assert router.last().url.path == "/api/analytics/overview"
    assert params["startDate"].startswith("2024-01-01")
    assert params["granularity"] == "day"


@pytest.mark.asyncio
async def test_analytics_track_is_queued_offline(make_client, router):
    api = PortfolioAPI(make_client(router, online=False))
    event = AnalyticsEventInput(
        portfolio_id="p1",
        type="page_view",
        name="home",
        session_id="s1",
    )

    with pytest.raises(RequestQueuedError):
        await api.analytics.track(event)

    assert router.requests == []
    await api.client.set_network_status(True)

    body = body_of(router.last())
    assert router.last().url.path == "/api/analytics/events"
    assert body["portfolioId"] == "p1"
    assert body["sessionId"] == "s1"


@pytest.mark.asyncio
async def test_contact_send(api, router):
    await api.contact.send(
        ContactMessageInput(
            portfolio_id="p1",
            name="Sam",
            email="sam@example.com",
            message="Hello",
        )
    )

    assert str(router.last().url) == f"{BASE_URL}/contact"
    assert body_of(router.last())["portfolioId"] == "p1"


@pytest.mark.asyncio
async def test_file_upload_from_path(api, router, tmp_path):
    resume = tmp_path / "resume.pdf"
    resume.write_bytes(b"%PDF-1.4 resume")

    await api.files.upload(resume, content_type="application/pdf", fields={"kind": "resume"})

    request = router.last()
    assert request.url.path == "/api/files/upload"
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert b'filename="resume.pdf"' in request.content
    assert b"%PDF-1.4 resume" in request.content


@pytest.mark.asyncio
async def test_file_upload_from_bytes(api, router):
    await api.files.upload(b"raw", filename="notes.txt", content_type="text/plain")

    assert b'filename="notes.txt"' in router.last().content
