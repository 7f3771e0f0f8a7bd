"""
Analytics endpoints.

track() is a mutation and is queued while offline like any other POST, so
events recorded without connectivity are delivered on reconnect.
"""

from typing import Any

from portfolio_client.api.base import BaseResource
from portfolio_client.api.models import AnalyticsEventInput, AnalyticsQuery, to_body
from portfolio_client.services.client import RequestOptions
from portfolio_client.services.types import APIResponse


class AnalyticsAPI(BaseResource):
    prefix = "analytics"

    async def track(self, event: AnalyticsEventInput) -> APIResponse[Any]:
        return await self.client.post(self.path("events"), json=to_body(event))

    async def overview(self, query: AnalyticsQuery | None = None) -> APIResponse[Any]:
        return await self._report("overview", query)

    async def traffic(self, query: AnalyticsQuery | None = None) -> APIResponse[Any]:
        return await self._report("traffic", query)

    async def projects(self, query: AnalyticsQuery | None = None) -> APIResponse[Any]:
        return await self._report("projects", query)

    async def realtime(self) -> APIResponse[Any]:
        return await self.client.get(self.path("realtime"), options=RequestOptions(cache=False))

    async def _report(self, name: str, query: AnalyticsQuery | None) -> APIResponse[Any]:
        params = query.to_params() if query else None
        return await self.client.get(self.path(name), params=params or None)
