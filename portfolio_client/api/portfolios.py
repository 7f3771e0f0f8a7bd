"""
Portfolio endpoints.
"""

from typing import Any

from portfolio_client.api.base import BaseResource
from portfolio_client.services.types import APIResponse, QueryParams


class PortfoliosAPI(BaseResource):
    prefix = "portfolios"

    async def list(self, params: QueryParams | dict[str, Any] | None = None) -> APIResponse[Any]:
        return await self.client.get(self.path(), params=self.query(params))

    async def get(self, portfolio_id: str) -> APIResponse[Any]:
        return await self.client.get(self.path(portfolio_id))

    async def get_by_slug(self, slug: str) -> APIResponse[Any]:
        return await self.client.get(self.path("slug", slug))

    async def create(self, data: dict[str, Any]) -> APIResponse[Any]:
        return await self.client.post(self.path(), json=data)

    async def update(self, portfolio_id: str, data: dict[str, Any]) -> APIResponse[Any]:
        return await self.client.patch(self.path(portfolio_id), json=data)

    async def delete(self, portfolio_id: str) -> APIResponse[Any]:
        return await self.client.delete(self.path(portfolio_id))

    async def publish(self, portfolio_id: str) -> APIResponse[Any]:
        return await self.client.post(self.path(portfolio_id, "publish"))

    async def unpublish(self, portfolio_id: str) -> APIResponse[Any]:
        return await self.client.post(self.path(portfolio_id, "unpublish"))
