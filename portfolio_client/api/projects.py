"""
Project endpoints.
"""

from typing import Any

from portfolio_client.api.base import BaseResource
from portfolio_client.services.types import APIResponse, QueryParams


class ProjectsAPI(BaseResource):
    prefix = "projects"

    async def list(self, params: QueryParams | dict[str, Any] | None = None) -> APIResponse[Any]:
        return await self.client.get(self.path(), params=self.query(params))

    async def featured(self, limit: int | None = None) -> APIResponse[Any]:
        params = {"limit": limit} if limit is not None else None
        return await self.client.get(self.path("featured"), params=params)

    async def get(self, project_id: str) -> APIResponse[Any]:
        return await self.client.get(self.path(project_id))

    async def create(self, data: dict[str, Any]) -> APIResponse[Any]:
        return await self.client.post(self.path(), json=data)

    async def update(self, project_id: str, data: dict[str, Any]) -> APIResponse[Any]:
        return await self.client.patch(self.path(project_id), json=data)

    async def delete(self, project_id: str) -> APIResponse[Any]:
        return await self.client.delete(self.path(project_id))

    async def like(self, project_id: str) -> APIResponse[Any]:
        return await self.client.post(self.path(project_id, "like"))

    async def share(self, project_id: str, platform: str | None = None) -> APIResponse[Any]:
        body = {"platform": platform} if platform else None
        return await self.client.post(self.path(project_id, "share"), json=body)
