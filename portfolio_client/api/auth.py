"""
Authentication endpoints.

login() and register() store the returned token pair on the client, refresh()
replaces it and logout() clears it. The dispatcher itself never refreshes.
"""

from typing import Any

from loguru import logger

from portfolio_client.api.base import BaseResource
from portfolio_client.api.models import (
    LoginCredentials,
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterData,
    to_body,
)
from portfolio_client.services.client import RequestOptions
from portfolio_client.services.types import APIResponse


class AuthAPI(BaseResource):
    prefix = "auth"

    async def login(self, credentials: LoginCredentials) -> APIResponse[Any]:
        response = await self.client.post(self.path("login"), json=to_body(credentials))
        self._store_tokens(response)
        return response

    async def register(self, data: RegisterData) -> APIResponse[Any]:
        response = await self.client.post(self.path("register"), json=to_body(data))
        self._store_tokens(response)
        return response

    async def refresh(self) -> APIResponse[Any]:
        """Exchange the current refresh token for a new pair."""
        refresh_token = self.client.auth.refresh_token
        if not refresh_token:
            raise ValueError("No refresh token available")

        response = await self.client.post(
            self.path("refresh"), json={"refreshToken": refresh_token}
        )
        self._store_tokens(response)
        return response

    async def logout(self) -> APIResponse[Any]:
        try:
            return await self.client.post(self.path("logout"))
        finally:
            self.client.clear_tokens()
            self.client.clear_cache()

    async def me(self) -> APIResponse[Any]:
        # Identity must never be served from another session's cache
        return await self.client.get(self.path("me"), options=RequestOptions(cache=False))

    async def request_password_reset(self, data: PasswordResetRequest) -> APIResponse[Any]:
        return await self.client.post(self.path("password-reset"), json=to_body(data))

    async def confirm_password_reset(self, data: PasswordResetConfirm) -> APIResponse[Any]:
        return await self.client.post(self.path("password-reset", "confirm"), json=to_body(data))

    def _store_tokens(self, response: APIResponse[Any]) -> None:
        """Pick up {token|accessToken, refreshToken} from a success envelope."""
        data = response.data if response.success else None
        if not isinstance(data, dict):
            return

        access = data.get("token") or data.get("accessToken")
        if not access:
            logger.warning("Auth response carried no access token")
            return
        self.client.set_tokens(access, data.get("refreshToken"))
