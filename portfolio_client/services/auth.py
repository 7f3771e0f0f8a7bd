"""
AuthTokenManager - holds the bearer/refresh token pair for one client.
"""

from dataclasses import dataclass

from loguru import logger


@dataclass(frozen=True)
class AuthSession:
    """Access/refresh token pair. Replaced as a whole, never patched."""

    access_token: str
    refresh_token: str | None = None


class AuthTokenManager:
    """
    Attaches `Authorization: Bearer <access>` to outgoing requests.

    Refreshing is not done here. A session layer calls the refresh endpoint
    and hands the new pair to set_tokens().
    """

    def __init__(self, debug: bool = False):
        self._session: AuthSession | None = None
        self._debug = debug

    @property
    def session(self) -> AuthSession | None:
        return self._session

    @property
    def access_token(self) -> str | None:
        return self._session.access_token if self._session else None

    @property
    def refresh_token(self) -> str | None:
        return self._session.refresh_token if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def set_tokens(self, access_token: str, refresh_token: str | None = None) -> None:
        """Replace the current pair."""
        if not access_token:
            raise ValueError("access_token must be a non-empty string")
        self._session = AuthSession(access_token=access_token, refresh_token=refresh_token)
        if self._debug:
            logger.debug("[AuthTokenManager] tokens set")

    def clear_tokens(self) -> None:
        self._session = None
        if self._debug:
            logger.debug("[AuthTokenManager] tokens cleared")

    def attach_auth_header(self, headers: dict[str, str]) -> dict[str, str]:
        """Return a copy of headers with the bearer header when a session exists."""
        result = dict(headers)
        if self._session is not None:
            result["Authorization"] = f"Bearer {self._session.access_token}"
        return result
