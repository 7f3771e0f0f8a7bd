"""
Base class for domain resources.
"""

from typing import Any

from portfolio_client.services.client import APIClient, get_api_client
from portfolio_client.services.types import QueryParams


class BaseResource:
    """
    A group of endpoints under one path prefix.

    Resources hold no state of their own; every call goes through the
    shared APIClient so caching, auth and offline queuing apply uniformly.
    """

    prefix: str = ""

    def __init__(self, client: APIClient | None = None):
        self.client = client or get_api_client()

    def path(self, *parts: str) -> str:
        """Build a path under this resource's prefix."""
        segments = [self.prefix.strip("/"), *(str(p).strip("/") for p in parts)]
        return "/".join(s for s in segments if s)

    @staticmethod
    def query(params: QueryParams | dict[str, Any] | None) -> dict[str, Any] | None:
        if params is None:
            return None
        if isinstance(params, QueryParams):
            return params.to_params() or None
        return dict(params) or None
