"""
Client core - the request-dispatch engine shared by every frontend.

Provides:
- resolve_config: Merges caller options over defaults
- CacheManager: GET response cache with TTL
- AuthTokenManager: Bearer token attachment
- OfflineRequestQueue: Deferred mutations with bounded retry
- EventEmitter: Lifecycle events for observers
- APIClient: Dispatcher combining all of the above
"""

from portfolio_client.services.errors import (
    APIClientError,
    ConfigError,
    NetworkError,
    NoConnectionError,
    RequestTimeoutError,
    InvalidRequestError,
    RequestCancelledError,
    HTTPError,
    RequestQueuedError,
    QueueExhaustedError,
)
from portfolio_client.services.types import (
    APIError,
    APIResponse,
    PaginationInfo,
    QueryParams,
)
from portfolio_client.services.config import ClientConfig, default_config, resolve_config
from portfolio_client.services.cache import CacheManager, CacheEntry, CacheStats
from portfolio_client.services.auth import AuthSession, AuthTokenManager
from portfolio_client.services.events import (
    ClientEvent,
    EventEmitter,
    NetworkStatusEvent,
    RequestStartEvent,
    RequestSuccessEvent,
    RequestErrorEvent,
    QueueSuccessEvent,
    QueueFailedEvent,
)
from portfolio_client.services.offline_queue import (
    DrainResult,
    OfflineRequestQueue,
    QueuedRequest,
)
from portfolio_client.services.client import (
    APIClient,
    RequestOptions,
    close_api_client,
    get_api_client,
)

__all__ = [
    # Errors
    "APIClientError",
    "ConfigError",
    "NetworkError",
    "NoConnectionError",
    "RequestTimeoutError",
    "InvalidRequestError",
    "RequestCancelledError",
    "HTTPError",
    "RequestQueuedError",
    "QueueExhaustedError",
    # Envelope
    "APIError",
    "APIResponse",
    "PaginationInfo",
    "QueryParams",
    # Config
    "ClientConfig",
    "default_config",
    "resolve_config",
    # Cache
    "CacheManager",
    "CacheEntry",
    "CacheStats",
    # Auth
    "AuthSession",
    "AuthTokenManager",
    # Events
    "ClientEvent",
    "EventEmitter",
    "NetworkStatusEvent",
    "RequestStartEvent",
    "RequestSuccessEvent",
    "RequestErrorEvent",
    "QueueSuccessEvent",
    "QueueFailedEvent",
    # Offline queue
    "DrainResult",
    "OfflineRequestQueue",
    "QueuedRequest",
    # Client
    "APIClient",
    "RequestOptions",
    "close_api_client",
    "get_api_client",
]
