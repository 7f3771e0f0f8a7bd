"""
API client exceptions.
"""

from typing import TYPE_CHECKING

from portfolio_client.services.types import APIError

if TYPE_CHECKING:
    from portfolio_client.services.offline_queue import QueuedRequest


class APIClientError(Exception):
    """Base exception for API client errors."""

    code = "CLIENT_ERROR"

    def __init__(
        self,
        message: str,
        method: str | None = None,
        url: str | None = None,
    ):
        self.message = message
        self.method = method
        self.url = url
        super().__init__(message)

    def to_api_error(self) -> APIError:
        """Describe this failure as an error envelope body."""
        return APIError(code=self.code, message=self.message)


class ConfigError(APIClientError):
    """A configuration value is invalid. Never escapes config resolution."""

    code = "CONFIG_ERROR"

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"Invalid value for '{field}': {value!r}")


class NetworkError(APIClientError):
    """Transport failed (DNS, connection refused, aborted)."""

    code = "NETWORK_ERROR"


class NoConnectionError(NetworkError):
    """Client is offline and the request cannot be deferred."""

    code = "NO_CONNECTION"

    def __init__(self, method: str, url: str):
        super().__init__(
            f"No connection available for {method} {url}",
            method=method,
            url=url,
        )


class RequestTimeoutError(NetworkError):
    """Request timed out."""

    code = "TIMEOUT"

    def __init__(self, method: str, url: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            f"{method} {url} timed out after {timeout}s",
            method=method,
            url=url,
        )


class InvalidRequestError(APIClientError):
    """Request could not be built (unencodable body, malformed URL)."""

    code = "INVALID_REQUEST"

    def __init__(self, method: str, url: str, reason: Exception):
        self.reason = reason
        super().__init__(
            f"{method} {url} could not be built: {reason}",
            method=method,
            url=url,
        )


class RequestCancelledError(APIClientError):
    """Request was cancelled through its cancellation signal."""

    code = "CANCELLED"

    def __init__(self, method: str, url: str):
        super().__init__(f"{method} {url} was cancelled", method=method, url=url)


class HTTPError(APIClientError):
    """Backend answered with a non-2xx status."""

    code = "HTTP_ERROR"

    def __init__(self, status_code: int, error: APIError, method: str, url: str):
        self.status_code = status_code
        self.error = error
        super().__init__(
            f"HTTP {status_code}: {error.message}",
            method=method,
            url=url,
        )

    def to_api_error(self) -> APIError:
        return self.error


class RequestQueuedError(APIClientError):
    """Request was accepted into the offline queue and will be replayed."""

    code = "QUEUED"

    def __init__(self, request: "QueuedRequest"):
        self.request = request
        super().__init__(
            f"{request.method} {request.url} queued for replay ({request.id})",
            method=request.method,
            url=request.url,
        )


class QueueExhaustedError(APIClientError):
    """Queued request ran out of retries. Only delivered via queue:failed."""

    code = "QUEUE_EXHAUSTED"

    def __init__(self, request: "QueuedRequest", last_error: Exception):
        self.request = request
        self.last_error = last_error
        super().__init__(
            f"{request.method} {request.url} dropped after "
            f"{request.retry_count} retries: {last_error}",
            method=request.method,
            url=request.url,
        )
