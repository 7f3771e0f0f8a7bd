"""
APIClient - Resilient async API client shared by every frontend.

Combines:
- CacheManager for GET response caching
- AuthTokenManager for bearer headers
- OfflineRequestQueue for mutations made without connectivity
- EventEmitter for request, network and queue lifecycle events
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Callable
from uuid import uuid4

import httpx
from loguru import logger

from portfolio_client.services.auth import AuthTokenManager
from portfolio_client.services.cache import CacheManager
from portfolio_client.services.config import ClientConfig, resolve_config
from portfolio_client.services.errors import (
    APIClientError,
    HTTPError,
    InvalidRequestError,
    NetworkError,
    NoConnectionError,
    RequestCancelledError,
    RequestQueuedError,
    RequestTimeoutError,
)
from portfolio_client.services.events import (
    ClientEvent,
    EventEmitter,
    EventHandler,
    NetworkStatusEvent,
    RequestErrorEvent,
    RequestStartEvent,
    RequestSuccessEvent,
)
from portfolio_client.services.offline_queue import (
    MUTATING_METHODS,
    DrainResult,
    OfflineRequestQueue,
    QueuedRequest,
)
from portfolio_client.services.types import APIError, APIResponse


@dataclass
class RequestOptions:
    """Per-call overrides."""

    timeout: float | None = None  # seconds
    cache: bool = True
    headers: dict[str, str] = field(default_factory=dict)
    cancel: asyncio.Event | None = None


class APIClient:
    """
    Dispatches every API call for a frontend.

    Usage:
        client = APIClient(resolve_config(platform="cli"))
        client.on(ClientEvent.QUEUE_FAILED, warn_user)

        response = await client.get("/projects", params={"page": 1})

        # Host platform feeds connectivity in
        await client.set_network_status(False)
        try:
            await client.post("/contact", json={"message": "hi"})
        except RequestQueuedError:
            ...  # accepted, replayed when back online
        await client.set_network_status(True)
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        online: bool = True,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or resolve_config()
        self._debug = self.config.enable_logging
        self._online = online

        # Initialize components
        self.events = EventEmitter()
        self.cache = CacheManager(
            ttl=self.config.cache_timeout,
            max_size=self.config.cache_max_size,
            clock=clock,
            debug=self._debug,
        )
        self.auth = AuthTokenManager(debug=self._debug)
        self.queue = OfflineRequestQueue(
            self.events,
            max_retries=self.config.max_retries,
            debug=self._debug,
        )

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout),
            transport=transport,
            follow_redirects=True,
        )

    # Events and auth

    def on(self, event: ClientEvent | str, handler: EventHandler) -> None:
        self.events.on(event, handler)

    def off(self, event: ClientEvent | str, handler: EventHandler) -> bool:
        return self.events.off(event, handler)

    def set_tokens(self, access_token: str, refresh_token: str | None = None) -> None:
        self.auth.set_tokens(access_token, refresh_token)

    def clear_tokens(self) -> None:
        self.auth.clear_tokens()

    def clear_cache(self) -> None:
        self.cache.clear()

    # Connectivity

    @property
    def is_online(self) -> bool:
        return self._online

    async def set_network_status(self, online: bool) -> DrainResult | None:
        """
        Feed the platform connectivity signal into the client.

        Going from offline to online drains the offline queue. Returns the
        drain result in that case, None otherwise.
        """
        if online == self._online:
            return None

        self._online = online
        logger.info(f"Network status changed: {'online' if online else 'offline'}")
        event = ClientEvent.NETWORK_ONLINE if online else ClientEvent.NETWORK_OFFLINE
        self.events.emit(event, NetworkStatusEvent(online=online, queued=len(self.queue)))

        if online:
            return await self.flush_queue()
        return None

    async def flush_queue(self) -> DrainResult:
        """Replay queued requests now. No-op while offline."""
        if not self._online:
            return DrainResult()
        return await self.queue.drain(self._replay)

    # Dispatch

    def build_url(self, path: str) -> str:
        """Join path onto the base URL; absolute URLs pass through."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.config.base_url}/{path.lstrip('/')}"

    def build_headers(
        self,
        extra: dict[str, str] | None = None,
        multipart: bool = False,
    ) -> dict[str, str]:
        """Default headers, then config headers, then caller headers, then auth."""
        return self.auth.attach_auth_header(self._base_headers(extra, multipart))

    def _base_headers(
        self,
        extra: dict[str, str] | None,
        multipart: bool,
    ) -> dict[str, str]:
        headers: dict[str, str] = {
            "X-API-Version": self.config.version,
            "X-Platform": self.config.platform,
        }
        # httpx sets the multipart boundary itself
        if not multipart:
            headers["Content-Type"] = "application/json"
        if self.config.user_agent:
            headers["User-Agent"] = self.config.user_agent
        if self.config.api_key:
            headers["X-API-Key"] = self.config.api_key
        headers.update(self.config.headers)
        if extra:
            headers.update(extra)
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        files: Any = None,
        data: dict[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> APIResponse[Any]:
        """
        Dispatch one API call.

        Args:
            method: HTTP method
            path: Path relative to base_url, or an absolute URL
            params: Query parameters (GET filters)
            json: JSON body for mutating calls
            files: Multipart files, switches the body to multipart
            data: Extra multipart form fields
            options: Per-call timeout, cache opt-out, headers, cancel signal

        Returns:
            APIResponse envelope (from_cache=True on a cache hit)

        Raises:
            NoConnectionError: GET while offline
            RequestQueuedError: Mutation deferred to the offline queue
            RequestTimeoutError: Request exceeded its timeout
            RequestCancelledError: Cancel signal fired
            NetworkError: Transport failed
            HTTPError: Non-2xx response
            InvalidRequestError: Body or URL could not be encoded
        """
        method = method.upper()
        options = options or RequestOptions()
        url = self.build_url(path)

        use_cache = method == "GET" and self.config.enable_cache and options.cache
        cache_key = self.cache.generate_key(url, params) if use_cache else None

        if cache_key is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                self._log(f"CACHE HIT {method} {url}")
                response = APIResponse[Any].model_validate(cached)
                response.from_cache = True
                return response

        # Queued requests keep the headers without auth; replay attaches the
        # token current at that time
        base_headers = self._base_headers(options.headers, multipart=files is not None)
        headers = self.auth.attach_auth_header(base_headers)
        timeout = options.timeout if options.timeout is not None else self.config.timeout

        request_id = uuid4().hex
        started = time.perf_counter()
        self.events.emit(
            ClientEvent.REQUEST_START,
            RequestStartEvent(request_id=request_id, method=method, url=url),
        )
        self._log(f"→ {method} {url}")

        try:
            if not self._online:
                self._handle_offline(method, url, base_headers, json, files, data)

            try:
                http_response = await self._send(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    json=json,
                    files=files,
                    data=data,
                    timeout=timeout,
                    cancel=options.cancel,
                )
            except NetworkError as e:
                # Connectivity loss: defer mutations like an offline call
                if method in MUTATING_METHODS and self.config.enable_offline:
                    queued = self._enqueue(method, url, base_headers, json, files, data)
                    raise RequestQueuedError(queued) from e
                raise

            response = self._parse_response(http_response, method, url)

        except APIClientError as e:
            self._emit_error(request_id, method, url, e, started)
            raise
        except asyncio.CancelledError:
            self._emit_error(
                request_id, method, url, RequestCancelledError(method, url), started
            )
            raise

        if cache_key is not None and response.success:
            self.cache.set(cache_key, response.to_wire())

        duration = time.perf_counter() - started
        self._log(f"← {http_response.status_code} {method} {url} ({duration:.3f}s)")
        self.events.emit(
            ClientEvent.REQUEST_SUCCESS,
            RequestSuccessEvent(
                request_id=request_id,
                method=method,
                url=url,
                status_code=http_response.status_code,
                duration=duration,
            ),
        )
        return response

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> APIResponse[Any]:
        return await self.request("GET", path, params=params, options=options)

    async def post(
        self, path: str, json: Any = None, options: RequestOptions | None = None
    ) -> APIResponse[Any]:
        return await self.request("POST", path, json=json, options=options)

    async def put(
        self, path: str, json: Any = None, options: RequestOptions | None = None
    ) -> APIResponse[Any]:
        return await self.request("PUT", path, json=json, options=options)

    async def patch(
        self, path: str, json: Any = None, options: RequestOptions | None = None
    ) -> APIResponse[Any]:
        return await self.request("PATCH", path, json=json, options=options)

    async def delete(self, path: str, options: RequestOptions | None = None) -> APIResponse[Any]:
        return await self.request("DELETE", path, options=options)

    async def upload(
        self,
        path: str,
        files: Any,
        data: dict[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> APIResponse[Any]:
        """POST a multipart body. Content-Type is left to httpx."""
        return await self.request("POST", path, files=files, data=data, options=options)

    # Internals

    def _handle_offline(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any,
        files: Any,
        form: dict[str, Any] | None,
    ) -> None:
        """Always raises: queued for mutations, no connection otherwise."""
        if method in MUTATING_METHODS and self.config.enable_offline:
            queued = self._enqueue(method, url, headers, body, files, form)
            raise RequestQueuedError(queued)
        raise NoConnectionError(method, url)

    def _enqueue(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any,
        files: Any,
        form: dict[str, Any] | None,
    ) -> QueuedRequest:
        # An unsendable mutation fails here instead of blocking the queue
        self._build_request(
            method,
            url,
            headers=headers,
            json=body,
            files=files,
            data=form,
            timeout=self.config.timeout,
        )
        queued = self.queue.enqueue(
            QueuedRequest(
                url=url,
                method=method,
                headers=headers,
                body=body,
                files=files,
                form=form,
            )
        )
        logger.info(f"Queued {method} {url} for replay ({len(self.queue)} pending)")
        return queued

    async def _replay(self, request: QueuedRequest) -> APIResponse[Any]:
        """Send a queued request, emitting the usual request events."""
        request_id = uuid4().hex
        started = time.perf_counter()
        self.events.emit(
            ClientEvent.REQUEST_START,
            RequestStartEvent(request_id=request_id, method=request.method, url=request.url),
        )

        try:
            http_response = await self._send(
                request.method,
                request.url,
                headers=self.auth.attach_auth_header(request.headers),
                json=request.body,
                files=request.files,
                data=request.form,
                timeout=self.config.timeout,
            )
            response = self._parse_response(http_response, request.method, request.url)
        except APIClientError as e:
            self._emit_error(request_id, request.method, request.url, e, started)
            raise

        self.events.emit(
            ClientEvent.REQUEST_SUCCESS,
            RequestSuccessEvent(
                request_id=request_id,
                method=request.method,
                url=request.url,
                status_code=http_response.status_code,
                duration=time.perf_counter() - started,
            ),
        )
        return response

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        params: dict[str, Any] | None = None,
        json: Any = None,
        files: Any = None,
        data: dict[str, Any] | None = None,
        timeout: float,
        cancel: asyncio.Event | None = None,
    ) -> httpx.Response:
        """Execute the actual HTTP request, mapping transport failures."""
        if cancel is not None and cancel.is_set():
            raise RequestCancelledError(method, url)

        http_request = self._build_request(
            method,
            url,
            headers=headers,
            params=params,
            json=json,
            files=files,
            data=data,
            timeout=timeout,
        )
        call = self._http_client.send(http_request)

        try:
            if cancel is None:
                return await call
            return await self._with_cancel(call, cancel, method, url)

        except httpx.TimeoutException as e:
            raise RequestTimeoutError(method, url, timeout) from e

        except httpx.RequestError as e:
            raise NetworkError(
                f"{method} {url} failed: {e!r}", method=method, url=url
            ) from e

    def _build_request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        params: dict[str, Any] | None = None,
        json: Any = None,
        files: Any = None,
        data: dict[str, Any] | None = None,
        timeout: float,
    ) -> httpx.Request:
        """Encode URL and body, mapping encoding failures to InvalidRequestError."""
        try:
            return self._http_client.build_request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                json=json if files is None else None,
                files=files,
                data=data,
                timeout=timeout,
            )
        except (TypeError, ValueError, httpx.InvalidURL) as e:
            raise InvalidRequestError(method, url, e) from e

    async def _with_cancel(
        self,
        call: Any,
        cancel: asyncio.Event,
        method: str,
        url: str,
    ) -> httpx.Response:
        """Race the request against the cancel signal."""
        send_task = asyncio.ensure_future(call)
        cancel_task = asyncio.ensure_future(cancel.wait())
        try:
            done, _ = await asyncio.wait(
                {send_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            # Also reached when the caller itself is cancelled
            for task in (send_task, cancel_task):
                if not task.done():
                    task.cancel()

        if send_task not in done:
            raise RequestCancelledError(method, url)
        return send_task.result()

    def _parse_response(
        self,
        http_response: httpx.Response,
        method: str,
        url: str,
    ) -> APIResponse[Any]:
        """Turn an HTTP response into an envelope or raise HTTPError."""
        payload = self._read_json(http_response)

        if not http_response.is_success:
            raise HTTPError(
                http_response.status_code,
                self._error_from_payload(http_response, payload),
                method=method,
                url=url,
            )

        if isinstance(payload, dict) and "success" in payload:
            try:
                return APIResponse[Any].model_validate(payload)
            except ValueError as e:
                logger.warning(f"Malformed envelope from {method} {url}: {e}")
                if payload.get("success") is not True:
                    return self._malformed_failure(http_response, payload)

        # Bare JSON, text or empty body: wrap it
        if payload is None and http_response.content:
            payload = http_response.text
        return APIResponse[Any](
            success=True,
            data=payload,
            request_id=http_response.headers.get("X-Request-ID") or uuid4().hex,
        )

    @staticmethod
    def _malformed_failure(
        http_response: httpx.Response, payload: dict[str, Any]
    ) -> APIResponse[Any]:
        """Failed envelope that did not validate; never promoted to success."""
        reason = payload.get("error")
        if not isinstance(reason, str) or not reason:
            reason = payload.get("message")
        if not isinstance(reason, str) or not reason:
            reason = "Malformed error envelope"
        return APIResponse[Any](
            success=False,
            error=APIError(code="MALFORMED_RESPONSE", message=reason),
            request_id=http_response.headers.get("X-Request-ID") or uuid4().hex,
        )

    @staticmethod
    def _read_json(http_response: httpx.Response) -> Any:
        if not http_response.content:
            return None
        try:
            return http_response.json()
        except ValueError:
            return None

    @staticmethod
    def _error_from_payload(http_response: httpx.Response, payload: Any) -> APIError:
        """Error from the envelope when well-formed, synthesized otherwise."""
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict):
                try:
                    return APIError.model_validate(error)
                except ValueError:
                    pass
            message = payload.get("message")
            if isinstance(message, str) and message:
                return APIError(code=f"HTTP_{http_response.status_code}", message=message)

        return APIError(
            code=f"HTTP_{http_response.status_code}",
            message=http_response.reason_phrase or f"HTTP {http_response.status_code}",
        )

    def _emit_error(
        self,
        request_id: str,
        method: str,
        url: str,
        error: APIClientError,
        started: float,
    ) -> None:
        self._log(f"✗ {method} {url}: {error}")
        self.events.emit(
            ClientEvent.REQUEST_ERROR,
            RequestErrorEvent(
                request_id=request_id,
                method=method,
                url=url,
                error=error,
                duration=time.perf_counter() - started,
            ),
        )

    def _log(self, message: str) -> None:
        """Log debug message if logging is enabled."""
        if self._debug:
            logger.debug(f"[APIClient] {message}")

    # Lifecycle

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._http_client.aclose()
        logger.debug("APIClient closed")

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def get_status(self) -> dict[str, Any]:
        """Snapshot of client state for health checks."""
        return {
            "online": self._online,
            "authenticated": self.auth.is_authenticated,
            "cache": self.cache.get_stats().to_dict(),
            "queue": {
                "pending": len(self.queue),
                "draining": self.queue.is_draining,
                "max_retries": self.queue.max_retries,
            },
            "platform": self.config.platform,
            "base_url": self.config.base_url,
        }


# Composition-root instance
_global_client: APIClient | None = None


def get_api_client() -> APIClient:
    """Get the application-wide client, creating it from settings on first use."""
    global _global_client
    if _global_client is None:
        _global_client = APIClient()
    return _global_client


async def close_api_client() -> None:
    """Close the application-wide client."""
    global _global_client
    if _global_client:
        await _global_client.close()
        _global_client = None
