"""
ClientConfig and the configuration resolver.

Configuration is advisory: resolve_config() never fails. Every override is
checked on its own and an absent, unknown or invalid value falls back to the
default silently.
"""

from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import Any, Callable, Literal

from portfolio_client.services.errors import ConfigError
from portfolio_client.settings import Settings, global_settings

Platform = Literal["web", "mobile", "desktop", "cli"]
PLATFORMS: tuple[str, ...] = ("web", "mobile", "desktop", "cli")


@dataclass(frozen=True)
class ClientConfig:
    """Resolved configuration for one API client instance."""

    base_url: str = "http://localhost:3000/api"
    timeout: float = 30.0  # seconds
    retries: int = 3
    version: str = "v1"
    platform: Platform = "web"
    enable_cache: bool = True
    cache_timeout: timedelta = timedelta(minutes=5)
    enable_offline: bool = True
    enable_retry: bool = True
    enable_logging: bool = False
    api_key: str | None = None
    user_agent: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    cache_max_size: int | None = None  # None keeps the cache unbounded

    @property
    def max_retries(self) -> int:
        """Retry budget for queued requests."""
        return self.retries if self.enable_retry else 0


def default_config(settings: Settings | None = None) -> ClientConfig:
    """Defaults, with environment-provided values where they are valid."""
    settings = settings or global_settings
    base = ClientConfig()
    return resolve_config(
        base,
        base_url=settings.api_url,
        timeout=settings.api_timeout,
        retries=settings.api_retries,
        version=settings.api_version,
        platform=settings.api_platform,
        cache_timeout=settings.api_cache_timeout,
        enable_logging=settings.enable_logging,
        api_key=settings.api_key,
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_base_url(value: Any) -> str:
    if not isinstance(value, str) or not value.startswith(("http://", "https://")):
        raise ConfigError("base_url", value)
    return value.rstrip("/")


def _check_timeout(value: Any) -> float:
    if not _is_number(value) or value <= 0:
        raise ConfigError("timeout", value)
    return float(value)


def _check_retries(value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ConfigError("retries", value)
    return value


def _check_version(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError("version", value)
    return value


def _check_platform(value: Any) -> str:
    if value not in PLATFORMS:
        raise ConfigError("platform", value)
    return value


def _check_flag(name: str) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        if not isinstance(value, bool):
            raise ConfigError(name, value)
        return value

    return check


def _check_cache_timeout(value: Any) -> timedelta:
    if isinstance(value, timedelta):
        ttl = value
    elif _is_number(value):
        ttl = timedelta(seconds=value)
    else:
        raise ConfigError("cache_timeout", value)
    if ttl <= timedelta(0):
        raise ConfigError("cache_timeout", value)
    return ttl


def _check_optional_str(name: str) -> Callable[[Any], str | None]:
    def check(value: Any) -> str | None:
        if value is not None and not isinstance(value, str):
            raise ConfigError(name, value)
        return value or None

    return check


def _check_headers(value: Any) -> dict[str, str]:
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise ConfigError("headers", value)
    return dict(value)


def _check_cache_max_size(value: Any) -> int | None:
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ConfigError("cache_max_size", value)
    return value


_VALIDATORS: dict[str, Callable[[Any], Any]] = {
    "base_url": _check_base_url,
    "timeout": _check_timeout,
    "retries": _check_retries,
    "version": _check_version,
    "platform": _check_platform,
    "enable_cache": _check_flag("enable_cache"),
    "cache_timeout": _check_cache_timeout,
    "enable_offline": _check_flag("enable_offline"),
    "enable_retry": _check_flag("enable_retry"),
    "enable_logging": _check_flag("enable_logging"),
    "api_key": _check_optional_str("api_key"),
    "user_agent": _check_optional_str("user_agent"),
    "headers": _check_headers,
    "cache_max_size": _check_cache_max_size,
}


def resolve_config(base: ClientConfig | None = None, **overrides: Any) -> ClientConfig:
    """
    Merge overrides over a base configuration.

    Args:
        base: Configuration to start from (default: environment defaults)
        **overrides: Any ClientConfig field; None means "not supplied"

    Returns:
        A new ClientConfig. Invalid or unknown overrides are ignored.
    """
    if base is None:
        base = default_config()

    accepted: dict[str, Any] = {}
    for name, value in overrides.items():
        check = _VALIDATORS.get(name)
        if check is None or value is None:
            continue
        try:
            accepted[name] = check(value)
        except ConfigError:
            continue

    return replace(base, **accepted)
