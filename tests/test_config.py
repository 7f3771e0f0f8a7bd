from datetime import timedelta

from portfolio_client.services.config import ClientConfig, default_config, resolve_config
from portfolio_client.settings import Settings


def test_defaults():
    config = ClientConfig()

    assert config.timeout == 30.0
    assert config.retries == 3
    assert config.cache_timeout == timedelta(minutes=5)
    assert config.platform == "web"
    assert config.version == "v1"
    assert config.enable_cache and config.enable_offline and config.enable_retry
    assert config.cache_max_size is None


def test_overrides_are_merged_over_base():
    config = resolve_config(
        ClientConfig(),
        base_url="https://api.example.com/api/",
        timeout=5,
        retries=1,
        platform="desktop",
        cache_timeout=1,
        enable_cache=False,
    )

    assert config.base_url == "https://api.example.com/api"
    assert config.timeout == 5.0
    assert config.retries == 1
    assert config.platform == "desktop"
    assert config.cache_timeout == timedelta(seconds=1)
    assert config.enable_cache is False
    # untouched fields keep their defaults
    assert config.enable_offline is True


def test_invalid_values_fall_back_silently():
    config = resolve_config(
        ClientConfig(),
        base_url="not a url",
        timeout=-1,
        retries="3",
        platform="tv",
        enable_cache="yes",
        cache_timeout=timedelta(0),
        headers={"X-Count": 1},
        unknown_option=True,
    )

    assert config == ClientConfig()


def test_none_means_not_supplied():
    base = ClientConfig(api_key="secret")
    assert resolve_config(base, api_key=None).api_key == "secret"


def test_retry_budget_is_zero_when_retry_disabled():
    assert resolve_config(ClientConfig(), retries=5).max_retries == 5
    assert resolve_config(ClientConfig(), retries=5, enable_retry=False).max_retries == 0


def test_default_config_reads_settings():
    settings = Settings(
        API_URL="https://backend.example.com",
        API_PLATFORM="mobile",
        API_TIMEOUT=12,
        API_CACHE_TIMEOUT=60,
        API_ENABLE_LOGGING=True,
    )

    config = default_config(settings)

    assert config.base_url == "https://backend.example.com"
    assert config.platform == "mobile"
    assert config.timeout == 12.0
    assert config.cache_timeout == timedelta(seconds=60)
    assert config.enable_logging is True


def test_default_config_ignores_invalid_settings():
    config = default_config(Settings(API_PLATFORM="smartwatch", ENVIRONMENT="development"))

    assert config.platform == "web"
    assert config.enable_logging is True
