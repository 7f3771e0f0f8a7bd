import os

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

load_dotenv()


class Settings(BaseModel):
    # Backend
    api_url: str = Field(default="http://localhost:3000/api", alias="API_URL")
    api_key: str | None = Field(default=None, alias="API_KEY")
    api_version: str = Field(default="v1", alias="API_VERSION")
    api_platform: str = Field(default="web", alias="API_PLATFORM")

    # Request behaviour
    api_timeout: float = Field(default=30.0, alias="API_TIMEOUT")
    api_retries: int = Field(default=3, alias="API_RETRIES")
    api_cache_timeout: float = Field(default=300.0, alias="API_CACHE_TIMEOUT")

    # Logging
    environment: str = Field(default="production", alias="ENVIRONMENT")
    api_enable_logging: bool | None = Field(default=None, alias="API_ENABLE_LOGGING")

    @property
    def enable_logging(self) -> bool:
        """Explicit flag wins, otherwise log only in development."""
        if self.api_enable_logging is not None:
            return self.api_enable_logging
        return self.environment == "development"


def load_settings() -> Settings:
    """Build settings from the process environment (and .env)."""
    try:
        return Settings.model_validate(dict(os.environ))
    except ValidationError as e:
        logger.warning(f"Invalid API client environment, using defaults: {e}")
        return Settings()


global_settings = load_settings()
