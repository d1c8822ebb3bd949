from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HttpClientSettings(BaseSettings):
    """HTTP adapter settings, read from HTTP_CLIENT_* environment variables"""

    # Transport
    timeout: float = Field(default=100.0, gt=0)
    connect_timeout: float | None = Field(default=None, gt=0)
    user_agent: str | None = None

    # Logging
    service_name: str = "api-interaction"
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(
        env_prefix="HTTP_CLIENT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> HttpClientSettings:
    """Get HTTP adapter settings singleton"""
    return HttpClientSettings()
