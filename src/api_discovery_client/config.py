"""Runtime configuration sourced from the environment."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DISCOVERY_ROOT = "https://www.googleapis.com/discovery/v1"


class Settings(BaseSettings):
    """Client defaults; every field can be overridden per APIClient."""

    model_config = SettingsConfigDict(env_prefix="DISCOVERY_CLIENT_", extra="ignore")

    discovery_root: str = DEFAULT_DISCOVERY_ROOT
    default_version: str = "v1"
    key: str | None = None  # DISCOVERY_CLIENT_KEY
    user_ip: str | None = None  # DISCOVERY_CLIENT_USER_IP
    timeout: float = 30.0
    user_agent: str = "api-discovery-client/0.1.0"


@lru_cache
def get_settings() -> Settings:
    return Settings()
