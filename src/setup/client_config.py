from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """Configuration for the board client."""
    API_BASE_URL: str = "http://localhost:8000"
    CACHE_PATH: str | None = None
    CACHE_TTL_SECONDS: float = 300.0
    RELOAD_DELAY_SECONDS: float = 1.0
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    model_config = ConfigDict(env_file=".env", extra="ignore")


def get_client_settings() -> ClientSettings:
    """Return a fresh client settings instance."""
    return ClientSettings()
