from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class AuthSettings(BaseSettings):
    """Single shared account and JWT signing parameters."""
    JWT_SECRET: str = ""
    JWT_EXPIRES_IN: str = "24h"
    JWT_ALGORITHM: str = "HS256"
    AUTH_USERNAME: str = ""
    AUTH_PASSWORD: str = ""

    model_config = ConfigDict(env_file=".env", extra="ignore")


def get_auth_settings() -> AuthSettings:
    """Return a fresh auth settings instance."""
    return AuthSettings()
