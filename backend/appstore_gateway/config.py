"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - API_KEY comes from the environment (or .env) and is never hardcoded
    - A missing or blank API_KEY is a ConfigurationError: the process refuses to start
    - Settings are immutable once built; the key is handed to the validator explicitly

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box on port 8081
"""

from functools import lru_cache

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from appstore_gateway.core.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, frozen=True, extra="ignore",
    )

    # Auth
    api_key: str

    @field_validator("api_key")
    @classmethod
    def require_api_key(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("API_KEY must not be empty")
        return v

    # Server
    host: str = "0.0.0.0"
    port: int = 8081

    # Store client
    store_timeout_seconds: float = 30.0
    store_default_country: str = "us"

    # API
    cors_origins: list[str] = []

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


def load_settings(**overrides) -> Settings:
    """Build Settings, turning validation failures into ConfigurationError."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        names = [
            ".".join(str(loc) for loc in err["loc"]).upper() for err in e.errors()
        ]
        if "API_KEY" in names:
            raise ConfigurationError(
                "API_KEY environment variable is not set",
            ) from e
        raise ConfigurationError(
            f"Invalid configuration: {', '.join(names)}",
        ) from e


@lru_cache
def get_settings() -> Settings:
    return load_settings()
