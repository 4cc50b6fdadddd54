"""
Centralized configuration for the EcoBazaar storefront client.

All settings are loaded from environment variables with sensible defaults.
Variables are namespaced with the ECOBAZAAR_ prefix (e.g., ECOBAZAAR_API_BASE).
"""

from functools import lru_cache
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_session_file() -> Path:
    return Path.home() / ".ecobazaar" / "session.json"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ECOBAZAAR_",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend
    api_base: str = "http://localhost:8080/api"
    request_timeout: float = 15.0  # seconds
    network_retries: int = 1  # extra attempts for GET on transport failure

    # Persisted session layout
    token_storage_key: str = "ecobazaar_token"
    user_storage_key: str = "ecobazaar_user"
    session_file: Path = Field(default_factory=_default_session_file)

    # Navigation
    login_route: str = "/login"
    public_routes: list[str] = ["/", "/login", "/register"]

    # Wishlist behaviour
    wishlist_hydrate_products: bool = True
    wishlist_verify_removal: bool = False
    wishlist_trace_size: int = 50

    # Logging
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
