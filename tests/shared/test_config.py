"""Tests for shared/config.py."""

import os
from pathlib import Path
from unittest.mock import patch

from ecobazaar.shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings()
        assert settings.api_base == "http://localhost:8080/api"
        assert settings.request_timeout == 15.0
        assert settings.token_storage_key == "ecobazaar_token"
        assert settings.user_storage_key == "ecobazaar_user"
        assert settings.login_route == "/login"
        assert settings.public_routes == ["/", "/login", "/register"]
        assert settings.wishlist_hydrate_products is True
        assert settings.wishlist_verify_removal is False

    def test_session_file_defaults_to_home(self):
        """The session file should live under the user's home directory."""
        settings = Settings()
        assert settings.session_file == Path.home() / ".ecobazaar" / "session.json"

    def test_loads_from_prefixed_env(self):
        """Settings should load ECOBAZAAR_* environment variables."""
        with patch.dict(os.environ, {
            "ECOBAZAAR_API_BASE": "https://shop.example.com/api",
            "ECOBAZAAR_REQUEST_TIMEOUT": "3.5",
            "ECOBAZAAR_WISHLIST_VERIFY_REMOVAL": "true",
        }):
            settings = Settings()
            assert settings.api_base == "https://shop.example.com/api"
            assert settings.request_timeout == 3.5
            assert settings.wishlist_verify_removal is True

    def test_ignores_unprefixed_env(self):
        """Unprefixed variables should not leak into settings."""
        with patch.dict(os.environ, {"API_BASE": "http://elsewhere"}):
            settings = Settings()
            assert settings.api_base == "http://localhost:8080/api"


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        """get_settings should return a Settings instance."""
        get_settings.cache_clear()
        assert isinstance(get_settings(), Settings)

    def test_get_settings_caches(self):
        """get_settings should return cached instance."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()
