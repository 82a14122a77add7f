"""Unit tests for configuration and settings."""
import pytest
from pydantic import ValidationError

from hotel_booking.config import Settings, get_settings, reset_settings_cache


class TestSettings:
    """Test configuration management."""

    def test_get_settings_returns_same_instance(self):
        """Test that get_settings returns cached instance."""
        assert get_settings() is get_settings()

    def test_reset_settings_cache(self):
        """Test that cache can be reset."""
        settings1 = get_settings()
        reset_settings_cache()
        settings2 = get_settings()

        assert settings1 is not settings2

    def test_environment_overrides(self):
        """The test suite configures the database and limits through the environment."""
        settings = get_settings()

        assert settings.database_url.startswith("sqlite")
        assert settings.rate_limiting_enabled is False
        assert settings.service_api_key == "test-service-key"

    def test_seed_defaults(self, monkeypatch):
        monkeypatch.delenv("SEED_HOTEL_COUNT", raising=False)
        monkeypatch.delenv("SEED_RANDOM_SEED", raising=False)
        settings = Settings(_env_file=None)

        assert settings.seed_hotel_count == 50
        assert settings.seed_random_seed is None

    def test_store_backend_from_env(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "memory")

        assert Settings(_env_file=None).store_backend == "memory"

    def test_unknown_store_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "redis")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_cors_origins_configuration(self):
        settings = get_settings()

        assert isinstance(settings.cors_origins, list)
        assert len(settings.cors_origins) > 0
