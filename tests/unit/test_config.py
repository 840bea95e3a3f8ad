"""Tests for configuration validation"""
import pytest

from rewards_engine import config
from rewards_engine.exceptions import ConfigurationError


class TestConfigValidation:
    """Test validate_config against module-level settings"""

    def test_defaults_are_valid(self):
        """Test shipped defaults pass validation"""
        config.validate_config()

    def test_missing_database_url(self, monkeypatch):
        monkeypatch.setattr(config, "DATABASE_URL", "")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "DATABASE_URL"

    def test_non_positive_decay_window(self, monkeypatch):
        monkeypatch.setattr(config, "STREAK_DECAY_HOURS", 0)

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "STREAK_DECAY_HOURS"

    def test_invalid_pool_range(self, monkeypatch):
        monkeypatch.setattr(config, "DB_POOL_MIN_SIZE", 5)
        monkeypatch.setattr(config, "DB_POOL_MAX_SIZE", 2)

        with pytest.raises(ConfigurationError):
            config.validate_config()
