"""Tests for environment-driven settings."""

from datetime import timedelta

import pytest

from ldms.domain.exceptions import ValidationError
from ldms.infrastructure.config import DEFAULT_DATABASE_URL, Settings


class TestSettingsFromEnv:

    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.database_url == DEFAULT_DATABASE_URL
        assert settings.deal_window == timedelta(hours=12)
        assert settings.store_timeout == 5.0
        assert settings.log_level == "WARNING"

    def test_overrides(self):
        settings = Settings.from_env(
            {
                "LDMS_DATABASE_URL": "sqlite:////tmp/other.db",
                "LDMS_DEAL_WINDOW_HOURS": "1.5",
                "LDMS_STORE_TIMEOUT_SECONDS": "0.25",
                "LDMS_LOG_LEVEL": "debug",
            }
        )

        assert settings.database_url == "sqlite:////tmp/other.db"
        assert settings.deal_window == timedelta(minutes=90)
        assert settings.store_timeout == 0.25
        assert settings.log_level == "DEBUG"

    def test_blank_values_fall_back_to_defaults(self):
        settings = Settings.from_env({"LDMS_DEAL_WINDOW_HOURS": " ", "LDMS_DATABASE_URL": ""})
        assert settings.deal_window == timedelta(hours=12)
        assert settings.database_url == DEFAULT_DATABASE_URL

    def test_non_numeric_window(self):
        with pytest.raises(ValidationError, match="LDMS_DEAL_WINDOW_HOURS"):
            Settings.from_env({"LDMS_DEAL_WINDOW_HOURS": "soon"})

    @pytest.mark.parametrize("raw", ["0", "-2", "nan"])
    def test_non_positive_timeout(self, raw):
        with pytest.raises(ValidationError, match="must be positive"):
            Settings.from_env({"LDMS_STORE_TIMEOUT_SECONDS": raw})

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError, match="LDMS_LOG_LEVEL"):
            Settings.from_env({"LDMS_LOG_LEVEL": "chatty"})
