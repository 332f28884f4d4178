"""Unit tests for infrastructure settings."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import DomainEventsSettings, Settings


class TestDomainEventsSettings:
    """Tests for broker growth thresholds."""

    def test_default_thresholds(self):
        """Should have sensible defaults."""
        settings = DomainEventsSettings()
        assert settings.pending_aggregates_warning_threshold == 1000
        assert settings.pending_events_warning_threshold == 1000

    def test_thresholds_from_environment(self, monkeypatch):
        """Should read thresholds from prefixed environment variables."""
        monkeypatch.setenv("DOMAIN_KERNEL_EVENTS_PENDING_AGGREGATES_WARNING_THRESHOLD", "5")
        monkeypatch.setenv("DOMAIN_KERNEL_EVENTS_PENDING_EVENTS_WARNING_THRESHOLD", "7")

        settings = DomainEventsSettings()

        assert settings.pending_aggregates_warning_threshold == 5
        assert settings.pending_events_warning_threshold == 7

    def test_thresholds_must_be_positive(self):
        """Thresholds must be >= 1."""
        with pytest.raises(ValidationError):
            DomainEventsSettings(pending_aggregates_warning_threshold=0)

        with pytest.raises(ValidationError):
            DomainEventsSettings(pending_events_warning_threshold=-1)


class TestSettings:
    """Tests for application settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.app_name == "domain-kernel"
        assert settings.debug is False
        assert settings.log_level == "INFO"

    def test_log_level_is_normalized(self):
        """Should accept any casing and surrounding whitespace."""
        assert Settings(log_level=" debug ").log_level == "DEBUG"

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(log_level="verbose")

        assert "log_level" in str(exc_info.value)

    def test_exposes_events_settings(self):
        assert isinstance(Settings().events, DomainEventsSettings)
