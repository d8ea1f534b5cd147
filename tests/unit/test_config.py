"""Unit tests for Settings."""

import pytest

from radar.config import Settings


@pytest.mark.unit
class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "RADAR_HOST", "RADAR_LOG_LEVEL", "RADAR_OUTBOUND_QUEUE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.port == 3000
        assert settings.host == "0.0.0.0"
        assert settings.log_level == "INFO"
        assert settings.outbound_queue_size == 256

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "8123")
        monkeypatch.setenv("RADAR_HOST", "127.0.0.1")
        monkeypatch.setenv("RADAR_OUTBOUND_QUEUE", "8")

        settings = Settings()

        assert settings.port == 8123
        assert settings.host == "127.0.0.1"
        assert settings.outbound_queue_size == 8
