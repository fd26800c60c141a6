"""Tests for logger business rules and service settings."""

import pytest

from blob_upload.core.logger import BusinessRulesProcessor, LogIcon, LoggerConfig, LoggerError, LogLevel
from blob_upload.core.settings import Settings


class TestBusinessRulesProcessor:
    """Tests for the log event business rules."""

    def test_icon_prepended_in_debug(self) -> None:
        event = BusinessRulesProcessor(debug=True)(None, "info", {"event": "stored", "icon": LogIcon.UPLOAD})
        assert event["event"] == f"{LogIcon.UPLOAD.value} STORED"

    def test_icon_dropped_outside_debug(self) -> None:
        event = BusinessRulesProcessor(debug=False)(None, "info", {"event": "stored", "icon": LogIcon.FILE})
        assert event == {"event": "STORED"}

    @pytest.mark.parametrize("icon", ["🔍", "⬇️", "ℹ️"])
    def test_unknown_icon_rejected(self, icon: str) -> None:
        with pytest.raises(LoggerError):
            BusinessRulesProcessor(debug=True)(None, "info", {"event": "x", "icon": icon})

    def test_icon_set(self) -> None:
        assert {icon.name for icon in LogIcon} == {
            "DEFAULT",
            "SUCCESS",
            "ERROR",
            "WARNING",
            "START",
            "PROCESSING",
            "COMPLETE",
            "TOOL",
            "ADAPTER",
            "NETWORK",
            "HEALTHCHECK",
            "IMAGE",
            "FILE",
            "UPLOAD",
        }

    def test_default_level(self) -> None:
        assert [level.value for level in LogLevel] == ["INFO"]
        assert LoggerConfig().log_level is LogLevel.INFO


class TestSettings:
    """Tests for the service settings."""

    def test_upload_defaults(self) -> None:
        config = Settings()

        assert config.UPLOAD_ENDPOINT == "/upload"
        assert config.UPLOAD_FIELD == "myFile"
        assert config.MAX_UPLOAD_SIZE is None

    def test_no_derived_api_url(self) -> None:
        assert "api_url" not in Settings.model_fields
        assert not hasattr(Settings(), "api_url")

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("UPLOAD_ENDPOINT", "/files")
        monkeypatch.setenv("MAX_UPLOAD_SIZE", "1024")

        config = Settings()

        assert config.UPLOAD_ENDPOINT == "/files"
        assert config.MAX_UPLOAD_SIZE == 1024
