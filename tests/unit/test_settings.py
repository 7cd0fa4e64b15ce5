"""Unit tests for ResponderSettings."""

import pytest
from pydantic import ValidationError

from envelope_assertions.config.settings import ResponderSettings, get_settings


class TestResponderSettings:
    def test_defaults_are_correct(self):
        settings = ResponderSettings()

        assert settings.include_status_code is True
        assert settings.max_data_depth == 32
        assert settings.log_level == "INFO"

    def test_env_prefix_is_responder(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("RESPONDER_INCLUDE_STATUS_CODE", "false")
        monkeypatch.setenv("RESPONDER_MAX_DATA_DEPTH", "8")

        settings = ResponderSettings()
        assert settings.include_status_code is False
        assert settings.max_data_depth == 8

    @pytest.mark.parametrize("depth", ["0", "2000"])
    def test_depth_bounds(self, monkeypatch: pytest.MonkeyPatch, depth: str):
        monkeypatch.setenv("RESPONDER_MAX_DATA_DEPTH", depth)
        with pytest.raises(ValidationError):
            ResponderSettings()


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_cache_clear_reloads(self, monkeypatch: pytest.MonkeyPatch):
        first = get_settings()
        monkeypatch.setenv("RESPONDER_LOG_LEVEL", "DEBUG")
        get_settings.cache_clear()

        second = get_settings()
        assert second is not first
        assert second.log_level == "DEBUG"
