"""
Tests cho WatchSettings dataclass va load_watch_settings().

Coverage:
- Default values, validation trong constructor
- from_dict() voi fields hop le, sai type, ngoai range, extra keys
- to_dict() roundtrip
- Overrides tu environment variables
"""

import pytest

from filewatch.config.paths import BUFFER_SIZE_ENV_VAR, CANCEL_RETRY_ENV_VAR
from filewatch.config.watch_settings import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_CANCEL_RETRY_INTERVAL,
    WatchSettings,
    load_watch_settings,
)


class TestWatchSettings:
    """Test WatchSettings creation va validation."""

    def test_default_values(self):
        settings = WatchSettings()
        assert settings.buffer_size == DEFAULT_BUFFER_SIZE == 256 * 1024
        assert settings.cancel_retry_interval == DEFAULT_CANCEL_RETRY_INTERVAL
        assert settings.thread_name_prefix == "filewatch"

    def test_buffer_too_small_rejected(self):
        with pytest.raises(ValueError):
            WatchSettings(buffer_size=64)

    def test_non_positive_retry_interval_rejected(self):
        with pytest.raises(ValueError):
            WatchSettings(cancel_retry_interval=0)

    def test_from_dict_full(self):
        settings = WatchSettings.from_dict(
            {
                "buffer_size": 8192,
                "cancel_retry_interval": 0.2,
                "thread_name_prefix": "hot-reload",
            }
        )
        assert settings.buffer_size == 8192
        assert settings.cancel_retry_interval == 0.2
        assert settings.thread_name_prefix == "hot-reload"

    def test_from_dict_wrong_types_fall_back_to_defaults(self):
        settings = WatchSettings.from_dict(
            {"buffer_size": "big", "cancel_retry_interval": True, "thread_name_prefix": 7}
        )
        assert settings == WatchSettings()

    def test_from_dict_out_of_range_falls_back(self):
        settings = WatchSettings.from_dict({"buffer_size": 10, "cancel_retry_interval": 0.5})
        assert settings.buffer_size == DEFAULT_BUFFER_SIZE
        assert settings.cancel_retry_interval == 0.5

    def test_from_dict_accepts_int_for_float(self):
        assert WatchSettings.from_dict({"cancel_retry_interval": 1}).cancel_retry_interval == 1.0

    def test_from_dict_ignores_unknown_keys(self):
        assert WatchSettings.from_dict({"recursive": True}) == WatchSettings()

    def test_to_dict_roundtrip(self):
        settings = WatchSettings(buffer_size=65536, thread_name_prefix="w")
        assert WatchSettings.from_dict(settings.to_dict()) == settings


class TestLoadWatchSettings:
    """Test doc overrides tu environment."""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv(BUFFER_SIZE_ENV_VAR, "16384")
        monkeypatch.setenv(CANCEL_RETRY_ENV_VAR, "0.25")

        settings = load_watch_settings()

        assert settings.buffer_size == 16384
        assert settings.cancel_retry_interval == 0.25

    def test_invalid_env_values_ignored(self, monkeypatch):
        monkeypatch.setenv(BUFFER_SIZE_ENV_VAR, "lots")
        monkeypatch.setenv(CANCEL_RETRY_ENV_VAR, "-1")

        assert load_watch_settings() == WatchSettings()

    def test_environment_can_be_skipped(self, monkeypatch):
        monkeypatch.setenv(BUFFER_SIZE_ENV_VAR, "16384")
        assert load_watch_settings(environ_overrides=False) == WatchSettings()
