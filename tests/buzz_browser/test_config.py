from __future__ import annotations

import json
import logging

import pytest
from pythonjsonlogger import jsonlogger

from buzz_browser.config import (
    ENV_DEBOUNCE_MS,
    ENV_LOG_FORMAT,
    ENV_LOG_LEVEL,
    ENV_STORAGE_KEY,
    ENV_STORAGE_ROOT,
    Settings,
    load_settings,
)
from buzz_browser.core.exceptions import ConfigError
from buzz_browser.logging_config import configure_logging


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for name in (ENV_STORAGE_ROOT, ENV_STORAGE_KEY, ENV_DEBOUNCE_MS, ENV_LOG_FORMAT, ENV_LOG_LEVEL):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_file():
    settings = load_settings()
    assert settings == Settings()
    assert settings.debounce_ms == 300
    assert settings.storage_key == "sns-dashboard-storage"


def test_file_values_then_env_overrides(tmp_path, monkeypatch):
    cfg = tmp_path / "settings.json"
    cfg.write_text(json.dumps({"storage_root": str(tmp_path / "a"), "debounce_ms": 150}))

    settings = load_settings(cfg)
    assert settings.storage_root == tmp_path / "a"
    assert settings.debounce_ms == 150

    monkeypatch.setenv(ENV_DEBOUNCE_MS, "50")
    monkeypatch.setenv(ENV_STORAGE_ROOT, str(tmp_path / "b"))
    monkeypatch.setenv(ENV_STORAGE_KEY, "other-key")
    settings = load_settings(cfg)
    assert settings.debounce_ms == 50
    assert settings.storage_root == tmp_path / "b"
    assert settings.storage_key == "other-key"


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps([1]),
        json.dumps({"debounce_ms": "soon"}),
        json.dumps({"debounce_ms": -1}),
        json.dumps({"storage_root": 5}),
        json.dumps({"storage_root": None}),
        json.dumps({"storage_key": ["a"]}),
        json.dumps({"log_format": "xml"}),
        json.dumps({"log_level": "LOUD"}),
    ],
)
def test_invalid_config_raises(tmp_path, content):
    cfg = tmp_path / "settings.json"
    cfg.write_text(content)
    with pytest.raises(ConfigError):
        load_settings(cfg)


def test_missing_config_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "nope.json")


def test_configure_logging_replaces_handlers():
    root = logging.getLogger()
    saved = (root.level, list(root.handlers))
    try:
        configure_logging(force_format="plain")
        configure_logging(level=logging.DEBUG, force_format="json")
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved[1]
        root.setLevel(saved[0])


def test_log_settings_from_file_then_env(tmp_path, monkeypatch):
    cfg = tmp_path / "settings.json"
    cfg.write_text(json.dumps({"log_format": "PLAIN", "log_level": "debug"}))

    settings = load_settings(cfg)
    assert settings.log_format == "plain"
    assert settings.log_level == logging.DEBUG

    monkeypatch.setenv(ENV_LOG_FORMAT, "json")
    monkeypatch.setenv(ENV_LOG_LEVEL, "WARNING")
    settings = load_settings(cfg)
    assert settings.log_format == "json"
    assert settings.log_level == logging.WARNING


def test_bad_log_format_in_env_raises(monkeypatch):
    monkeypatch.setenv(ENV_LOG_FORMAT, "yaml")
    with pytest.raises(ConfigError):
        load_settings()


def test_configure_logging_follows_settings():
    root = logging.getLogger()
    saved = (root.level, list(root.handlers))
    try:
        handler = configure_logging(Settings(log_format="plain", log_level=logging.WARNING))
        assert root.handlers == [handler]
        assert root.level == logging.WARNING
        assert not isinstance(handler.formatter, jsonlogger.JsonFormatter)

        handler = configure_logging(Settings(log_format="plain"), force_format="json")
        assert isinstance(handler.formatter, jsonlogger.JsonFormatter)
        assert root.level == logging.INFO
    finally:
        root.handlers[:] = saved[1]
        root.setLevel(saved[0])
