from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from buzz_browser.core.exceptions import ConfigError
from buzz_browser.core.staging import DEBOUNCE_DELAY_MS
from buzz_browser.services.persistence import STORAGE_KEY

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_ROOT = Path.home() / ".buzz_browser"
LOG_FORMATS = ("json", "plain")

ENV_STORAGE_ROOT = "BUZZ_BROWSER_STORAGE_ROOT"
ENV_STORAGE_KEY = "BUZZ_BROWSER_STORAGE_KEY"
ENV_DEBOUNCE_MS = "BUZZ_BROWSER_DEBOUNCE_MS"
ENV_LOG_FORMAT = "BUZZ_BROWSER_LOG_FORMAT"
ENV_LOG_LEVEL = "BUZZ_BROWSER_LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings.

    - storage_root: directory holding the persisted snapshot
    - storage_key: file name of the snapshot inside storage_root
    - debounce_ms: quiescence window before a staged draft is committed
    - log_format: "json" (default) or "plain"
    - log_level: numeric logging level for the root logger
    """
    storage_root: Path = DEFAULT_STORAGE_ROOT
    storage_key: str = STORAGE_KEY
    debounce_ms: float = DEBOUNCE_DELAY_MS
    log_format: str = "json"
    log_level: int = logging.INFO


def _parse_debounce(value: Any, source: str) -> float:
    try:
        ms = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{source}: debounce_ms must be a number, got {value!r}") from None
    if ms < 0:
        raise ConfigError(f"{source}: debounce_ms must be >= 0, got {ms}")
    return ms


def _parse_str(value: Any, name: str, source: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{source}: {name} must be a string, got {value!r}")
    return value


def _parse_log_format(value: Any, source: str) -> str:
    fmt = _parse_str(value, "log_format", source).lower()
    if fmt not in LOG_FORMATS:
        raise ConfigError(f"{source}: log_format must be one of {LOG_FORMATS}, got {value!r}")
    return fmt


def _parse_log_level(value: Any, source: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise ConfigError(f"{source}: unknown log_level {value!r}")
    return level


def load_settings(config_path: Optional[str | Path] = None) -> Settings:
    """
    Build Settings from an optional JSON file, then apply env overrides.

    Selection Order (last wins):
        1) defaults
        2) JSON file {"storage_root", "storage_key", "debounce_ms", "log_format", "log_level"}
        3) BUZZ_BROWSER_* environment variables
    """
    raw: Dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        try:
            raw = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {config_path}") from None
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config file {config_path} is not valid JSON: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")
        logger.info("Loaded settings from %s", config_path)

    storage_root = Path(_parse_str(raw.get("storage_root", str(DEFAULT_STORAGE_ROOT)), "storage_root", "config"))
    storage_key = _parse_str(raw.get("storage_key", STORAGE_KEY), "storage_key", "config")
    debounce_ms = _parse_debounce(raw.get("debounce_ms", DEBOUNCE_DELAY_MS), "config")
    log_format = _parse_log_format(raw.get("log_format", "json"), "config")
    log_level = _parse_log_level(raw.get("log_level", logging.INFO), "config")

    if os.getenv(ENV_STORAGE_ROOT):
        storage_root = Path(os.environ[ENV_STORAGE_ROOT])
    if os.getenv(ENV_STORAGE_KEY):
        storage_key = os.environ[ENV_STORAGE_KEY]
    if os.getenv(ENV_DEBOUNCE_MS):
        debounce_ms = _parse_debounce(os.environ[ENV_DEBOUNCE_MS], ENV_DEBOUNCE_MS)
    if os.getenv(ENV_LOG_FORMAT):
        log_format = _parse_log_format(os.environ[ENV_LOG_FORMAT], ENV_LOG_FORMAT)
    if os.getenv(ENV_LOG_LEVEL):
        log_level = _parse_log_level(os.environ[ENV_LOG_LEVEL], ENV_LOG_LEVEL)

    if not storage_key.strip():
        raise ConfigError("storage_key must not be empty")

    return Settings(
        storage_root=storage_root.expanduser(),
        storage_key=storage_key,
        debounce_ms=debounce_ms,
        log_format=log_format,
        log_level=log_level,
    )
