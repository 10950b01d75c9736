from __future__ import annotations

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger

from buzz_browser.config import Settings

JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"
PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _build_formatter(format_mode: str) -> logging.Formatter:
    if format_mode == "plain":
        return logging.Formatter(PLAIN_FORMAT)
    return jsonlogger.JsonFormatter(JSON_FIELDS)


def configure_logging(
        settings: Optional[Settings] = None,
        *,
        level: Optional[int] = None,
        force_format: Optional[str] = None,
) -> logging.Handler:
    """
    Point the root logger at a single stderr handler.

    Format and level come from `settings` (see load_settings for the
    BUZZ_BROWSER_LOG_FORMAT / BUZZ_BROWSER_LOG_LEVEL overrides);
    `force_format` and `level` win over both.

    Returns the installed handler.
    """
    settings = settings or Settings()
    format_mode = (force_format or settings.log_format).lower()

    root = logging.getLogger()
    root.setLevel(settings.log_level if level is None else level)

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(format_mode))

    # Replace any existing handlers to avoid duplicate logs
    root.handlers.clear()
    root.addHandler(handler)
    return handler
