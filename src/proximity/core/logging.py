"""
Logging configuration.

Packaged YAML config (`src/proximity/config/logging.yaml`) with the level taken
from, in order: the explicit `level` argument (CLI `--log-level`), then settings
(`app.log_level` / `PROXIMITY_LOG_LEVEL`).
"""

from __future__ import annotations

import copy
import logging.config

from proximity.config.settings import get_logging_config, get_settings


def configure_logging(level: str | None = None) -> None:
    """Apply the packaged logging config with the resolved level."""
    config = copy.deepcopy(get_logging_config())
    level = (level or get_settings().app.log_level).upper()

    config.setdefault("root", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level

    logging.config.dictConfig(config)
