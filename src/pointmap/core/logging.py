"""
Logging setup for the API and CLI entrypoints.

The packaged `logging.yaml` supplies handlers and format; `app.log_level` (or
`POINTMAP_LOG_LEVEL`) decides the level. Library modules only call
`logging.getLogger(__name__)`; the core never logs.
"""

from __future__ import annotations

import copy
import logging.config

from pointmap.config.settings import get_logging_config, get_settings


def configure_logging(level: str | None = None) -> dict:
    """Apply the packaged dictConfig at `level` (default: `app.log_level`) and return it."""
    # get_logging_config() is cached; work on a copy.
    config = copy.deepcopy(get_logging_config())
    level = (level or get_settings().app.log_level).upper()

    config.setdefault("root", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level

    logging.config.dictConfig(config)
    return config
