"""Logging helpers for host processes.

The library modules only create module-level loggers; configuring handlers
is left to whoever embeds the client, typically once at startup with
``configure_logging()`` so that ``SVC_CLIENT_LOG_LEVEL`` applies.
"""

from __future__ import annotations

import logging

from core.config import ClientSettings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int | None = None, *, settings: ClientSettings | None = None) -> int:
    """Apply the default console format and return the numeric level.

    Without ``level`` the value comes from ``settings.log_level``.
    """

    if level is None:
        level = (settings or ClientSettings()).log_level

    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    return level
