"""Logging for the finance dashboard.

``app.py`` and ``seed_db.py`` call ``configure_logging()``; the other
modules only ask for ``get_logger("finance_dashboard.<module>")``.
"""

from __future__ import annotations

import logging
import os

ROOT_LOGGER = "finance_dashboard"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_configured = False


def resolve_level(level: int | str | None = None) -> int:
    """``level`` if usable, else ``FINANCE_DASHBOARD_LOG_LEVEL``, else INFO."""
    for candidate in (level, os.getenv("FINANCE_DASHBOARD_LOG_LEVEL")):
        if isinstance(candidate, int):
            return candidate
        if isinstance(candidate, str) and candidate.strip():
            name = candidate.strip().upper()
            if name.isdigit():
                return int(name)
            value = logging.getLevelName(name)
            if isinstance(value, int):
                return value
    return logging.INFO


def configure_logging(level: int | str | None = None) -> None:
    # Streamlit reruns the whole script on each interaction.
    global _configured
    if _configured:
        return

    root = logging.getLogger(ROOT_LOGGER)
    root.handlers = [h for h in root.handlers if not isinstance(h, logging.NullHandler)]

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(resolve_level(level))
    root.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not _configured and not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)
