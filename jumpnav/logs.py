"""Logging setup for the ``jumpnav`` logger hierarchy.

Logging is off by default. ``JUMPNAV_LOG_LEVEL`` (or ``options.log_level``)
enables a file handler under the user state directory.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from platformdirs import user_state_dir

APP_NAME = "jumpnav"
LOG_PATH = Path(user_state_dir(APP_NAME, appauthor=False)) / "jumpnav.log"
ENV_LEVEL = "JUMPNAV_LOG_LEVEL"
TRACE = 5

LOG_LEVELS: dict[str, int] = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}
LOG_FORMAT = "[%(levelname)-5s %(asctime)s] %(module)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%H:%M:%S"

logging.addLevelName(TRACE, "TRACE")
_ROOT = logging.getLogger(APP_NAME)
_ROOT.addHandler(logging.NullHandler())
_ROOT.propagate = False
_file_handler: logging.Handler | None = None


def resolve_level(configured: str | None = None) -> str:
    """Pick the effective level name: environment first, then config."""
    level = os.environ.get(ENV_LEVEL) or configured or "off"
    level = level.strip().lower()
    return level if level in LOG_LEVELS or level == "off" else "off"


def configure(configured: str | None = None, path: Path | None = None) -> str:
    """(Re)attach the file handler for the resolved level and return its name."""
    global _file_handler

    level = resolve_level(configured)
    if _file_handler is not None:
        _ROOT.removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None

    if level == "off":
        _ROOT.setLevel(logging.CRITICAL + 1)
        return level

    target = path if path is not None else LOG_PATH
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(target, encoding="utf-8")
    except OSError:
        _ROOT.setLevel(logging.CRITICAL + 1)
        return "off"
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    _ROOT.addHandler(handler)
    _ROOT.setLevel(LOG_LEVELS[level])
    _file_handler = handler
    return level


def trace(logger: logging.Logger, msg: str, *args: object) -> None:
    """Log at the custom TRACE level."""
    if logger.isEnabledFor(TRACE):
        logger.log(TRACE, msg, *args, stacklevel=2)
