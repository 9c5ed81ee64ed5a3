"""Logging setup for the filecollector CLI.

Library modules only create module loggers; handlers are installed here when
the command-line entry point runs. Output always goes to stderr so tree and
file listings on stdout stay machine-readable.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "FILECOLLECTOR_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_log_level(log_level: str | None = None) -> int:
    """Resolve a level from the argument, then the environment, then the default."""
    level_str = log_level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL
    level = logging.getLevelName(level_str.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(log_level: str | None = None) -> None:
    """Install a single stderr handler on the package logger."""
    level = resolve_log_level(log_level)
    package_logger = logging.getLogger("filecollector")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False


__all__ = [
    "LOG_LEVEL_ENV",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "resolve_log_level",
    "configure_logging",
]
