"""Logging setup for the tre command line."""

from __future__ import annotations

import argparse
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

LEVEL_NAMES = ("debug", "info", "warning", "error", "critical")

# Indexed by quiet - verbose, clamped: -v is DEBUG, -q WARNING, -qq ERROR.
_VERBOSITY_LADDER = (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR)

# Pillow logs every PNG chunk at DEBUG, which drowns out pipeline output.
NOISY_LIBRARY_LOGGERS = ("PIL",)


def add_logging_args(parser: argparse.ArgumentParser) -> None:
    """Add --log-level, -v and -q to the top-level parser."""
    group = parser.add_argument_group("logging")
    group.add_argument(
        "--log-level",
        choices=LEVEL_NAMES,
        help="Explicit log level, overrides -v and -q",
    )
    group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Show per-stage debug output",
    )
    group.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Only warnings (-q) or errors (-qq)",
    )


def resolve_log_level(log_level: str | None = None, verbose: int = 0, quiet: int = 0) -> int:
    if log_level:
        return getattr(logging, log_level.upper())
    step = min(max(quiet - verbose + 1, 0), len(_VERBOSITY_LADDER) - 1)
    return _VERBOSITY_LADDER[step]


def configure_logging(log_level: str | None = None, verbose: int = 0, quiet: int = 0) -> int:
    """Route log records to stdout at the resolved level and return it.

    Calling this again (as tests do through tre.main) only adjusts levels on
    the existing handlers.
    """
    level = resolve_log_level(log_level, verbose, quiet)

    for name in NOISY_LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, stream=sys.stdout)
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)
    return level
