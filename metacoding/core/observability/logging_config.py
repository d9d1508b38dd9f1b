"""
Logging setup for the metacoding CLI.

``setup_logging`` runs once from the click group. Modules log through
``logging.getLogger(__name__)`` and never add handlers of their own.

The console level comes from the first of: ``--debug``, ``--verbose``,
``--quiet``, ``METACODING_LOG_LEVEL``, and finally WARNING. Console
records go to stderr so ``--json`` output on stdout stays parseable.
``METACODING_LOG_FILE`` adds a file sink with full detail, at
``METACODING_LOG_FILE_LEVEL`` when set.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "METACODING_LOG_LEVEL"
LOG_FILE_ENV = "METACODING_LOG_FILE"
LOG_FILE_LEVEL_ENV = "METACODING_LOG_FILE_LEVEL"

_CLOCK = "%H:%M:%S"
_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"

# (upper bound, format, datefmt); first bound >= level wins
_CONSOLE_FORMATS = (
    (logging.DEBUG, _DETAILED, _CLOCK),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", _CLOCK),
    (logging.CRITICAL, "%(levelname)s: %(message)s", None),
)

_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

_LIBRARY_LOGGERS = ("yaml",)


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Console level name for the given flags."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LOG_LEVEL_ENV, "WARNING")


def _console_formatter(level: int) -> logging.Formatter:
    for bound, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= bound:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter(_CONSOLE_FORMATS[-1][1])


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Install the console handler (and optional file handler) on the root logger.

    Any handlers already on the root logger are replaced, so calling
    this twice does not duplicate output. The root level is the lowest
    of the sink levels.
    """
    console_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    levels = [console_level]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(file_level)
        sink.setFormatter(logging.Formatter(_DETAILED, datefmt=_FILE_DATEFMT))
        root.addHandler(sink)
        levels.append(file_level)

    root.setLevel(min(levels))

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _LIBRARY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Numeric level for a name; unknown or empty names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
