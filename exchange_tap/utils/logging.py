# COMPONENT: CENTRALIZED LOGGING CONFIGURATION
# REQUIREMENTS SATISFIED: environment-controlled verbosity, injectable line logger
"""
exchange_tap/utils/logging.py

Provides the shared logging setup for exchange_tap and the adapter that turns
a ``logging.Logger`` into the ``(*values)`` logger capability expected by the
request logger middleware.

Environment Variables:
    LOG_LEVEL:
        0 → Silent (no logs emitted)
        1 → INFO level logging (default)
        2 → DEBUG level logging

    LOG_FILE:
        Optional path to a log file, opened for appending. If it cannot be
        opened, logs go to standard output instead.

The shared logger is configured once, when this module is imported. It does
not propagate to the root logger. Each call of a line logger produces exactly
one log record, so lines from overlapping exchanges never mix.
"""
import os
import sys
import json
import logging
from typing import Any, Callable

LOGGER_NAME = "exchange_tap"

_LEVELS = {0: logging.CRITICAL + 1, 1: logging.INFO, 2: logging.DEBUG}


def setup_logger():
    """
    (Re)configure the "exchange_tap" logger from LOG_LEVEL and LOG_FILE.
    Unparseable levels silence it; levels above 2 mean DEBUG.
    """
    try:
        verbosity = int(os.environ.get("LOG_LEVEL", "1"))
    except ValueError:
        verbosity = 0
    verbosity = max(0, min(verbosity, 2))

    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False
    logger.setLevel(_LEVELS[verbosity])

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    if verbosity == 0:
        return logger

    log_file = os.environ.get("LOG_FILE")
    handler = logging.StreamHandler(sys.stdout)
    if log_file:
        try:
            handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError:
            pass

    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger


def render_value(value: Any) -> str:
    """
    Render one logged value as text.

    Strings pass through, dicts and lists become compact JSON, and bytes are
    decoded (and re-rendered as JSON when they hold a JSON document).
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value).decode("utf-8", errors="replace")
        try:
            return json.dumps(json.loads(raw), separators=(",", ":"))
        except ValueError:
            return raw
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return repr(value)
    return str(value)


def make_line_logger(logger: logging.Logger, level: int = logging.INFO) -> Callable[..., None]:
    """
    Adapt ``logger`` into a ``(*values)`` callable that writes the rendered
    values, space separated, as a single record at ``level``.
    """

    def log_line(*values: Any) -> None:
        if not logger.isEnabledFor(level):
            return
        logger.log(level, " ".join(render_value(v) for v in values))

    return log_line


# Create a single logger instance that can be imported by other files
logger = setup_logger()
