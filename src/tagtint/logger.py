"""Logging for tagtint with semantic verbosity levels."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

# Custom levels between the standard ones
CHANGES_LEVEL = 25  # verbosity 1: palette swaps, remapped overrides, new tags
CHECKS_LEVEL = 15  # verbosity 2: per-tag resolution details

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0
VERBOSITY_CHANGES = 1
VERBOSITY_CHECKS = 2
VERBOSITY_DEBUG = 3

_LEVELS = {
    VERBOSITY_SILENT: logging.ERROR,
    VERBOSITY_CHANGES: CHANGES_LEVEL,
    VERBOSITY_CHECKS: CHECKS_LEVEL,
    VERBOSITY_DEBUG: logging.DEBUG,
}


class TagTintLogger(logging.Logger):
    """Logger with methods named after the verbosity they belong to.

    - changes(): level 1, anything that alters persisted state
    - checks(): level 2, how individual tags and palettes were resolved
    - debug(): level 3, everything else
    """

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log at verbosity level 1."""
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log at verbosity level 2."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> TagTintLogger:
    """Return the shared tagtint logger.

    setup_logger() configures it; until then only errors get through.
    """
    logging.setLoggerClass(TagTintLogger)
    logger = logging.getLogger("tagtint")
    assert isinstance(logger, TagTintLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the logger for a verbosity level (0-3).

    Args:
        verbosity: 0=errors only, 1=changes, 2=checks, 3=debug
        stream: Output stream, defaults to sys.stderr
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_LEVELS.get(verbosity, logging.ERROR))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and go back to errors-only."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)


def checks_enabled() -> bool:
    """True when per-tag resolution details will be printed."""
    return get_logger().isEnabledFor(CHECKS_LEVEL)
