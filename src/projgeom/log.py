## logging setup for projgeom

"""projgeom logging.

Every module logs through :func:`get_logger`, which hands out loggers
below the ``projgeom`` root.  The root gets its handlers the first time a
logger is requested; nothing is printed directly.

Environment variables:
    PROJGEOM_LOG_LEVEL  DEBUG / INFO / WARNING (default) / ERROR
    PROJGEOM_LOG_FILE   optional path; log lines are appended to it
"""

import logging
import os
import sys
from functools import lru_cache

PROJGEOM_LOG_LEVEL = "PROJGEOM_LOG_LEVEL"
PROJGEOM_LOG_FILE = "PROJGEOM_LOG_FILE"

ROOT_NAME = "projgeom"
DEFAULT_LEVEL = "WARNING"

_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
_RESET = "\033[0m"


class _ColorFormatter(logging.Formatter):
    """Colours the level name of records written to a terminal."""

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        ## copy so other handlers see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = color + record.levelname + _RESET
        return super().format(record)


def _parse_level(level):
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError('bad log level: {}'.format(level))
    return value


def _level_from_env() -> int:
    try:
        return _parse_level(os.environ.get(PROJGEOM_LOG_LEVEL, DEFAULT_LEVEL))
    except ValueError:
        return logging.WARNING


@lru_cache(maxsize=1)
def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_NAME)
    root.setLevel(_level_from_env())

    fmt = "%(levelname)s %(name)s: %(message)s"
    console = logging.StreamHandler(sys.stderr)
    if hasattr(sys.stderr, "isatty") and sys.stderr.isatty():
        console.setFormatter(_ColorFormatter(fmt))
    else:
        console.setFormatter(logging.Formatter(fmt))
    root.addHandler(console)

    log_file = os.environ.get(PROJGEOM_LOG_FILE)
    if log_file:
        fh = logging.FileHandler(log_file, mode="a")
        fh.setFormatter(logging.Formatter("%(asctime)s " + fmt))
        root.addHandler(fh)
    return root


def set_level(level) -> None:
    """Set the level of every projgeom logger.

    ``level`` is a logging constant or a level name such as ``"debug"``;
    an unknown name raises ValueError.
    """
    _root_logger().setLevel(_parse_level(level))


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``projgeom`` root.

    Args:
        name: usually ``__name__`` of the calling module; a leading
              ``projgeom.`` is not repeated.
    """
    _root_logger()
    if name == ROOT_NAME or name.startswith(ROOT_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger("{}.{}".format(ROOT_NAME, name))
