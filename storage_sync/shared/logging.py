"""
Logging setup for hosts embedding the storage sync layer.

The library itself only creates module loggers. A host process (a CLI, a
worker or a test harness) calls ``configure_logging`` once to get the pipe
format on stdout. Request telemetry goes to the ``storage_sync.telemetry``
logger, which can be tuned apart from the rest of the package.

Never logs credentials or response bodies.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

TELEMETRY_LOGGER = "storage_sync.telemetry"

# Transport libraries that log one line per request at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore")


def _as_level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(level: str = "INFO", telemetry_level: Optional[str] = None) -> None:
    """Install the root handler and quiet the HTTP stack.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR).
        telemetry_level: Level for per-request telemetry records. Defaults
            to ``level``; pass WARNING to keep only slow responses and
            failures.
    """
    logging.basicConfig(
        level=_as_level(level),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(TELEMETRY_LOGGER).setLevel(_as_level(telemetry_level or level))
