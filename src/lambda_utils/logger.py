"""Logging setup for programs built on lambda_utils.

Short-lived programs call :func:`init` (or :func:`set_up_logger`) once at
start-up. Everything is written to stdout, where the hosting platform
collects it, one line per record::

    2024-05-01T12:00:00.123Z [prices.fetch] [INFO] Fetched 42 quotes

Third-party loggers stay at ``WARNING``; the program's own logger, the
module that called the setup, and ``lambda_utils`` itself log at ``INFO``
(or ``DEBUG`` when verbose).
"""

from __future__ import annotations

import logging
import platform
import sys
import time
from typing import Optional, TextIO

_LIBRARY_LOGGER = "lambda_utils"
_HANDLER_NAME = "lambda_utils.handler"

logger = logging.getLogger(__name__)


class UTCFormatter(logging.Formatter):
    """Formatter rendering timestamps as ISO-8601 UTC with milliseconds."""

    converter = time.gmtime

    def __init__(self) -> None:
        super().__init__("%(asctime)s [%(name)s] [%(levelname)s] %(message)s")

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = time.strftime("%Y-%m-%dT%H:%M:%S", self.converter(record.created))
        return f"{stamp}.{int(record.msecs):03d}Z"


def set_up_logger(
    app_name: str,
    calling_module: str,
    verbose: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Route log records to one stream with per-logger levels.

    Safe to call more than once: the handler is replaced rather
    than duplicated.

    Args:
        app_name: Logger name of the host program.
        calling_module: Logger name of the module doing the setup,
            usually ``__name__``.
        verbose: Log at ``DEBUG`` instead of ``INFO``.
        stream: Where to write. Defaults to stdout.
    """
    level = logging.DEBUG if verbose else logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(UTCFormatter())
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    for name in (app_name, _LIBRARY_LOGGER, calling_module):
        logging.getLogger(name).setLevel(level)

    logger.info("python: %s", platform.python_version())


def init(app_name: str, calling_module: str, verbose: bool = False) -> None:
    """Entry-point hook for scheduled functions.

    Currently only configures logging via :func:`set_up_logger`.
    """
    set_up_logger(app_name, calling_module, verbose)
