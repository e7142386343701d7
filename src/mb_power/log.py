"""Logging configuration for mb-power."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_path: Path, *, debug: bool = False) -> logging.Logger:
    """Configure package logger with a rotating file handler, plus stderr tracing in debug mode.

    Idempotent — skips if handlers are already attached.
    """
    root = logging.getLogger("mb_power")
    if root.handlers:
        return root

    handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    root.addHandler(handler)

    if debug:
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s"))
        root.addHandler(stream)

    root.setLevel(logging.DEBUG)
    return root
