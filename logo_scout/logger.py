# === FILE: logo_scout/logger.py ===
"""Logging for LogoScout.

All modules log under the ``LogoScout`` logger: the top-level code through
:data:`logger`, the pipeline stages through children from :func:`get_logger`
(``LogoScout.static``, ``LogoScout.scheduler``, ...). Per-site failures are
DEBUG, run progress and the summary are INFO.

The CLI calls :func:`init_logging` once with the ``--log-*`` options; output
goes to stdout and, when a file is given, to a rotating log file.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "LogoScout"

LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _formatted(handler: logging.Handler, fmt: str) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set the level and handlers of the ``LogoScout`` logger.

    With *replace_handlers* the previous handlers are closed first, so calling
    this again (as the CLI does per invocation) does not duplicate output.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)

    if replace_handlers:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    root.addHandler(_formatted(logging.StreamHandler(sys.stdout), log_format))
    if log_file is not None:
        rotating = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        root.addHandler(_formatted(rotating, log_format))

    root.propagate = False
    return root


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


def get_logger(name: str | None = None) -> logging.Logger:
    """``LogoScout`` itself, or its child ``LogoScout.<name>``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "get_logger", "LOGGER_NAME", "DEFAULT_FORMAT"]
