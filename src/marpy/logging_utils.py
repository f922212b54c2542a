#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/logging_utils.py
"""Logging setup for the ``marpy`` command line.

Library modules only create module loggers. Handlers are attached to the root
logger here, when the command line starts.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

CONSOLE_FORMAT = "marpy: %(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers held at WARNING unless tracing
QUIET_LOGGERS = ("markdown_it",)


def resolve_level(level: int | str) -> int:
    """Convert a level name such as ``"debug"`` to its number.

    Unknown names resolve to ``logging.INFO``.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _attach(logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Send log records to stderr and, optionally, a file.

    Parameters
    ----------
    log_level : int | str
        Numeric level or level name
    log_file : str, optional
        File that receives a copy of every record
    trace_mode : bool, default False
        Include timestamps and logger names, and stop quieting third-party
        loggers

    Returns
    -------
    logging.Logger
        The root logger

    """
    level = resolve_level(log_level)
    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(CONSOLE_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    _attach(root, logging.StreamHandler(sys.stderr), level, formatter)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root.warning("Could not open log file %s: %s", log_file, exc)
        else:
            _attach(root, file_handler, level, formatter)
            root.info("Logging to file: %s", log_file)

    for name in QUIET_LOGGERS:
        root.getChild(name).setLevel(level if trace_mode else max(level, logging.WARNING))

    return root
