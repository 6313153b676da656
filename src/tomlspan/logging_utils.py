#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/logging_utils.py
"""Logging setup for the tomlspan command line.

Records go to stderr and, when requested, to a log file. Each record is
tagged with the CLI command being run (``check``, ``get``, ...) so trace
output and log files shared between runs show which command wrote what.
Log files always use the trace format; the console uses it only in trace
mode.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(command)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class CommandContextFilter(logging.Filter):
    """Attach the running CLI command to every record as ``record.command``.

    Parameters
    ----------
    command : str or None, default = None
        Command name; records show ``-`` when it is not known

    """

    def __init__(self, command: Optional[str] = None):
        super().__init__()
        self.command = command or "-"

    def filter(self, record: logging.LogRecord) -> bool:
        record.command = self.command
        return True


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    command: Optional[str] = None,
) -> logging.Logger:
    """Replace the root logging handlers with the tomlspan CLI handlers.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "DEBUG"). Unknown names
        fall back to INFO.
    log_file : str, optional
        Path to a log file that receives the same records as stderr, in the
        trace format. A file that cannot be opened is reported as a warning.
    trace_mode : bool, default False
        Use the trace format (timestamp, command and logger name) on stderr.
    command : str, optional
        Name of the CLI command, added to every record.

    Returns
    -------
    logging.Logger
        The configured root logger.

    """
    root_logger = logging.getLogger()
    root_logger.setLevel(_resolve_level(log_level))
    root_logger.handlers.clear()

    context = CommandContextFilter(command)
    trace_formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(trace_formatter if trace_mode else logging.Formatter(CONSOLE_FORMAT))
    console_handler.addFilter(context)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setFormatter(trace_formatter)
            file_handler.addFilter(context)
            root_logger.addHandler(file_handler)
            root_logger.debug("Logging to file: %s", log_file)

    return root_logger
