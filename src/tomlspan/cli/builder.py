#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/cli/builder.py
"""Argument parser construction and exit codes for the tomlspan CLI."""

from __future__ import annotations

import argparse

from tomlspan.cli.actions import EnvironmentAwareAction, EnvironmentAwareBooleanAction
from tomlspan.exceptions import (
    FileError,
    ParsingError,
    RenderingError,
    ValidationError,
)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
EXIT_RENDERING_ERROR = 7

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with the check, keys, get and set commands.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser; the chosen command is stored in ``command``

    """
    from tomlspan import __version__

    parser = argparse.ArgumentParser(
        prog="tomlspan",
        description="Inspect and edit TOML files without disturbing their formatting.",
        epilog="Options can also be set with TOMLSPAN_<OPTION> environment variables, e.g. TOMLSPAN_LOG_LEVEL=DEBUG.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        action=EnvironmentAwareAction,
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", action=EnvironmentAwareAction, help="Also write log records to this file")
    parser.add_argument(
        "--trace",
        action=EnvironmentAwareBooleanAction,
        help="Include timestamps and logger names in log output",
    )
    parser.add_argument(
        "--rich",
        action=EnvironmentAwareBooleanAction,
        help="Use rich terminal output with formatting (requires the 'rich' extra)",
    )
    parser.add_argument(
        "--force-rich",
        action=EnvironmentAwareBooleanAction,
        help="Use rich output even when stdout is not a terminal",
    )
    parser.add_argument(
        "--encoding",
        action=EnvironmentAwareAction,
        default="utf-8",
        help="Encoding of the TOML files (default: utf-8)",
    )
    parser.add_argument(
        "--no-validate",
        dest="validate",
        action="store_false",
        help="Skip the tomllib cross-check before building the tree",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    check = subparsers.add_parser("check", help="Verify that files parse and render back unchanged")
    check.add_argument("files", nargs="+", metavar="FILE", help="TOML files to check")

    keys = subparsers.add_parser("keys", help="List the top-level keys of a file in order")
    keys.add_argument("file", metavar="FILE", help="TOML file")

    get = subparsers.add_parser("get", help="Print the value at a dotted key path")
    get.add_argument("file", metavar="FILE", help="TOML file")
    get.add_argument("key", metavar="KEY", help='Dotted key path, e.g. server.port or tool."name.with.dots"')

    set_ = subparsers.add_parser("set", help="Assign a TOML value at a dotted key path")
    set_.add_argument("file", metavar="FILE", help="TOML file")
    set_.add_argument("key", metavar="KEY", help="Dotted key path; the last key is created if missing")
    set_.add_argument("value", metavar="VALUE", help='Value as a TOML literal, e.g. 8080, "text" or [1, 2]')
    set_.add_argument("--in-place", "-i", action="store_true", help="Write the result back to FILE")

    return parser


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to a CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map

    Returns
    -------
    int
        The exit code for the exception type

    """
    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR
    if isinstance(exception, FileError):
        return EXIT_FILE_ERROR
    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR
    if isinstance(exception, RenderingError):
        return EXIT_RENDERING_ERROR
    return EXIT_ERROR
