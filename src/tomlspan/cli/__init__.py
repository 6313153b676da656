#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/cli/__init__.py
"""Command-line interface for tomlspan.

The ``tomlspan`` command inspects and edits TOML files while leaving their
formatting alone.

Commands
--------
check FILE...
    Parse each file and verify that it renders back unchanged
keys FILE
    List top-level keys in order with the kind of item each holds
get FILE KEY
    Print the value at a dotted key path
set FILE KEY VALUE [--in-place]
    Assign a TOML literal at a dotted key path

Global options take defaults from ``TOMLSPAN_<OPTION>`` environment
variables (``TOMLSPAN_LOG_LEVEL``, ``TOMLSPAN_RICH``, ...).

Examples
--------
    $ tomlspan check pyproject.toml
    $ tomlspan get pyproject.toml project.version
    $ tomlspan set pyproject.toml project.version '"1.2.0"' --in-place

"""

from __future__ import annotations

import logging
import sys

from tomlspan.cli.builder import EXIT_ERROR, create_parser, get_exit_code_for_exception
from tomlspan.cli.commands import COMMAND_HANDLERS
from tomlspan.exceptions import TomlSpanError
from tomlspan.logging_utils import configure_logging

logger = logging.getLogger(__name__)


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return the exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(
        parsed_args.log_level,
        log_file=parsed_args.log_file,
        trace_mode=parsed_args.trace,
        command=parsed_args.command,
    )

    handler = COMMAND_HANDLERS[parsed_args.command]
    try:
        return handler(parsed_args)
    except TomlSpanError as e:
        logger.debug("Command %s failed", parsed_args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


__all__ = ["main"]
