#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/cli/output.py
"""Utility functions for cli output."""

from __future__ import annotations

import argparse
import sys
from typing import Any, Optional, TextIO


def check_rich_available() -> bool:
    """Check if Rich library is available.

    Returns
    -------
    bool
        True if Rich is available, False otherwise

    """
    try:
        import rich  # noqa: F401

        return True
    except ImportError:
        return False


def should_use_rich_output(args: argparse.Namespace, stream: Optional[TextIO] = None) -> bool:
    """Determine if Rich output should be used based on TTY and args.

    Notes
    -----
    Rich output is used when:
    - The --rich flag is set
    - AND either --force-rich is set OR the stream is a TTY
    - AND Rich library is available

    """
    if not getattr(args, "rich", False):
        return False
    if not check_rich_available():
        return False
    if getattr(args, "force_rich", False):
        return True

    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def print_table(
    title: str,
    columns: list[str],
    rows: list[tuple[Any, ...]],
    use_rich: bool,
    stream: Optional[TextIO] = None,
) -> None:
    """Print rows as a Rich table, or as tab-separated plain text.

    Plain output has no header line so it can be piped into other tools.
    """
    target = stream or sys.stdout
    if use_rich:
        from rich.console import Console
        from rich.table import Table

        table = Table(title=title)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*(str(cell) for cell in row))
        Console(file=target).print(table)
        return

    for row in rows:
        print("\t".join(str(cell) for cell in row), file=target)
