#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/options/toml.py
"""Options for TOML parsing and rendering.

The parser builds a format-preserving element tree from TOML text; the
renderer turns such a tree back into text, reproducing unmodified parts of
the source exactly.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tomlspan.constants import DEFAULT_MAX_NESTING_DEPTH, DEFAULT_TABLE_SEPARATOR, DEFAULT_VALIDATE
from tomlspan.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class TomlParserOptions(BaseParserOptions):
    """Configuration options for TOML parsing.

    Parameters
    ----------
    validate : bool, default = True
        Check the whole document with ``tomllib`` before building the tree.
        This catches semantic errors (key redefinition, invalid escapes,
        out-of-range dates) with ``tomllib``'s diagnostics.
    max_nesting_depth : int, default = 64
        Maximum nesting of arrays and inline tables.

    """

    validate: bool = field(
        default=DEFAULT_VALIDATE,
        metadata={"help": "Cross-check the document with tomllib before building the tree", "importance": "core"},
    )
    max_nesting_depth: int = field(
        default=DEFAULT_MAX_NESTING_DEPTH,
        metadata={"help": "Maximum nesting of arrays and inline tables", "type": int, "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate options by calling parent validation."""
        super().__post_init__()
        if self.max_nesting_depth < 1:
            raise ValueError(f"max_nesting_depth must be at least 1, got {self.max_nesting_depth}")


@dataclass(frozen=True)
class TomlRendererOptions(BaseRendererOptions):
    """Configuration options for TOML rendering.

    Parameters
    ----------
    table_separator : str, default = "\\n"
        Text placed before the header of a table created programmatically,
        unless it is the first thing in the output

    """

    table_separator: str = field(
        default=DEFAULT_TABLE_SEPARATOR,
        metadata={"help": "Text before headers of tables created programmatically", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate options by calling parent validation."""
        super().__post_init__()
        if self.table_separator.strip(" \t\r\n"):
            raise ValueError(f"table_separator must only contain whitespace, got {self.table_separator!r}")
