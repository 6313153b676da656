#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/options/base.py
"""Base classes for parser and renderer options.

This module defines the foundation classes for the options used by the
tomlspan parser and renderer.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from tomlspan.constants import DEFAULT_ENCODING, DEFAULT_NEWLINE


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for renderer options.

    Parameters
    ----------
    default_newline : str, default = "\\n"
        Line terminator used after lines that carry none of their own
        (entries and tables created programmatically)

    """

    default_newline: str = field(
        default=DEFAULT_NEWLINE,
        metadata={"help": "Line terminator for lines created programmatically", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Validate the line terminator.

        Raises
        ------
        ValueError
            If the terminator is not a newline sequence.

        """
        if self.default_newline not in ("\n", "\r\n"):
            raise ValueError(f"default_newline must be '\\n' or '\\r\\n', got {self.default_newline!r}")


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for parser options.

    Parameters
    ----------
    encoding : str, default = "utf-8"
        Encoding used to decode bytes, binary streams and files

    """

    encoding: str = field(
        default=DEFAULT_ENCODING,
        metadata={"help": "Encoding for bytes and file input", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Validate base parser options.

        Raises
        ------
        ValueError
            If the encoding is empty.

        """
        if not self.encoding:
            raise ValueError("encoding must not be empty")
