#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/parsers/base.py
"""Base classes for document parsers.

This module defines the abstract base class for parsers producing
:class:`~tomlspan.document.ImDocument` trees, together with the shared input
loading logic.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, TYPE_CHECKING, Literal, Union

from tomlspan.exceptions import FileError, InputFileNotFoundError, InvalidOptionsError, ParsingError
from tomlspan.options.base import BaseParserOptions

if TYPE_CHECKING:
    from tomlspan.document import ImDocument

logger = logging.getLogger(__name__)

SourceMode = Literal["borrowed", "owned"]
ParserInput = Union[str, Path, IO[bytes], IO[str], bytes, bytearray]


class BaseParser(ABC):
    """Abstract base class for document parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Format-specific parsing options

    Notes
    -----
    The parse() method accepts:
    - str: the document text itself, held by reference ("borrowed")
    - Path: a file to read
    - IO[bytes] or IO[str]: a file-like object
    - bytes or bytearray: encoded document text

    Text read from anything other than a ``str`` is owned by the document
    ("owned").

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options: BaseParserOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: ParserInput) -> ImDocument:
        """Parse the input into an immutable document.

        Raises
        ------
        ParsingError
            If the input is malformed

        """

    def _load_text_content(self, input_data: ParserInput) -> tuple[str, SourceMode]:
        """Load document text from the supported input types.

        Returns
        -------
        tuple of (str, SourceMode)
            The text, and whether the caller's own string is being held
            ("borrowed") or the text was produced here ("owned")

        Raises
        ------
        InputFileNotFoundError
            If a path does not exist
        FileError
            If a path cannot be read
        ParsingError
            If bytes cannot be decoded

        """
        encoding = self.options.encoding if self.options is not None else "utf-8"

        if isinstance(input_data, str):
            return input_data, "borrowed"
        if isinstance(input_data, (bytes, bytearray)):
            return self._decode(bytes(input_data), encoding), "owned"
        if isinstance(input_data, Path):
            try:
                data = input_data.read_bytes()
            except FileNotFoundError as e:
                raise InputFileNotFoundError(str(input_data), original_error=e) from e
            except OSError as e:
                raise FileError(f"Could not read {input_data}: {e}", file_path=str(input_data), original_error=e) from e
            logger.debug("Read %d bytes from %s", len(data), input_data)
            return self._decode(data, encoding), "owned"
        if hasattr(input_data, "read"):
            content = input_data.read()
            if isinstance(content, str):
                return content, "owned"
            return self._decode(content, encoding), "owned"
        raise TypeError(f"Unsupported input type: {type(input_data).__name__}")

    @staticmethod
    def _decode(data: bytes, encoding: str) -> str:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError as e:
            raise ParsingError(f"Input is not valid {encoding}: {e.reason}", original_error=e) from e
