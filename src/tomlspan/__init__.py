#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/__init__.py
"""tomlspan - format-preserving TOML documents.

tomlspan parses TOML into an element tree that remembers how every part of
the document was written: key spelling, literal values, whitespace, comments
and line endings. An unmodified document renders back to exactly the text it
was parsed from, and edits change only the parts they touch.

Documents come in two forms. :class:`ImDocument` is the immutable result of
parsing; its tree refers into the source text by span. :class:`Document` is
the editable form, produced by :meth:`ImDocument.into_mut`, which copies the
referenced text into the tree and consumes the immutable document.

Examples
--------
Reading a value:

    >>> import tomlspan
    >>> doc = tomlspan.parse('port = 8080  # default\\n')
    >>> doc["port"].value
    8080

Editing while keeping the comment:

    >>> doc = tomlspan.parse_mut('port = 8080  # default\\n')
    >>> doc["port"] = 9090
    >>> tomlspan.dumps(doc)
    'port = 9090  # default\\n'

"""

from __future__ import annotations

from typing import Union

from tomlspan.ast.nodes import (
    Array,
    ArrayOfTables,
    Boolean,
    DateTime,
    Float,
    InlineTable,
    Integer,
    Item,
    Key,
    String,
    Table,
    Value,
    item,
    value,
)
from tomlspan.ast.raw import Decor, RawString, Repr
from tomlspan.document import Document, ImDocument
from tomlspan.exceptions import (
    DocumentConsumedError,
    FileError,
    InputFileNotFoundError,
    InvalidOptionsError,
    InvariantViolation,
    ParsingError,
    ReadOnlyItemError,
    RenderingError,
    TomlSpanError,
    ValidationError,
)
from tomlspan.options.toml import TomlParserOptions, TomlRendererOptions
from tomlspan.parsers.base import ParserInput
from tomlspan.parsers.toml import TomlParser
from tomlspan.renderers.toml import TomlRenderer

__version__ = "0.1.0"


def parse(source: ParserInput, options: TomlParserOptions | None = None) -> ImDocument:
    """Parse TOML into an immutable document.

    Parameters
    ----------
    source : str, Path, IO, bytes or bytearray
        TOML text, or a source to read it from. A ``str`` is always treated
        as the document text, never as a path.
    options : TomlParserOptions or None, default = None
        Parser options

    Returns
    -------
    ImDocument
        The parsed document

    Raises
    ------
    ParsingError
        If the text is not valid TOML
    FileError
        If a path cannot be read

    """
    return TomlParser(options).parse(source)


def parse_mut(source: ParserInput, options: TomlParserOptions | None = None) -> Document:
    """Parse TOML into an editable document.

    Equivalent to ``parse(source, options).into_mut()``.
    """
    return parse(source, options).into_mut()


def dumps(
    doc: Union[ImDocument, Document, Table],
    options: TomlRendererOptions | None = None,
) -> str:
    """Render a document (or a bare table) to TOML text."""
    return TomlRenderer(options).render_to_string(doc)


__all__ = [
    "Array",
    "ArrayOfTables",
    "Boolean",
    "DateTime",
    "Decor",
    "Document",
    "DocumentConsumedError",
    "FileError",
    "Float",
    "ImDocument",
    "InlineTable",
    "InputFileNotFoundError",
    "Integer",
    "InvalidOptionsError",
    "InvariantViolation",
    "Item",
    "Key",
    "ParsingError",
    "RawString",
    "ReadOnlyItemError",
    "RenderingError",
    "Repr",
    "String",
    "Table",
    "TomlParser",
    "TomlParserOptions",
    "TomlRenderer",
    "TomlRendererOptions",
    "TomlSpanError",
    "ValidationError",
    "Value",
    "__version__",
    "dumps",
    "item",
    "parse",
    "parse_mut",
    "value",
]
