#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/renderers/toml.py
"""TOML rendering from the element tree.

This module provides the TomlRenderer class which writes a document back to
TOML text. Every piece of text the parser recorded (keys as written,
literal values, whitespace, comments and line terminators) is emitted as is,
so an unmodified document renders to exactly the text it was parsed from.
Parts created programmatically have no recorded text and get defaults:
values and keys are formatted with ``tomli_w``.

Ordering
--------
Header tables are written in the order of their ``position``; tables without
one (created programmatically) follow the table written before them in tree
order. Within a table, key/value lines, including dotted ones such as
``a.b = 1``, are ordered the same way by the position of their line.

Examples
--------
Round trip:

    >>> from tomlspan import ImDocument
    >>> text = '[server]  # main\\nport = 8080\\n'
    >>> TomlRenderer().render_to_string(ImDocument.parse(text)) == text
    True

"""

from __future__ import annotations

import logging
from typing import Optional, Union

import tomli_w

from tomlspan.ast.nodes import (
    Array,
    ArrayOfTables,
    InlineTable,
    Key,
    Scalar,
    Table,
    TableKeyValue,
    Value,
)
from tomlspan.ast.raw import RawString
from tomlspan.constants import BARE_KEY_PATTERN
from tomlspan.document import Document, ImDocument
from tomlspan.exceptions import RenderingError
from tomlspan.options.toml import TomlRendererOptions
from tomlspan.renderers.base import BaseRenderer, RenderInput

logger = logging.getLogger(__name__)

BodyEntry = tuple[TableKeyValue, list[Key]]


class TomlRenderer(BaseRenderer):
    """Render documents and tables to TOML text.

    Parameters
    ----------
    options : TomlRendererOptions or None, default = None
        TOML rendering options

    Examples
    --------
    Rendering an edited document:

        >>> doc = Document.parse('name = "api"  # service\\n')
        >>> doc["name"] = "web"
        >>> TomlRenderer().render_to_string(doc)
        'name = "web"  # service\\n'

    """

    def __init__(self, options: TomlRendererOptions | None = None):
        """Initialize the TOML renderer with options."""
        BaseRenderer._validate_options_type(options, TomlRendererOptions, "toml")
        options = options or TomlRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: TomlRendererOptions = options

    def render_to_string(self, doc: RenderInput) -> str:
        """Render a document or table to a TOML string.

        Parameters
        ----------
        doc : ImDocument, Document or Table
            What to render. A bare table is rendered as a document root.

        Returns
        -------
        str
            TOML text

        Raises
        ------
        RenderingError
            If the tree still refers into a source text that is not available

        """
        source: Optional[str]
        trailing: Optional[RawString]
        if isinstance(doc, ImDocument):
            root, source, trailing = doc.as_table(), doc.raw(), doc.trailing()
        elif isinstance(doc, Document):
            root, source, trailing = doc.as_table(), doc.source, doc.trailing()
        elif isinstance(doc, Table):
            root, source, trailing = doc, None, None
        else:
            raise RenderingError(f"Cannot render {type(doc).__name__} as TOML")

        writer = _TomlWriter(source, self.options)
        text = writer.write_document(root, trailing)
        logger.debug("Rendered TOML document: %d characters", len(text))
        return text

    def render_value(self, value: Value, source: Optional[str] = None) -> str:
        """Render a single value as written after ``=``, without its surrounding decor.

        Parameters
        ----------
        value : Value
            Scalar, array or inline table
        source : str or None, default = None
            Source text the value's spans refer to, if it has any

        """
        return _TomlWriter(source, self.options)._value_repr(value)


class _TomlWriter:
    """Accumulates the output for one render call."""

    def __init__(self, source: Optional[str], options: TomlRendererOptions):
        self.source = source
        self.options = options
        self.newline = options.default_newline
        self._output: list[str] = []
        # The last line written ended the file without a terminator
        self._unterminated = False

    # ------------------------------------------------------------------
    # Text primitives
    # ------------------------------------------------------------------

    def _text(self, raw: Optional[RawString], default: str) -> str:
        if raw is None:
            return default
        try:
            return raw.to_str(self.source)
        except ValueError as e:
            raise RenderingError(f"Cannot render detached text: {e}", original_error=e) from e

    def _start_line(self) -> None:
        if self._unterminated:
            self._output.append(self.newline)
            self._unterminated = False

    def _end_line(self, newline: Optional[str]) -> None:
        if newline is None:
            newline = self.newline
        self._output.append(newline)
        self._unterminated = newline == ""

    # ------------------------------------------------------------------
    # Document structure
    # ------------------------------------------------------------------

    def write_document(self, root: Table, trailing: Optional[RawString]) -> str:
        for table, path, is_array in self._ordered_tables(root):
            if table is root:
                self._write_body(table)
            elif self._has_header(table):
                self._write_header(table, path, is_array)
                self._write_body(table)
        trailing_text = self._text(trailing, "")
        if trailing_text:
            self._start_line()
            self._output.append(trailing_text)
        return "".join(self._output)

    def _ordered_tables(self, root: Table) -> list[tuple[Table, list[Key], bool]]:
        collected: list[tuple[int, Table, list[Key], bool]] = []
        last_position = 0

        def visit(table: Table, path: list[Key], is_array: bool) -> None:
            nonlocal last_position
            if table.position is not None:
                last_position = table.position
            collected.append((last_position, table, path, is_array))
            for entry in table.entries.values():
                child = entry.item
                if isinstance(child, Table):
                    visit(child, path + [entry.key], False)
                elif isinstance(child, ArrayOfTables):
                    for element in child.tables:
                        visit(element, path + [entry.key], True)

        visit(root, [], False)
        collected.sort(key=lambda record: record[0])
        return [(table, path, is_array) for _, table, path, is_array in collected]

    @staticmethod
    def _has_header(table: Table) -> bool:
        if table.dotted:
            return False
        if not table.implicit:
            return True
        # An implied table only needs a header once it holds key/value lines
        for entry in table.entries.values():
            child = entry.item
            if isinstance(child, Value) or (isinstance(child, Table) and child.dotted):
                return True
        return False

    def _write_header(self, table: Table, path: list[Key], is_array: bool) -> None:
        self._start_line()
        separator = self.options.table_separator if self._output else ""
        self._output.append(self._text(table.decor.prefix, separator))
        keys = table.header_keys if table.header_keys is not None else path
        open_bracket, close_bracket = ("[[", "]]") if is_array else ("[", "]")
        self._output.append(open_bracket + self._key_path(keys, "", "") + close_bracket)
        self._output.append(self._text(table.decor.suffix, ""))
        self._end_line(table.newline)

    def _write_body(self, table: Table) -> None:
        for entry, path in self._ordered_body(table):
            self._start_line()
            keys = entry.dotted_path + [entry.key] if entry.dotted_path is not None else path + [entry.key]
            assert isinstance(entry.item, Value)
            self._output.append(self._key_path(keys, "", " ") + "=" + self._value(entry.item, " ", ""))
            self._end_line(entry.newline)

    def _ordered_body(self, table: Union[Table, InlineTable]) -> list[BodyEntry]:
        collected: list[tuple[int, TableKeyValue, list[Key]]] = []
        last_position = 0

        def visit(container: Union[Table, InlineTable], path: list[Key]) -> None:
            nonlocal last_position
            for entry in container.entries.values():
                child = entry.item
                if isinstance(child, (Table, InlineTable)) and child.dotted:
                    visit(child, path + [entry.key])
                elif isinstance(child, (Table, ArrayOfTables)):
                    continue
                else:
                    if entry.position is not None:
                        last_position = entry.position
                    collected.append((last_position, entry, path))

        visit(table, [])
        collected.sort(key=lambda record: record[0])
        return [(entry, path) for _, entry, path in collected]

    # ------------------------------------------------------------------
    # Keys and values
    # ------------------------------------------------------------------

    def _key_path(self, keys: list[Key], first_prefix: str, leaf_suffix: str) -> str:
        parts = []
        for index, key in enumerate(keys):
            prefix = first_prefix if index == 0 else ""
            suffix = leaf_suffix if index == len(keys) - 1 else ""
            parts.append(self._text(key.decor.prefix, prefix) + self._key_repr(key) + self._text(key.decor.suffix, suffix))
        return ".".join(parts)

    def _key_repr(self, key: Key) -> str:
        if key.repr is not None:
            return self._text(key.repr.raw, key.key)
        if BARE_KEY_PATTERN.fullmatch(key.key):
            return key.key
        return tomli_w.dumps({key.key: 0}).rsplit(" = ", 1)[0]

    def _value(self, value: Value, default_prefix: str, default_suffix: str) -> str:
        return (
            self._text(value.decor.prefix, default_prefix)
            + self._value_repr(value)
            + self._text(value.decor.suffix, default_suffix)
        )

    def _value_repr(self, value: Value) -> str:
        if isinstance(value, Scalar):
            if value.repr is not None:
                return self._text(value.repr.raw, "")
            return tomli_w.dumps({"v": value.value})[len("v = ") :].rstrip("\n")
        if isinstance(value, Array):
            return self._array_repr(value)
        if isinstance(value, InlineTable):
            return self._inline_table_repr(value)
        raise RenderingError(f"Cannot render value of type {type(value).__name__}")

    def _array_repr(self, array: Array) -> str:
        parts = ["["]
        for index, element in enumerate(array.values):
            if index > 0:
                parts.append(",")
            parts.append(self._value(element, "" if index == 0 else " ", ""))
        if array.trailing_comma and array.values:
            parts.append(",")
        parts.append(self._text(array.trailing, ""))
        parts.append("]")
        return "".join(parts)

    def _inline_table_repr(self, table: InlineTable) -> str:
        entries = self._ordered_body(table)
        if not entries:
            return "{" + self._text(table.preamble, "") + "}"
        parts = []
        for index, (entry, path) in enumerate(entries):
            keys = entry.dotted_path + [entry.key] if entry.dotted_path is not None else path + [entry.key]
            assert isinstance(entry.item, Value)
            last = index == len(entries) - 1
            parts.append(self._key_path(keys, " ", " ") + "=" + self._value(entry.item, " ", " " if last else ""))
        return "{" + ",".join(parts) + "}"
