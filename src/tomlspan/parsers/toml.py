#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/parsers/toml.py
"""Format-preserving TOML parser.

This module turns TOML text into an :class:`~tomlspan.document.ImDocument`
whose element tree refers into the source text instead of copying it: every
key, scalar and run of whitespace or comments is stored as a span. Nothing is
normalised, so rendering the unmodified tree reproduces the input exactly.

Decoding of individual scalars (escapes, numbers, date-times) is delegated to
``tomllib`` (``tomli`` before Python 3.11). By default the whole document is
also checked with ``tomllib`` first, so semantic errors are reported with its
diagnostics before any tree is built.

Examples
--------
Input TOML::

    # service settings
    name = "api"   # display name
    [server]
    port = 8080

Parsing keeps the comment lines as the prefix of ``name``, the inline
comment as the suffix of its value, and the header line of ``[server]`` with
its position in the document::

    >>> doc = TomlParser().parse(text)
    >>> doc["server"]["port"].value
    8080
    >>> doc.raw() == text
    True

"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional, Union

from tomlspan.ast.nodes import (
    Array,
    ArrayOfTables,
    Boolean,
    DateTime,
    Float,
    InlineTable,
    Integer,
    Key,
    String,
    Table,
    TableKeyValue,
    Value,
    set_frozen,
)
from tomlspan.ast.raw import Decor, RawString, Repr
from tomlspan.constants import (
    BARE_KEY_PATTERN,
    LOCAL_DATE_PATTERN,
    ROOT_TABLE_POSITION,
    SCALAR_TOKEN_PATTERN,
    TIME_AFTER_SPACE_PATTERN,
    TOMLLIB_POSITION_PATTERN,
    WHITESPACE_CHARS,
)
from tomlspan.document import ImDocument
from tomlspan.exceptions import ParsingError
from tomlspan.options.toml import TomlParserOptions
from tomlspan.parsers.base import BaseParser, ParserInput

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

TableTarget = Union[Table, InlineTable]


class TomlParser(BaseParser):
    """Parse TOML text into a span-based immutable document.

    Parameters
    ----------
    options : TomlParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> parser = TomlParser()
        >>> doc = parser.parse('title = "demo"\\n')

    Skipping the up-front ``tomllib`` check:

        >>> parser = TomlParser(TomlParserOptions(validate=False))

    """

    def __init__(self, options: TomlParserOptions | None = None):
        """Initialize the TOML parser with options."""
        BaseParser._validate_options_type(options, TomlParserOptions, "toml")
        options = options or TomlParserOptions()
        super().__init__(options)
        self.options: TomlParserOptions = options

    def parse(self, input_data: ParserInput) -> ImDocument:
        """Parse TOML input into an immutable document.

        Parameters
        ----------
        input_data : str, Path, IO, bytes or bytearray
            TOML text, or a source to read it from

        Returns
        -------
        ImDocument
            Document whose spans refer into the parsed text

        Raises
        ------
        ParsingError
            If the text is not valid TOML

        """
        source, mode = self._load_text_content(input_data)

        if self.options.validate:
            self._validate(source)

        builder = _TreeBuilder(source, self.options.max_nesting_depth)
        try:
            root, trailing = builder.build()
        except RecursionError as e:
            raise ParsingError("Values are nested too deeply to parse", original_error=e) from e
        set_frozen(root, True)
        logger.debug("Parsed TOML document: %d top-level keys, %d characters", len(root), len(source))
        return ImDocument._from_parts(root, trailing, source, mode)

    @staticmethod
    def _validate(source: str) -> None:
        """Check the whole document with ``tomllib``.

        Raises
        ------
        ParsingError
            With the position reported by ``tomllib``

        """
        try:
            tomllib.loads(source)
        except RecursionError as e:
            raise ParsingError("Invalid TOML: values are nested too deeply", original_error=e) from e
        except tomllib.TOMLDecodeError as e:
            line = getattr(e, "lineno", None)
            column = getattr(e, "colno", None)
            message = getattr(e, "msg", None) or str(e)
            match = TOMLLIB_POSITION_PATTERN.search(str(e))
            if line is None and match:
                line, column = int(match.group(1)), int(match.group(2))
            message = TOMLLIB_POSITION_PATTERN.sub("", message).strip()
            lines = source.splitlines()
            context = lines[line - 1] if line and line <= len(lines) else None
            raise ParsingError(f"Invalid TOML: {message}", line, column, context, original_error=e) from e


def decode_scalar(raw: str) -> Any:
    """Decode the literal text of a single TOML value with ``tomllib``.

    Raises
    ------
    tomllib.TOMLDecodeError
        If ``raw`` is not a valid TOML value

    """
    return tomllib.loads(f"v = {raw}")["v"]


def decode_key(raw: str) -> str:
    """Decode a quoted TOML key with ``tomllib``."""
    return next(iter(tomllib.loads(f"{raw} = 0")))


def _table_key(key: Key) -> Key:
    # Key stored for an implied or header table: same spelling, none of the
    # whitespace or comments of the line it was first written on
    return Key(key=key.key, repr=key.repr.copy() if key.repr is not None else None)


class _TreeBuilder:
    """Recursive-descent grammar engine producing a span-based tree.

    Every piece of text is recorded as a span into ``source``: whitespace and
    comment lines before an entry become the prefix of its first key, text
    after a value up to the line terminator becomes the value's suffix, and
    anything after the last element is returned as the trailing span.
    """

    def __init__(self, source: str, max_depth: int):
        self.src = source
        self.n = len(source)
        self.pos = 0
        self.max_depth = max_depth
        self.root = Table.with_pos(ROOT_TABLE_POSITION)
        self.current: Table = self.root
        self._position = ROOT_TABLE_POSITION

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _next_position(self) -> int:
        self._position += 1
        return self._position

    def _span(self, start: int, end: Optional[int] = None) -> RawString:
        return RawString.with_span(start, self.pos if end is None else end)

    def _error(self, message: str, offset: Optional[int] = None) -> ParsingError:
        offset = self.pos if offset is None else min(offset, self.n)
        line = self.src.count("\n", 0, offset) + 1
        line_start = self.src.rfind("\n", 0, offset) + 1
        line_end = self.src.find("\n", offset)
        if line_end == -1:
            line_end = self.n
        context = self.src[line_start:line_end].rstrip("\r")
        return ParsingError(message, line=line, column=offset - line_start + 1, context=context)

    def _peek(self) -> str:
        return self.src[self.pos] if self.pos < self.n else ""

    def _expect(self, char: str, what: str) -> None:
        if self._peek() != char:
            found = repr(self._peek()) if self.pos < self.n else "end of file"
            raise self._error(f"Expected {what}, found {found}")
        self.pos += 1

    def _skip_ws(self) -> None:
        while self.pos < self.n and self.src[self.pos] in WHITESPACE_CHARS:
            self.pos += 1

    def _skip_comment(self) -> None:
        if self.pos < self.n and self.src[self.pos] == "#":
            end = self.src.find("\n", self.pos)
            if end == -1:
                end = self.n
            elif end > self.pos and self.src[end - 1] == "\r":
                end -= 1
            self.pos = end

    def _skip_trivia(self) -> None:
        """Skip whitespace, comments and line terminators."""
        while self.pos < self.n:
            char = self.src[self.pos]
            if char in WHITESPACE_CHARS:
                self.pos += 1
            elif char == "#":
                self._skip_comment()
            elif char == "\n":
                self.pos += 1
            elif self.src.startswith("\r\n", self.pos):
                self.pos += 2
            else:
                break

    def _consume_newline(self, after: str) -> str:
        if self.pos >= self.n:
            return ""
        if self.src[self.pos] == "\n":
            self.pos += 1
            return "\n"
        if self.src.startswith("\r\n", self.pos):
            self.pos += 2
            return "\r\n"
        raise self._error(f"Expected a newline after {after}, found {self._peek()!r}")

    # ------------------------------------------------------------------
    # Document structure
    # ------------------------------------------------------------------

    def build(self) -> tuple[Table, RawString]:
        """Parse the whole source into a root table and a trailing span."""
        while True:
            prefix_start = self.pos
            self._skip_trivia()
            if self.pos >= self.n:
                return self.root, self._span(prefix_start)
            if self.src[self.pos] == "[":
                self._parse_header(prefix_start)
            else:
                self._parse_key_value_line(prefix_start)

    def _parse_header(self, prefix_start: int) -> None:
        start = self.pos
        is_array = self.src.startswith("[[", self.pos)
        self.pos += 2 if is_array else 1
        keys = self._parse_key_path(self.pos)
        self._expect("]", "']' to close the table header")
        if is_array:
            self._expect("]", "']]' to close the array of tables header")
        header_end = self.pos
        suffix_start = self.pos
        self._skip_ws()
        self._skip_comment()
        suffix = self._span(suffix_start)
        newline = self._consume_newline("the table header")

        table = self._attach_header(keys, is_array, start)
        table.decor = Decor(prefix=self._span(prefix_start, start), suffix=suffix)
        table.header_keys = keys
        table.newline = newline
        table.position = self._next_position()
        table.span = (start, header_end)
        self.current = table

    def _attach_header(self, keys: list[Key], is_array: bool, offset: int) -> Table:
        """Find or create the table a header line names."""
        *path, leaf = keys
        target = self.root
        for key in path:
            entry = target.entries.get(key.key)
            if entry is None:
                sub = Table(implicit=True)
                target.entries[key.key] = TableKeyValue(key=_table_key(key), item=sub)
                target = sub
            elif isinstance(entry.item, Table):
                target = entry.item
            elif isinstance(entry.item, ArrayOfTables) and entry.item.tables:
                target = entry.item.tables[-1]
            else:
                raise self._error(f"Key {key.key!r} is already defined as a {entry.item.type_name}", offset)

        entry = target.entries.get(leaf.key)
        if is_array:
            if entry is None:
                aot = ArrayOfTables(span=(offset, offset + 2))
                target.entries[leaf.key] = TableKeyValue(key=_table_key(leaf), item=aot)
            elif isinstance(entry.item, ArrayOfTables):
                aot = entry.item
            else:
                raise self._error(f"Cannot redefine {leaf.key!r} as an array of tables", offset)
            table = Table()
            aot.tables.append(table)
            return table

        if entry is None:
            table = Table()
            target.entries[leaf.key] = TableKeyValue(key=_table_key(leaf), item=table)
            return table
        existing = entry.item
        if isinstance(existing, Table) and existing.implicit and not existing.dotted:
            # A header for a table that earlier headers only implied
            existing.implicit = False
            return existing
        raise self._error(f"Table {'.'.join(key.key for key in keys)!r} is defined more than once", offset)

    def _parse_key_value_line(self, prefix_start: int) -> None:
        line_start = self.pos
        keys = self._parse_key_path(prefix_start)
        self._expect("=", "'=' after key")
        value = self._parse_decorated_value(depth=0)
        suffix_start = self.pos
        self._skip_ws()
        self._skip_comment()
        value.decor.suffix = self._span(suffix_start)
        newline = self._consume_newline("a value")
        self._insert_key_value(self.current, keys, value, newline, line_start)

    def _insert_key_value(
        self, table: TableTarget, keys: list[Key], value: Value, newline: Optional[str], offset: int
    ) -> None:
        """Store a key/value pair, creating dotted tables along its path."""
        *path, leaf = keys
        target: TableTarget = table
        for key in path:
            entry = target.entries.get(key.key)
            if entry is None:
                sub: TableTarget = (
                    InlineTable(dotted=True) if isinstance(table, InlineTable) else Table(implicit=True, dotted=True)
                )
                target.entries[key.key] = TableKeyValue(key=_table_key(key), item=sub)
                target = sub
            elif isinstance(entry.item, (Table, InlineTable)) and entry.item.dotted:
                target = entry.item
            else:
                raise self._error(
                    f"Cannot extend {key.key!r} with a dotted key: it is already defined as a {entry.item.type_name}",
                    offset,
                )

        if leaf.key in target.entries:
            raise self._error(f"Duplicate key {leaf.key!r}", offset)
        target.entries[leaf.key] = TableKeyValue(
            key=leaf,
            item=value,
            dotted_path=path or None,
            position=self._next_position(),
            newline=newline,
        )

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def _parse_key_path(self, prefix_start: int) -> list[Key]:
        """Parse ``key(.key)*``; the first key's prefix starts at ``prefix_start``."""
        keys: list[Key] = []
        segment_start = prefix_start
        while True:
            self._skip_ws()
            key_start = self.pos
            name = self._parse_simple_key()
            key_repr = Repr(self._span(key_start))
            after_start = self.pos
            self._skip_ws()
            decor = Decor(prefix=self._span(segment_start, key_start), suffix=self._span(after_start))
            keys.append(Key(key=name, repr=key_repr, decor=decor))
            if self._peek() != ".":
                return keys
            self.pos += 1
            segment_start = self.pos

    def _parse_simple_key(self) -> str:
        start = self.pos
        char = self._peek()
        if char in ('"', "'"):
            if self.src.startswith(char * 3, self.pos):
                raise self._error("Multi-line strings cannot be used as keys")
            end = self._scan_string()
            raw = self.src[start:end]
            if char == "'":
                return raw[1:-1]
            try:
                return decode_key(raw)
            except tomllib.TOMLDecodeError as e:
                raise self._error(f"Invalid quoted key {raw}", start) from e
        match = BARE_KEY_PATTERN.match(self.src, self.pos)
        if match is None:
            found = repr(char) if char else "end of file"
            raise self._error(f"Expected a key, found {found}")
        self.pos = match.end()
        return match.group(0)

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def _parse_decorated_value(self, depth: int) -> Value:
        """Parse whitespace then a value; the whitespace becomes its prefix."""
        ws_start = self.pos
        self._skip_ws()
        prefix = self._span(ws_start)
        value = self._parse_value(depth)
        value.decor = Decor(prefix=prefix)
        return value

    def _parse_value(self, depth: int) -> Value:
        start = self.pos
        char = self._peek()
        if not char or char in "\r\n#":
            raise self._error("Expected a value")
        if char in ('"', "'"):
            end = self._scan_string()
            return String(self._decode(start, end), repr=Repr(self._span(start, end)), span=(start, end))
        if char == "[":
            return self._parse_array(depth + 1)
        if char == "{":
            return self._parse_inline_table(depth + 1)

        match = SCALAR_TOKEN_PATTERN.match(self.src, self.pos)
        if match is None:
            raise self._error(f"Unexpected character {char!r} in value")
        end = match.end()
        if LOCAL_DATE_PATTERN.fullmatch(self.src, start, end) and TIME_AFTER_SPACE_PATTERN.match(self.src, end):
            # "1979-05-27 07:32:00": a space may separate date and time
            time_match = SCALAR_TOKEN_PATTERN.match(self.src, end + 1)
            assert time_match is not None
            end = time_match.end()
        self.pos = end
        decoded = self._decode(start, end)
        raw = Repr(self._span(start, end))
        if isinstance(decoded, bool):
            return Boolean(decoded, repr=raw, span=(start, end))
        if isinstance(decoded, int):
            return Integer(decoded, repr=raw, span=(start, end))
        if isinstance(decoded, float):
            return Float(decoded, repr=raw, span=(start, end))
        if isinstance(decoded, str):
            raise self._error(f"Unexpected value {self.src[start:end]!r}", start)
        return DateTime(decoded, repr=raw, span=(start, end))

    def _decode(self, start: int, end: int) -> Any:
        raw = self.src[start:end]
        try:
            return decode_scalar(raw)
        except tomllib.TOMLDecodeError as e:
            raise self._error(f"Invalid value {raw!r}", start) from e

    def _scan_string(self) -> int:
        """Advance past a string literal starting at ``pos`` and return its end."""
        start = self.pos
        quote = self.src[start]
        escapes = quote == '"'
        if self.src.startswith(quote * 3, start):
            i = start + 3
            while i < self.n:
                if escapes and self.src[i] == "\\":
                    i += 2
                    continue
                if self.src.startswith(quote * 3, i):
                    j = i
                    while j < self.n and self.src[j] == quote:
                        j += 1
                    if j - i > 5:
                        raise self._error("Too many quotes closing a multi-line string", i)
                    self.pos = j
                    return j
                i += 1
            raise self._error("Unterminated multi-line string", start)

        i = start + 1
        while i < self.n:
            char = self.src[i]
            if char in "\r\n":
                break
            if escapes and char == "\\":
                i += 2
                continue
            if char == quote:
                self.pos = i + 1
                return i + 1
            i += 1
        raise self._error("Unterminated string", start)

    def _check_depth(self, depth: int, start: int) -> None:
        if depth > self.max_depth:
            raise self._error(f"Values are nested more than {self.max_depth} levels deep", start)

    def _parse_array(self, depth: int) -> Array:
        start = self.pos
        self._check_depth(depth, start)
        self.pos += 1
        array = Array()
        while True:
            ws_start = self.pos
            self._skip_trivia()
            if self._peek() == "]":
                array.trailing = self._span(ws_start)
                self.pos += 1
                break
            prefix = self._span(ws_start)
            element = self._parse_value(depth)
            suffix_start = self.pos
            self._skip_trivia()
            element.decor = Decor(prefix=prefix, suffix=self._span(suffix_start))
            array.values.append(element)
            array.trailing_comma = False
            if self._peek() == ",":
                self.pos += 1
                array.trailing_comma = True
            elif self._peek() == "]":
                self.pos += 1
                break
            else:
                raise self._error("Expected ',' or ']' in array")
        array.span = (start, self.pos)
        return array

    def _parse_inline_table(self, depth: int) -> InlineTable:
        start = self.pos
        self._check_depth(depth, start)
        self.pos += 1
        table = InlineTable()
        ws_start = self.pos
        self._skip_ws()
        if self._peek() == "}":
            table.preamble = self._span(ws_start)
            self.pos += 1
            table.span = (start, self.pos)
            return table
        self.pos = ws_start
        while True:
            entry_start = self.pos
            keys = self._parse_key_path(entry_start)
            self._expect("=", "'=' after key")
            value = self._parse_decorated_value(depth)
            suffix_start = self.pos
            self._skip_ws()
            value.decor.suffix = self._span(suffix_start)
            self._insert_key_value(table, keys, value, None, entry_start)
            if self._peek() == ",":
                self.pos += 1
            elif self._peek() == "}":
                self.pos += 1
                break
            else:
                raise self._error("Expected ',' or '}' in inline table")
        table.span = (start, self.pos)
        return table
