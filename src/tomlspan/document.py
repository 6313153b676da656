#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/document.py
"""Immutable and mutable TOML documents.

A parsed document comes in two forms:

- :class:`ImDocument` is a snapshot with provenance. Its element tree is made
  of spans into the exact source text it was parsed from, which it keeps.
  Its tree is read-only: edits raise
  :class:`~tomlspan.exceptions.ReadOnlyItemError`.
- :class:`Document` is a working copy. It owns every piece of its text, so it
  can be edited freely and outlives the source.

The only way from the first to the second is :meth:`ImDocument.into_mut`,
which hands the tree over and runs the detachment ("despan") pass: every
span is resolved against the source and replaced with an owned copy. The
conversion consumes the immutable document; there is no way back.

Both forms behave like the root table they wrap: ``doc["key"]``,
``len(doc)``, ``"key" in doc`` and iteration forward to it, and the
mutable form also forwards assignment and deletion. Mutation through the
document changes the same tree :meth:`Document.as_table_mut` returns.

Examples
--------
    >>> im = ImDocument.parse('a = 1\\n# trailing comment\\n')
    >>> list(im)
    ['a']
    >>> doc = im.into_mut()
    >>> doc.trailing().as_str()
    '# trailing comment\\n'
    >>> doc["b"] = [1, 2]
    >>> str(doc)
    'a = 1\\nb = [1, 2]\\n# trailing comment\\n'

"""

from __future__ import annotations

import logging
from collections.abc import ItemsView, Iterator, Mapping, MutableMapping
from typing import TYPE_CHECKING, Any, Optional

from tomlspan.ast.nodes import Item, Table, set_frozen
from tomlspan.ast.raw import RawString
from tomlspan.ast.visitors import detach_spans
from tomlspan.constants import ROOT_TABLE_POSITION
from tomlspan.exceptions import DocumentConsumedError, InvariantViolation

if TYPE_CHECKING:
    from tomlspan.options.toml import TomlParserOptions
    from tomlspan.parsers.base import ParserInput, SourceMode

logger = logging.getLogger(__name__)


def _root_table(root: Optional[Item]) -> Table:
    if not isinstance(root, Table):
        raise InvariantViolation(f"root should always be a table, found {type(root).__name__}")
    return root


def _render(doc: ImDocument | Document) -> str:
    from tomlspan.renderers.toml import TomlRenderer

    return TomlRenderer().render_to_string(doc)


class ImDocument(Mapping):
    """A parsed TOML document tied to its source text.

    ``ImDocument()`` creates an empty document; use :meth:`parse` to parse
    text.

    Attributes
    ----------
    source_mode : {"borrowed", "owned"}
        "borrowed" when the caller's own ``str`` is held as the source,
        "owned" when the text was decoded by the parser (from bytes, a path
        or a stream) and belongs to the document

    """

    def __init__(self) -> None:
        """Create an empty document: an empty root table and no trailing text."""
        self._root: Optional[Item] = Table.with_pos(ROOT_TABLE_POSITION)
        set_frozen(self._root, True)
        self._trailing: Optional[RawString] = RawString()
        self._raw: Optional[str] = ""
        self.source_mode: SourceMode = "borrowed"
        self._consumed = False

    @classmethod
    def new(cls) -> ImDocument:
        """Create an empty document."""
        return cls()

    @classmethod
    def _from_parts(cls, root: Item, trailing: RawString, raw: str, source_mode: SourceMode) -> ImDocument:
        doc = cls.__new__(cls)
        doc._root = _root_table(root)
        doc._trailing = trailing
        doc._raw = raw
        doc.source_mode = source_mode
        doc._consumed = False
        return doc

    @classmethod
    def parse(cls, source: ParserInput, options: TomlParserOptions | None = None) -> ImDocument:
        """Parse a TOML document.

        Parameters
        ----------
        source : str, Path, IO, bytes or bytearray
            TOML text, or a source to read it from
        options : TomlParserOptions or None, default = None
            Parser options

        Returns
        -------
        ImDocument
            The parsed document; ``raw()`` returns the parsed text

        Raises
        ------
        ParsingError
            If the text is not valid TOML

        """
        from tomlspan.parsers.toml import TomlParser

        return TomlParser(options).parse(source)

    def _check(self) -> None:
        if self._consumed:
            raise DocumentConsumedError()

    def as_item(self) -> Item:
        """Return the root item."""
        self._check()
        assert self._root is not None
        return self._root

    def as_table(self) -> Table:
        """Return the root table.

        Raises
        ------
        InvariantViolation
            If the root is not a table, which only a construction bug can cause

        """
        self._check()
        return _root_table(self._root)

    def iter(self) -> ItemsView:
        """Return a lazy, restartable view of top-level ``(key, item)`` pairs in source order."""
        return self.as_table().iter()

    def raw(self) -> str:
        """Return the exact source text the document was parsed from."""
        self._check()
        assert self._raw is not None
        return self._raw

    def trailing(self) -> RawString:
        """Return the whitespace and comments after the last element."""
        self._check()
        assert self._trailing is not None
        return self._trailing

    @property
    def consumed(self) -> bool:
        """Whether :meth:`into_mut` has taken this document's contents."""
        return self._consumed

    def into_mut(self) -> Document:
        """Convert into an editable :class:`Document`, consuming this document.

        The tree is handed over and every span in it is replaced by an owned
        copy of the source text; its items become editable. Afterwards this
        document raises :class:`~tomlspan.exceptions.DocumentConsumedError`
        on any access.
        """
        doc = self._into_spanned_document()
        doc._despan()
        return doc

    def _into_spanned_document(self) -> Document:
        self._check()
        doc = Document._from_parts(self.as_table(), self.trailing(), self.raw())
        self._root = None
        self._trailing = None
        self._raw = None
        self._consumed = True
        return doc

    def __getitem__(self, key: str) -> Item:
        return self.as_table()[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.as_table())

    def __len__(self) -> int:
        return len(self.as_table())

    def __str__(self) -> str:
        return _render(self)

    def __repr__(self) -> str:
        if self._consumed:
            return "ImDocument(<consumed>)"
        return f"ImDocument(keys={list(self.as_table())!r}, source_mode={self.source_mode!r})"


class Document(MutableMapping):
    """An editable TOML document that owns all of its text.

    Parameters
    ----------
    root : Table or None, default = None
        Table to wrap. None creates an empty document. A wrapped table
        gets an empty trailing text and no retained source.

    Examples
    --------
    Building a document from scratch:

        >>> doc = Document()
        >>> doc["title"] = "demo"
        >>> doc["server"] = {"port": 8080}
        >>> str(doc)
        'title = "demo"\\n\\n[server]\\nport = 8080\\n'

    """

    def __init__(self, root: Optional[Table] = None):
        """Wrap ``root``, or create an empty document."""
        if root is None:
            root = Table.with_pos(ROOT_TABLE_POSITION)
        elif not isinstance(root, Table):
            raise TypeError(f"Document root must be a Table, got {type(root).__name__}")
        self._root: Item = root
        self._trailing = RawString()
        self._source: Optional[str] = None
        self._detached = False

    @classmethod
    def new(cls) -> Document:
        """Create an empty document."""
        return cls()

    @classmethod
    def _from_parts(cls, root: Table, trailing: RawString, source: str) -> Document:
        doc = cls(root)
        doc._trailing = trailing
        doc._source = source
        return doc

    @classmethod
    def parse(cls, source: ParserInput, options: TomlParserOptions | None = None) -> Document:
        """Parse TOML text straight into an editable document.

        Equivalent to ``ImDocument.parse(source, options).into_mut()``.

        Raises
        ------
        ParsingError
            If the text is not valid TOML

        """
        return ImDocument.parse(source, options).into_mut()

    def as_item(self) -> Item:
        """Return the root item."""
        return self._root

    def as_item_mut(self) -> Item:
        """Return the root item for editing; it is the document's own tree."""
        return self._root

    def as_table(self) -> Table:
        """Return the root table.

        Raises
        ------
        InvariantViolation
            If the root is not a table, which only a construction bug can cause

        """
        return _root_table(self._root)

    def as_table_mut(self) -> Table:
        """Return the root table for editing; it is the document's own tree."""
        return _root_table(self._root)

    def iter(self) -> ItemsView:
        """Return a lazy, restartable view of top-level ``(key, item)`` pairs in order."""
        return self.as_table().iter()

    def trailing(self) -> RawString:
        """Return the whitespace and comments after the last element."""
        return self._trailing

    def set_trailing(self, trailing: RawString | str) -> None:
        """Set the whitespace and comments after the last element."""
        self._trailing = trailing if isinstance(trailing, RawString) else RawString(trailing)

    @property
    def source(self) -> Optional[str]:
        """The text the document was parsed from, if any.

        Kept for diagnostics only; the document's contents never depend on it.
        """
        return self._source

    def _despan(self) -> None:
        """Replace every span in the tree and trailing text with owned text.

        Runs once, from :meth:`ImDocument.into_mut`.

        Raises
        ------
        InvariantViolation
            If the document has no retained source (it was not produced by
            the parser) or was already detached

        """
        if self._source is None:
            raise InvariantViolation("despan requires a document produced by the parser")
        if self._detached:
            raise InvariantViolation("despan must run only once per document")
        count = detach_spans(self.as_table(), self._source, self._trailing)
        self._detached = True
        logger.debug("Converted parsed document to mutable form (%d spans detached)", count)

    def __getitem__(self, key: str) -> Item:
        return self.as_table()[key]

    def __setitem__(self, key: str, obj: Any) -> None:
        self.as_table_mut()[key] = obj

    def __delitem__(self, key: str) -> None:
        del self.as_table_mut()[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.as_table())

    def __len__(self) -> int:
        return len(self.as_table())

    def __str__(self) -> str:
        return _render(self)

    def __repr__(self) -> str:
        return f"Document(keys={list(self.as_table())!r})"
