#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/ast/nodes.py
"""Element tree classes for TOML documents.

This module defines the node hierarchy used to represent a parsed TOML
document. Every node keeps the text it was parsed from as span text
(:class:`~tomlspan.ast.raw.RawString`) so an unmodified tree renders back to
the exact source.

Node Hierarchy
--------------
All items inherit from :class:`Item` and support the visitor pattern.

Container items:
    - Table: a ``[header]`` table, the document root, or a table created
      implicitly by a dotted key or a nested header
    - ArrayOfTables: the tables of a ``[[header]]`` sequence

Values (usable anywhere a value is allowed):
    - String, Integer, Float, Boolean, DateTime (scalars)
    - Array, InlineTable

Supporting nodes:
    - Key: one segment of a key path, as written
    - TableKeyValue: one entry of a table, linking a key to its item

Tables and inline tables are ordered, key-unique mappings and implement the
:class:`collections.abc.MutableMapping` protocol. Assigning a plain Python
value converts it with :func:`item` (tables) or :func:`value` (inline tables
and arrays); assigning an existing item stores an independent copy of it.

Trees produced by the parser are frozen: the containers of an
:class:`~tomlspan.document.ImDocument` raise
:class:`~tomlspan.exceptions.ReadOnlyItemError` on assignment, deletion and
append until :meth:`~tomlspan.document.ImDocument.into_mut` hands the tree
to an editable document.

"""

from __future__ import annotations

import copy
import datetime
from abc import ABC, abstractmethod
from collections.abc import ItemsView, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any, Optional

from tomlspan.ast.raw import Decor, RawString, Repr, Span
from tomlspan.exceptions import ReadOnlyItemError


@dataclass
class Key:
    """One segment of a key path.

    Parameters
    ----------
    key : str
        The decoded key name used for lookups
    repr : Repr or None, default = None
        The key as written in the source (bare, basic or literal quoted).
        None for keys created programmatically.
    decor : Decor, default = empty Decor
        Whitespace around the key segment

    """

    key: str
    repr: Optional[Repr] = None
    decor: Decor = field(default_factory=Decor)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this key."""
        return visitor.visit_key(self)

    def clone(self) -> Key:
        """Return an independent copy sharing no span text objects."""
        return Key(key=self.key, repr=self.repr.copy() if self.repr is not None else None, decor=self.decor.copy())


class Item(ABC):
    """Base class for all element tree items.

    Attributes
    ----------
    span : tuple of int or None
        Position of the item in the source text, for diagnostics. Cleared
        when the tree is detached from its source.
    frozen : bool
        Whether the item belongs to an immutable document and rejects edits

    """

    span: Optional[Span]
    frozen: bool = False

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this item.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """

    @abstractmethod
    def unwrap(self) -> Any:
        """Convert the item to plain Python data, dropping formatting."""

    @property
    @abstractmethod
    def type_name(self) -> str:
        """Human-readable kind of the item."""

    def is_table(self) -> bool:
        """Whether the item is a (non-inline) table."""
        return isinstance(self, Table)

    def as_table(self) -> Optional[Table]:
        """Return the item as a table, or None."""
        return self if isinstance(self, Table) else None

    def as_array_of_tables(self) -> Optional[ArrayOfTables]:
        """Return the item as an array of tables, or None."""
        return self if isinstance(self, ArrayOfTables) else None

    def as_value(self) -> Optional[Value]:
        """Return the item as a value, or None."""
        return self if isinstance(self, Value) else None

    def as_inline_table(self) -> Optional[InlineTable]:
        """Return the item as an inline table, or None."""
        return self if isinstance(self, InlineTable) else None

    def as_array(self) -> Optional[Array]:
        """Return the item as an array value, or None."""
        return self if isinstance(self, Array) else None


class Value(Item):
    """Base class for values: scalars, arrays and inline tables."""

    decor: Decor


# ============================================================================
# Scalars
# ============================================================================


@dataclass
class Scalar(Value):
    """A scalar value with its source representation.

    Parameters
    ----------
    value : Any
        The decoded Python value
    repr : Repr or None, default = None
        Literal text of the value in the source; None for values created
        programmatically, which the renderer formats itself
    decor : Decor, default = empty Decor
        Whitespace/comments around the value
    span : tuple of int or None, default = None
        Source position

    """

    value: Any
    repr: Optional[Repr] = None
    decor: Decor = field(default_factory=Decor)
    span: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this scalar."""
        return visitor.visit_scalar(self)

    def unwrap(self) -> Any:
        """Return the decoded Python value."""
        return self.value

    @property
    def type_name(self) -> str:
        """Human-readable kind of the item."""
        return type(self).__name__.lower()


@dataclass
class String(Scalar):
    """A string value (basic, literal or multi-line)."""


@dataclass
class Integer(Scalar):
    """An integer value (decimal, hex, octal or binary)."""


@dataclass
class Float(Scalar):
    """A float value, including ``inf`` and ``nan``."""


@dataclass
class Boolean(Scalar):
    """A ``true`` or ``false`` value."""


@dataclass
class DateTime(Scalar):
    """An offset/local date-time, local date, or local time value."""


# ============================================================================
# Arrays
# ============================================================================


@dataclass
class Array(Value):
    """An array value.

    Parameters
    ----------
    values : list of Value, default = empty list
        Elements in order; each carries its own decor
    trailing : RawString, default = empty
        Whitespace/comments after the last element (after the trailing
        comma if there is one) and before ``]``
    trailing_comma : bool, default = False
        Whether the last element is followed by a comma
    decor : Decor, default = empty Decor
        Whitespace/comments around the whole array
    span : tuple of int or None, default = None
        Source position

    """

    values: list[Value] = field(default_factory=list)
    trailing: RawString = field(default_factory=RawString)
    trailing_comma: bool = False
    decor: Decor = field(default_factory=Decor)
    span: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this array."""
        return visitor.visit_array(self)

    def unwrap(self) -> list[Any]:
        """Return the elements as plain Python data."""
        return [element.unwrap() for element in self.values]

    @property
    def type_name(self) -> str:
        """Human-readable kind of the item."""
        return "array"

    def append(self, element: Any) -> None:
        """Append an element, converting plain Python data with :func:`value`.

        Raises
        ------
        ReadOnlyItemError
            If the array belongs to an immutable document

        """
        _ensure_mutable(self)
        self.values.append(value(_owned(element)))

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.values)

    def __getitem__(self, index: int) -> Value:
        return self.values[index]


# ============================================================================
# Tables
# ============================================================================


@dataclass
class TableKeyValue:
    """One entry of a table or inline table.

    Parameters
    ----------
    key : Key
        The entry's own key (the last segment of the key path)
    item : Item
        The entry's item
    dotted_path : list of Key or None, default = None
        For a key/value line written with a dotted key (``a.b.c = 1``), the
        leading segments as written on that line, relative to the table the
        line belongs to. None for single-segment keys and programmatic entries.
    position : int or None, default = None
        Document order of the line, used to interleave dotted entries
    newline : str or None, default = None
        Line terminator written after the entry (``"\\n"``, ``"\\r\\n"`` or
        ``""`` at end of file)

    """

    key: Key
    item: Item
    dotted_path: Optional[list[Key]] = None
    position: Optional[int] = None
    newline: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this entry."""
        return visitor.visit_key_value(self)


class TableLike(MutableMapping):
    """Mapping behaviour shared by :class:`Table` and :class:`InlineTable`.

    Entries are stored in ``entries`` in insertion order, which is the order
    keys first appear in the source.
    """

    entries: dict[str, TableKeyValue]

    def _coerce(self, obj: Any) -> Item:
        return item(obj)

    def __getitem__(self, key: str) -> Item:
        return self.entries[key].item

    def __setitem__(self, key: str, obj: Any) -> None:
        _ensure_mutable(self)
        new_item = self._coerce(_owned(obj))
        existing = self.entries.get(key)
        if existing is None:
            self.entries[key] = TableKeyValue(key=Key(key), item=new_item)
            return
        old_item = existing.item
        if (
            isinstance(new_item, Value)
            and isinstance(old_item, Value)
            and new_item.decor.prefix is None
            and new_item.decor.suffix is None
        ):
            # Keep comments and spacing around a replaced value
            new_item.decor = old_item.decor.copy()
        existing.item = new_item

    def __delitem__(self, key: str) -> None:
        _ensure_mutable(self)
        del self.entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def iter(self) -> ItemsView:
        """Return a lazy, restartable view of ``(key, item)`` pairs in order."""
        return self.items()

    def entry(self, key: str) -> TableKeyValue:
        """Return the entry stored under ``key``."""
        return self.entries[key]

    def get_key(self, key: str) -> Key:
        """Return the :class:`Key` stored for ``key``."""
        return self.entries[key].key

    def is_empty(self) -> bool:
        """Whether the table has no entries."""
        return not self.entries

    def unwrap(self) -> dict[str, Any]:
        """Return the entries as a plain ``dict``."""
        return {name: kv.item.unwrap() for name, kv in self.entries.items()}


@dataclass(eq=False)
class Table(TableLike, Item):
    """A standard table.

    Parameters
    ----------
    entries : dict, default = empty dict
        Ordered entries keyed by decoded key name
    decor : Decor, default = empty Decor
        For a header table, the text before ``[`` (prefix) and after the
        closing bracket up to the line terminator (suffix)
    implicit : bool, default = False
        Created implicitly by a nested header or a dotted key; implicit
        tables without body entries get no header line
    dotted : bool, default = False
        Created by a dotted key; rendered as key prefixes, never as a header
    position : int or None, default = None
        Document order of the header line (the root table has position 0)
    header_keys : list of Key or None, default = None
        The header key path as written
    newline : str or None, default = None
        Line terminator after the header line
    span : tuple of int or None, default = None
        Source position of the header line

    """

    entries: dict[str, TableKeyValue] = field(default_factory=dict)
    decor: Decor = field(default_factory=Decor)
    implicit: bool = False
    dotted: bool = False
    position: Optional[int] = None
    header_keys: Optional[list[Key]] = None
    newline: Optional[str] = None
    span: Optional[Span] = None

    @classmethod
    def with_pos(cls, position: Optional[int]) -> Table:
        """Create an empty table at the given document position."""
        return cls(position=position)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table."""
        return visitor.visit_table(self)

    @property
    def type_name(self) -> str:
        """Human-readable kind of the item."""
        return "table"

    def __repr__(self) -> str:
        return f"Table({list(self.entries)!r}, position={self.position!r})"


@dataclass(eq=False)
class InlineTable(TableLike, Value):
    """An inline table value (``{ a = 1, b = 2 }``).

    Parameters
    ----------
    entries : dict, default = empty dict
        Ordered entries; items are values (dotted keys create nested
        inline tables with ``dotted=True``)
    preamble : RawString, default = empty
        Whitespace inside the braces of an empty inline table
    decor : Decor, default = empty Decor
        Whitespace/comments around the inline table
    dotted : bool, default = False
        Created by a dotted key inside another inline table
    span : tuple of int or None, default = None
        Source position

    """

    entries: dict[str, TableKeyValue] = field(default_factory=dict)
    preamble: RawString = field(default_factory=RawString)
    decor: Decor = field(default_factory=Decor)
    dotted: bool = False
    span: Optional[Span] = None

    def _coerce(self, obj: Any) -> Item:
        return value(obj)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline table."""
        return visitor.visit_inline_table(self)

    @property
    def type_name(self) -> str:
        """Human-readable kind of the item."""
        return "inline table"

    def __repr__(self) -> str:
        return f"InlineTable({list(self.entries)!r})"


@dataclass
class ArrayOfTables(Item):
    """The tables of a ``[[header]]`` sequence, in order.

    Parameters
    ----------
    tables : list of Table, default = empty list
        The tables, each with its own header decor and position
    span : tuple of int or None, default = None
        Source position of the first header

    """

    tables: list[Table] = field(default_factory=list)
    span: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this array of tables."""
        return visitor.visit_array_of_tables(self)

    def unwrap(self) -> list[dict[str, Any]]:
        """Return the tables as a list of plain dicts."""
        return [table.unwrap() for table in self.tables]

    @property
    def type_name(self) -> str:
        """Human-readable kind of the item."""
        return "array of tables"

    def append(self, table: Table | Mapping[str, Any]) -> None:
        """Append a table, converting a plain mapping with :func:`item`.

        Raises
        ------
        ReadOnlyItemError
            If the array of tables belongs to an immutable document

        """
        _ensure_mutable(self)
        new_table = item(_owned(table))
        if not isinstance(new_table, Table):
            raise TypeError(f"Expected a table, got {type(table).__name__}")
        self.tables.append(new_table)

    def __len__(self) -> int:
        return len(self.tables)

    def __iter__(self) -> Iterator[Table]:
        return iter(self.tables)

    def __getitem__(self, index: int) -> Table:
        return self.tables[index]


# ============================================================================
# Read-only trees
# ============================================================================


def _ensure_mutable(node: Item) -> None:
    if node.frozen:
        raise ReadOnlyItemError(f"Cannot modify a {node.type_name} of an immutable document; use into_mut() first")


def _children(node: Item) -> Iterator[Item]:
    if isinstance(node, (Table, InlineTable)):
        for entry in node.entries.values():
            yield entry.item
    elif isinstance(node, Array):
        yield from node.values
    elif isinstance(node, ArrayOfTables):
        yield from node.tables


def set_frozen(node: Item, frozen: bool) -> None:
    """Mark ``node`` and every item below it as read-only or editable."""
    pending = [node]
    while pending:
        current = pending.pop()
        current.frozen = frozen
        pending.extend(_children(current))


def _owned(obj: Any) -> Any:
    # Items are stored by copy so one node never sits in two places
    if not isinstance(obj, Item):
        return obj
    clone = copy.deepcopy(obj)
    set_frozen(clone, False)
    return clone


# ============================================================================
# Conversion from plain Python data
# ============================================================================

_DATETIME_TYPES = (datetime.datetime, datetime.date, datetime.time)


def value(obj: Any) -> Value:
    """Convert plain Python data into a :class:`Value`.

    Mappings become inline tables and sequences become arrays. Values are
    created without a source representation; the renderer formats them.

    Raises
    ------
    TypeError
        If ``obj`` has no TOML equivalent

    """
    if isinstance(obj, Value):
        return obj
    if isinstance(obj, Item):
        raise TypeError(f"A {obj.type_name} cannot be used as a value")
    if isinstance(obj, bool):
        return Boolean(obj)
    if isinstance(obj, int):
        return Integer(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, _DATETIME_TYPES):
        return DateTime(obj)
    if isinstance(obj, Mapping):
        inline = InlineTable()
        for name, element in obj.items():
            inline[str(name)] = element
        return inline
    if isinstance(obj, (list, tuple)):
        return Array(values=[value(element) for element in obj])
    raise TypeError(f"Cannot convert {type(obj).__name__} to a TOML value")


def item(obj: Any) -> Item:
    """Convert plain Python data into an :class:`Item` for a standard table.

    Mappings become standard tables and non-empty lists of mappings become
    arrays of tables; everything else goes through :func:`value`.
    """
    if isinstance(obj, Item):
        return obj
    if isinstance(obj, Mapping):
        table = Table()
        for name, element in obj.items():
            table[str(name)] = element
        return table
    if isinstance(obj, (list, tuple)) and obj and all(isinstance(e, Mapping) for e in obj):
        aot = ArrayOfTables()
        for element in obj:
            aot.append(element)
        return aot
    return value(obj)
