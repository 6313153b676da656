#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/ast/__init__.py
"""Element tree for format-preserving TOML documents.

The module consists of several components:

- raw: span text (references into a source, or owned strings) and the
  decor/representation wrappers built on it
- nodes: the tagged element tree (tables, arrays of tables, values, keys)
- visitors: visitor base classes and the span detachment/collection walkers

Examples
--------
Building a table by hand:

    >>> from tomlspan.ast import Table
    >>> table = Table()
    >>> table["name"] = "demo"
    >>> table["ports"] = [8080, 8081]
    >>> table.unwrap()
    {'name': 'demo', 'ports': [8080, 8081]}

"""

from __future__ import annotations

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
    Scalar,
    String,
    Table,
    TableKeyValue,
    TableLike,
    Value,
    item,
    set_frozen,
    value,
)
from tomlspan.ast.raw import Decor, RawString, Repr, Span
from tomlspan.ast.visitors import (
    NodeVisitor,
    RawStringWalker,
    SpanCollector,
    SpanDetacher,
    collect_spans,
    detach_spans,
)

__all__ = [
    "Array",
    "ArrayOfTables",
    "Boolean",
    "DateTime",
    "Decor",
    "Float",
    "InlineTable",
    "Integer",
    "Item",
    "Key",
    "NodeVisitor",
    "RawString",
    "RawStringWalker",
    "Repr",
    "Scalar",
    "Span",
    "SpanCollector",
    "SpanDetacher",
    "String",
    "Table",
    "TableKeyValue",
    "TableLike",
    "Value",
    "collect_spans",
    "detach_spans",
    "item",
    "set_frozen",
    "value",
]
