#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/ast/visitors.py
"""Visitor pattern implementation for element tree traversal.

This module provides the visitor base classes for walking the element tree.
:class:`RawStringWalker` visits every span-bearing node exactly once and
hands each :class:`~tomlspan.ast.raw.RawString` it finds to
:meth:`RawStringWalker.visit_raw`; the two concrete walkers built on it are

- :class:`SpanDetacher`, which replaces every span reference with an owned
  copy of the source text (the "despan" pass run by
  :meth:`tomlspan.document.ImDocument.into_mut`), and
- :class:`SpanCollector`, which gathers the references still present, for
  diagnostics.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from tomlspan.ast.nodes import (
    Array,
    ArrayOfTables,
    InlineTable,
    Item,
    Key,
    Scalar,
    Table,
    TableKeyValue,
)
from tomlspan.ast.raw import Decor, RawString

logger = logging.getLogger(__name__)


class NodeVisitor(ABC):
    """Abstract base class for element tree visitors.

    Subclasses implement a ``visit_*`` method for each node type. Items call
    back into the visitor through their ``accept`` method.

    Examples
    --------
    Counting scalars:

        >>> class ScalarCounter(RawStringWalker):
        ...     def __init__(self):
        ...         self.count = 0
        ...
        ...     def visit_scalar(self, node):
        ...         self.count += 1
        ...         super().visit_scalar(node)
        ...
        ...     def visit_raw(self, raw):
        ...         pass

    """

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""

    @abstractmethod
    def visit_inline_table(self, node: InlineTable) -> Any:
        """Visit an InlineTable node."""

    @abstractmethod
    def visit_array_of_tables(self, node: ArrayOfTables) -> Any:
        """Visit an ArrayOfTables node."""

    @abstractmethod
    def visit_array(self, node: Array) -> Any:
        """Visit an Array node."""

    @abstractmethod
    def visit_scalar(self, node: Scalar) -> Any:
        """Visit a scalar value node."""

    @abstractmethod
    def visit_key(self, node: Key) -> Any:
        """Visit a Key node."""

    @abstractmethod
    def visit_key_value(self, node: TableKeyValue) -> Any:
        """Visit a TableKeyValue entry."""


class RawStringWalker(NodeVisitor):
    """Walk a whole tree, visiting each span text exactly once.

    Every node that can hold span text is visited once: tables (decor and
    header keys), entries (their key and the dotted keys as written),
    arrays (element values and trailing text), inline tables (preamble),
    scalars (representation and decor), and keys (representation and decor).
    The walk never changes tree shape, order or key names.
    """

    @abstractmethod
    def visit_raw(self, raw: RawString) -> None:
        """Handle one span text."""

    def visit_node_span(self, node: Item) -> None:
        """Handle the positional span of an item; nothing by default."""

    def walk(self, node: Item, trailing: Optional[RawString] = None) -> None:
        """Visit ``node`` and, if given, a document's trailing text."""
        node.accept(self)
        if trailing is not None:
            self.visit_raw(trailing)

    def _visit_decor(self, decor: Decor) -> None:
        for raw in decor.raw_strings():
            self.visit_raw(raw)

    def visit_table(self, node: Table) -> None:
        self._visit_decor(node.decor)
        if node.header_keys is not None:
            for key in node.header_keys:
                key.accept(self)
        for entry in node.entries.values():
            entry.accept(self)
        self.visit_node_span(node)

    def visit_inline_table(self, node: InlineTable) -> None:
        self.visit_raw(node.preamble)
        self._visit_decor(node.decor)
        for entry in node.entries.values():
            entry.accept(self)
        self.visit_node_span(node)

    def visit_array_of_tables(self, node: ArrayOfTables) -> None:
        for table in node.tables:
            table.accept(self)
        self.visit_node_span(node)

    def visit_array(self, node: Array) -> None:
        for element in node.values:
            element.accept(self)
        self.visit_raw(node.trailing)
        self._visit_decor(node.decor)
        self.visit_node_span(node)

    def visit_scalar(self, node: Scalar) -> None:
        if node.repr is not None:
            self.visit_raw(node.repr.raw)
        self._visit_decor(node.decor)
        self.visit_node_span(node)

    def visit_key(self, node: Key) -> None:
        if node.repr is not None:
            self.visit_raw(node.repr.raw)
        self._visit_decor(node.decor)

    def visit_key_value(self, node: TableKeyValue) -> None:
        if node.dotted_path is not None:
            for key in node.dotted_path:
                key.accept(self)
        node.key.accept(self)
        node.item.accept(self)


class SpanDetacher(RawStringWalker):
    """Replace every span reference in a tree with an owned copy.

    The walk also clears the source position of every item and makes the
    items editable again.

    Parameters
    ----------
    source : str
        The text the spans refer into

    Attributes
    ----------
    detached : int
        Number of span references converted so far

    """

    def __init__(self, source: str):
        """Bind the detacher to the source text."""
        self.source = source
        self.detached = 0

    def visit_raw(self, raw: RawString) -> None:
        if raw.is_spanned:
            raw.despan(self.source)
            self.detached += 1

    def visit_node_span(self, node: Item) -> None:
        node.span = None
        node.frozen = False


class SpanCollector(RawStringWalker):
    """Collect the span text objects that still refer into a source.

    Examples
    --------
    A detached document holds no references:

        >>> collector = SpanCollector()
        >>> collector.walk(doc.as_item(), doc.trailing())
        >>> collector.spans
        []

    """

    def __init__(self) -> None:
        """Start with an empty collection."""
        self.spans: list[RawString] = []

    def visit_raw(self, raw: RawString) -> None:
        if raw.is_spanned:
            self.spans.append(raw)


def collect_spans(node: Item, trailing: Optional[RawString] = None) -> list[RawString]:
    """Return every span reference left in ``node`` (and ``trailing``)."""
    collector = SpanCollector()
    collector.walk(node, trailing)
    return collector.spans


def detach_spans(node: Item, source: str, trailing: Optional[RawString] = None) -> int:
    """Detach every span reference in ``node`` from ``source``.

    Returns
    -------
    int
        Number of references converted

    """
    detacher = SpanDetacher(source)
    detacher.walk(node, trailing)
    logger.debug("Detached %d span references", detacher.detached)
    return detacher.detached
