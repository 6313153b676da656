#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/ast/raw.py
"""Span text primitives.

A :class:`RawString` is either a reference into the source text of a parsed
document (a ``(start, end)`` pair of ``str`` indices) or an owned string.
Parsed trees are built entirely out of references, which keeps parsing
zero-copy; :meth:`RawString.despan` resolves a reference against the source
and replaces it with an owned copy so the tree no longer depends on it.

:class:`Decor` and :class:`Repr` wrap raw strings for the whitespace/comments
around an element and for its literal representation.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

Span = tuple[int, int]


class RawString:
    """Text that is either a span into a source or an owned string.

    Parameters
    ----------
    text : str, default = ""
        Owned text. Ignored when ``span`` is given.
    span : tuple of int, optional
        ``(start, end)`` indices into the source text

    Examples
    --------
    >>> raw = RawString(span=(0, 5))
    >>> raw.is_spanned
    True
    >>> raw.to_str("hello world")
    'hello'
    >>> raw.despan("hello world")
    >>> raw.as_str()
    'hello'

    """

    __slots__ = ("_text", "_span")

    def __init__(self, text: str = "", span: Optional[Span] = None):
        """Create owned text, or a reference when ``span`` is given."""
        if span is not None:
            start, end = span
            if start < 0 or end < start:
                raise ValueError(f"Invalid span: {span!r}")
            self._text: Optional[str] = None
            self._span: Optional[Span] = (start, end)
        else:
            self._text = text
            self._span = None

    @classmethod
    def with_span(cls, start: int, end: int) -> RawString:
        """Create a reference to ``source[start:end]``."""
        if start == end:
            return cls()
        return cls(span=(start, end))

    @property
    def is_spanned(self) -> bool:
        """Whether this text still refers into a source."""
        return self._span is not None

    @property
    def span(self) -> Optional[Span]:
        """The ``(start, end)`` reference, or None for owned text."""
        return self._span

    def as_str(self) -> Optional[str]:
        """Return the owned text, or None if this is still a reference."""
        return self._text

    def to_str(self, source: Optional[str]) -> str:
        """Return the text, resolving a reference against ``source``.

        Raises
        ------
        ValueError
            If this is a reference and no source is given

        """
        if self._span is None:
            assert self._text is not None
            return self._text
        if source is None:
            raise ValueError(f"RawString span {self._span!r} cannot be resolved without a source")
        start, end = self._span
        return source[start:end]

    def despan(self, source: str) -> None:
        """Replace a reference with an owned copy of ``source[start:end]``.

        Owned text is left untouched.
        """
        if self._span is not None:
            start, end = self._span
            self._text = source[start:end]
            self._span = None

    def copy(self) -> RawString:
        """Return an independent copy."""
        if self._span is not None:
            return RawString(span=self._span)
        return RawString(self._text or "")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RawString):
            return self._text == other._text and self._span == other._span
        if isinstance(other, str):
            return self._span is None and self._text == other
        return NotImplemented

    def __repr__(self) -> str:
        if self._span is not None:
            return f"RawString(span={self._span!r})"
        return f"RawString({self._text!r})"


def _to_raw(value: RawString | str | None) -> Optional[RawString]:
    if value is None or isinstance(value, RawString):
        return value
    return RawString(value)


@dataclass
class Decor:
    """Whitespace and comments surrounding an element.

    ``None`` means "not set": the renderer falls back to a default that
    depends on where the element appears.

    Parameters
    ----------
    prefix : RawString or None, default = None
        Text before the element
    suffix : RawString or None, default = None
        Text after the element

    """

    prefix: Optional[RawString] = None
    suffix: Optional[RawString] = None

    def __post_init__(self) -> None:
        self.prefix = _to_raw(self.prefix)
        self.suffix = _to_raw(self.suffix)

    def set_prefix(self, prefix: RawString | str | None) -> None:
        """Set the text before the element."""
        self.prefix = _to_raw(prefix)

    def set_suffix(self, suffix: RawString | str | None) -> None:
        """Set the text after the element."""
        self.suffix = _to_raw(suffix)

    def clear(self) -> None:
        """Reset both sides to the renderer defaults."""
        self.prefix = None
        self.suffix = None

    def copy(self) -> Decor:
        """Return an independent copy."""
        return Decor(
            prefix=self.prefix.copy() if self.prefix is not None else None,
            suffix=self.suffix.copy() if self.suffix is not None else None,
        )

    def raw_strings(self) -> list[RawString]:
        """Return the raw strings that are set."""
        return [raw for raw in (self.prefix, self.suffix) if raw is not None]


@dataclass
class Repr:
    """The literal source representation of a key or scalar value."""

    raw: RawString = field(default_factory=RawString)

    def __post_init__(self) -> None:
        if isinstance(self.raw, str):
            self.raw = RawString(self.raw)

    def copy(self) -> Repr:
        """Return an independent copy."""
        return Repr(self.raw.copy())
