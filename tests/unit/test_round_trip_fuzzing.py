#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_round_trip_fuzzing.py
"""Property-based round-trip tests for parsing and rendering.

Hypothesis builds TOML text from random keys, values, whitespace, comments
and line terminators. Documents mix dotted keys, nested and implied tables,
arrays of tables, multi-line strings and arrays spread over several lines.
The properties check that:

- raw() returns the exact input
- both document forms render back to the exact input
- the decoded data matches tomllib
- conversion to the mutable form keeps keys and their order
"""

import string
import sys

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from tomlspan import ImDocument, dumps, parse, parse_mut
from tomlspan.ast import collect_spans

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

keys = st.from_regex(r"[a-z][a-z0-9_-]{0,8}", fullmatch=True)
spaces = st.sampled_from(["", " ", "  ", "\t"])
newlines = st.sampled_from(["\n", "\r\n"])
comments = st.text(alphabet=string.ascii_letters + string.digits + " ", max_size=20).map(lambda text: "#" + text)
# Whitespace, comments and line breaks allowed between array elements
array_gaps = st.sampled_from(["", " ", "\t", "\n", "\r\n", "\n  ", " # note\n", " # note\r\n"])

scalar_literals = st.one_of(
    st.integers(min_value=-(2**63), max_value=2**63 - 1).map(str),
    st.booleans().map(lambda flag: "true" if flag else "false"),
    st.text(alphabet=string.ascii_letters + string.digits + " _-.", max_size=15).map(lambda text: f'"{text}"'),
    st.text(alphabet=string.ascii_letters + string.digits + " \\", max_size=15).map(lambda text: f"'{text}'"),
    st.dates().map(lambda day: day.isoformat()),
)

multiline_text = st.text(alphabet=string.ascii_letters + string.digits + " \n", max_size=30)
multiline_literals = st.one_of(
    multiline_text.map(lambda text: f'"""{text}"""'),
    multiline_text.map(lambda text: f"'''{text}'''"),
)


@st.composite
def array_literals(draw):
    """Arrays spread over lines, with comments and an optional trailing comma."""
    elements = draw(st.lists(st.one_of(scalar_literals, multiline_literals), max_size=4))
    parts = [draw(array_gaps) + element + draw(array_gaps) for element in elements]
    trailing_comma = "," if elements and draw(st.booleans()) else ""
    return "[" + ",".join(parts) + trailing_comma + draw(array_gaps) + "]"


@st.composite
def inline_table_literals(draw):
    """Inline tables of scalars with random spacing."""
    names = draw(st.lists(keys, max_size=3, unique=True))
    parts = [draw(spaces) + name + draw(spaces) + "=" + draw(spaces) + draw(scalar_literals) + draw(spaces) for name in names]
    if not parts:
        return "{" + draw(spaces) + "}"
    return "{" + ",".join(parts) + "}"


FUZZ_SETTINGS = settings(deadline=None, suppress_health_check=[HealthCheck.too_slow])

values = st.one_of(scalar_literals, multiline_literals, array_literals(), inline_table_literals())


def dotted(draw, segments):
    """Join key segments with dots and random spacing."""
    return segments[0] + "".join(draw(spaces) + "." + draw(spaces) + segment for segment in segments[1:])


@st.composite
def key_value_lines(draw):
    """Key/value lines with random decoration.

    Some keys are dotted under the shared tables ``G`` and ``G.H``; lowercase
    names are unique, so no key is defined twice.
    """
    lines = []
    for name in draw(st.lists(keys, max_size=4, unique=True)):
        path = draw(st.sampled_from([[name], ["G", name], ["G", "H", name]]))
        prefix = draw(st.sampled_from(["", "\n", draw(comments) + draw(newlines)]))
        suffix = draw(st.one_of(st.just(""), spaces, comments.map(lambda comment: " " + comment)))
        line = prefix + draw(spaces) + dotted(draw, path) + draw(spaces) + "=" + draw(spaces) + draw(values) + suffix
        lines.append(line + draw(newlines))
    return "".join(lines)


@st.composite
def header_line(draw, segments, is_array=False):
    """A ``[table]`` or ``[[array]]`` header line with random decoration."""
    open_bracket, close_bracket = ("[[", "]]") if is_array else ("[", "]")
    prefix = draw(st.sampled_from(["", "\n", draw(comments) + draw(newlines)]))
    suffix = draw(st.one_of(st.just(""), spaces, comments.map(lambda comment: " " + comment)))
    path = draw(spaces) + dotted(draw, segments) + draw(spaces)
    return prefix + open_bracket + path + close_bracket + suffix + draw(newlines)


@st.composite
def documents(draw):
    """Documents with root keys, nested and implied tables, arrays of tables and a trailing comment.

    Header names get an uppercase first letter (``T``, ``S``, ``I``, ``A``)
    so they never collide with lowercase keys.
    """
    text = draw(key_value_lines())
    for table_name in draw(st.lists(keys, max_size=3, unique=True)):
        text += draw(header_line(["T" + table_name])) + draw(key_value_lines())
        for sub_name in draw(st.lists(keys, max_size=2, unique=True)):
            text += draw(header_line(["T" + table_name, "S" + sub_name])) + draw(key_value_lines())
    for implied_name in draw(st.lists(keys, max_size=2, unique=True)):
        # Only the child is declared; the parent exists implicitly
        text += draw(header_line(["I" + implied_name, "S" + draw(keys)])) + draw(key_value_lines())
    for array_name in draw(st.lists(keys, max_size=2, unique=True)):
        for _ in range(draw(st.integers(min_value=1, max_value=3))):
            text += draw(header_line(["A" + array_name], is_array=True)) + draw(key_value_lines())
    if draw(st.booleans()):
        text += draw(comments)
    return text


@pytest.mark.unit
@pytest.mark.fuzzing
class TestRoundTripFuzzing:
    """Property-based round-trip tests."""

    @FUZZ_SETTINGS
    @given(documents())
    def test_raw_is_input(self, text):
        """Property: raw() returns the parsed text unchanged."""
        assert parse(text).raw() == text

    @FUZZ_SETTINGS
    @given(documents())
    def test_immutable_render_is_exact(self, text):
        """Property: rendering an unmodified immutable document reproduces the input."""
        assert dumps(parse(text)) == text

    @FUZZ_SETTINGS
    @given(documents())
    def test_mutable_render_is_exact(self, text):
        """Property: rendering an unmodified mutable document reproduces the input."""
        assert dumps(parse_mut(text)) == text

    @FUZZ_SETTINGS
    @given(documents())
    def test_data_matches_tomllib(self, text):
        """Property: decoded data equals tomllib's."""
        assert parse(text).as_table().unwrap() == tomllib.loads(text)

    @FUZZ_SETTINGS
    @given(documents())
    def test_into_mut_keeps_keys(self, text):
        """Property: conversion keeps top-level keys in order and leaves no spans."""
        im = ImDocument.parse(text)
        keys_before = list(im)
        doc = im.into_mut()
        assert list(doc) == keys_before
        assert collect_spans(doc.as_table(), doc.trailing()) == []

    @FUZZ_SETTINGS
    @given(documents(), keys, scalar_literals)
    def test_edit_result_reparses(self, text, name, literal):
        """Property: setting a root key yields valid TOML with the new value."""
        doc = parse_mut(text)
        new_value = parse_mut(f"v = {literal}\n")["v"]
        doc[name] = new_value
        reparsed = tomllib.loads(dumps(doc))
        assert reparsed[name] == tomllib.loads(f"v = {literal}\n")["v"]
