#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/renderers/test_toml_renderer.py
"""Unit tests for the TOML renderer."""

import datetime
from io import BytesIO, StringIO

import pytest

from tomlspan.ast import Decor, Table, value
from tomlspan.document import Document, ImDocument
from tomlspan.exceptions import InvalidOptionsError, RenderingError
from tomlspan.options.toml import TomlRendererOptions
from tomlspan.renderers.toml import TomlRenderer

ROUND_TRIP_CASES = [
    "",
    "\n\n",
    "# only a comment",
    "a = 1",
    "a = 1\n",
    "a=1\nb   =   'two'   # note\n",
    "a = 1\r\nb = 2\r\n",
    "a = 1\n\n# trailing comment\n",
    'title = "demo"\n\n[server]\nport = 8080\n',
    "[server]  # main\nport = 8080\n",
    "  [ spaced . header ]  \nx = 1\n",
    "a.b = 1\nc = 2\na.d = 3\n",
    "a . b   =  1\n",
    'site."google.com" = true\n',
    "[a.b]\nx = 1\n[a]\ny = 2\n",
    "[a.b.c]\n",
    "[[fruit]]\nname = 'apple'\n\n[fruit.info]\ncolor = 'red'\n\n[[fruit]]\nname = 'pear'\n",
    "arr = [ 1, 2, ]\n",
    "arr = [\n  1,  # one\n  2,\n  # end of list\n]\n",
    "m = [[1, 2], ['a', \"b\"]]\n",
    "p = { x = 1, y.z = 2 }\n",
    "p = {x=1,y={}}\n",
    "e = {  }\n",
    's = """\nmulti\nline"""\n',
    "s = '''raw \\n text'''\n",
    "d1 = 1979-05-27\nd2 = 1979-05-27 07:32:00\nd3 = 07:32:00.999\nd4 = 1979-05-27T00:32:00-07:00\n",
    "hex = 0xDEAD_beef\nexp = 1E+3\ninf = -inf\nnan = nan\n",
    "\"quoted key\" = 1\n'literal key' = 2\n",
    "a = 1 # no trailing newline",
    "# header\n\n[t]\n\n# comment before key\nk = 1\n\n\n# comment at end",
]


@pytest.mark.unit
class TestTomlRendererInitialization:
    """Test TOML renderer initialization."""

    def test_default_options(self):
        """Test default options are created."""
        renderer = TomlRenderer()
        assert isinstance(renderer.options, TomlRendererOptions)
        assert renderer.options.default_newline == "\n"

    def test_invalid_options(self):
        """Test wrong options types are rejected."""
        with pytest.raises(InvalidOptionsError):
            TomlRenderer(options=object())


@pytest.mark.unit
class TestRoundTrip:
    """Test unmodified documents render to their exact source."""

    @pytest.mark.parametrize("text", ROUND_TRIP_CASES)
    def test_imdocument_round_trip(self, text):
        """Test the immutable form renders its source exactly."""
        assert TomlRenderer().render_to_string(ImDocument.parse(text)) == text

    @pytest.mark.parametrize("text", ROUND_TRIP_CASES)
    def test_document_round_trip(self, text):
        """Test the mutable form renders its source exactly."""
        assert TomlRenderer().render_to_string(ImDocument.parse(text).into_mut()) == text

    def test_sample_round_trip(self, sample_toml):
        """Test the shared sample document round trips."""
        assert str(Document.parse(sample_toml)) == sample_toml


@pytest.mark.unit
class TestEdits:
    """Test edits change only what they touch."""

    def test_replace_value_keeps_comment(self):
        """Test a replaced value keeps its spacing and comment."""
        doc = Document.parse("port = 8080   # default\nhost = 'x'\n")
        doc["port"] = 9090
        assert str(doc) == "port = 9090   # default\nhost = 'x'\n"

    def test_replace_string_formats_with_escapes(self):
        """Test new strings are written as escaped basic strings."""
        doc = Document.parse("name = 'old'\n")
        doc["name"] = 'say "hi"'
        assert str(doc) == 'name = "say \\"hi\\""\n'

    def test_add_key_to_root_before_tables(self):
        """Test new root keys go after existing root keys, before headers."""
        doc = Document.parse("a = 1\n\n[t]\nx = 1\n")
        doc["b"] = True
        assert str(doc) == "a = 1\nb = true\n\n[t]\nx = 1\n"

    def test_add_key_to_table(self):
        """Test new keys go at the end of their table."""
        doc = Document.parse("[t]\nx = 1\n\n[u]\ny = 2\n")
        doc["t"]["z"] = 3
        assert str(doc) == "[t]\nx = 1\nz = 3\n\n[u]\ny = 2\n"

    def test_add_key_to_dotted_table(self):
        """Test new keys in dotted tables follow their siblings and use the full key path."""
        doc = Document.parse("a.b = 1\nc = 2\n")
        doc["a"]["x"] = 3
        assert str(doc) == "a.b = 1\na.x = 3\nc = 2\n"

    def test_add_table(self):
        """Test a new table is appended after a blank line."""
        doc = Document.parse("a = 1\n")
        doc["t"] = {"x": 1}
        assert str(doc) == "a = 1\n\n[t]\nx = 1\n"

    def test_add_nested_table_after_parent(self):
        """Test a new sub-table follows the table it belongs to."""
        doc = Document.parse("[a]\nx = 1\n\n[b]\ny = 2\n")
        doc["a"]["sub"] = {"z": 3}
        assert str(doc) == "[a]\nx = 1\n\n[a.sub]\nz = 3\n\n[b]\ny = 2\n"

    def test_delete_key_removes_its_comments(self):
        """Test comment lines belong to the key they precede."""
        doc = Document.parse("# about a\na = 1\nb = 2\n")
        del doc["a"]
        assert str(doc) == "b = 2\n"

    def test_delete_table(self):
        """Test deleting a table removes its header and body."""
        doc = Document.parse("a = 1\n\n[t]\nx = 1\n\n[u]\ny = 2\n")
        del doc["t"]
        assert str(doc) == "a = 1\n\n[u]\ny = 2\n"

    def test_append_to_array(self):
        """Test appended elements get a space after the comma."""
        doc = Document.parse("arr = [1, 2]  # list\n")
        doc["arr"].append(3)
        assert str(doc) == "arr = [1, 2, 3]  # list\n"

    def test_append_to_array_of_tables(self):
        """Test appended tables follow the last table of the array."""
        doc = Document.parse("[[fruit]]\nname = 'apple'\n\n[other]\nx = 1\n")
        doc["fruit"].append({"name": "pear"})
        assert str(doc) == "[[fruit]]\nname = 'apple'\n\n[[fruit]]\nname = \"pear\"\n\n[other]\nx = 1\n"

    def test_add_after_unterminated_last_line(self):
        """Test a newline is inserted when the last line had none."""
        doc = Document.parse("a = 1")
        doc["b"] = 2
        assert str(doc) == "a = 1\nb = 2\n"

    def test_trailing_after_unterminated_last_line(self):
        """Test trailing text starts on its own line."""
        doc = Document.parse("a = 1")
        doc.set_trailing("# end\n")
        assert str(doc) == "a = 1\n# end\n"

    def test_edit_inline_table_keeps_existing_spacing(self):
        """Test keys added to inline tables leave existing spacing alone."""
        doc = Document.parse("p = { x = 1 }\n")
        doc["p"]["y"] = 2
        assert str(doc) == "p = { x = 1 , y = 2 }\n"

    def test_implicit_table_gets_header_when_filled(self):
        """Test a table only implied by a header is written once it has keys."""
        doc = Document.parse("[a.b]\nx = 1\n")
        doc["a"]["y"] = 2
        assert str(doc) == "[a]\ny = 2\n[a.b]\nx = 1\n"

    def test_crlf_default_newline(self):
        """Test the default line terminator is configurable."""
        doc = Document()
        doc["a"] = 1
        doc["t"] = {"b": 2}
        renderer = TomlRenderer(TomlRendererOptions(default_newline="\r\n", table_separator="\r\n"))
        assert renderer.render_to_string(doc) == "a = 1\r\n\r\n[t]\r\nb = 2\r\n"

    def test_table_separator(self):
        """Test the separator before new headers is configurable."""
        doc = Document()
        doc["a"] = 1
        doc["t"] = {"b": 2}
        renderer = TomlRenderer(TomlRendererOptions(table_separator=""))
        assert renderer.render_to_string(doc) == "a = 1\n[t]\nb = 2\n"

    def test_replace_with_custom_decor(self):
        """Test a value carrying its own decor uses it."""
        doc = Document.parse("a = 1  # old\n")
        table = doc.as_table_mut()
        table["a"] = 2
        table["a"].decor = Decor(" ", "  # new")
        assert str(doc) == "a = 2  # new\n"


@pytest.mark.unit
class TestProgrammaticDocuments:
    """Test rendering of documents built in code."""

    def test_scalars(self):
        """Test scalar formatting."""
        doc = Document()
        doc["s"] = "text"
        doc["i"] = 42
        doc["f"] = 1.5
        doc["b"] = False
        doc["d"] = datetime.date(2024, 1, 2)
        doc["t"] = datetime.time(7, 30)
        assert str(doc) == 's = "text"\ni = 42\nf = 1.5\nb = false\nd = 2024-01-02\nt = 07:30:00\n'

    def test_collections(self):
        """Test nested and empty arrays."""
        doc = Document()
        doc["arr"] = [1, [2, 3]]
        doc["empty"] = []
        assert str(doc) == "arr = [1, [2, 3]]\nempty = []\n"

    def test_inline_table_value(self):
        """Test inline tables nested in arrays."""
        doc = Document()
        doc["points"] = value([{"x": 1, "y": 2}, {}])
        assert str(doc) == "points = [{ x = 1, y = 2 }, {}]\n"

    def test_keys_needing_quotes(self):
        """Test keys that are not bare are quoted."""
        doc = Document()
        doc["my key"] = 1
        doc["a.b"] = 2
        doc[""] = 3
        assert str(doc) == '"my key" = 1\n"a.b" = 2\n"" = 3\n'

    def test_tables_and_arrays_of_tables(self):
        """Test headers for nested tables and arrays of tables."""
        doc = Document()
        doc["title"] = "demo"
        doc["server"] = {"port": 8080}
        doc["plugins"] = [{"name": "a"}, {"name": "b"}]
        assert str(doc) == (
            'title = "demo"\n'
            "\n[server]\nport = 8080\n"
            '\n[[plugins]]\nname = "a"\n'
            '\n[[plugins]]\nname = "b"\n'
        )

    def test_bare_table(self):
        """Test a table can be rendered as a document root."""
        table = Table()
        table["a"] = 1
        table["sub"] = {"b": 2}
        assert TomlRenderer().render_to_string(table) == "a = 1\n\n[sub]\nb = 2\n"

    def test_render_value(self):
        """Test rendering a single value."""
        doc = Document.parse("v = [ 1,2 ]  # c\n")
        assert TomlRenderer().render_value(doc["v"]) == "[ 1,2 ]"


@pytest.mark.unit
class TestRenderErrors:
    """Test rendering failures."""

    def test_span_without_source(self):
        """Test a spanned tree cannot be rendered without its source."""
        im = ImDocument.parse("a = 1\n")
        with pytest.raises(RenderingError, match="detached"):
            TomlRenderer().render_to_string(im.as_table())

    def test_unsupported_input(self):
        """Test objects other than documents and tables are rejected."""
        with pytest.raises(RenderingError, match="Cannot render"):
            TomlRenderer().render_to_string({"a": 1})


@pytest.mark.unit
class TestRenderOutput:
    """Test writing rendered text to outputs."""

    def test_render_to_path_keeps_crlf(self, tmp_path):
        """Test files are written without newline translation."""
        text = "a = 1\r\nb = 2\r\n"
        path = tmp_path / "out.toml"
        TomlRenderer().render(Document.parse(text), path)
        assert path.read_bytes() == text.encode("utf-8")

    def test_render_to_text_stream(self):
        """Test writing to a text stream."""
        stream = StringIO()
        TomlRenderer().render(Document.parse("a = 1\n"), stream)
        assert stream.getvalue() == "a = 1\n"

    def test_render_to_binary_stream(self):
        """Test writing to a binary stream."""
        stream = BytesIO()
        TomlRenderer().render(Document.parse("a = 1\n"), stream)
        assert stream.getvalue() == b"a = 1\n"
