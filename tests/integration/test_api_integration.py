#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_api_integration.py
"""Integration tests for the top-level parse, edit and render workflow."""

import io
import sys

import pytest

import tomlspan
from tomlspan import (
    Document,
    DocumentConsumedError,
    ImDocument,
    InputFileNotFoundError,
    ParsingError,
    TomlParserOptions,
    TomlRenderer,
    TomlRendererOptions,
)
from tomlspan.ast import collect_spans

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

pytestmark = pytest.mark.integration

DATABASE_BLOCK = '\n[database]\n# connection settings\nurl = "postgres://localhost/demo"\npool = { min = 1, max = 10 }\n'


class TestFileRoundTrip:
    """Reading and writing documents through files and streams."""

    def test_parse_path(self, sample_file, sample_toml):
        doc = tomlspan.parse(sample_file)
        assert doc.source_mode == "owned"
        assert doc.raw() == sample_toml
        assert tomlspan.dumps(doc) == sample_toml

    def test_parse_string_is_borrowed(self, sample_toml):
        doc = tomlspan.parse(sample_toml)
        assert doc.source_mode == "borrowed"
        assert doc.raw() is sample_toml

    def test_write_unmodified_file(self, sample_file, sample_toml, tmp_path):
        output = tmp_path / "out.toml"
        TomlRenderer().render(tomlspan.parse_mut(sample_file), output)
        assert output.read_bytes() == sample_toml.encode("utf-8")

    def test_crlf_preserved_through_file(self, tmp_path):
        source = tmp_path / "crlf.toml"
        source.write_bytes(b"a = 1\r\n\r\n[t]\r\nb = 2\r\n")

        doc = tomlspan.parse_mut(source)
        doc["t"]["b"] = 3
        TomlRenderer().render(doc, source)

        assert source.read_bytes() == b"a = 1\r\n\r\n[t]\r\nb = 3\r\n"

    def test_binary_stream(self, sample_toml):
        doc = tomlspan.parse(io.BytesIO(sample_toml.encode("utf-8")))
        assert doc.source_mode == "owned"
        assert tomlspan.dumps(doc) == sample_toml

    def test_render_to_text_stream(self, sample_toml):
        buffer = io.StringIO()
        TomlRenderer().render(tomlspan.parse(sample_toml), buffer)
        assert buffer.getvalue() == sample_toml

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputFileNotFoundError):
            tomlspan.parse(tmp_path / "missing.toml")

    def test_encoding_option(self, tmp_path):
        path = tmp_path / "latin.toml"
        path.write_bytes('name = "café"\n'.encode("latin-1"))

        with pytest.raises(ParsingError):
            tomlspan.parse(path)

        doc = tomlspan.parse(path, TomlParserOptions(encoding="latin-1"))
        assert doc["name"].value == "café"


class TestDataAccess:
    """Decoded data and structure of a parsed document."""

    def test_unwrap_matches_tomllib(self, sample_toml):
        assert tomlspan.parse(sample_toml).as_table().unwrap() == tomllib.loads(sample_toml)

    def test_mutable_unwrap_matches_tomllib(self, sample_toml):
        assert tomlspan.parse_mut(sample_toml).as_table().unwrap() == tomllib.loads(sample_toml)

    def test_top_level_order(self, sample_toml):
        doc = tomlspan.parse(sample_toml)
        assert [(name, entry.type_name) for name, entry in doc.iter()] == [
            ("title", "string"),
            ("server", "table"),
            ("database", "table"),
            ("plugins", "array of tables"),
        ]

    def test_nested_access(self, sample_toml):
        doc = tomlspan.parse(sample_toml)
        assert doc["server"]["tls"]["cert"].value == "certs/server.pem"
        assert doc["plugins"][1]["name"].value == "cache"
        assert doc["database"]["pool"]["max"].value == 10


class TestConversion:
    """Converting the immutable form into the editable one."""

    def test_into_mut_consumes(self, sample_toml):
        im = ImDocument.parse(sample_toml)
        doc = im.into_mut()

        assert im.consumed
        assert isinstance(doc, Document)
        with pytest.raises(DocumentConsumedError):
            im["title"]
        with pytest.raises(DocumentConsumedError):
            im.into_mut()

    def test_editable_form_owns_its_text(self, sample_toml):
        doc = tomlspan.parse_mut(sample_toml)
        assert collect_spans(doc.as_table(), doc.trailing()) == []

        # Rendering without the source still reproduces the text
        assert TomlRenderer().render_to_string(doc.as_table()) == sample_toml

    def test_editable_form_independent_of_source(self, sample_toml):
        im = tomlspan.parse(sample_toml)
        raw_title = im["title"].repr.raw
        doc = im.into_mut()

        doc["title"] = "changed"
        assert raw_title.to_str(sample_toml) == '"demo"'
        assert tomlspan.dumps(doc).startswith('# Service configuration\ntitle = "changed"   # shown in the UI\n')


class TestEditWorkflow:
    """Editing a parsed document and rendering it back."""

    def test_scalar_edit_changes_one_line(self, sample_toml):
        doc = tomlspan.parse_mut(sample_toml)
        doc["server"]["port"] = 9090
        assert tomlspan.dumps(doc) == sample_toml.replace("port = 8080", "port = 9090")

    def test_dotted_edit(self, sample_toml):
        doc = tomlspan.parse_mut(sample_toml)
        doc["server"]["tls"]["enabled"] = False
        assert tomlspan.dumps(doc) == sample_toml.replace("tls.enabled = true", "tls.enabled = false")

    def test_remove_table(self, sample_toml):
        doc = tomlspan.parse_mut(sample_toml)
        del doc["database"]

        rendered = tomlspan.dumps(doc)
        assert rendered == sample_toml.replace(DATABASE_BLOCK, "")
        assert "database" not in tomllib.loads(rendered)

    def test_append_to_array_of_tables(self, sample_toml):
        doc = tomlspan.parse_mut(sample_toml)
        doc["plugins"].append({"name": "metrics"})

        rendered = tomlspan.dumps(doc)
        assert rendered == sample_toml + '\n[[plugins]]\nname = "metrics"\n'
        assert [plugin["name"] for plugin in tomllib.loads(rendered)["plugins"]] == ["auth", "cache", "metrics"]

    def test_new_tables_follow_existing_ones(self, sample_toml):
        doc = tomlspan.parse_mut(sample_toml)
        doc["plugins"].append({"name": "metrics"})
        doc["logging"] = {"level": "debug"}

        assert tomlspan.dumps(doc) == (
            sample_toml + '\n[[plugins]]\nname = "metrics"\n' + '\n[logging]\nlevel = "debug"\n'
        )

    def test_custom_separator(self, sample_toml):
        doc = tomlspan.parse_mut(sample_toml)
        doc["logging"] = {"level": "debug"}

        rendered = tomlspan.dumps(doc, TomlRendererOptions(table_separator=""))
        assert rendered == sample_toml + '[logging]\nlevel = "debug"\n'

    def test_edited_document_reparses(self, sample_toml):
        doc = tomlspan.parse_mut(sample_toml)
        doc["title"] = "renamed"
        doc["database"]["pool"]["max"] = 20
        doc["plugins"][0]["order"].append(4)

        data = tomllib.loads(tomlspan.dumps(doc))
        assert data["title"] == "renamed"
        assert data["database"]["pool"] == {"min": 1, "max": 20}
        assert data["plugins"][0]["order"] == [1, 2, 3, 4]

    def test_edit_then_reparse_round_trips(self, sample_toml):
        doc = tomlspan.parse_mut(sample_toml)
        doc["server"]["host"] = "0.0.0.0"
        rendered = tomlspan.dumps(doc)

        assert tomlspan.dumps(tomlspan.parse(rendered)) == rendered
