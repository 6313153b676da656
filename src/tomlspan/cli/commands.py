#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/cli/commands.py
"""Command handlers for the tomlspan CLI.

Each handler takes the parsed arguments and returns an exit code. Errors
from the library propagate to :func:`tomlspan.cli.main`, which maps them to
exit codes; ``check`` reports per-file failures itself so one bad file does
not stop the others.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tomlspan.ast.nodes import ArrayOfTables, Item, Table, TableLike, Value
from tomlspan.ast.raw import Decor
from tomlspan.cli.builder import EXIT_ERROR, EXIT_SUCCESS, get_exit_code_for_exception
from tomlspan.cli.output import print_table, should_use_rich_output
from tomlspan.document import Document, ImDocument
from tomlspan.exceptions import TomlSpanError, ValidationError
from tomlspan.options.toml import TomlParserOptions
from tomlspan.renderers.toml import TomlRenderer

logger = logging.getLogger(__name__)


def _parser_options(args: argparse.Namespace) -> TomlParserOptions:
    return TomlParserOptions(validate=args.validate, encoding=args.encoding)


def split_key_path(key_path: str) -> list[str]:
    """Split a dotted key path into key names using TOML key syntax.

    Quoted segments may contain dots: ``tool."a.b".c`` has three keys.

    Raises
    ------
    ParsingError
        If ``key_path`` is not a valid TOML key

    """
    table: Table = ImDocument.parse(f"{key_path} = 0", TomlParserOptions(validate=False)).as_table()
    names: list[str] = []
    while True:
        entry = next(iter(table.entries.values()))
        names.append(entry.key.key)
        if not isinstance(entry.item, Table):
            return names
        table = entry.item


def _resolve(root: Table, names: list[str], key_path: str) -> Item:
    current: Item = root
    for depth, name in enumerate(names):
        if not isinstance(current, TableLike) or name not in current:
            missing = ".".join(names[: depth + 1])
            raise ValidationError(f"Key {missing!r} not found", parameter_name="key", parameter_value=key_path)
        current = current[name]
    return current


def handle_check_command(args: argparse.Namespace) -> int:
    """Parse each file and verify the editable form renders back to the same text."""
    options = _parser_options(args)
    renderer = TomlRenderer()
    rows: list[tuple[str, str, str]] = []
    exit_code = EXIT_SUCCESS

    for file_name in args.files:
        try:
            im = ImDocument.parse(Path(file_name), options)
            text = im.raw()
            rendered = renderer.render_to_string(im.into_mut())
        except TomlSpanError as e:
            logger.debug("Check failed for %s", file_name, exc_info=True)
            rows.append((file_name, "error", str(e)))
            if exit_code == EXIT_SUCCESS:
                exit_code = get_exit_code_for_exception(e)
            continue

        if rendered == text:
            rows.append((file_name, "ok", ""))
        else:
            rows.append((file_name, "changed", "rendering differs from the source"))
            if exit_code == EXIT_SUCCESS:
                exit_code = EXIT_ERROR

    print_table("TOML check", ["File", "Status", "Details"], rows, should_use_rich_output(args))
    return exit_code


def handle_keys_command(args: argparse.Namespace) -> int:
    """List top-level keys in document order with the kind of item each holds."""
    doc = ImDocument.parse(Path(args.file), _parser_options(args))
    rows = [(name, entry_item.type_name) for name, entry_item in doc.iter()]
    print_table(args.file, ["Key", "Type"], rows, should_use_rich_output(args))
    return EXIT_SUCCESS


def handle_get_command(args: argparse.Namespace) -> int:
    """Print the item at a dotted key path as TOML."""
    doc = Document.parse(Path(args.file), _parser_options(args))
    found = _resolve(doc.as_table(), split_key_path(args.key), args.key)

    renderer = TomlRenderer()
    if isinstance(found, Value):
        sys.stdout.write(renderer.render_value(found) + "\n")
    elif isinstance(found, Table):
        sys.stdout.write(renderer.render_to_string(found))
    elif isinstance(found, ArrayOfTables):
        sys.stdout.write("\n".join(renderer.render_to_string(table) for table in found))
    return EXIT_SUCCESS


def handle_set_command(args: argparse.Namespace) -> int:
    """Assign a TOML literal at a dotted key path, keeping all other formatting."""
    path = Path(args.file)
    options = _parser_options(args)
    doc = Document.parse(path, options)

    names = split_key_path(args.key)
    new_value = Document.parse(f"v = {args.value}\n", options.create_updated(validate=True))["v"]
    # An unset decor takes over the spacing and comments of a replaced value
    new_value.decor = Decor()  # type: ignore[union-attr]

    parent = _resolve(doc.as_table_mut(), names[:-1], args.key) if len(names) > 1 else doc.as_table_mut()
    if not isinstance(parent, TableLike):
        raise ValidationError(
            f"Cannot set {args.key!r}: {'.'.join(names[:-1])!r} is a {parent.type_name}",
            parameter_name="key",
            parameter_value=args.key,
        )
    parent[names[-1]] = new_value
    logger.info("Set %s = %s", args.key, args.value)

    renderer = TomlRenderer()
    if args.in_place:
        renderer.render(doc, path)
    else:
        sys.stdout.write(renderer.render_to_string(doc))
    return EXIT_SUCCESS


COMMAND_HANDLERS = {
    "check": handle_check_command,
    "keys": handle_keys_command,
    "get": handle_get_command,
    "set": handle_set_command,
}
