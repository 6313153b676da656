#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/utils/io_utils.py
"""I/O helpers for writing rendered documents."""

from __future__ import annotations

import io
from io import BytesIO, StringIO
from pathlib import Path
from typing import IO, Union, cast

OutputTarget = Union[str, Path, IO[bytes], IO[str]]


def write_text_content(content: str, output: OutputTarget, encoding: str = "utf-8") -> None:
    """Write rendered text to a path or file-like object.

    Text is written byte-for-byte: line terminators are never translated,
    so a document keeps its original ``\\n`` or ``\\r\\n`` endings.

    Parameters
    ----------
    content : str
        Text to write
    output : str, Path, IO[bytes], or IO[str]
        Destination. A ``str`` is a file path.
    encoding : str, default = "utf-8"
        Encoding for paths and binary streams

    Raises
    ------
    TypeError
        If the output type is not supported

    """
    if isinstance(output, (str, Path)):
        Path(output).write_bytes(content.encode(encoding))
        return

    if hasattr(output, "write"):
        if isinstance(output, BytesIO):
            is_binary_mode = True
        elif isinstance(output, StringIO):
            is_binary_mode = False
        elif isinstance(output, io.TextIOBase):
            is_binary_mode = False
        elif isinstance(output, (io.BufferedIOBase, io.RawIOBase)):
            is_binary_mode = True
        elif hasattr(output, "mode"):
            mode = getattr(output, "mode", "")
            is_binary_mode = isinstance(mode, str) and "b" in mode
        else:
            is_binary_mode = False

        if is_binary_mode:
            cast(IO[bytes], output).write(content.encode(encoding))
        else:
            cast(IO[str], output).write(content)
        return

    raise TypeError(f"Unsupported output type: {type(output)}")


__all__ = ["OutputTarget", "write_text_content"]
