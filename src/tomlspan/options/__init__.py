#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Options classes for the tomlspan parser and renderer."""

from tomlspan.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from tomlspan.options.toml import TomlParserOptions, TomlRendererOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "TomlParserOptions",
    "TomlRendererOptions",
]
