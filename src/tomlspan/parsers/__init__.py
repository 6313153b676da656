#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/parsers/__init__.py
"""Parsers producing span-based TOML documents."""

from tomlspan.parsers.base import BaseParser
from tomlspan.parsers.toml import TomlParser

__all__ = ["BaseParser", "TomlParser"]
