#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/renderers/__init__.py
"""Renderers writing tomlspan documents back to text."""

from tomlspan.renderers.base import BaseRenderer, RenderInput
from tomlspan.renderers.toml import TomlRenderer

__all__ = ["BaseRenderer", "RenderInput", "TomlRenderer"]
