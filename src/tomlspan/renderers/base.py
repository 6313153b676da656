#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/renderers/base.py
"""Base classes for document renderers.

This module defines the abstract base class for renderers turning
tomlspan documents back into text.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Union

from tomlspan.exceptions import InvalidOptionsError
from tomlspan.options.base import BaseRendererOptions
from tomlspan.utils.io_utils import OutputTarget, write_text_content

if TYPE_CHECKING:
    from tomlspan.ast.nodes import Table
    from tomlspan.document import Document, ImDocument

RenderInput = Union["ImDocument", "Document", "Table"]


class BaseRenderer(ABC):
    """Abstract base class for document renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    Examples
    --------
    Creating a custom renderer:

        >>> class KeyListRenderer(BaseRenderer):
        ...     def render_to_string(self, doc):
        ...         return "\\n".join(doc.as_table())

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def render_to_string(self, doc: RenderInput) -> str:
        """Render a document to a string.

        Raises
        ------
        RenderingError
            If rendering fails

        """

    def render(self, doc: RenderInput, output: OutputTarget) -> None:
        """Render a document and write it to a path or file-like object.

        Parameters
        ----------
        doc : ImDocument, Document or Table
            Document to render
        output : str, Path, IO[bytes], or IO[str]
            Output destination

        """
        write_text_content(self.render_to_string(doc), output)
