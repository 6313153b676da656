#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the tomlspan library.

This module defines specialized exception classes for the error conditions
that can occur while parsing, converting and rendering TOML documents.

Exception Hierarchy
-------------------
- TomlSpanError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for parser or renderer)

  - FileError (file access and I/O)
    - InputFileNotFoundError (file doesn't exist)

  - ParsingError (malformed TOML input)

  - RenderingError (output generation failures)

  - DocumentConsumedError (use of an immutable document after conversion)
  - ReadOnlyItemError (edit of an item owned by an immutable document)

- InvariantViolation (internal consistency fault, an AssertionError)

User-input problems are always reported through the ``TomlSpanError``
hierarchy and can be caught and recovered from. ``InvariantViolation`` sits
outside of it: it signals a construction bug inside the library
and should not be caught by callers handling bad input.

"""

from __future__ import annotations


class TomlSpanError(Exception):
    """Base exception class for all tomlspan-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(TomlSpanError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: object = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an incorrect options class is provided.

    Parameters
    ----------
    converter_name : str
        Name of the parser or renderer that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        converter_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{converter_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class FileError(TomlSpanError):
    """Base exception for file access and I/O errors.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the file that caused the error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path details."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class InputFileNotFoundError(FileError):
    """Exception raised when an input file does not exist."""

    def __init__(self, file_path: str, original_error: Exception | None = None):
        """Initialize with the missing path."""
        super().__init__(f"File not found: {file_path}", file_path=file_path, original_error=original_error)


class ParsingError(TomlSpanError):
    """Exception raised when TOML source text is malformed.

    The parser never returns a partially built document: any failure is
    reported through this single error kind, carrying the position of the
    problem in the source text.

    Parameters
    ----------
    message : str
        Description of the problem
    line : int, optional
        1-based line number of the problem
    column : int, optional
        1-based column number of the problem
    context : str, optional
        The source line containing the problem
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        context: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the parsing error with location details."""
        super().__init__(message, original_error=original_error)
        self.line = line
        self.column = column
        self.context = context

    def __str__(self) -> str:
        """Format the error with its location and a caret under the column."""
        if self.line is None:
            return self.message
        text = f"{self.message} (at line {self.line}, column {self.column})"
        if self.context is not None and self.column is not None:
            text += f"\n  | {self.context}\n  | {' ' * (self.column - 1)}^"
        return text


class RenderingError(TomlSpanError):
    """Exception raised when a document cannot be rendered to text."""


class DocumentConsumedError(TomlSpanError):
    """Exception raised when an immutable document is used after ``into_mut()``."""

    def __init__(self, message: str = "ImDocument was consumed by into_mut() and can no longer be used"):
        """Initialize with a default message."""
        super().__init__(message)


class ReadOnlyItemError(TomlSpanError):
    """Exception raised when an item of an immutable document is modified.

    Parsed trees stay read-only while an :class:`~tomlspan.document.ImDocument`
    owns them; :meth:`~tomlspan.document.ImDocument.into_mut` converts the
    document into an editable one.
    """


class InvariantViolation(AssertionError):
    """Internal consistency fault.

    Raised when a structural invariant of the library is broken, for example a
    document whose root is not a table, or a detachment pass that runs without
    a retained source. These indicate a defect in construction logic rather
    than bad input, so they are not part of the recoverable error hierarchy.
    """
