"""Exceptions raised by the resume build pipeline, one family per stage."""

from pathlib import Path
from typing import Any, List, Optional


class RsumeError(Exception):
    """
    Base exception for every pipeline failure.

    Attributes:
        message: Error description
        stage: Pipeline stage that failed ("load", "validate", "render", "compile", "persist")
    """

    stage = "pipeline"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ResumeIOError(RsumeError):
    """
    Exception raised when a file cannot be read, parsed or written.

    Attributes:
        message: Error description
        path: File that could not be accessed
        stage: "load" for input files, "persist" for output files
    """

    def __init__(self, message: str, path: Optional[Path] = None, stage: str = "load"):
        self.path = path
        self.stage = stage
        super().__init__(f"{message}: {path}" if path is not None else message)


class SchemaError(RsumeError):
    """
    Exception raised when resume data does not match the data model.

    Attributes:
        message: Error description
        field_path: Dotted/indexed location of the offending field (e.g. 'experiences[0].position')
    """

    stage = "validate"

    def __init__(self, message: str, field_path: str = ""):
        self.field_path = field_path
        super().__init__(f"{field_path}: {message}" if field_path else message)


class MissingFieldError(SchemaError):
    """Exception raised when a required field is absent."""

    def __init__(self, field_path: str):
        super().__init__("missing required field", field_path)


class InvalidTypeError(SchemaError):
    """Exception raised when a field holds a value of the wrong type."""

    def __init__(self, field_path: str, expected: str, value: Any):
        self.expected = expected
        self.actual = type(value).__name__
        super().__init__(f"expected {expected}, got {self.actual}", field_path)


class MalformedDateError(SchemaError):
    """Exception raised when a date field cannot be interpreted as a date."""

    def __init__(self, field_path: str, value: Any):
        self.value = value
        super().__init__(f"malformed date {value!r}", field_path)


class InvalidValueError(SchemaError):
    """Exception raised when a field has the right type but an unusable value."""

    def __init__(self, field_path: str, reason: str):
        super().__init__(reason, field_path)


class TemplateError(RsumeError):
    """
    Exception raised when template loading or rendering fails.

    Attributes:
        message: Error description
        template_name: Entry-point template name
        template_path: Path to the template file (when known)
        original_error: The original Jinja2 error
    """

    stage = "render"

    def __init__(
        self,
        message: str,
        template_name: Optional[str] = None,
        template_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.template_name = template_name
        self.template_path = template_path
        self.original_error = original_error

        # Build enhanced error message
        parts = [message]

        if template_path:
            parts.append(f"\nTemplate: {template_path}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))


class CompilationError(RsumeError):
    """
    Exception raised when the LaTeX engine rejects the rendered source.

    Attributes:
        message: Error description
        errors: Parsed LaTeX errors
        warnings: Parsed LaTeX warnings
        output: Engine log, stdout and stderr text, kept for diagnostics
    """

    stage = "compile"

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        warnings: Optional[List[str]] = None,
        output: str = "",
    ):
        self.errors = errors or []
        self.warnings = warnings or []
        self.output = output

        parts = [message]
        for i, err in enumerate(self.errors[:5], 1):
            parts.append(f"  Error {i}: {err}")
        if len(self.errors) > 5:
            parts.append(f"  ... and {len(self.errors) - 5} more errors")

        super().__init__("\n".join(parts))
