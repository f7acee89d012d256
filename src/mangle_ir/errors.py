"""Custom exceptions for the Mangle IR compiler and stream extractor."""

from __future__ import annotations


class IRBaseError(Exception):
    """Base exception for IR-related failures."""


class SchemaError(IRBaseError):
    """Raised when an IR value is malformed."""


class RenderError(IRBaseError):
    """Raised when rendering fails."""


class QueryNotFoundError(RenderError):
    """Raised when the requested query name is absent from the program."""

    def __init__(self, query_name: str) -> None:
        super().__init__(f'Query with name "{query_name}" not found in Mangle program.')
        self.query_name = query_name


class ProjectionNotBoundError(RenderError):
    """Raised when a query projects a variable its where clauses never bind."""

    def __init__(self, query_name: str, variables: list[str]) -> None:
        super().__init__(
            f"Query {query_name} projects unbound variables: {', '.join(variables)}"
        )
        self.query_name = query_name
        self.variables = list(variables)


class ValidationError(IRBaseError):
    """Raised when program validation fails."""


class ExtractionError(IRBaseError):
    """Base exception for per-object failures in a text stream."""


class DecodeError(ExtractionError):
    """Raised when candidate object text is not valid JSON."""


class ShapeValidationError(ExtractionError):
    """Raised when a decoded object does not match the expected shape."""


class IncompleteTrailingDataWarning(UserWarning):
    """Emitted when a stream ends with unconsumed non-whitespace content."""
