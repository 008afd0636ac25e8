"""Exception hierarchy for dfatable.

Every error raised by the parser, the serializer, the dict/JSON/YAML
converters and the configuration layer derives from ``DfaTableError``,
so callers that only care about "did it work" can catch a single type.

Example:
    ```python
    from dfatable import parse
    from dfatable.exceptions import TableParseError

    try:
        parse("- 0")
    except TableParseError as e:
        print(e)           # Line 1 has too few columns
        print(e.line)      # 1
        print(e.context)   # {'line': 1, 'column': None, 'reason': 'too_few_columns', 'found': 2}
    ```
"""

from typing import Any, Dict


class DfaTableError(Exception):
    """Base exception for all dfatable errors.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (line numbers, values, etc.)
        details: Alternative to context (details takes precedence)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = details or context or {}
        self.details = self.context


class ValidationError(DfaTableError):
    """Raised when a value does not satisfy the table model's constraints."""

    pass


class NotFoundError(DfaTableError):
    """Raised when a requested state is not present in a table."""

    pass


class ConfigurationError(DfaTableError):
    """Raised when CLI configuration is invalid or cannot be loaded."""

    pass


class SerializationError(DfaTableError):
    """Raised when conversion to or from a textual/dict form fails."""

    pass


class TableParseError(SerializationError):
    """Raised when transition table text is malformed.

    The message always names the 1-based line and, for transition
    errors, the 1-based column of the offending token.

    Attributes:
        line: 1-based line number of the offending line
        column: 1-based column number of the offending token, or None
    """

    def __init__(
        self,
        message: str,
        line: int,
        column: int | None = None,
        details: Dict[str, Any] | None = None,
    ):
        context = {"line": line, "column": column}
        if details:
            context.update(details)
        super().__init__(message, context=context)
        self.line = line
        self.column = column


class TableSerializeError(SerializationError):
    """Raised when an in-memory table cannot be rendered as text."""

    def __init__(self, row_index: int, message: str, details: Dict[str, Any] | None = None):
        context: Dict[str, Any] = {"row_index": row_index}
        if details:
            context.update(details)
        super().__init__(
            f"Row {row_index + 1} cannot be serialized: {message}",
            context=context,
        )
        self.row_index = row_index


__all__ = [
    "DfaTableError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    "SerializationError",
    "TableParseError",
    "TableSerializeError",
]
