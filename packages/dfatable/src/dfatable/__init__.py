"""dfatable: DFA transition table parser and serializer.

Converts between the textual transition table format::

    - 0 1 E
    + 1 E 1

and an immutable in-memory ``Table`` of ``Row`` and ``Transition``
values, validating in both directions.
"""

__version__ = "0.1.0"

from .exceptions import (
    ConfigurationError,
    DfaTableError,
    NotFoundError,
    SerializationError,
    TableParseError,
    TableSerializeError,
    ValidationError,
)
from .parser import parse, parse_file, parse_lines
from .serializer import format_text, serialize, serialize_file
from .table import (
    ACCEPTING_MARKER,
    ERROR_SYMBOL,
    NON_ACCEPTING_MARKER,
    STARTING_STATE_ID,
    Row,
    Table,
    Transition,
    TransitionKind,
)

__all__ = [
    "__version__",
    # Model
    "Table",
    "Row",
    "Transition",
    "TransitionKind",
    "STARTING_STATE_ID",
    "ERROR_SYMBOL",
    "ACCEPTING_MARKER",
    "NON_ACCEPTING_MARKER",
    # Text format
    "parse",
    "parse_file",
    "parse_lines",
    "serialize",
    "serialize_file",
    "format_text",
    # Exceptions
    "DfaTableError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    "SerializationError",
    "TableParseError",
    "TableSerializeError",
]
