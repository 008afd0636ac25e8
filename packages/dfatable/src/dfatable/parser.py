"""Parse the textual transition table format.

Each line describes one state::

    <marker> <id> <transition>+

where ``<marker>`` is ``+`` (accepting) or ``-`` (non-accepting),
``<id>`` is an unsigned integer and each ``<transition>`` is either an
unsigned integer (the target state) or ``E`` (error transition). Columns
are separated by any run of whitespace and every line must have the same
number of columns as the first one.

Parsing is all-or-nothing: the first problem found raises
``TableParseError`` and no partial table is returned.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, List, Union

from dfatable.exceptions import TableParseError
from dfatable.table import (
    ACCEPTING_MARKER,
    ERROR_SYMBOL,
    NON_ACCEPTING_MARKER,
    Row,
    Table,
    Transition,
)

logger = logging.getLogger(__name__)

# Marker, id and at least one transition
MIN_COLUMNS = 3
FIRST_TRANSITION_COLUMN = 2

# Unicode White_Space: everything str.isspace() accepts except the
# information separators \x1c-\x1f
COLUMN_SEPARATOR = re.compile(r"[^\S\x1c-\x1f]+")


def parse_unsigned(token: str) -> int:
    """Parse an unsigned decimal integer.

    Accepts ASCII digits with an optional leading ``+``. Signs, decimal
    points and non-ASCII digits are rejected.

    Raises:
        ValueError: With the reason the token is not an unsigned integer
    """
    digits = token[1:] if token.startswith("+") else token
    if not digits:
        raise ValueError(
            "cannot parse integer from empty string" if not token else "invalid digit found in string"
        )
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError("invalid digit found in string")
    return int(digits)


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only; a final newline does not start another line.

    Other control characters such as form feed stay inside their line,
    where the tokenizer treats them as whitespace. A trailing ``\\r`` is
    whitespace too, so ``\\r\\n`` endings need no extra handling.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def split_columns(line: str) -> List[str]:
    """Split a line on runs of whitespace, ignoring leading and trailing runs."""
    return [column for column in COLUMN_SEPARATOR.split(line) if column]


def _parse_transition(token: str, line_number: int, column_number: int) -> Transition:
    # Sentinel is checked before the numeric parse
    if token == ERROR_SYMBOL:
        return Transition.error()
    try:
        return Transition.goto(parse_unsigned(token))
    except ValueError as e:
        raise TableParseError(
            f"Line {line_number} column {column_number} has an invalid transition: {e}",
            line=line_number,
            column=column_number,
            details={"reason": "invalid_transition", "token": token},
        ) from e


def _parse_row(columns: List[str], line_number: int) -> Row:
    marker = columns[0][0]
    if marker == ACCEPTING_MARKER:
        accepting = True
    elif marker == NON_ACCEPTING_MARKER:
        accepting = False
    else:
        raise TableParseError(
            f"Line {line_number} has an invalid accepting state",
            line=line_number,
            details={"reason": "invalid_accepting_state", "token": columns[0]},
        )

    try:
        state_id = parse_unsigned(columns[1])
    except ValueError as e:
        raise TableParseError(
            f"Line {line_number} has an invalid state ID: {e}",
            line=line_number,
            details={"reason": "invalid_state_id", "token": columns[1]},
        ) from e

    transitions = tuple(
        _parse_transition(token, line_number, index + 1)
        for index, token in enumerate(columns[FIRST_TRANSITION_COLUMN:], FIRST_TRANSITION_COLUMN)
    )
    return Row(accepting=accepting, id=state_id, transitions=transitions)


def parse_lines(lines: Iterable[str]) -> Table:
    """Parse already-split lines into a table sorted by state id.

    Args:
        lines: One string per table row, in input order

    Returns:
        The parsed table; rows with equal ids keep their input order

    Raises:
        TableParseError: On the first malformed line
    """
    rows: List[Row] = []
    expected_columns: int | None = None

    for line_number, line in enumerate(lines, 1):
        columns = split_columns(line)

        if len(columns) < MIN_COLUMNS:
            raise TableParseError(
                f"Line {line_number} has too few columns",
                line=line_number,
                details={"reason": "too_few_columns", "found": len(columns)},
            )

        if expected_columns is None:
            expected_columns = len(columns)
        elif len(columns) != expected_columns:
            raise TableParseError(
                f"Line {line_number} has a different number of columns than the previous lines",
                line=line_number,
                details={
                    "reason": "inconsistent_columns",
                    "expected": expected_columns,
                    "found": len(columns),
                },
            )

        rows.append(_parse_row(columns, line_number))

    # list.sort is stable, so duplicate ids keep their relative order
    rows.sort(key=lambda row: row.id)
    logger.debug(
        f"Parsed transition table with {len(rows)} rows and "
        f"{(expected_columns or FIRST_TRANSITION_COLUMN) - FIRST_TRANSITION_COLUMN} symbols"
    )
    return Table(tuple(rows))


def parse(text: str) -> Table:
    """Parse transition table text.

    Example:
        ```python
        table = parse("- 0 1 E\\n+ 1 E 1")
        table.rows[0].transitions
        # (Transition(kind=<TransitionKind.GOTO: 'goto'>, target=1),
        #  Transition(kind=<TransitionKind.ERROR: 'error'>, target=None))
        ```

    Args:
        text: The whole document; an empty string yields an empty table

    Returns:
        The parsed table, sorted by state id

    Raises:
        TableParseError: If any line is malformed
    """
    return parse_lines(split_lines(text))


def parse_file(path: Union[str, Path], encoding: str = "utf-8") -> Table:
    """Read and parse a transition table file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        TableParseError: If the contents are malformed
    """
    path = Path(path)
    logger.debug(f"Parsing transition table from {path}")
    return parse(path.read_text(encoding=encoding))
