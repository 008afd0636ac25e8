"""Render transition tables in their canonical text form.

Rows are written in the order the table holds them, one per line, as
``<marker> <id> <transition>*`` with single spaces and no trailing
newline after the last row.
"""

import logging
from pathlib import Path
from typing import List, Union

from dfatable.exceptions import TableSerializeError
from dfatable.parser import parse
from dfatable.table import ERROR_SYMBOL, Row, Table, Transition, TransitionKind

logger = logging.getLogger(__name__)


def _render_transition(transition: Transition, row_index: int) -> str:
    if not isinstance(transition, Transition):
        raise TableSerializeError(
            row_index,
            f"expected a Transition, got {type(transition).__name__}",
            details={"value": repr(transition)},
        )
    if transition.kind is TransitionKind.ERROR:
        return ERROR_SYMBOL
    return str(transition.target)


def _render_row(row: Row, row_index: int) -> str:
    if not isinstance(row.accepting, bool):
        raise TableSerializeError(
            row_index,
            f"accepting flag must be a boolean, got {row.accepting!r}",
            details={"field": "accepting"},
        )
    if isinstance(row.id, bool) or not isinstance(row.id, int) or row.id < 0:
        raise TableSerializeError(
            row_index,
            f"state id must be a non-negative integer, got {row.id!r}",
            details={"field": "id"},
        )
    parts: List[str] = [row.marker, str(row.id)]
    parts.extend(_render_transition(t, row_index) for t in row.transitions)
    return " ".join(parts)


def serialize(table: Table) -> str:
    """Serialize a table to text.

    Args:
        table: The table to render; rows are not re-sorted

    Returns:
        Rows joined by ``\\n`` with no trailing newline

    Raises:
        TableSerializeError: If a row holds values the text format cannot express
    """
    text = "\n".join(_render_row(row, index) for index, row in enumerate(table.rows))
    logger.debug(f"Serialized transition table with {len(table.rows)} rows")
    return text


def serialize_file(table: Table, path: Union[str, Path], encoding: str = "utf-8") -> None:
    """Write the canonical text of ``table`` to ``path``."""
    path = Path(path)
    path.write_text(serialize(table), encoding=encoding)
    logger.debug(f"Wrote transition table to {path}")


def format_text(text: str) -> str:
    """Canonicalize table text: single spaces, rows sorted by id.

    Raises:
        TableParseError: If ``text`` is malformed
    """
    return serialize(parse(text))
