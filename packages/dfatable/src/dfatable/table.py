"""Transition table model.

A DFA transition table has one row per state and one column per input
symbol. Symbols are identified only by their column position; each cell
is either a move to another state or an explicit error (sink) move.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Tuple

from dfatable.exceptions import NotFoundError, SerializationError, ValidationError

logger = logging.getLogger(__name__)

STARTING_STATE_ID = 0
"""Conventional id of the start state."""

ERROR_SYMBOL = "E"
"""Text token for an error transition."""

ACCEPTING_MARKER = "+"
NON_ACCEPTING_MARKER = "-"


class TransitionKind(Enum):
    """Discriminator for the two transition forms."""

    GOTO = "goto"
    """Move to the state named by ``target``."""

    ERROR = "error"
    """No valid move for this symbol."""


def _is_state_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


@dataclass(frozen=True)
class Transition:
    """A single cell of the transition table.

    Build instances with ``Transition.goto(n)`` or ``Transition.error()``
    and dispatch on ``kind``; ``target`` is only set for ``GOTO``.
    """

    kind: TransitionKind
    target: int | None = None

    def __post_init__(self) -> None:
        if self.kind is TransitionKind.GOTO:
            if not _is_state_id(self.target):
                raise ValidationError(
                    f"Goto transition needs a non-negative integer target, got {self.target!r}",
                    context={"target": self.target},
                )
        elif self.kind is TransitionKind.ERROR:
            if self.target is not None:
                raise ValidationError(
                    "Error transition cannot have a target",
                    context={"target": self.target},
                )
        else:
            raise ValidationError(f"Unknown transition kind: {self.kind!r}")

    @classmethod
    def goto(cls, state_id: int) -> "Transition":
        return cls(TransitionKind.GOTO, state_id)

    @classmethod
    def error(cls) -> "Transition":
        return cls(TransitionKind.ERROR)

    @property
    def is_goto(self) -> bool:
        return self.kind is TransitionKind.GOTO

    @property
    def is_error(self) -> bool:
        return self.kind is TransitionKind.ERROR

    def __str__(self) -> str:
        return ERROR_SYMBOL if self.is_error else str(self.target)

    def to_dict(self) -> Dict[str, Any]:
        if self.is_error:
            return {"error": True}
        return {"goto": self.target}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transition":
        """Build a transition from ``{"goto": n}`` or ``{"error": true}``.

        Raises:
            SerializationError: If the dict matches neither form
        """
        if not isinstance(data, dict):
            raise SerializationError(
                f"Transition must be a dict, got {type(data).__name__}",
                context={"data": data},
            )
        if "goto" in data and "error" not in data:
            try:
                return cls.goto(data["goto"])
            except ValidationError as e:
                raise SerializationError(str(e), context=e.context) from e
        if data.get("error") is True and "goto" not in data:
            return cls.error()
        raise SerializationError(
            "Transition dict must be {'goto': <id>} or {'error': true}",
            context={"data": data},
        )


@dataclass(frozen=True)
class Row:
    """One state of the table.

    Attributes:
        accepting: Whether this is a final (accepting) state
        id: The state's identifier
        transitions: One transition per input symbol, in column order
    """

    accepting: bool
    id: int
    transitions: Tuple[Transition, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Frozen, so lists handed in by callers are swapped for tuples
        if not isinstance(self.transitions, tuple):
            object.__setattr__(self, "transitions", tuple(self.transitions))

    @property
    def marker(self) -> str:
        return ACCEPTING_MARKER if self.accepting else NON_ACCEPTING_MARKER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accepting": self.accepting,
            "id": self.id,
            "transitions": [t.to_dict() for t in self.transitions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Row":
        """Build a row from its dict form.

        Raises:
            SerializationError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise SerializationError(
                f"Row must be a dict, got {type(data).__name__}",
                context={"data": data},
            )
        missing = [key for key in ("accepting", "id") if key not in data]
        if missing:
            raise SerializationError(
                f"Row is missing required fields: {', '.join(missing)}",
                context={"missing": missing},
            )
        if not isinstance(data["accepting"], bool):
            raise SerializationError(
                f"Row 'accepting' must be a boolean, got {data['accepting']!r}",
                context={"field": "accepting", "value": data["accepting"]},
            )
        if not _is_state_id(data["id"]):
            raise SerializationError(
                f"Row 'id' must be a non-negative integer, got {data['id']!r}",
                context={"field": "id", "value": data["id"]},
            )
        transitions = data.get("transitions", [])
        if not isinstance(transitions, list):
            raise SerializationError(
                "Row 'transitions' must be a list",
                context={"field": "transitions", "value": transitions},
            )
        return cls(
            accepting=data["accepting"],
            id=data["id"],
            transitions=tuple(Transition.from_dict(t) for t in transitions),
        )


@dataclass(frozen=True)
class Table:
    """An ordered sequence of rows.

    Tables produced by ``dfatable.parse`` are sorted by state id. Tables
    built directly keep whatever order they were given.
    """

    rows: Tuple[Row, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.rows, tuple):
            object.__setattr__(self, "rows", tuple(self.rows))

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    @property
    def symbol_count(self) -> int:
        """Number of transition columns (0 for an empty table)."""
        return len(self.rows[0].transitions) if self.rows else 0

    def is_consistent(self) -> bool:
        """True when every row has the same number of transitions."""
        return len({len(row.transitions) for row in self.rows}) <= 1

    def accepting_ids(self) -> List[int]:
        return [row.id for row in self.rows if row.accepting]

    def get_row(self, state_id: int) -> Row:
        """Return the first row with the given id.

        Raises:
            NotFoundError: If no row has that id
        """
        for row in self.rows:
            if row.id == state_id:
                return row
        raise NotFoundError(
            f"State {state_id} not found",
            context={"state_id": state_id, "available": [row.id for row in self.rows]},
        )

    def start_row(self) -> Row:
        return self.get_row(STARTING_STATE_ID)

    def sorted_by_id(self) -> "Table":
        """Return a copy with rows ordered by id; equal ids keep their order."""
        return Table(tuple(sorted(self.rows, key=lambda row: row.id)))

    def to_dict(self) -> Dict[str, Any]:
        return {"rows": [row.to_dict() for row in self.rows]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Table":
        """Build a table from its dict form, keeping row order as given.

        Raises:
            SerializationError: If the rows are malformed or their
                transition counts differ
        """
        if not isinstance(data, dict) or not isinstance(data.get("rows", []), list):
            raise SerializationError(
                "Table must be a dict with a 'rows' list",
                context={"data": data},
            )
        table = cls(tuple(Row.from_dict(row) for row in data.get("rows", [])))
        if not table.is_consistent():
            raise SerializationError(
                "Table rows have different numbers of transitions",
                context={"counts": [len(row.transitions) for row in table.rows]},
            )
        logger.debug(f"Loaded table with {len(table)} rows from dict")
        return table
