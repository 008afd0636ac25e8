"""Dict, JSON and YAML serialization for transition tables.

The canonical textual form lives in ``dfatable.serializer``; this module
covers the structured forms used by ``dfatable convert``. Any object with
``to_dict()`` / ``from_dict()`` (the ``Serializable`` protocol) can be
passed through these helpers.

Example:
    ```python
    from dfatable import Table, parse
    from dfatable.serialization import dumps, loads

    table = parse("- 0 1 E\\n+ 1 E 1")
    text = dumps(table, indent=2)
    assert loads(Table, text) == table
    ```
"""

import json
from typing import Any, Dict, Protocol, Type, TypeVar, runtime_checkable

import yaml

from dfatable.exceptions import SerializationError

T = TypeVar("T")


@runtime_checkable
class Serializable(Protocol):
    """Protocol for objects that can be serialized to/from dict."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert object to dictionary representation."""
        ...

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """Create object from dictionary representation."""
        ...


class TableJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles objects exposing ``to_dict``."""

    def default(self, obj: Any) -> Any:
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        return super().default(obj)


def serialize(obj: Any) -> Dict[str, Any]:
    """Serialize an object to dictionary.

    Args:
        obj: Object to serialize (must have to_dict method)

    Returns:
        Serialized dictionary

    Raises:
        SerializationError: If object doesn't support serialization or serialization fails
    """
    if not hasattr(obj, "to_dict"):
        raise SerializationError(
            f"Object of type {type(obj).__name__} is not serializable (missing to_dict method)",
            context={"type": type(obj).__name__, "object": str(obj)},
        )

    try:
        result = obj.to_dict()
        if not isinstance(result, dict):
            raise SerializationError(
                f"to_dict() must return a dict, got {type(result).__name__}",
                context={"type": type(obj).__name__, "result_type": type(result).__name__},
            )
        return result
    except Exception as e:
        if isinstance(e, SerializationError):
            raise
        raise SerializationError(
            f"Failed to serialize {type(obj).__name__}: {e}",
            context={"type": type(obj).__name__, "error": str(e)},
        ) from e


def deserialize(cls: Type[T], data: Dict[str, Any]) -> T:
    """Deserialize dictionary into an object.

    Args:
        cls: Class to deserialize into (must have from_dict classmethod)
        data: Dictionary with serialized data

    Returns:
        Deserialized object instance

    Raises:
        SerializationError: If class doesn't support deserialization or deserialization fails
    """
    if not hasattr(cls, "from_dict"):
        raise SerializationError(
            f"Class {cls.__name__} is not deserializable (missing from_dict classmethod)",
            context={"class": cls.__name__},
        )

    if not isinstance(data, dict):
        raise SerializationError(
            f"Data must be a dict, got {type(data).__name__}",
            context={"class": cls.__name__, "data_type": type(data).__name__},
        )

    try:
        return cls.from_dict(data)  # type: ignore[attr-defined]
    except Exception as e:
        if isinstance(e, SerializationError):
            raise
        raise SerializationError(
            f"Failed to deserialize {cls.__name__}: {e}",
            context={"class": cls.__name__, "error": str(e)},
        ) from e


def dumps(obj: Any, **kwargs) -> str:
    """Serialize obj to a JSON string.

    Args:
        obj: Object to serialize
        **kwargs: Additional arguments for json.dumps

    Returns:
        JSON string
    """
    kwargs.setdefault("cls", TableJSONEncoder)
    return json.dumps(obj, **kwargs)


def loads(cls: Type[T], s: str) -> T:
    """Deserialize a JSON document into an instance of ``cls``.

    Raises:
        SerializationError: If the text is not valid JSON or does not describe ``cls``
    """
    try:
        data = json.loads(s)
    except json.JSONDecodeError as e:
        raise SerializationError(
            f"Invalid JSON: {e}",
            context={"format": "json", "line": e.lineno, "column": e.colno},
        ) from e
    return deserialize(cls, data)


def to_yaml(obj: Any) -> str:
    """Serialize an object to a YAML document."""
    return yaml.safe_dump(serialize(obj), default_flow_style=False, sort_keys=False)


def from_yaml(cls: Type[T], s: str) -> T:
    """Deserialize a YAML document into an instance of ``cls``.

    Raises:
        SerializationError: If the text is not valid YAML or does not describe ``cls``
    """
    try:
        data = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise SerializationError(f"Invalid YAML: {e}", context={"format": "yaml"}) from e
    return deserialize(cls, data)


__all__ = [
    "Serializable",
    "TableJSONEncoder",
    "serialize",
    "deserialize",
    "dumps",
    "loads",
    "to_yaml",
    "from_yaml",
]
