"""Shape classification for parsed JSON values.

JSON documents stay plain Python values (``None``, ``bool``, ``int``,
``float``, ``str``, ``list``, ``dict``); every shape decision in the engine
goes through :func:`kind_of` so dispatch covers all six kinds.
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any


class JSONKind(Enum):
    """The six shapes a JSON value can take."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


CONTAINER_KINDS = frozenset({JSONKind.SEQUENCE, JSONKind.MAPPING})


def kind_of(value: Any) -> JSONKind:
    """Classify a parsed JSON value.

    Raises:
        TypeError: for values no JSON parser produces.
    """
    if value is None:
        return JSONKind.NULL
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return JSONKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JSONKind.NUMBER
    if isinstance(value, str):
        return JSONKind.STRING
    if isinstance(value, Mapping):
        return JSONKind.MAPPING
    if isinstance(value, Sequence):
        return JSONKind.SEQUENCE
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def or_null(value: Any) -> Any:
    """Collapse falsy scalars (false, 0, NaN, "") to None.

    Empty sequences and mappings are kept as they are.
    """
    kind = kind_of(value)
    if kind in CONTAINER_KINDS:
        return value
    if kind is JSONKind.NUMBER and value != value:
        return None
    return value if value else None


def empty_counterpart(other: Any) -> Any:
    """Empty value of the same container shape as ``other``, else None."""
    kind = kind_of(other)
    if kind is JSONKind.SEQUENCE:
        return []
    if kind is JSONKind.MAPPING:
        return {}
    return None


def deep_equal(left: Any, right: Any) -> bool:
    """Structural JSON equality; ``true`` never equals ``1`` and NaN equals NaN."""
    left_kind = kind_of(left)
    if left_kind is not kind_of(right):
        return False
    if left_kind is JSONKind.SEQUENCE:
        return len(left) == len(right) and all(
            deep_equal(a, b) for a, b in zip(left, right)
        )
    if left_kind is JSONKind.MAPPING:
        return left.keys() == right.keys() and all(
            deep_equal(value, right[key]) for key, value in left.items()
        )
    if left_kind is JSONKind.NUMBER and left != left:
        # NaN is the only value unequal to itself
        return right != right
    return left == right


def contains_equal(items: Sequence, item: Any) -> bool:
    """Whether any element of ``items`` is deep-equal to ``item``."""
    return any(deep_equal(item, candidate) for candidate in items)
