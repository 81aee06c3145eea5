"""Capabilities of host values seen during rendering.

Templates are rendered against arbitrary Python values. This module decides,
for any such value, how to:

- dereference a property segment (``$user.name``),
- interpret it as a boolean, a number, or text,
- enumerate and count it (loops and ``#$items``).

Property access uses a fixed priority over a closed set of value shapes:

1. Mappings: ``value.get(name)``
2. Indexable nodes (objects with ``__getitem__`` that are neither mappings,
   sequences nor strings, e.g. DataFrames or parse-tree nodes):
   ``value[name]``, where any lookup failure (``LookupError``, ``TypeError``,
   ``ValueError``) means "no value"
3. Records (dataclasses, pydantic models, namedtuples, plain objects):
   ``getattr(value, name, None)``

None of the functions here raise for missing or mistyped values; they return
``None``, ``False`` or ``""`` instead.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Iterable, Iterator, Mapping, Sequence, Sized
from decimal import Decimal
from typing import Any

__all__ = [
    "Variables",
    "resolve_property",
    "resolve_path",
    "is_enumerable",
    "is_one_shot",
    "has_elements",
    "count_elements",
    "to_decimal",
    "format_decimal",
    "truthiness",
    "to_text",
]

# Type alias for the variable environment supplied to a render call
Variables = Mapping[str, Any]

_MISSING = object()


def _is_indexable_node(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray, Sequence, Mapping)):
        return False
    return hasattr(type(value), "__getitem__")


def resolve_property(value: Any, name: str) -> Any:
    """Dereference one property segment of ``value``.

    Args:
        value: Current value along a property path (not None).
        name: Property name.

    Returns:
        The property value, or None if ``value`` has no such property.
    """
    if isinstance(value, Mapping):
        return value.get(name)

    if _is_indexable_node(value):
        try:
            return value[name]
        except (LookupError, TypeError, ValueError):
            return None

    return getattr(value, name, None)


def resolve_path(
    variables: Variables | None, name: str, path: Sequence[str] = ()
) -> Any:
    """Resolve ``$name.p1.p2...`` against a variable environment.

    An absent root name resolves to None. Resolution stops at the first
    segment that yields None.

    Example:
        >>> resolve_path({"user": {"name": "Ada"}}, "user", ("name",))
        'Ada'
        >>> resolve_path({"user": None}, "user", ("name", "first")) is None
        True
    """
    value = variables.get(name) if variables else None
    for segment in path:
        if value is None:
            break
        value = resolve_property(value, segment)
    return value


def is_enumerable(value: Any) -> bool:
    """Whether ``value`` can be looped over or counted.

    Strings are enumerable (as their characters).
    """
    return value is not None and isinstance(value, Iterable)


def is_one_shot(value: Any) -> bool:
    """Whether ``value`` is an iterator that can only be traversed once."""
    return isinstance(value, Iterator)


def has_elements(value: Iterable[Any]) -> bool:
    """Whether ``value`` has at least one element.

    One-shot iterators are reported as non-empty without being advanced, so
    a later loop over the same iterator still sees every element.
    """
    if isinstance(value, Sized):
        return len(value) > 0
    if is_one_shot(value):
        return True
    return next(iter(value), _MISSING) is not _MISSING


def count_elements(value: Iterable[Any]) -> int:
    """Number of elements in ``value``; exhausts a one-shot iterator."""
    if isinstance(value, Sized):
        return len(value)
    return sum(1 for _ in value)


def to_decimal(value: Any) -> Decimal | None:
    """Interpret a host value as an exact decimal number.

    Any numeric type is accepted and converted into ``Decimal``. Floats go
    through their shortest round-trip representation so that ``0.1``
    becomes exactly ``Decimal("0.1")``. Booleans, NaN and non-numeric values
    have no numeric interpretation.

    Returns:
        The decimal value, or None.

    Example:
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal("3") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return None if value.is_nan() else value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if math.isnan(value):
            return None
        return Decimal(repr(value))
    if isinstance(value, numbers.Rational):
        return Decimal(int(value.numerator)) / Decimal(int(value.denominator))
    if isinstance(value, numbers.Real):
        return to_decimal(float(value))
    return None


def format_decimal(value: Decimal) -> str:
    """Render a decimal in fixed-point notation (never ``1E+3``)."""
    return format(value, "f")


def truthiness(value: Any) -> bool:
    """Boolean interpretation of a resolved variable value.

    - None: False
    - bool: itself
    - str: non-empty
    - numbers: non-zero
    - other iterables: at least one element
    - anything else: True
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return len(value) > 0
    if isinstance(value, numbers.Number):
        return value != 0
    if is_enumerable(value):
        return has_elements(value)
    return True


def to_text(value: Any) -> str:
    """Render a resolved variable value; None renders as an empty string."""
    if value is None:
        return ""
    return str(value)
