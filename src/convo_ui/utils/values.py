"""Field value kinds and loose coercion helpers.

Field values travel through the engine as plain JSON-shaped Python values
(``None``, ``bool``, ``int``/``float``, ``str``, ``list``, ``dict``). Every
value is tagged with a :class:`ValueKind` before it is compared, so the
coercion rules below are a closed match over kinds rather than ad-hoc
``isinstance`` chains at every call site.

The rules follow the loosely-typed semantics chat schemas are written
against: ``"5" == 5`` holds, ``true == 1`` holds, and a missing value only
equals another missing value.
"""

from __future__ import annotations

import math
import re
from enum import StrEnum
from typing import Any

from pydantic import JsonValue, TypeAdapter

_JSON_ADAPTER: TypeAdapter[JsonValue] = TypeAdapter(JsonValue)

# Numeric literal forms accepted by to_number() for text values
_NUMERIC_RE = re.compile(
    r"^[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|Infinity)$"
)
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")


class ValueKind(StrEnum):
    """Tag for a field value."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    TEXT = "text"
    LIST = "list"
    MAPPING = "mapping"


def classify(value: Any) -> ValueKind:
    """Return the kind tag for a JSON-shaped value.

    Raises:
        TypeError: If the value is not JSON-shaped.
    """
    if value is None:
        return ValueKind.NULL
    # bool before number: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int | float):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, list | tuple):
        return ValueKind.LIST
    if isinstance(value, dict):
        return ValueKind.MAPPING
    raise TypeError(f"Unsupported field value type: {type(value).__name__}")


def coerce_field_value(raw: Any) -> JsonValue:
    """Validate that ``raw`` is JSON-shaped and return it.

    This is the boundary check for values entering the field store from
    outside the schema parser.

    Raises:
        pydantic.ValidationError: If the value cannot be represented as JSON.
    """
    return _JSON_ADAPTER.validate_python(raw)


def is_empty(value: Any) -> bool:
    """True for values a ``required`` field treats as missing."""
    return value is None or value == ""


def to_number(value: Any) -> float:
    """Coerce a value to a float, returning ``nan`` when it has no numeric reading.

    Missing values coerce to ``nan`` so that any ordering comparison
    against them is false.
    """
    kind = classify(value)
    if kind is ValueKind.NULL:
        return math.nan
    if kind is ValueKind.BOOL:
        return 1.0 if value else 0.0
    if kind is ValueKind.NUMBER:
        return float(value)
    if kind is ValueKind.TEXT:
        text = value.strip()
        if not text:
            return 0.0
        if _HEX_RE.match(text):
            return float(int(text, 16))
        if _NUMERIC_RE.match(text):
            return float(text.replace("Infinity", "inf"))
        return math.nan
    if kind is ValueKind.LIST:
        return to_number(to_text(value))
    return math.nan


def _number_text(number: float | int) -> str:
    if isinstance(number, int):
        return str(number)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number.is_integer():
        return str(int(number))
    return repr(number)


def to_text(value: Any) -> str:
    """Coerce a value to display text.

    Missing values become the empty string; lists join their items with
    commas; booleans render lowercase.
    """
    kind = classify(value)
    if kind is ValueKind.NULL:
        return ""
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER:
        return _number_text(value)
    if kind is ValueKind.TEXT:
        return value
    if kind is ValueKind.LIST:
        return ",".join(to_text(item) for item in value)
    return "[object Object]"


def loose_equals(left: Any, right: Any) -> bool:
    """Compare two values with type coercion.

    - Missing only equals missing.
    - Same kinds compare directly.
    - Booleans compare as 1/0.
    - Number against text compares numerically.
    - Lists and mappings compare through their text form against scalars.
    """
    left_kind = classify(left)
    right_kind = classify(right)

    if left_kind is ValueKind.NULL or right_kind is ValueKind.NULL:
        return left_kind is right_kind

    if left_kind is right_kind:
        return bool(left == right)

    if left_kind is ValueKind.BOOL:
        return loose_equals(to_number(left), right)
    if right_kind is ValueKind.BOOL:
        return loose_equals(left, to_number(right))

    numeric = {ValueKind.NUMBER, ValueKind.TEXT}
    if left_kind in numeric and right_kind in numeric:
        return to_number(left) == to_number(right)

    composite = {ValueKind.LIST, ValueKind.MAPPING}
    if left_kind in composite and right_kind not in composite:
        return loose_equals(to_text(left), right)
    if right_kind in composite and left_kind not in composite:
        return loose_equals(left, to_text(right))

    return False
