"""
Helpers over the JSON value model.

Documents are plain decoded JSON: None, bool, int/float/Decimal, str,
list (tuples are accepted as arrays) and dict with string keys.
"""

from __future__ import annotations

import json
import math
from decimal import Decimal
from enum import Enum
from typing import Any


class JsonKind(str, Enum):
    """The six kinds of JSON value."""
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a JSON number
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_object(value: Any) -> bool:
    return isinstance(value, dict)


def _is_nan(value: Any) -> bool:
    if isinstance(value, Decimal):
        return value.is_nan()
    return isinstance(value, float) and math.isnan(value)


def kind_of(value: Any) -> JsonKind:
    """
    Classify a value.

    Raises:
        TypeError: If the value is not part of the JSON value model
    """
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if is_number(value):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if is_array(value):
        return JsonKind.ARRAY
    if is_object(value):
        return JsonKind.OBJECT
    raise TypeError(f"{type(value).__name__} is not a JSON value")


def json_equals(left: Any, right: Any) -> bool:
    """
    Structural equality over JSON values.

    Kinds must agree (``True`` never equals ``1``, ``"1"`` never equals
    ``1``). Numbers compare by exact value, so ``1 == 1.0``. Object key
    order is irrelevant; array order is not. NaN (which the json module
    decodes by default) equals NaN, keeping equality reflexive.
    """
    left_kind = kind_of(left)
    if left_kind is not kind_of(right):
        return False

    if left_kind is JsonKind.ARRAY:
        return len(left) == len(right) and all(
            json_equals(a, b) for a, b in zip(left, right)
        )
    if left_kind is JsonKind.OBJECT:
        return left.keys() == right.keys() and all(
            json_equals(value, right[key]) for key, value in left.items()
        )
    if left_kind is JsonKind.NUMBER and (_is_nan(left) or _is_nan(right)):
        return _is_nan(left) and _is_nan(right)
    return left == right


def render_value(value: Any, max_length: int = 100) -> str:
    """Render a value as compact JSON for messages, truncating if too long."""
    if isinstance(value, Decimal):
        formatted = str(value)
    else:
        try:
            formatted = json.dumps(value, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            formatted = repr(value)

    if len(formatted) > max_length:
        return formatted[: max_length - 3] + "..."

    return formatted


def describe(value: Any) -> str:
    """Kind and rendered value, e.g. ``string "abc"``."""
    if value is None:
        return "null"
    try:
        kind = kind_of(value).value
    except TypeError:
        kind = type(value).__name__
    return f"{kind} {render_value(value)}"
