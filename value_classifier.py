import json
from enum import Enum

# integral floats in this range are written as plain digits, not 1e+16
_PLAIN_INTEGRAL = 1e16
_EXPONENT_FROM = 1e21


class Shape(str, Enum):
    PRIMITIVE = "primitive"
    EMPTY_ARRAY = "empty_array"
    OBJECT_NODE = "object_node"
    ARRAY_OF_PRIMITIVE = "array_of_primitive"
    ARRAY_OF_OBJECT = "array_of_object"


def classify(value) -> Shape:
    if isinstance(value, dict):
        return Shape.OBJECT_NODE
    if isinstance(value, (list, tuple)):
        if len(value) == 0:
            return Shape.EMPTY_ARRAY
        # Only the head element is looked at; [1, {"a": 1}] is an array of primitives.
        if classify(value[0]) is Shape.PRIMITIVE:
            return Shape.ARRAY_OF_PRIMITIVE
        return Shape.ARRAY_OF_OBJECT
    return Shape.PRIMITIVE


def is_primitive(value) -> bool:
    return classify(value) is Shape.PRIMITIVE


def is_row_shaped(value) -> bool:
    """Non-empty array whose first element is an object."""
    if not isinstance(value, list) or not value:
        return False
    return classify(value[0]) is Shape.OBJECT_NODE


def field_value(row, column):
    if isinstance(row, dict):
        return row.get(column)
    return None


def to_json(value) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def to_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer() and _PLAIN_INTEGRAL <= abs(value) < _EXPONENT_FROM:
        return str(int(value))
    return to_json(value)


def display_text(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, list):
        return f"[ Array({len(value)}) ]"
    if isinstance(value, dict):
        return "[ Object ]"
    return to_text(value)
