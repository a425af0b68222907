import pytest

from value_classifier import (
    Shape,
    classify,
    display_text,
    field_value,
    is_row_shaped,
    to_text,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, Shape.PRIMITIVE),
        (True, Shape.PRIMITIVE),
        (0, Shape.PRIMITIVE),
        (2.5, Shape.PRIMITIVE),
        ("text", Shape.PRIMITIVE),
        ({}, Shape.OBJECT_NODE),
        ({"a": 1}, Shape.OBJECT_NODE),
        ([], Shape.EMPTY_ARRAY),
        ([1, 2], Shape.ARRAY_OF_PRIMITIVE),
        ([None], Shape.ARRAY_OF_PRIMITIVE),
        ([{"a": 1}], Shape.ARRAY_OF_OBJECT),
        ([[1], [2]], Shape.ARRAY_OF_OBJECT),
        ([[]], Shape.ARRAY_OF_OBJECT),
    ],
)
def test_classify(value, expected):
    assert classify(value) is expected


def test_classify_uses_head_element_only():
    assert classify([1, {"a": 1}]) is Shape.ARRAY_OF_PRIMITIVE
    assert classify([{"a": 1}, 1]) is Shape.ARRAY_OF_OBJECT


def test_row_shaped_needs_object_head():
    assert is_row_shaped([{"a": 1}, 2])
    assert not is_row_shaped([])
    assert not is_row_shaped([[1]])
    assert not is_row_shaped({"a": 1})


def test_field_value_of_non_object_row_is_none():
    assert field_value({"a": 1}, "a") == 1
    assert field_value({"a": 1}, "b") is None
    assert field_value(5, "a") is None


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        (True, "true"),
        (False, "false"),
        (3, "3"),
        (1.5, "1.5"),
        (1e20, "100000000000000000000"),
        (-1e16, "-10000000000000000"),
        (1e21, "1e+21"),
        (2.0, "2.0"),
        ("hi", "hi"),
        ({"a": [1, 2]}, '{"a":[1,2]}'),
        (["é"], '["é"]'),
    ],
)
def test_to_text(value, expected):
    assert to_text(value) == expected


def test_display_text():
    assert display_text(None) == "null"
    assert display_text([1, 2, 3]) == "[ Array(3) ]"
    assert display_text({"a": 1}) == "[ Object ]"
    assert display_text(False) == "false"
