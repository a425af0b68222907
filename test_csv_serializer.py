import pytest

from csv_serializer import generate_csv, quote_field


@pytest.mark.parametrize(
    "value, expected",
    [
        ("plain", "plain"),
        ("a,b", '"a,b"'),
        ('say "hi"', '"say ""hi"""'),
        ("two\nlines", '"two\nlines"'),
        (None, ""),
        (False, "false"),
        (42, "42"),
        ({"a": 1, "b": 2}, '"{""a"":1,""b"":2}"'),
        (["x"], '"[""x""]"'),
    ],
)
def test_quote_field(value, expected):
    assert quote_field(value) == expected


def test_generate_csv_terminates_every_row():
    rows = [{"name": "John", "age": 30}, {"name": "Doe, Jane"}]
    assert generate_csv(["name", "age"], rows) == 'name,age\nJohn,30\n"Doe, Jane",\n'


def test_generate_csv_quotes_headers_and_keeps_order():
    rows = [{"a,b": 2}, {"a,b": 1}]
    assert generate_csv(["a,b"], rows) == '"a,b"\n2\n1\n'


def test_generate_csv_without_rows_has_header_only():
    assert generate_csv(["x", "y"], []) == "x,y\n"


def test_generate_csv_line_terminator():
    assert generate_csv(["a"], [{"a": 1}], line_terminator="\r\n") == "a\r\n1\r\n"


def test_generate_csv_quotes_carriage_returns_and_nested_values():
    rows = [{"a": "x\r\ny", "b": {"k": [1]}}]
    assert generate_csv(["a", "b"], rows) == 'a,b\n"x\r\ny","{""k"":[1]}"\n'


def test_generate_csv_without_headers_is_empty():
    assert generate_csv([], [{"a": 1}]) == ""
