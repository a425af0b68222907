import copy

import pytest

from cell_coercion import coerce_cell_value, parse_document, serialize_document
from errors import DocumentParseError, PathMismatch
from path_resolver import apply_edit, index_label, parse_index_label, resolve


@pytest.fixture
def doc():
    return {
        "people": [
            {"name": "John", "age": 30, "tags": ["a", "b"]},
            {"name": "Joe", "age": 25},
        ],
        "meta": {"version": 1},
    }


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123", 123),
        ("1.5", 1.5),
        ("true", True),
        ("null", None),
        ('{"a": [1]}', {"a": [1]}),
        ('"quoted"', "quoted"),
        ("hello", "hello"),
        ("", ""),
        ("NaN", "NaN"),
        ("Infinity", "Infinity"),
    ],
)
def test_coerce_cell_value(text, expected):
    assert coerce_cell_value(text) == expected


def test_parse_document_reports_position():
    with pytest.raises(DocumentParseError) as info:
        parse_document('{"a": 1,\n "b": }')
    assert info.value.line == 2


def test_parse_document_rejects_non_json_constants():
    with pytest.raises(DocumentParseError):
        parse_document("[NaN]")


def test_serialize_document_keeps_key_order():
    text = serialize_document({"b": 1, "a": "é"}, indent=2)
    assert text == '{\n  "b": 1,\n  "a": "é"\n}'


def test_index_labels():
    assert index_label(3) == "[3]"
    assert parse_index_label("[12]") == 12
    assert parse_index_label("12") is None
    assert parse_index_label("[-1]") is None


def test_resolve(doc):
    assert resolve(doc, ["people", "[0]", "tags", "[1]"]) == "b"
    assert resolve(doc, []) is doc


@pytest.mark.parametrize(
    "path",
    [
        ["meta", "[0]"],
        ["people", "name"],
        ["people", "[5]"],
        ["missing"],
        ["meta", "version", "x"],
    ],
)
def test_resolve_mismatch(doc, path):
    with pytest.raises(PathMismatch):
        resolve(doc, path)


def test_edit_row_cell_round_trip(doc):
    new_root = apply_edit(doc, ["people"], index="0", key="age", raw_value="31")
    assert resolve(new_root, ["people", "[0]", "age"]) == 31
    assert doc["people"][0]["age"] == 30


def test_edit_array_item(doc):
    new_root = apply_edit(doc, ["people", "[0]", "tags"], index=1, raw_value="true")
    assert new_root["people"][0]["tags"] == ["a", True]


def test_edit_object_field(doc):
    new_root = apply_edit(doc, ["meta"], key="version", raw_value="hello")
    assert new_root["meta"] == {"version": "hello"}


def test_edit_adds_field_missing_from_sparse_row(doc):
    new_root = apply_edit(doc, ["people"], index=1, key="tags", raw_value='["x"]')
    assert new_root["people"][1] == {"name": "Joe", "age": 25, "tags": ["x"]}


def test_edit_at_root(doc):
    new_root = apply_edit(doc, [], key="meta", raw_value="null")
    assert new_root["meta"] is None


@pytest.mark.parametrize(
    "path, index, key",
    [
        (["meta"], 0, None),
        (["people"], None, "name"),
        (["people"], 9, "name"),
        (["people"], "x", "name"),
        (["people", "[0]", "tags"], 0, "name"),
        (["nope"], None, "a"),
    ],
)
def test_failed_edit_leaves_root_untouched(doc, path, index, key):
    before = copy.deepcopy(doc)
    with pytest.raises(PathMismatch):
        apply_edit(doc, path, index=index, key=key, raw_value="1")
    assert doc == before


def test_edit_needs_index_or_key(doc):
    with pytest.raises(ValueError):
        apply_edit(doc, ["people"], raw_value="1")
