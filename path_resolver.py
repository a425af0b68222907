"""Write a single edited value back into a JSON tree.

Paths are the navigation labels below the root: ``"[N]"`` steps into array
index N, anything else steps into an object key.
"""
import copy
import logging
import re

from cell_coercion import coerce_cell_value
from errors import PathMismatch

logger = logging.getLogger(__name__)

_INDEX_LABEL = re.compile(r"^\[(\d+)\]$")


def index_label(index: int) -> str:
    return f"[{index}]"


def parse_index_label(label: str) -> int | None:
    match = _INDEX_LABEL.match(label)
    if match is None:
        return None
    return int(match.group(1))


def _array_item(node, index: int, label: str):
    if not isinstance(node, list):
        raise PathMismatch(f"'{label}' needs an array, found {type(node).__name__}", label)
    if index < 0 or index >= len(node):
        raise PathMismatch(f"Index {index} out of range (length {len(node)})", label)
    return node[index]


def step(node, label: str):
    index = parse_index_label(label)
    if index is not None:
        return _array_item(node, index, label)
    if not isinstance(node, dict):
        raise PathMismatch(f"'{label}' needs an object, found {type(node).__name__}", label)
    if label not in node:
        raise PathMismatch(f"Key '{label}' not found", label)
    return node[label]


def resolve(root, path_labels):
    node = root
    for label in path_labels:
        node = step(node, label)
    return node


def _terminal_index(index) -> int:
    if isinstance(index, bool):
        raise PathMismatch(f"Invalid index {index!r}", str(index))
    if isinstance(index, int):
        return index
    text = str(index).strip()
    if not (text.isascii() and text.isdigit()):
        raise PathMismatch(f"Invalid index {index!r}", text)
    return int(text)


def apply_edit(root, path_labels, index=None, key=None, raw_value=""):
    """Return a copy of ``root`` with one value replaced.

    ``path_labels`` leads to the displayed container; ``index`` and/or ``key``
    address the edited cell inside it. ``root`` is never modified; on a
    PathMismatch nothing has been written anywhere.
    """
    if index is None and key is None:
        raise ValueError("An edit needs a terminal index, key, or both")

    new_value = coerce_cell_value(raw_value)
    new_root = copy.deepcopy(root)
    container = resolve(new_root, path_labels)

    if index is not None:
        position = _terminal_index(index)
        label = index_label(position)
        _array_item(container, position, label)
        if key is None:
            container[position] = new_value
            return new_root
        container = container[position]
        if not isinstance(container, dict):
            raise PathMismatch(f"Row {label} is not an object", label)
    elif not isinstance(container, dict):
        raise PathMismatch(f"'{key}' needs an object, found {type(container).__name__}", key)

    # sparse rows may lack the column being edited
    container[key] = new_value
    logger.debug("edit %s index=%s key=%s", "/".join(path_labels), index, key)
    return new_root
