import json

from errors import DocumentParseError


def _reject_constant(name):
    raise ValueError(f"'{name}' is not a JSON literal")


def parse_document(text):
    text = "" if text is None else str(text)
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise DocumentParseError(
            f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            line=exc.lineno,
            column=exc.colno,
        ) from exc
    except ValueError as exc:
        raise DocumentParseError(f"Invalid JSON: {exc}") from exc


def serialize_document(value, indent: int | None = 2) -> str:
    return json.dumps(value, indent=indent, ensure_ascii=False)


def coerce_cell_value(text):
    text = "" if text is None else str(text)
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return text
