import pandas as pd

from value_classifier import field_value, to_text


def _frame(headers, records) -> pd.DataFrame:
    return pd.DataFrame(records, columns=headers, dtype=object)


def quote_field(value) -> str:
    # nested objects and arrays are inlined as compact JSON
    text = to_text(value)
    if not text:
        return ""
    line = _frame(None, [[text]]).to_csv(index=False, header=False, lineterminator="\n")
    return line[: -len("\n")]


def generate_csv(headers, rows, line_terminator: str = "\n") -> str:
    headers = [to_text(h) for h in headers]
    if not headers:
        return ""
    records = [[to_text(field_value(row, h)) for h in headers] for row in rows]
    return _frame(headers, records).to_csv(index=False, lineterminator=line_terminator)
