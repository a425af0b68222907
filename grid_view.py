import json
from dataclasses import dataclass, field
from typing import Optional

from value_classifier import Shape, classify, display_text, field_value, is_primitive


@dataclass
class GridCell:
    text: str
    editable: bool
    index: Optional[int] = None
    key: Optional[str] = None


@dataclass
class GridRow:
    label: str
    cells: list[GridCell]


@dataclass
class GridModel:
    kind: str  # table | array | object | value
    headers: list[str] = field(default_factory=list)
    rows: list[GridRow] = field(default_factory=list)
    message: str = ""


def _cell(value, index=None, key=None) -> GridCell:
    # primitives are edited in place, containers are drilled into
    return GridCell(display_text(value), is_primitive(value), index, key)


def build_grid(data, view_rows, headers) -> GridModel:
    shape = classify(data)
    if shape is Shape.OBJECT_NODE:
        if not data:
            return GridModel("object", message="Empty Object {}")
        rows = [GridRow(str(k), [_cell(v, key=k)]) for k, v in data.items()]
        return GridModel("object", ["(key)", "(value)"], rows)
    if shape is Shape.EMPTY_ARRAY:
        return GridModel("array", message="Empty Array []")
    if shape is Shape.PRIMITIVE:
        return GridModel("value", message=json.dumps(data, indent=2, ensure_ascii=False))

    if classify(data[0]) is Shape.OBJECT_NODE:
        rows = []
        for vr in view_rows:
            cells = [_cell(field_value(vr.value, h), index=vr.index, key=h) for h in headers]
            rows.append(GridRow(str(vr.index), cells))
        grid = GridModel("table", ["(index)", *headers], rows)
        if not rows:
            grid.message = "No results found."
        return grid

    rows = [GridRow(str(vr.index), [_cell(vr.value, index=vr.index)]) for vr in view_rows]
    return GridModel("array", ["(index)", "(value)"], rows)


class GridRenderer:
    MAX_COL_WIDTH = 40

    def __init__(self, grid: GridModel):
        self.grid = grid

    def get_col_width(self, col_idx: int) -> int:
        texts = [self.grid.headers[col_idx]]
        for row in self.grid.rows:
            line = [row.label] + [c.text for c in row.cells]
            if col_idx < len(line):
                texts.append(line[col_idx])
        max_len = max(len(t) for t in texts)
        return min(self.MAX_COL_WIDTH, max_len + 2)

    @staticmethod
    def _fit(text: str, width: int) -> str:
        text = text.replace("\n", " ")
        if len(text) > width - 1:
            text = text[: max(0, width - 2)] + "…"
        return text.ljust(width)

    def render(self, width: int = 120) -> str:
        if not self.grid.headers:
            return self.grid.message
        widths = [self.get_col_width(i) for i in range(len(self.grid.headers))]
        lines = ["".join(self._fit(h, w) for h, w in zip(self.grid.headers, widths))]
        lines.append("".join("-" * (w - 1) + " " for w in widths))
        for row in self.grid.rows:
            values = [row.label] + [c.text for c in row.cells]
            lines.append("".join(self._fit(v, w) for v, w in zip(values, widths)))
        if self.grid.message:
            lines.append(self.grid.message)
        return "\n".join(line.rstrip()[:width] for line in lines)
