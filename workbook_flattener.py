"""Flatten row-shaped JSON into one main sheet plus linked secondary sheets.

Every object or non-empty array found under a visible column becomes a
placeholder cell on the main sheet pointing at a sheet named after the
column. Rows on a secondary sheet carry the 1-based position of the main
row they came from, under the row identifier column.
"""
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

import pandas as pd
from openpyxl.utils.exceptions import IllegalCharacterError
from openpyxl.worksheet.hyperlink import Hyperlink

from errors import ExportError
from value_classifier import Shape, classify, field_value, is_primitive, to_json

logger = logging.getLogger(__name__)

ROW_ID_COLUMN = "_rowId"
MAIN_SHEET_NAME = "Main"
MAX_SHEET_TITLE = 31
INVALID_TITLE_CHARS = set("[]:*?/\\")


@dataclass
class FlattenedRow:
    origin_row_id: int
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass
class SheetSpec:
    title: str
    columns: list[str]  # row identifier column first
    rows: list[FlattenedRow] = field(default_factory=list)


@dataclass
class SheetLink:
    row: int  # 0-based data row on the main sheet
    column: str
    target: str


@dataclass
class FlattenedWorkbook:
    main: SheetSpec
    secondary: list[SheetSpec]
    links: list[SheetLink]
    row_id_column: str = ROW_ID_COLUMN

    def sheets(self) -> list[SheetSpec]:
        return [self.main, *self.secondary]


def sheet_title(name: str) -> str:
    cleaned = "".join("_" if ch in INVALID_TITLE_CHARS else ch for ch in str(name))
    cleaned = cleaned[:MAX_SHEET_TITLE].strip("'")
    return cleaned or "Sheet"


class _SheetTitles:
    """Hands out sheet titles that are unique ignoring case."""

    def __init__(self):
        self._taken: set[str] = set()

    def allocate(self, name: str) -> str:
        base = sheet_title(name)
        candidate = base
        suffix = 1
        while candidate.casefold() in self._taken:
            tail = f"_{suffix}"
            candidate = f"{base[:MAX_SHEET_TITLE - len(tail)]}{tail}"
            suffix += 1
        if candidate != base:
            logger.warning("Sheet title %r already used; writing %r as %r", base, name, candidate)
        self._taken.add(candidate.casefold())
        return candidate


class _SecondarySheet:
    def __init__(self, title: str, row_id_column: str):
        self.title = title
        self.row_id_column = row_id_column
        self.union: list[str] = []
        self.rows: list[FlattenedRow] = []

    def add(self, origin_row_id: int, fields: dict):
        for key in fields:
            if key == self.row_id_column:
                logger.warning(
                    "Sheet %r: field %r shadows the row identifier column and is not exported",
                    self.title, key,
                )
                continue
            if key not in self.union:
                self.union.append(key)
        self.rows.append(FlattenedRow(origin_row_id, dict(fields)))

    def to_sheet(self) -> SheetSpec:
        return SheetSpec(self.title, [self.row_id_column, *self.union], self.rows)


def _element_fields(element) -> dict:
    if isinstance(element, dict):
        return element
    return {"value": element}


def flatten_rows(
    rows: Iterable,
    headers: Iterable[str],
    row_id_column: str = ROW_ID_COLUMN,
    main_sheet_name: str = MAIN_SHEET_NAME,
) -> FlattenedWorkbook:
    columns = []
    for header in headers:
        if header == row_id_column:
            logger.warning("Column %r collides with the row identifier column; skipped", header)
            continue
        if header not in columns:
            columns.append(header)

    titles = _SheetTitles()
    main_title = titles.allocate(main_sheet_name)
    secondary: dict[str, _SecondarySheet] = {}
    main_rows: list[FlattenedRow] = []
    links: list[SheetLink] = []

    def sheet_for(header: str) -> _SecondarySheet:
        if header not in secondary:
            secondary[header] = _SecondarySheet(titles.allocate(header), row_id_column)
        return secondary[header]

    for position, row in enumerate(rows):
        row_id = position + 1
        cells: dict[str, Any] = {}
        for header in columns:
            value = field_value(row, header)
            match classify(value):
                case Shape.PRIMITIVE:
                    cells[header] = value
                case Shape.EMPTY_ARRAY:
                    cells[header] = "[]"
                case Shape.OBJECT_NODE:
                    sheet = sheet_for(header)
                    sheet.add(row_id, value)
                    cells[header] = f"[View: {header}]"
                    links.append(SheetLink(position, header, sheet.title))
                case Shape.ARRAY_OF_PRIMITIVE:
                    sheet = sheet_for(header)
                    for element in value:
                        sheet.add(row_id, {"value": element})
                    cells[header] = f"[View: {header} ({len(value)})]"
                    links.append(SheetLink(position, header, sheet.title))
                case Shape.ARRAY_OF_OBJECT:
                    sheet = sheet_for(header)
                    for element in value:
                        sheet.add(row_id, _element_fields(element))
                    cells[header] = f"[View: {header} ({len(value)})]"
                    links.append(SheetLink(position, header, sheet.title))
        main_rows.append(FlattenedRow(row_id, cells))

    main = SheetSpec(main_title, [row_id_column, *columns], main_rows)
    return FlattenedWorkbook(
        main=main,
        secondary=[sheet.to_sheet() for sheet in secondary.values()],
        links=links,
        row_id_column=row_id_column,
    )


def _cell_value(value):
    if is_primitive(value):
        return value
    return to_json(value)


def sheet_frame(sheet: SheetSpec, row_id_column: str = ROW_ID_COLUMN) -> pd.DataFrame:
    records = []
    for row in sheet.rows:
        record = []
        for column in sheet.columns:
            if column == row_id_column:
                record.append(row.origin_row_id)
            else:
                record.append(_cell_value(row.fields.get(column)))
        records.append(record)
    return pd.DataFrame(records, columns=sheet.columns, dtype=object)


def _link_location(title: str) -> str:
    quoted = title.replace("'", "''")
    return f"'{quoted}'!A1"


def _attach_links(ws, workbook: FlattenedWorkbook):
    columns = workbook.main.columns
    for link in workbook.links:
        cell = ws.cell(row=link.row + 2, column=columns.index(link.column) + 1)
        cell.hyperlink = Hyperlink(ref=cell.coordinate, location=_link_location(link.target))
        cell.style = "Hyperlink"


def _keep_text_cells(ws, frame: pd.DataFrame):
    # openpyxl reads text starting with "=" as a formula
    records = [tuple(frame.columns), *frame.itertuples(index=False)]
    for r, record in enumerate(records, start=1):
        for c, value in enumerate(record, start=1):
            if isinstance(value, str) and value.startswith("="):
                cell = ws.cell(row=r, column=c)
                if cell.data_type == "f":
                    cell.data_type = "s"


def write_workbook(workbook: FlattenedWorkbook) -> bytes:
    buffer = io.BytesIO()
    try:
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            for sheet in workbook.sheets():
                frame = sheet_frame(sheet, workbook.row_id_column)
                frame.to_excel(writer, index=False, sheet_name=sheet.title)
                _keep_text_cells(writer.sheets[sheet.title], frame)
            _attach_links(writer.sheets[workbook.main.title], workbook)
    except (ValueError, TypeError, KeyError, IllegalCharacterError) as exc:
        raise ExportError(f"Could not write workbook: {exc}") from exc
    return buffer.getvalue()


def build_workbook_bytes(
    rows,
    headers,
    row_id_column: str = ROW_ID_COLUMN,
    main_sheet_name: str = MAIN_SHEET_NAME,
) -> bytes:
    workbook = flatten_rows(rows, headers, row_id_column, main_sheet_name)
    logger.info(
        "Flattened %d rows into %d sheets", len(workbook.main.rows), len(workbook.sheets())
    )
    return write_workbook(workbook)
