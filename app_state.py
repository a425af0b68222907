import logging

from cell_coercion import parse_document
from csv_serializer import generate_csv
from grid_view import GridModel, build_grid
from navigation import NavigationStack, SortState, ViewState
from path_resolver import index_label, step
from value_classifier import is_primitive, is_row_shaped
from view_query import ViewRow, collect_headers, query, visible_headers

logger = logging.getLogger(__name__)


class AppState:
    """One interactive session over a JSON document.

    Holds the parsed root and the navigation stack (which owns the view
    state). Edits and exports are turned into host request messages; the
    root only changes when the host answers with ``documentUpdated``.
    """

    def __init__(self, text, file_path=None, csv_line_terminator="\n"):
        self.file_path = file_path
        self.csv_line_terminator = csv_line_terminator
        self.root = parse_document(text)
        self.nav = NavigationStack(self.root)

    @property
    def view(self) -> ViewState:
        return self.nav.view

    @property
    def current_value(self):
        return self.nav.current().value

    # ---------- navigation ----------
    def descend(self, label: str):
        value = step(self.current_value, label)
        self.nav.push(label, value)

    def open_cell(self, index=None, key=None) -> bool:
        """Drill into a nested cell; primitives are edited, not opened."""
        data = self.current_value
        if index is not None and key is not None:
            row_label = index_label(index)
            row = step(data, row_label)
            value = row.get(key) if isinstance(row, dict) else None
            if is_primitive(value):
                return False
            self.nav.push(row_label, row)
            self.nav.push(key, value)
            return True
        if index is not None:
            label = index_label(index)
        elif key is not None:
            label = key
        else:
            return False
        value = step(data, label)
        if is_primitive(value):
            return False
        self.nav.push(label, value)
        return True

    def go_to(self, index: int) -> bool:
        return self.nav.truncate_to(index)

    def breadcrumbs(self) -> list[str]:
        return self.nav.labels()

    # ---------- view configuration ----------
    def headers(self) -> list[str]:
        data = self.current_value
        if not is_row_shaped(data):
            return []
        if not self.view.header_cache:
            self.view.header_cache = collect_headers(data)
        return list(self.view.header_cache)

    def visible_headers(self) -> list[str]:
        return visible_headers(self.headers(), self.view.hidden_columns)

    def set_filter(self, column: str, pattern: str):
        if pattern:
            self.view.filters[column] = pattern
        else:
            self.view.filters.pop(column, None)

    def toggle_sort(self, column: str):
        sort = self.view.sort
        if sort is not None and sort.column == column:
            sort.direction = "asc" if sort.descending else "desc"
        else:
            self.view.sort = SortState(column)

    def set_column_visible(self, column: str, visible: bool):
        if visible:
            self.view.hidden_columns.discard(column)
        else:
            self.view.hidden_columns.add(column)

    def toggle_columns_panel(self) -> bool:
        self.view.columns_visible = not self.view.columns_visible
        return self.view.columns_visible

    def view_rows(self) -> list[ViewRow]:
        return query(self.current_value, self.view)

    def grid(self) -> GridModel:
        return build_grid(self.current_value, self.view_rows(), self.visible_headers())

    # ---------- host requests ----------
    def build_update_request(self, new_value: str, index=None, key=None) -> dict:
        return {
            "command": "updateValue",
            "path": self.nav.labels(),
            "key": key,
            "index": None if index is None else str(index),
            "newValue": new_value,
        }

    def build_csv_export_request(self) -> dict:
        rows = [vr.value for vr in self.view_rows()]
        csv_text = generate_csv(self.visible_headers(), rows, self.csv_line_terminator)
        return {"command": "exportToCsv", "csvString": csv_text}

    def build_xlsx_export_request(self) -> dict:
        return {
            "command": "exportToXlsx",
            "data": [vr.value for vr in self.view_rows()],
            "headers": self.visible_headers(),
        }

    # ---------- host notifications ----------
    def apply_document_update(self, new_content: str):
        root = parse_document(new_content)
        self.root = root
        self.nav.reset_to_root(root)
        logger.info("Document reloaded; view reset to root")

    def receive(self, message) -> bool:
        if not isinstance(message, dict):
            return False
        if message.get("command") == "documentUpdated":
            self.apply_document_update(message.get("newContent", ""))
            return True
        logger.debug("Ignoring host message %r", message.get("command"))
        return False
