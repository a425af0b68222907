import logging
import os
from typing import Callable, Optional

from app_state import AppState
from cell_coercion import parse_document, serialize_document
from config_paths import default_config
from errors import DocumentParseError, JsonTableError, RequestError
from path_resolver import apply_edit
from workbook_flattener import build_workbook_bytes

logger = logging.getLogger(__name__)


class JsonDocumentHost:
    """Owns the JSON file behind a session and answers its request messages."""

    def __init__(
        self,
        path: str,
        config: Optional[dict] = None,
        choose_destination: Optional[Callable[[str], Optional[str]]] = None,
    ):
        self.path = path
        self.config = config if config is not None else default_config()
        self.choose_destination = choose_destination
        self._last_text: Optional[str] = None

        self._handlers = {
            "updateValue": self._update_value,
            "exportToCsv": self._export_csv,
            "exportToXlsx": self._export_xlsx,
        }

    def read_text(self) -> str:
        with open(self.path, "r", encoding="utf-8") as f:
            text = f.read()
        self._last_text = text
        return text

    def _write_text(self, text: str):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(text)
        self._last_text = text

    def open_session(self) -> AppState:
        return AppState(
            self.read_text(),
            self.path,
            csv_line_terminator=self.config.get("CSV_LINE_TERMINATOR", "\n"),
        )

    def handle(self, message) -> Optional[dict]:
        command = message.get("command") if isinstance(message, dict) else None
        handler = self._handlers.get(command)
        if handler is None:
            logger.warning("Unknown command %r", command)
            return None
        try:
            return handler(message)
        except (JsonTableError, OSError) as exc:
            logger.warning("%s failed: %s", command, exc)
            return {"command": "operationFailed", "request": command, "error": str(exc)}

    def poll_external_change(self) -> Optional[dict]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as exc:
            logger.warning("Cannot read %s: %s", self.path, exc)
            return None
        if text == self._last_text:
            return None
        try:
            parse_document(text)
        except DocumentParseError:
            # wait until the file is valid again
            return None
        self._last_text = text
        return {"command": "documentUpdated", "newContent": text}

    # ---------- handlers ----------
    def _edit_target(self, message):
        path = message.get("path") or []
        if not isinstance(path, list) or not all(isinstance(label, str) for label in path):
            raise RequestError(f"updateValue path must be a list of labels, got {path!r}")
        index, key = message.get("index"), message.get("key")
        if index is None and key is None:
            raise RequestError("updateValue needs an index, a key, or both")
        if key is not None and not isinstance(key, str):
            raise RequestError(f"updateValue key must be text, got {key!r}")
        if not isinstance(message.get("newValue", ""), str):
            raise RequestError("updateValue newValue must be text")
        return path[1:], index, key

    def _update_value(self, message) -> dict:
        path, index, key = self._edit_target(message)
        root = parse_document(self.read_text())
        new_root = apply_edit(
            root,
            path,
            index=index,
            key=key,
            raw_value=message.get("newValue", ""),
        )
        text = serialize_document(new_root, self.config.get("JSON_INDENT", 2))
        self._write_text(text)
        logger.info("Updated %s", self.path)
        return {"command": "documentUpdated", "newContent": text}

    def _destination(self, kind: str) -> Optional[str]:
        if self.choose_destination is None:
            return None
        return self.choose_destination(kind)

    def _export_csv(self, message) -> dict:
        dest = self._destination("csv")
        if not dest:
            return {"command": "exportCancelled", "request": "exportToCsv"}
        with open(dest, "w", encoding="utf-8", newline="") as f:
            f.write(message.get("csvString", ""))
        logger.info("Exported CSV to %s", dest)
        return {"command": "exportCompleted", "path": os.path.abspath(dest)}

    def _export_xlsx(self, message) -> dict:
        dest = self._destination("xlsx")
        if not dest:
            return {"command": "exportCancelled", "request": "exportToXlsx"}
        payload = build_workbook_bytes(
            message.get("data") or [],
            message.get("headers") or [],
            row_id_column=self.config.get("ROW_ID_COLUMN", "_rowId"),
            main_sheet_name=self.config.get("MAIN_SHEET_NAME", "Main"),
        )
        with open(dest, "wb") as f:
            f.write(payload)
        logger.info("Exported workbook to %s", dest)
        return {"command": "exportCompleted", "path": os.path.abspath(dest)}
