import json
import logging
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "jsontable")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")

# default settings
JSON_INDENT_DEFAULT = 2
ROW_ID_COLUMN_DEFAULT = "_rowId"
MAIN_SHEET_NAME_DEFAULT = "Main"
CSV_LINE_TERMINATOR_DEFAULT = "\n"
LOG_LEVEL_DEFAULT = "WARNING"
LOG_FILE_DEFAULT = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def default_config():
    return {
        "JSON_INDENT": JSON_INDENT_DEFAULT,
        "ROW_ID_COLUMN": ROW_ID_COLUMN_DEFAULT,
        "MAIN_SHEET_NAME": MAIN_SHEET_NAME_DEFAULT,
        "CSV_LINE_TERMINATOR": CSV_LINE_TERMINATOR_DEFAULT,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
        "LOG_FILE": LOG_FILE_DEFAULT,
    }


def _non_empty_str(value):
    return isinstance(value, str) and value.strip() != ""


def load_config():
    cfg = default_config()

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return cfg
    if not isinstance(data, dict):
        return cfg

    indent = data.get("json_indent")
    if isinstance(indent, int) and not isinstance(indent, bool) and indent >= 0:
        cfg["JSON_INDENT"] = indent

    export = data.get("export")
    if isinstance(export, dict):
        if _non_empty_str(export.get("row_id_column")):
            cfg["ROW_ID_COLUMN"] = export["row_id_column"]
        if _non_empty_str(export.get("main_sheet_name")):
            cfg["MAIN_SHEET_NAME"] = export["main_sheet_name"]
        if export.get("csv_line_terminator") in {"\n", "\r\n"}:
            cfg["CSV_LINE_TERMINATOR"] = export["csv_line_terminator"]

    level = data.get("log_level")
    if isinstance(level, str) and isinstance(logging.getLevelName(level.upper()), int):
        cfg["LOG_LEVEL"] = level.upper()

    if _non_empty_str(data.get("log_file")):
        cfg["LOG_FILE"] = os.path.expanduser(data["log_file"])

    return cfg


def configure_logging(cfg):
    logging.basicConfig(
        level=cfg.get("LOG_LEVEL", LOG_LEVEL_DEFAULT),
        format=LOG_FORMAT,
        filename=cfg.get("LOG_FILE"),
    )
