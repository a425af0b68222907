import json
import tempfile
from pathlib import Path

import config_paths


def _load_with(payload):
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "jsontable"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        cfg_path = cfg_dir / "config.json"
        if payload is not None:
            cfg_path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
        # point module paths to temp
        orig_dir = config_paths.CONFIG_DIR
        orig_json = config_paths.CONFIG_JSON
        try:
            config_paths.CONFIG_DIR = str(cfg_dir)
            config_paths.CONFIG_JSON = str(cfg_path)
            return config_paths.load_config()
        finally:
            config_paths.CONFIG_DIR = orig_dir
            config_paths.CONFIG_JSON = orig_json


def test_load_config_defaults_without_json():
    cfg = _load_with(None)
    assert cfg == config_paths.default_config()
    assert cfg["JSON_INDENT"] == 2
    assert cfg["ROW_ID_COLUMN"] == "_rowId"
    assert cfg["MAIN_SHEET_NAME"] == "Main"
    assert cfg["LOG_FILE"] is None


def test_load_config_reads_json_overrides():
    cfg = _load_with(
        {
            "json_indent": 4,
            "export": {
                "row_id_column": "source_row",
                "main_sheet_name": "Overview",
                "csv_line_terminator": "\r\n",
            },
            "log_level": "debug",
            "log_file": "/tmp/jsontable.log",
        }
    )
    assert cfg["JSON_INDENT"] == 4
    assert cfg["ROW_ID_COLUMN"] == "source_row"
    assert cfg["MAIN_SHEET_NAME"] == "Overview"
    assert cfg["CSV_LINE_TERMINATOR"] == "\r\n"
    assert cfg["LOG_LEVEL"] == "DEBUG"
    assert cfg["LOG_FILE"] == "/tmp/jsontable.log"


def test_load_config_ignores_invalid_entries():
    cfg = _load_with(
        {
            "json_indent": -1,
            "export": {"row_id_column": "", "csv_line_terminator": ";"},
            "log_level": "chatty",
        }
    )
    assert cfg == config_paths.default_config()


def test_load_config_ignores_malformed_file():
    assert _load_with("{not json") == config_paths.default_config()
    assert _load_with("[1, 2]") == config_paths.default_config()
