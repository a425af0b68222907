import argparse
import locale
import logging
import os
import sys

from config_paths import configure_logging, load_config
from document_host import JsonDocumentHost
from errors import JsonTableError
from grid_view import GridRenderer

try:
    from _version import __version__
except Exception:
    __version__ = "0.0.0"

logger = logging.getLogger(__name__)

EXPORT_KINDS = {".csv": "csv", ".xlsx": "xlsx"}


def _parse_filter(text: str) -> tuple[str, str]:
    column, sep, pattern = text.partition("=")
    if not sep or not column:
        raise argparse.ArgumentTypeError(f"expected COLUMN=PATTERN, got '{text}'")
    return column, pattern


def _add_view_options(parser):
    parser.add_argument("file", help="JSON document")
    parser.add_argument(
        "--at", action="append", default=[], metavar="LABEL",
        help="drill into a key or [index]; repeat to go deeper",
    )
    parser.add_argument(
        "--filter", action="append", default=[], type=_parse_filter,
        metavar="COLUMN=PATTERN",
    )
    parser.add_argument("--sort", metavar="COLUMN")
    parser.add_argument("--desc", action="store_true", help="sort descending")
    parser.add_argument("--hide", action="append", default=[], metavar="COLUMN")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsontable", description="Browse, edit and export JSON documents as tables."
    )
    parser.add_argument("-v", "--version", action="version", version=__version__)
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="print the table at a path")
    _add_view_options(show)
    show.add_argument("--width", type=int, default=120)

    export = sub.add_parser("export", help="export the table at a path to .csv or .xlsx")
    _add_view_options(export)
    export.add_argument("output")

    edit = sub.add_parser("set", help="write one value into the document")
    edit.add_argument("file")
    edit.add_argument("value", help="JSON literal, or plain text")
    edit.add_argument("--at", action="append", default=[], metavar="LABEL")
    edit.add_argument("--index", type=int)
    edit.add_argument("--key")
    return parser


def _open_view(host: JsonDocumentHost, args):
    state = host.open_session()
    for label in args.at:
        state.descend(label)
    for column, pattern in args.filter:
        state.set_filter(column, pattern)
    if args.sort:
        state.toggle_sort(args.sort)
        if args.desc:
            state.toggle_sort(args.sort)
    for column in args.hide:
        state.set_column_visible(column, False)
    return state


def _report(response) -> int:
    if response is None:
        return 1
    if response.get("command") == "operationFailed":
        print(f"{response['request']} failed: {response['error']}", file=sys.stderr)
        return 1
    return 0


def run(args, config) -> int:
    if args.command == "show":
        state = _open_view(JsonDocumentHost(args.file, config), args)
        print(" > ".join(state.breadcrumbs()))
        print(GridRenderer(state.grid()).render(args.width))
        return 0

    if args.command == "export":
        _, ext = os.path.splitext(args.output)
        kind = EXPORT_KINDS.get(ext.lower())
        if kind is None:
            print("Unsupported export type (use .csv or .xlsx)", file=sys.stderr)
            return 1
        host = JsonDocumentHost(args.file, config, choose_destination=lambda _kind: args.output)
        state = _open_view(host, args)
        if kind == "csv":
            request = state.build_csv_export_request()
        else:
            request = state.build_xlsx_export_request()
        response = host.handle(request)
        rc = _report(response)
        if rc == 0 and "path" in response:
            print(f"Exported {response['path']}")
        return rc

    if args.command == "set":
        if args.index is None and args.key is None:
            print("set needs --index, --key, or both", file=sys.stderr)
            return 1
        host = JsonDocumentHost(args.file, config)
        state = host.open_session()
        for label in args.at:
            state.descend(label)
        request = state.build_update_request(args.value, index=args.index, key=args.key)
        return _report(host.handle(request))

    return 1


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = load_config()
    configure_logging(config)
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.debug("Using default collation")
    try:
        rc = run(args, config)
    except (JsonTableError, OSError) as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        rc = 1
    sys.exit(rc)


if __name__ == "__main__":
    main()
