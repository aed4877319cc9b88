"""CLI entry point for ml-results.

Reads a saved query response (file or stdin) and prints its records.
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from ml_results.core.errors import ResultsError
from ml_results.core.formatting import FormatCache
from ml_results.core.paging import RecordPager
from ml_results.core.query_result import QueryResult, build_query_result
from ml_results.rendering import record_header, record_syntax, records_table
from ml_results.tui.results_view import ResultsApp
import ml_results.io.logging_setup
import ml_results.io.settings

logger = logging.getLogger(__name__)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8", errors="replace")


def _load_result(args: argparse.Namespace) -> QueryResult:
    headers = {"Content-Type": args.content_type} if args.content_type else {}
    raw = _read_input(args.file)
    return build_query_result(raw, status=args.status, headers=headers, boundary=args.boundary)


def _cmd_records(args: argparse.Namespace, console: Console) -> int:
    result = _load_result(args)
    page_size = args.page_size or ml_results.io.settings.load_page_size()
    pager = RecordPager(result.records, page_size=page_size)
    pager.jump_to_page(args.page - 1)
    title = f"{pager.total_records} records, page {pager.current_page + 1} of {max(pager.total_pages, 1)}"
    console.print(records_table(pager.page_records, start=pager.start, title=title))
    return 0


def _cmd_show(args: argparse.Namespace, console: Console) -> int:
    result = _load_result(args)
    total = result.total_records
    if not total:
        console.print(result.formatted)
        return 0
    if not 1 <= args.index <= total:
        print(f"ml-results: record {args.index} out of range (1-{total})", file=sys.stderr)
        return 2
    record = result.records[args.index - 1]
    theme = args.theme or ml_results.io.settings.load_code_theme()
    console.print(record_header(args.index, total, record))
    console.print(record_syntax(record, theme=theme, cache=FormatCache(), line_numbers=args.line_numbers))
    return 0


def _cmd_aggregate(args: argparse.Namespace, console: Console) -> int:
    result = _load_result(args)
    console.print(result.formatted, markup=False, highlight=False, soft_wrap=True)
    return 0


def _cmd_view(args: argparse.Namespace, console: Console) -> int:
    result = _load_result(args)
    app = ResultsApp(
        result.records,
        page_size=args.page_size or ml_results.io.settings.load_page_size(),
        code_theme=args.theme or ml_results.io.settings.load_code_theme(),
        source_name=args.file,
    )
    app.run()
    return 0


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value <= 0:
        raise ValueError(raw)
    return value


# Settings the config command may write, with the type each value is parsed as.
_SETTING_TYPES = {
    "page_size": _positive_int,
    "code_theme": str,
}


def _cmd_config(args: argparse.Namespace, console: Console) -> int:
    if args.action == "show":
        console.print_json(data=ml_results.io.settings.load_settings())
        return 0

    try:
        value = _SETTING_TYPES[args.key](args.value)
    except ValueError:
        print(f"ml-results: invalid value for {args.key}: {args.value!r}", file=sys.stderr)
        return 2
    ml_results.io.settings.save_setting(args.key, value)
    logger.info("saved %s=%r to %s", args.key, value, ml_results.io.settings.get_config_path())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ml-results",
        description="Parse and display query eval responses",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: env ML_RESULTS_LOG_LEVEL or WARNING)",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("file", help="Response body file, or - for stdin")
    common.add_argument(
        "--boundary",
        type=str,
        default=None,
        help="Multipart boundary token (default: from --content-type, else detected)",
    )
    common.add_argument(
        "--content-type",
        type=str,
        default=None,
        help="Response Content-Type header, e.g. 'multipart/mixed; boundary=abc'",
    )
    common.add_argument(
        "--status",
        type=int,
        default=200,
        help="HTTP status the response was received with (default: 200)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("records", parents=[common], help="Print a table of records")
    p.add_argument("--page", type=int, default=1, help="1-based page number (default: 1)")
    p.add_argument("--page-size", type=int, default=None, help="Records per page (default: settings or 50)")
    p.set_defaults(handler=_cmd_records)

    p = sub.add_parser("show", parents=[common], help="Print one record's formatted content")
    p.add_argument("--index", type=int, default=1, help="1-based record number (default: 1)")
    p.add_argument("--theme", type=str, default=None, help="Pygments style (default: settings or monokai)")
    p.add_argument("--line-numbers", action="store_true", default=False, help="Show line numbers")
    p.set_defaults(handler=_cmd_show)

    p = sub.add_parser("aggregate", parents=[common], help="Print all record contents joined by newlines")
    p.set_defaults(handler=_cmd_aggregate)

    p = sub.add_parser("view", parents=[common], help="Browse records interactively")
    p.add_argument("--page-size", type=int, default=None, help="Records per page (default: settings or 50)")
    p.add_argument("--theme", type=str, default=None, help="Pygments style (default: settings or monokai)")
    p.set_defaults(handler=_cmd_view)

    p = sub.add_parser("config", help="Show or change saved settings")
    config_sub = p.add_subparsers(dest="action", required=True)
    config_sub.add_parser("show", help="Print the settings file as JSON")
    p_set = config_sub.add_parser("set", help="Save one setting")
    p_set.add_argument("key", choices=sorted(_SETTING_TYPES), help="Setting name")
    p_set.add_argument("value", help="New value")
    p.set_defaults(handler=_cmd_config)

    return parser


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    args = build_parser().parse_args(argv)
    ml_results.io.logging_setup.configure(args.command, level=args.log_level)
    console = console or Console()
    try:
        return args.handler(args, console)
    except ResultsError as e:
        logger.debug("query result rejected", exc_info=True)
        print(f"ml-results: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        target = getattr(args, "file", None) or ml_results.io.settings.get_config_path()
        print(f"ml-results: cannot access {target}: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
