from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import IO, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .command_help import get_command_help
from .config import RollTablesConfig, load_config, load_options_file
from .errors import RollTablesError
from .help_formatter import formatter_for, render_extended_examples
from .logging_utils import configure_logging
from .preprocessor import RollTablesPreprocessor
from .protocol import read_input, write_output
from .summary_table import SummaryTableRenderer
from .validation import validate_options
from .validation_output import ValidationFormatter
from .version import __version__

LOGGER = logging.getLogger(__name__)

CONSOLE = Console()
ERR_CONSOLE = Console(stderr=True)

STDIN_MARKER = "-"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rolltables",
        description=(
            "mdBook preprocessor that fills in roll tables. Without a command it reads the "
            "preprocessor payload from stdin and writes the book to stdout."
        ),
        formatter_class=formatter_for("preprocess"),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging on stderr")
    parser.add_argument("--log-level", default=None, help="Log level (default: $ROLLTABLES_LOG_LEVEL or INFO)")
    parser.add_argument("--examples", action="store_true", help="Show extended usage examples and exit")
    parser.set_defaults(command=None)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    supports = subparsers.add_parser(
        "supports",
        help="Tell mdBook whether a renderer is supported (exit code 0 or 1)",
        formatter_class=formatter_for("supports"),
    )
    supports.add_argument("renderer", help="Renderer name, e.g. html")

    render = subparsers.add_parser(
        "render",
        help="Fill in the roll tables of a markdown file",
        formatter_class=formatter_for("render"),
    )
    render.add_argument("source", help="Markdown file to read, or - for stdin")
    render.add_argument("-o", "--output", type=Path, default=None, help="Write the result here instead of stdout")
    render.add_argument("--config", type=Path, default=None, help="book.toml or YAML file with rolltables options")
    render.add_argument("--separator", default=None, help="Separator between the bounds of a roll range")
    render.add_argument("--head-separator", default=None, help="Separator between dice in the header")
    render.add_argument(
        "--no-warn-unusual-dice",
        action="store_true",
        help="Do not warn when a table needs a d13, d17 or similar",
    )
    render.add_argument("--summary", action="store_true", help="Print a summary table on stderr")
    render.add_argument("--examples", action="store_true", help="Show extended usage examples and exit")

    validate = subparsers.add_parser(
        "validate-config",
        help="Validate rolltables options in book.toml or a YAML file",
        formatter_class=formatter_for("validate-config"),
    )
    validate.add_argument("config", type=Path, help="book.toml or YAML options file")
    validate.add_argument("--no-suggestions", action="store_true", help="Hide fix suggestions")
    validate.add_argument("--examples", action="store_true", help="Show extended usage examples and exit")

    return parser


def run_preprocess(
    args: argparse.Namespace,
    stdin: Optional[IO[str]] = None,
    stdout: Optional[IO[str]] = None,
) -> int:
    configure_logging(args.log_level, verbose=args.verbose)
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    preprocessor = RollTablesPreprocessor()
    try:
        context, book = read_input(stdin)
        processed = preprocessor.run(context, book)
    except RollTablesError as exc:
        LOGGER.error("%s", exc)
        return 1

    write_output(processed, stdout)
    return 0


def run_supports(args: argparse.Namespace) -> int:
    return 0 if RollTablesPreprocessor.supports_renderer(args.renderer) else 1


def _read_source(source: str) -> str:
    if source == STDIN_MARKER:
        return sys.stdin.read()
    with open(source, encoding="utf-8", newline="") as handle:
        return handle.read()


def _write_result(text: str, output: Optional[Path]) -> None:
    if output is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    with output.open("w", encoding="utf-8", newline="") as handle:
        handle.write(text)


def run_render(args: argparse.Namespace) -> int:
    configure_logging(args.log_level, verbose=args.verbose)

    try:
        config = load_config(args.config) if args.config else RollTablesConfig()
        text = _read_source(args.source)
    except RollTablesError as exc:
        LOGGER.error("%s", exc)
        return 1
    except OSError as exc:
        LOGGER.error("Unable to read %s: %s", args.source, exc)
        return 1

    config = config.with_overrides(
        separator=args.separator,
        head_separator=args.head_separator,
        warn_unusual_dice=False if args.no_warn_unusual_dice else None,
    )
    preprocessor = RollTablesPreprocessor(config)
    source_name = None if args.source == STDIN_MARKER else args.source
    result = preprocessor.process_markdown(text, source=source_name)

    try:
        _write_result(result, args.output)
    except OSError as exc:
        LOGGER.error("Unable to write %s: %s", args.output, exc)
        return 1

    if args.summary:
        SummaryTableRenderer(ERR_CONSOLE).print_summary(preprocessor.stats)
    return 0


def run_validate_config(args: argparse.Namespace) -> int:
    try:
        data = load_options_file(args.config)
    except RollTablesError as exc:
        CONSOLE.print(f"[bold red]✗ {escape(str(exc))}[/bold red]")
        return 1

    if data is None:
        table_name = escape("[preprocessor.rolltables]")
        CONSOLE.print(f"[yellow]No {table_name} table in {escape(str(args.config))}; defaults apply.[/yellow]")
        data = {}

    report = validate_options(data)
    formatter = ValidationFormatter(CONSOLE, show_suggestions=not args.no_suggestions)
    formatter.format_report(report, source=str(args.config))
    return 0 if report.is_valid else 1


_COMMANDS = {
    None: run_preprocess,
    "supports": run_supports,
    "render": run_render,
    "validate-config": run_validate_config,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if getattr(args, "examples", False):
        command = args.command or "preprocess"
        render_extended_examples(command, get_command_help(command).extended_examples, console=CONSOLE)
        return 0

    handler = _COMMANDS[args.command]
    try:
        return handler(args)
    except Exception as exc:  # noqa: BLE001 - the host only sees the exit code
        LOGGER.exception("rolltables failed: %s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
