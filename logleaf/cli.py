"""CLI commands for the LogLeaf health post parser.

Provides subcommands for inspecting how stored posts are classified.

Commands:
    logleaf classify TEXT   - Classify a single post text
    logleaf scan FILE       - Classify every post in a JSON Lines export
    logleaf dialects        - List known health text dialects
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections import Counter
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import ParserConfig
from .core.health import (
    CLASSIFIER_PRECEDENCE,
    DIALECTS,
    HealthPostParser,
    ParseResult,
    SourceTag,
    create_parser as create_health_parser,
    stage_breakdown,
    summarize,
)
from .core.health.taxonomy import SleepRecord

console = Console()

# Characters of post text shown for plain-text rows
PREVIEW_LENGTH = 30


def setup_logging(verbose: bool = False) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def load_parser(args: argparse.Namespace) -> tuple[ParserConfig, HealthPostParser]:
    """Build the health parser from the project's configuration."""
    config = ParserConfig.load(Path(args.project_path).resolve())
    return config, create_health_parser(config)


def preview(text: str) -> str:
    """First line of text, shortened for table display."""
    line = text.strip().split("\n", 1)[0]
    return line[:PREVIEW_LENGTH] + "..." if len(line) > PREVIEW_LENGTH else line


def render_result(result: ParseResult) -> Table:
    """Render the fields of one parse result as a table."""
    table = Table(title=f"{result.category.value} ({result.dialect or 'no dialect'})")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")

    if result.record is None:
        table.add_row("record", "[dim]none[/dim]")
        return table

    for name, value in result.to_dict()["record"].items():
        table.add_row(name, "-" if value is None else escape(str(value)))

    if isinstance(result.record, SleepRecord):
        for label, minutes, fraction in stage_breakdown(result.record):
            table.add_row(f"[dim]{label}[/dim]", f"{minutes}分 ({fraction:.0%})")

    return table


def classify_text(args: argparse.Namespace) -> int:
    """Classify a single post text.

    Args:
        args: Parsed arguments (text, source, json)

    Returns:
        Exit code (0 for success)
    """
    config, parser = load_parser(args)
    source = SourceTag.coerce(args.source) or config.default_source

    # Shells pass "\n" literally
    text = args.text.replace("\\n", "\n")
    result = parser.parse(text, source)

    if args.json:
        console.print_json(data=result.to_dict())
        return 0

    console.print(render_result(result))
    summary = summarize(result)
    if summary:
        console.print(f"[bold]Summary:[/bold] {escape(summary)}")
    return 0


def scan_file(args: argparse.Namespace) -> int:
    """Classify every post in a JSON Lines file.

    Each line is an object with "text" and optional "id" and "source" keys.

    Args:
        args: Parsed arguments (file, json)

    Returns:
        Exit code (0 for success, 1 if any line was malformed)
    """
    path = Path(args.file)
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        return 1

    config, parser = load_parser(args)

    rows: list[tuple[str, str, ParseResult]] = []
    malformed = 0

    with path.open(encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                post = json.loads(line)
            except json.JSONDecodeError as e:
                console.print(f"[yellow]⚠ Line {line_no}: invalid JSON ({e.msg})[/yellow]")
                malformed += 1
                continue
            if not isinstance(post, dict) or not isinstance(post.get("text"), str):
                console.print(f"[yellow]⚠ Line {line_no}: missing \"text\" field[/yellow]")
                malformed += 1
                continue

            post_id = str(post.get("id", line_no))
            source = SourceTag.coerce(post.get("source")) or config.default_source
            rows.append((post_id, post["text"], parser.parse(post["text"], source)))

    if args.json:
        console.print_json(data=[{"id": post_id, **result.to_dict()} for post_id, _, result in rows])
        return 1 if malformed else 0

    if not rows:
        console.print("[dim]No posts found.[/dim]")
        return 1 if malformed else 0

    table = Table(title=f"Posts in {path.name}")
    table.add_column("ID", style="dim")
    table.add_column("Category", style="cyan")
    table.add_column("Dialect")
    table.add_column("Summary")

    for post_id, text, result in rows:
        category = result.category.value
        if result.hint_mismatch():
            category = f"[yellow]{category}[/yellow]"
        summary = summarize(result) or preview(text)
        table.add_row(escape(post_id), category, result.dialect or "-", escape(summary))

    console.print(table)

    counts = Counter(result.category for _, _, result in rows)
    totals = ", ".join(f"{category.value}: {count}" for category, count in sorted(counts.items()))
    console.print(f"[bold]Total:[/bold] {len(rows)} posts ({totals})")

    return 1 if malformed else 0


def list_dialects(args: argparse.Namespace) -> int:
    """List known dialects in detection order.

    Args:
        args: Parsed arguments

    Returns:
        Exit code (0 for success)
    """
    table = Table(title="Health Text Dialects")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Dialect", style="cyan")
    table.add_column("Requires all of")
    table.add_column("Requires any of")
    table.add_column("Example", style="dim")

    order = 1
    for category in CLASSIFIER_PRECEDENCE:
        for dialect in DIALECTS[category]:
            table.add_row(
                str(order),
                dialect.name,
                " ".join(dialect.all_of) or "-",
                " | ".join(dialect.any_of) or "-",
                dialect.description,
            )
            order += 1

    console.print(table)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="logleaf",
        description="LogLeaf - recover health data from timeline posts",
    )
    parser.add_argument(
        "--project-path",
        "-p",
        default=".",
        help="Project directory holding .logleaf/config.yaml (default: current directory)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # =========================================================================
    # classify command
    # =========================================================================
    classify_parser = subparsers.add_parser("classify", help="Classify a post text")
    classify_parser.add_argument(
        "text",
        help="Post text (use \\n for line breaks)",
    )
    classify_parser.add_argument(
        "--source",
        "-s",
        choices=[tag.value for tag in SourceTag],
        help="Source hint of the post",
    )
    classify_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    classify_parser.set_defaults(func=classify_text)

    # =========================================================================
    # scan command
    # =========================================================================
    scan_parser = subparsers.add_parser("scan", help="Classify posts in a JSON Lines file")
    scan_parser.add_argument(
        "file",
        help="JSON Lines file with one post object per line",
    )
    scan_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the results as JSON",
    )
    scan_parser.set_defaults(func=scan_file)

    # =========================================================================
    # dialects command
    # =========================================================================
    dialects_parser = subparsers.add_parser("dialects", help="List known text dialects")
    dialects_parser.set_defaults(func=list_dialects)

    return parser


def run_cli(args: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not hasattr(parsed, "func"):
        parser.print_help()
        return 0

    setup_logging(parsed.verbose)

    try:
        return parsed.func(parsed)
    except KeyboardInterrupt:
        console.print("\n[dim]Cancelled.[/dim]")
        return 130
    except ValidationError as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {escape(str(e))}")
        return 1
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1


def main() -> None:
    """Entry point for the logleaf command."""
    sys.exit(run_cli())


__all__ = [
    "classify_text",
    "create_parser",
    "list_dialects",
    "main",
    "run_cli",
    "scan_file",
]
