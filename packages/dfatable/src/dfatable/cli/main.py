"""dfatable CLI tool for checking and converting transition table files.

This module provides a command-line interface for:
- Validating transition table files
- Rewriting files in canonical form
- Displaying a table in the terminal
- Converting between the text format and JSON/YAML
"""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table as RichTable

from .. import __version__
from ..config import OUTPUT_FORMATS, CLIConfig, configure_logging, load_config
from ..exceptions import DfaTableError, SerializationError
from ..parser import parse
from ..serialization import dumps, from_yaml, loads, to_yaml
from ..serializer import serialize
from ..table import STARTING_STATE_ID, Table

logger = logging.getLogger(__name__)

STRUCTURED_SUFFIXES = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def _console(ctx: click.Context) -> Console:
    return ctx.obj["console"]


def _fail(ctx: click.Context, message: str) -> NoReturn:
    _console(ctx).print(f"[red]Error: {escape(message)}[/red]", soft_wrap=True)
    sys.exit(1)


def _read_text(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SerializationError(
            f"Cannot read {path}: not valid UTF-8 text ({e.reason} at byte {e.start})",
            context={"path": path, "encoding": "utf-8", "position": e.start},
        ) from e
    except OSError as e:
        raise SerializationError(
            f"Cannot read {path}: {e.strerror or e}",
            context={"path": path},
        ) from e


def _load_table(path: str) -> Table:
    """Load a table from text, JSON or YAML depending on the file suffix."""
    text = _read_text(path)
    kind = STRUCTURED_SUFFIXES.get(Path(path).suffix.lower())
    if kind == "json":
        return loads(Table, text)
    if kind == "yaml":
        return from_yaml(Table, text)
    return parse(text)


def _render(table: Table, fmt: str) -> str:
    if fmt == "json":
        return dumps(table, indent=2)
    if fmt == "yaml":
        return to_yaml(table)
    return serialize(table)


@click.group()
@click.version_option(version=__version__)
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True),
              help='YAML or JSON settings file')
@click.option('--log-level', '-l', type=click.Choice(
    ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    help='Logging level (overrides config)')
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str | None):
    """dfatable - DFA transition table checker and converter"""
    ctx.ensure_object(dict)
    try:
        settings = load_config(config_path)
    except DfaTableError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)
    if log_level:
        settings.log_level = log_level.upper()
    configure_logging(settings.log_level)

    ctx.obj["config"] = settings
    ctx.obj["console"] = Console(no_color=not settings.color, highlight=False)


@cli.command()
@click.argument('table_file', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def validate(ctx: click.Context, table_file: str):
    """Check that a transition table file is well formed"""
    try:
        table = parse(_read_text(table_file))
    except DfaTableError as e:
        _fail(ctx, str(e))

    console = _console(ctx)
    console.print(f"[green]✓[/green] {escape(table_file)} is valid", soft_wrap=True)
    console.print(f"  States: {len(table)}")
    console.print(f"  Symbols: {table.symbol_count}")
    console.print(f"  Accepting: {len(table.accepting_ids())}")


@cli.command(name='format')
@click.argument('table_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False),
              help='Write to this file instead of stdout')
@click.option('--check', is_flag=True, help='Only report whether the file is canonical')
@click.pass_context
def format_table(ctx: click.Context, table_file: str, output: str | None, check: bool):
    """Rewrite a table with single spaces and rows sorted by state id"""
    try:
        original = _read_text(table_file)
        canonical = serialize(parse(original))
    except DfaTableError as e:
        _fail(ctx, str(e))

    if check:
        if canonical != original:
            _console(ctx).print(
                f"[yellow]{escape(table_file)} is not in canonical form[/yellow]", soft_wrap=True
            )
            sys.exit(1)
        _console(ctx).print(f"[green]✓[/green] {escape(table_file)} is canonical", soft_wrap=True)
        return

    if output:
        Path(output).write_text(canonical, encoding="utf-8")
        _console(ctx).print(f"[green]✓[/green] Wrote {escape(output)}", soft_wrap=True)
    else:
        click.echo(canonical)


@cli.command()
@click.argument('table_file', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def show(ctx: click.Context, table_file: str):
    """Display a transition table"""
    try:
        table = _load_table(table_file)
    except DfaTableError as e:
        _fail(ctx, str(e))

    view = RichTable(title=escape(Path(table_file).name))
    view.add_column("State", style="cyan", justify="right")
    view.add_column("Accepting", style="green")
    for symbol in range(table.symbol_count):
        view.add_column(str(symbol), justify="right")

    for row in table:
        state_label = str(row.id)
        if row.id == STARTING_STATE_ID:
            state_label += " (start)"
        view.add_row(
            state_label,
            "yes" if row.accepting else "",
            *(str(t) if t.is_goto else "[red]E[/red]" for t in row.transitions),
        )

    _console(ctx).print(view)


@cli.command()
@click.argument('table_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--to', 'target', type=click.Choice(list(OUTPUT_FORMATS)),
              help='Output format (defaults to the configured output_format)')
@click.option('--output', '-o', type=click.Path(dir_okay=False),
              help='Write to this file instead of stdout')
@click.pass_context
def convert(ctx: click.Context, table_file: str, target: str | None, output: str | None):
    """Convert between the text format and JSON/YAML

    Files ending in .json, .yaml or .yml are read as structured
    documents; anything else is read as table text.
    """
    settings: CLIConfig = ctx.obj["config"]
    target = target or settings.output_format
    try:
        table = _load_table(table_file)
        rendered = _render(table, target)
    except DfaTableError as e:
        _fail(ctx, str(e))

    logger.info(f"Converted {table_file} to {target}")
    if output:
        Path(output).write_text(rendered, encoding="utf-8")
        _console(ctx).print(f"[green]✓[/green] Wrote {escape(output)}", soft_wrap=True)
    else:
        click.echo(rendered)


def main():
    """Main entry point for CLI"""
    cli()


if __name__ == '__main__':
    main()
