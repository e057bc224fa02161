"""STURDY deck CLI: inspect, check and export the slide deck.

Every command takes an optional PATH. Without one, the deck named by
``STURDY_DECK_PATH`` is used, falling back to the deck packaged with STURDY.

Behavior
- Deck content (outlines, exported Markdown, snippets) goes to **stdout**;
  findings and status lines go to **stderr**.
- Unreadable or malformed decks → ``ClickException`` with the parser's message.
- ``check`` and ``snippets --compile`` exit with status 1 when problems are found.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from rich.console import Console
from rich.table import Table

from sturdy import config
from sturdy.domain.errors import DeckError
from sturdy.markup import (
    Severity,
    check_deck,
    compile_snippets,
    dump_deck,
    format_deck,
    has_errors,
    iter_code_blocks,
    load_deck,
    write_deck,
)

from .helpers import error, success, warn

if TYPE_CHECKING:
    from sturdy.domain.models import Deck

logger = logging.getLogger(__name__)

STDOUT = Path("-")

deck_path_argument = click.argument(
    "path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
)


def _load(path: Path | None) -> Deck:
    target = path if path is not None else config.get_deck_path()
    logger.debug("Using deck %s", target)
    try:
        return load_deck(target)
    except DeckError as e:
        raise click.ClickException(f"{target}: {e}") from e


def _outline_rows(deck: Deck) -> list[dict[str, object]]:
    return [
        {
            "index": slide.index + 1,
            "title": slide.title,
            "bullets": len(slide.bullets),
            "code_blocks": len(slide.code_blocks),
            "line": slide.start_line,
        }
        for slide in deck
    ]


@click.group(cls=clickx.ExtraGroup)
def deck() -> None:
    """Slide deck commands."""


@deck.command()
@deck_path_argument
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Render the outline as a table or as JSON.",
)
def outline(path: Path | None, output_format: str) -> None:
    """List the slides with their titles, bullet and code-block counts."""
    loaded = _load(path)
    rows = _outline_rows(loaded)

    if output_format == "json":
        click.echo(json.dumps({"slides": rows, "count": len(rows)}, indent=2))
        return

    name = loaded.source.name if loaded.source is not None else "deck"
    table = Table(title=f"{name} ({len(rows)} slides)")
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Bullets", justify="right")
    table.add_column("Code", justify="right", style="magenta")
    for row in rows:
        table.add_row(
            str(row["index"]),
            str(row["title"] or "-"),
            str(row["bullets"]),
            str(row["code_blocks"]),
        )
    Console().print(table)


@deck.command()
@deck_path_argument
@click.option(
    "--strict/--no-strict",
    default=False,
    show_default=True,
    help="Treat warnings as failures.",
)
@click.option(
    "--require",
    "required_directives",
    multiple=True,
    default=("marp",),
    show_default=True,
    help="Front-matter directive that must be set. Repeatable.",
)
@click.pass_context
def check(
    ctx: click.Context,
    path: Path | None,
    strict: bool,
    required_directives: tuple[str, ...],
) -> None:
    """Check the deck's structure and report problems."""
    loaded = _load(path)
    findings = check_deck(loaded, required_directives=required_directives)

    for finding in findings:
        if finding.severity is Severity.ERROR:
            error(str(finding))
        else:
            warn(str(finding))

    failed = has_errors(findings) or (strict and bool(findings))
    if failed:
        logger.debug("Check failed with %d finding(s)", len(findings))
        ctx.exit(1)
    success(f"{len(loaded)} slides checked, {len(findings)} warning(s).")


@deck.command()
@deck_path_argument
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=STDOUT,
    show_default=True,
    help="Destination file, or '-' for stdout.",
)
@click.option(
    "--canonical/--verbatim",
    default=False,
    show_default=True,
    help="Write the canonical form instead of the source text.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing output file.")
def export(path: Path | None, output: Path, canonical: bool, force: bool) -> None:
    """Write the deck out, verbatim or in canonical form."""
    loaded = _load(path)

    if output == STDOUT:
        click.echo(format_deck(loaded) if canonical else dump_deck(loaded), nl=False)
        return

    if output.exists() and not force:
        raise click.ClickException(
            f"{output} already exists. Use --force to overwrite it."
        )
    write_deck(loaded, output, canonical=canonical)
    success(f"Wrote {len(loaded)} slides to {output}.")


@deck.command()
@deck_path_argument
@click.option(
    "--lang",
    "language",
    default=None,
    help="Only show code blocks in this language (case-insensitive).",
)
@click.option(
    "--compile",
    "compile_python",
    is_flag=True,
    help="Byte-compile Python snippets instead of printing them; fail on syntax errors.",
)
@click.pass_context
def snippets(
    ctx: click.Context, path: Path | None, language: str | None, compile_python: bool
) -> None:
    """Print the deck's fenced code blocks."""
    loaded = _load(path)

    if compile_python:
        failures = compile_snippets(loaded)
        for failure in failures:
            error(str(failure))
        if failures:
            ctx.exit(1)
        success("All Python snippets compile.")
        return

    for slide, block in iter_code_blocks(loaded, language):
        label = block.language or "text"
        click.echo(f"# slide {slide.index + 1}, line {block.line} [{label}]")
        click.echo(block.code)
