"""Command-line interface for tabcalc."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TextIO

import click

from tabcalc import __version__
from tabcalc.formulas.errors import SheetError
from tabcalc.logging import EventType, configure_sink, emit_error, emit_info
from tabcalc.sheet import Sheet


@click.group()
@click.version_option(version=__version__, prog_name="tabcalc")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="YAML config file (default: ./tabcalc.yaml if present).",
)
@click.pass_context
def main(ctx: click.Context, config_path: str | None) -> None:
    """tabcalc -- evaluate tab-separated spreadsheets with formulas."""
    from tabcalc.config import load_config

    try:
        config = load_config(Path(config_path) if config_path else None)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    if config["logging_enabled"]:
        configure_sink(Path(config["logs_dir"]), fsync=config["logging_fsync"])
    else:
        configure_sink(None)
    ctx.obj = config


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _load_sheet(ctx: click.Context, source: TextIO) -> Sheet:
    return Sheet.from_text(source.read(), max_depth=ctx.obj["max_depth"])


def _source_name(source: TextIO) -> str:
    return getattr(source, "name", "<stdin>")


# ---------------------------------------------------------------------------
# Render
# ---------------------------------------------------------------------------


@main.command()
@click.argument("source", type=click.File("r"), default="-")
@click.pass_context
def render(ctx: click.Context, source: TextIO) -> None:
    """Print every evaluated cell of SOURCE (default: stdin)."""
    sheet = _load_sheet(ctx, source)
    context = {"source": _source_name(source), "cells": len(sheet)}
    emit_info(EventType.render_started, "Render started", context)
    try:
        output = sheet.render()
    except SheetError as e:
        emit_error(EventType.render_failed, str(e), context, error_code=e.error_code)
        raise click.ClickException(str(e))
    emit_info(EventType.render_completed, "Render completed", context)
    click.echo(output)


# ---------------------------------------------------------------------------
# Get
# ---------------------------------------------------------------------------


@main.command()
@click.argument("source", type=click.File("r"))
@click.argument("address")
@click.option("--raw", is_flag=True, help="Print the stored content instead of the value.")
@click.pass_context
def get(ctx: click.Context, source: TextIO, address: str, raw: bool) -> None:
    """Print the value of the cell at ADDRESS in SOURCE."""
    sheet = _load_sheet(ctx, source)
    context = {"source": _source_name(source), "address": address, "raw": raw}
    try:
        value = sheet.get_raw(address) if raw else sheet.get_value(address)
    except SheetError as e:
        emit_error(EventType.lookup_failed, str(e), context, error_code=e.error_code)
        raise click.ClickException(str(e))
    emit_info(EventType.lookup_completed, f"{address} = {value}", context)
    click.echo(value)


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------


@main.command()
@click.argument("source", type=click.File("r"), default="-")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def cells(ctx: click.Context, source: TextIO, as_json: bool) -> None:
    """List every cell of SOURCE with its content and value.

    Evaluation errors are reported per cell instead of aborting the listing.
    """
    sheet = _load_sheet(ctx, source)
    rows: list[dict[str, Any]] = []
    for cell in sheet:
        entry: dict[str, Any] = {"address": cell.address_string, "raw": cell.content}
        try:
            entry["value"] = sheet.get_value(cell.address_string)
        except SheetError as e:
            entry["error"] = str(e)
            entry["error_code"] = e.error_code
        rows.append(entry)

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return
    if not rows:
        click.echo("Sheet is empty.")
        return
    for entry in rows:
        shown = entry["value"] if "value" in entry else f"#ERR! {entry['error']}"
        click.echo(f"  {entry['address']:8s} {entry['raw']:24s} {shown}")
