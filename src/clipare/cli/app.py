# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler
from rich.table import Table

from ..config import Config
from ..config_loader import load_config
from ..console import get_console_manager
from ..core.models import RawToolOutput
from ..errors import ClipareError, invalid_input_error
from ..extraction import split_json_objects
from ..logging import fail, warn
from ..output.policy import ToolOutput, error_output
from ..registry import iter_tools, normalize
from .shared import STDIN_MARKER, CLIError, parse_context, read_input

app = typer.Typer(
    name="clipare",
    help="Normalize developer-tool output into compact structured records.",
    no_args_is_help=True,
    add_completion=False,
)


def _load(root: Path) -> Config:
    try:
        return load_config(root)
    except ClipareError as exc:
        raise CLIError(str(exc), exit_code=2) from exc


def _exit_with(exc: CLIError, config: Config | None = None) -> typer.Exit:
    output = (config or Config()).output
    fail(str(exc), use_color=output.color, use_emoji=output.emoji)
    return typer.Exit(code=exc.exit_code)


def _echo_json(output: ToolOutput) -> None:
    typer.echo(json.dumps(output.to_mcp(), indent=2, ensure_ascii=False))


def _decodes(text: str) -> bool:
    try:
        json.loads(text)
    except json.JSONDecodeError:
        return False
    return True


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log parser diagnostics to stderr.")] = False,
) -> None:
    """Normalize developer-tool output into compact structured records."""

    if verbose:
        console = get_console_manager().get(color=True, emoji=False, stderr=True)
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_time=False)],
            force=True,
        )


@app.command("normalize")
def normalize_command(
    tool: Annotated[str, typer.Argument(help="Tool command, for example go-build or git-status.")],
    stdout: Annotated[
        str | None,
        typer.Option("--stdout", help="File holding the tool's stdout, or '-' for stdin."),
    ] = STDIN_MARKER,
    stderr: Annotated[str | None, typer.Option("--stderr", help="File holding the tool's stderr.")] = None,
    exit_code: Annotated[int, typer.Option("--exit-code", help="Exit status of the tool.")] = 0,
    duration_ms: Annotated[float, typer.Option("--duration-ms", min=0, help="Run time in milliseconds.")] = 0.0,
    timed_out: Annotated[bool, typer.Option("--timed-out", help="The tool was killed on timeout.")] = False,
    full: Annotated[bool, typer.Option("--full", help="Never compact the output.")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the MCP-shaped JSON payload.")] = False,
    context: Annotated[
        list[str] | None,
        typer.Option("--context", "-c", help="Parser context as key=value, for example file=main.go."),
    ] = None,
    root: Annotated[Path, typer.Option("--root", help="Directory searched for configuration.")] = Path("."),
) -> None:
    """Parse captured tool output and print its text or JSON rendering."""

    config: Config | None = None
    try:
        config = _load(root)
        raw = RawToolOutput(
            stdout=read_input(stdout),
            stderr=read_input(stderr),
            exit_code=exit_code,
            duration_ms=duration_ms,
            timed_out=timed_out,
        )
        try:
            output = normalize(tool, raw, force_full=full, config=config, **parse_context(context or []))
        except ClipareError as exc:
            if not as_json:
                raise CLIError(str(exc), exit_code=2) from exc
            _echo_json(error_output(invalid_input_error(str(exc))))
            raise typer.Exit(code=2) from exc
    except CLIError as exc:
        raise _exit_with(exc, config) from exc

    if as_json:
        _echo_json(output)
    else:
        typer.echo(output.text)
    if output.is_error:
        raise typer.Exit(code=1)


@app.command("tools")
def tools_command() -> None:
    """List registered tool commands."""

    table = Table(title="clipare tools")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Context")
    table.add_column("Description")
    for spec in iter_tools():
        context = ", ".join(f"{key}={value.__name__}" for key, value in spec.context.items())
        table.add_row(spec.name, context or "-", spec.description)
    get_console_manager().get(color=True, emoji=False).print(table)


@app.command("extract-json")
def extract_json_command(
    source: Annotated[str, typer.Argument(help="File to scan, or '-' for stdin.")] = STDIN_MARKER,
    all_values: Annotated[
        bool,
        typer.Option("--all", help="Print every top-level JSON value, one per line."),
    ] = False,
) -> None:
    """Print the first JSON value embedded in noisy text.

    Balanced spans that do not decode, such as an ``[INFO]`` log prefix, are
    skipped. With ``--all`` every value of a concatenated stream is printed,
    as produced by ``go list -json``.
    """

    try:
        text = read_input(source)
    except CLIError as exc:
        raise _exit_with(exc) from exc
    documents = [value for value in split_json_objects(text) if _decodes(value)]
    if not all_values:
        documents = documents[:1]
    if not documents:
        warn("no JSON value found in input")
        raise typer.Exit(code=1)
    for document in documents:
        typer.echo(document)


__all__ = ["app"]
