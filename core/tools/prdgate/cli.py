"""prd-gate CLI: PreToolUse hook entry point plus inspection commands."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from . import EXIT_CODE_NAMES, PRESETS, TOOL_INPUT_ENV_VAR, ExitCode
from .config import (
    ConfigError,
    GateConfig,
    default_config_path,
    load_gate_config,
    resolve_gate_config,
    validate_gate_config,
)
from .gate import locate_prd_files, run_gate
from .observability import configure_logging, emit_internal_error, is_debug_enabled

app = typer.Typer(help="Block specialist sub-agents until a PRD exists in docs/.")
console = Console(stderr=True)
stdout_console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Config file (default: $PRD_GATE_CONFIG or .claude/prd-gate.yaml)"),
]
PresetOption = Annotated[
    str | None,
    typer.Option("--preset", "-p", help=f"Allow-list preset: {', '.join(sorted(PRESETS))}"),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]


def _load_or_exit(config_path: Path | None, preset: str | None) -> GateConfig:
    """Resolve config for the inspection commands; errors exit 1."""
    try:
        return resolve_gate_config(Path.cwd(), config_path, preset)
    except (FileNotFoundError, ConfigError, KeyError) as e:
        console.print(f"[red]Config error:[/red] {e}")
        raise typer.Exit(1)


@app.command("check")
def check(
    from_stdin: Annotated[bool, typer.Option("--stdin", help=f"Read payload from stdin instead of ${TOOL_INPUT_ENV_VAR}")] = False,
    config_path: ConfigOption = None,
    preset: PresetOption = None,
    debug: Annotated[bool, typer.Option("--debug", help="Print swallowed internal errors")] = False,
) -> None:
    """Run the gate. Exit 0 allows the tool call, exit 3 blocks it."""
    debug = debug or is_debug_enabled()
    if debug:
        configure_logging(debug)

    # Everything up to run_gate is inside the fail-open boundary too.
    try:
        raw_input = sys.stdin.read() if from_stdin else os.environ.get(TOOL_INPUT_ENV_VAR)
        working_dir = Path.cwd()
        config = resolve_gate_config(working_dir, config_path, preset, quiet=not debug)
    except Exception as e:
        if debug:
            emit_internal_error(e)
        raise typer.Exit(ExitCode.ALLOW)

    raise typer.Exit(run_gate(raw_input, working_dir, config, debug=debug))


@app.command("status")
def status(
    config_path: ConfigOption = None,
    preset: PresetOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show the docs directory, PRD files found and the current verdict."""
    config = _load_or_exit(config_path, preset)
    working_dir = Path.cwd()
    docs_dir = working_dir / config.docs_dir

    try:
        found = locate_prd_files(working_dir, config)
    except OSError as e:
        console.print(f"[red]Cannot list {docs_dir}:[/red] {e}")
        raise typer.Exit(1)
    exists = found is not None
    prd_files = found or []
    verdict = ExitCode.ALLOW if prd_files else ExitCode.BLOCK

    if json_output:
        stdout_console.print_json(json.dumps({
            "docs_dir": str(docs_dir),
            "exists": exists,
            "prd_files": prd_files,
            "verdict": EXIT_CODE_NAMES[verdict],
            "exit_code": int(verdict),
        }))
        return

    console.print(f"[bold]Docs directory:[/bold] {docs_dir}" + ("" if exists else " [red](missing)[/red]"))
    if prd_files:
        table = Table(title="PRD Files")
        table.add_column("File", style="cyan", overflow="fold")
        for name in prd_files:
            table.add_row(name)
        console.print(table)
    elif exists:
        console.print(f"[yellow]No {config.prd_prefix}*{config.prd_suffix} files found.[/yellow]")

    if verdict == ExitCode.BLOCK:
        console.print("[red]Gated agents would be BLOCKED.[/red]")
    else:
        console.print("[green]Gated agents would be ALLOWED.[/green]")


@app.command("agents")
def agents(
    config_path: ConfigOption = None,
    preset: PresetOption = None,
    json_output: JsonOption = False,
) -> None:
    """List gated sub-agent identifiers."""
    config = _load_or_exit(config_path, preset)

    if json_output:
        stdout_console.print_json(json.dumps({
            "gated_agents": sorted(config.gated_agents),
            "legacy_aliases": sorted(config.legacy_aliases),
        }))
        return

    if not config.all_gated:
        console.print("[yellow]No gated agents configured.[/yellow]")
        return

    table = Table(title="Gated Agents")
    table.add_column("Subagent Type", style="cyan")
    table.add_column("Kind", style="dim")
    for name in sorted(config.gated_agents):
        table.add_row(name, "specialist")
    for name in sorted(config.legacy_aliases - config.gated_agents):
        table.add_row(name, "legacy alias")
    console.print(table)


@app.command("validate-config")
def validate_config(
    path: Annotated[Path | None, typer.Argument(help="Config file (default: resolved config path)")] = None,
) -> None:
    """Validate a config file. Exit 1 on warnings or unreadable file."""
    config_path = path if path is not None else default_config_path(Path.cwd())
    try:
        config = load_gate_config(config_path, quiet=True)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    warnings = validate_gate_config(config)
    if warnings:
        for warning in warnings:
            console.print(f"[yellow]WARNING:[/yellow] {warning}")
        raise typer.Exit(1)
    console.print(f"[green]OK:[/green] {config_path}")


def main(argv: list[str] | None = None) -> None:
    app(args=argv, prog_name="prd-gate")


if __name__ == "__main__":
    main()
