"""Config management commands."""

from __future__ import annotations

import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import click
from rich.console import Console
from rich.table import Table
from ruamel.yaml import YAML

from ..config import (
    config_file_keys,
    find_config_path,
    get_default_config_yaml,
    load_config,
    validate_config,
)
from ..errors import UnknownMethodError
from ..probe.inputs import HEADER_SEPARATOR, normalize_method, split_header
from ..visualization import escape_rich

console = Console()

DEFAULT_FILENAME = "htprobe.yaml"


@click.group("config")
def config():
    """Manage htprobe configuration.

    Create htprobe.yaml, list the request defaults it sets and check it.
    """


@config.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing config file")
@click.option("--filename", default=DEFAULT_FILENAME,
              help="Config filename (default: htprobe.yaml)")
def init(force, filename):
    """Create a commented htprobe.yaml in the current directory."""
    target = Path.cwd() / filename

    if target.exists() and not force:
        console.print(f"[yellow]Config file already exists:[/yellow] {target}")
        console.print("[dim]Use --force to overwrite.[/dim]")
        return

    target.write_text(get_default_config_yaml(), encoding="utf-8")
    console.print(f"[green]Config file created:[/green] {target}")


def _active_path(config_path: Optional[str]) -> Optional[Path]:
    return Path(config_path) if config_path else find_config_path()


def _display_value(key: str, value: Any) -> str:
    if isinstance(value, bool):
        return "[green]on[/green]" if value else "[dim]off[/dim]"
    if key == "timeout":
        return "0 [dim](disabled)[/dim]" if value == 0 else f"{value}s"
    if key == "headers":
        return "\n".join(escape_rich(h) for h in value) if value else "[dim](none)[/dim]"
    if value == "":
        return "[dim](direct)[/dim]" if key == "proxy" else "[dim](not sent)[/dim]"
    return escape_rich(str(value))


@config.command()
@click.option("--config", "-c", "config_path", default=None, help="Config file path")
@click.option("--yaml", "as_yaml", is_flag=True,
              help="Print the effective settings as an htprobe.yaml document")
def show(config_path, as_yaml):
    """Show the effective request defaults and where each one comes from.

    Command line options still override every value listed here.
    """
    settings = load_config(config_path)
    path = _active_path(config_path)
    from_file = config_file_keys(path) if path is not None and path.exists() else set()

    if as_yaml:
        yaml = YAML()
        yaml.default_flow_style = False
        yaml.dump({"htprobe": asdict(settings)}, sys.stdout)
        return

    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Source", style="dim")

    for key, value in asdict(settings).items():
        source = "[yellow]file[/yellow]" if key in from_file else "default"
        table.add_row(key, _display_value(key, value), source)

    console.print(table)

    if path is not None and path.exists():
        console.print(f"[dim]Config file: {path.resolve()} ({len(from_file)} setting(s))[/dim]")
    else:
        console.print("[dim]No config file found (using defaults)[/dim]")


def lint_settings(path: Path) -> list[str]:
    """Return warnings for values that load but would fail or be ignored at request time."""
    settings = load_config(path)
    warnings: list[str] = []

    try:
        normalize_method(settings.method)
    except UnknownMethodError as e:
        warnings.append(f"'method': {e.message}")

    for raw in settings.headers:
        name, _ = split_header(raw)
        if HEADER_SEPARATOR not in raw or not name:
            warnings.append(f"'headers': '{raw}' is not in 'Name: Value' form")

    if settings.proxy:
        _, sep, port = settings.proxy.rpartition(":")
        if sep and "://" not in settings.proxy and "]" not in port and not port.isdigit():
            warnings.append(f"'proxy': port of '{settings.proxy}' is not a number")

    if settings.trust:
        warnings.append("'trust': certificate errors are ignored for every request")

    return warnings


@config.command()
@click.option("--config", "-c", "config_path", default=None, help="Config file path")
def validate(config_path):
    """Validate the config file.

    Checks YAML syntax, key names and value types, then the request
    defaults themselves: method, header lines and proxy port.
    """
    path = _active_path(config_path)

    if path is None:
        console.print("[yellow]No config file found.[/yellow]")
        console.print("[dim]Run 'htprobe config init' to create one.[/dim]")
        return

    if not path.exists():
        console.print(f"[red]Config file not found:[/red] {path}")
        sys.exit(1)

    errors = validate_config(path)
    if errors:
        console.print(f"[red]Config has {len(errors)} error(s):[/red] {path}")
        for err in errors:
            console.print(f"  [red]-[/red] {escape_rich(err)}")
        sys.exit(1)

    warnings = lint_settings(path)
    console.print(f"[green]Config is valid:[/green] {path}")
    for warning in warnings:
        console.print(f"  [yellow]![/yellow] {escape_rich(warning)}")
