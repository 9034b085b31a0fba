"""Version command - show version and runtime information."""

import platform

import click
from rich.console import Console

console = Console()


@click.command()
def version():
    """Show version."""
    from htprobe import APP_NAME, __author__, __version__

    console.print(f"[bold]{APP_NAME}[/bold] {__version__}", highlight=False)
    console.print(
        f"[dim]Python {platform.python_version()} ({platform.python_implementation()}) "
        f"on {platform.system()}/{platform.machine()}[/dim]",
        highlight=False,
    )
    console.print(f"[dim]Author: {__author__}[/dim]", highlight=False)
