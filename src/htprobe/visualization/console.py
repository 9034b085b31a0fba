"""Rich console formatting utilities for htprobe."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.text import Text

from ..certs.models import Marker
from ..probe.dns import resolve_host
from ..probe.models import WebRequestResult


@dataclass(frozen=True)
class Glyphs:
    """Frame and marker characters used in the chain layout."""

    bullet: str
    tee: str
    corner: str
    vbar: str
    right_arrow: str
    left_arrow: str
    rule: str


UNICODE_GLYPHS = Glyphs(
    bullet="•",
    tee="├──",
    corner="└──",
    vbar="│",
    right_arrow="⟶",
    left_arrow="⟵",
    rule="═",
)

ASCII_GLYPHS = Glyphs(
    bullet="*",
    tee="+--",
    corner="`--",
    vbar="|",
    right_arrow="->",
    left_arrow="<-",
    rule="=",
)

MARKER_COLORS = {
    Marker.OK: "green",
    Marker.WARNING: "yellow",
    Marker.CRITICAL: "red",
}

HOP_TAB = " " * 7
HEADER_INDENT = " "


@dataclass
class Display:
    """Output settings shared by all renderers."""

    console: Console
    glyphs: Glyphs = UNICODE_GLYPHS
    full: bool = False
    resolve: bool = False

    @property
    def width(self) -> int:
        return self.console.width

    def print(self, markup: str = "") -> None:
        self.console.print(markup, highlight=False, soft_wrap=True)


def make_console(no_color: bool = False, stderr: bool = False, file=None) -> Console:
    """Create a console; ``file`` redirects output, e.g. for --outfile."""
    if file is not None:
        return Console(file=file, no_color=True, highlight=False, soft_wrap=True)
    return Console(no_color=no_color, stderr=stderr, highlight=False)


def escape_rich(text: str) -> str:
    """Escape Rich markup characters in text.

    Args:
        text: Text to escape

    Returns:
        Escaped text safe for Rich display
    """
    return str(text).replace("[", "\\[")


def shorten(text: str, length: int, disable: bool = False) -> str:
    """Cut ``text`` to ``length`` characters with a '...' suffix.

    Args:
        text: Text to shorten
        length: Maximum length including suffix
        disable: Return the text unchanged (--full)

    Returns:
        Shortened or original text
    """
    if disable or length < 4 or len(text) <= length:
        return text
    return text[: length - 3] + "..."


def color_status(status: int) -> str:
    """Return rich markup for a status code, colored by class."""
    code = str(status)
    if status < 100:
        return code
    if status < 200:
        return f"[cyan]{code}[/cyan]"
    if status < 300:
        return f"[green]{code}[/green]"
    if status < 400:
        return f"[yellow]{code}[/yellow]"
    if status < 500:
        return f"[red]{code}[/red]"
    if status < 600:
        return f"[magenta]{code}[/magenta]"
    return code


def color_marker(text: str, marker: Marker) -> str:
    """Wrap already escaped text in the color of ``marker``."""
    color = MARKER_COLORS[marker]
    return f"[{color}]{text}[/{color}]"


def format_datetime(value: Optional[datetime]) -> str:
    if value is None:
        return "(unknown)"
    return value.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def plain_length(markup: str) -> int:
    """Return the visible width of a rich markup string."""
    return Text.from_markup(markup).cell_len


def format_request(hop: WebRequestResult, resolve: bool = False) -> str:
    """Return the hop URL, with resolved addresses when requested."""
    text = hop.url
    if resolve:
        text = f"{text} ({resolve_host(hop.host)})"
    return escape_rich(text)


def format_hop_title(hop: WebRequestResult, index: int, resolve: bool = False) -> str:
    """Title for a hop: the first is the URL, later ones are redirect targets."""
    target = f"[bold]{format_request(hop, resolve)}  \\[{hop.method}][/bold]"
    if index == 0:
        return f"[bold]URL:[/bold] {target}"
    return f"[yellow]Redirect to:[/yellow] {target}"


def canonical_header_name(name: str) -> str:
    """Canonicalize a header name (``content-type`` -> ``Content-Type``)."""
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))
