"""Content command - show the response body."""

from __future__ import annotations

from typing import Optional

import click

from ..app import AppContext
from ..errors import FileIOError, NoFileError
from ..visualization import Display, make_console, print_content, print_hop_title


@click.command("content")
@click.argument("urls", nargs=-1, required=True)
@click.option("--follow", "-f", is_flag=True, help="Follow redirects and show the content of all hops")
@click.option("--outfile", "-o", default=None, type=click.Path(dir_okay=False),
              help="Write the output to FILE instead of stdout")
@click.pass_obj
def content(app: AppContext, urls: tuple[str, ...], follow: bool, outfile: Optional[str]) -> None:
    """Show the content of a http response."""
    if outfile is None:
        _print_all(app, app.display, urls, follow)
        return

    try:
        handle = open(outfile, "w", encoding="utf-8")
    except FileNotFoundError as e:
        raise NoFileError("Cannot create output file", outfile) from e
    except OSError as e:
        raise FileIOError(f"Cannot open output file: {e}", outfile) from e

    with handle:
        display = Display(
            console=make_console(file=handle),
            glyphs=app.display.glyphs,
            full=app.display.full,
            resolve=app.display.resolve,
        )
        _print_all(app, display, urls, follow)


def _print_all(app: AppContext, display: Display, urls: tuple[str, ...], follow: bool) -> None:
    for hops in app.probe(urls, follow=follow):
        for index, hop in enumerate(hops):
            print_hop_title(display, hop, index)
            print_content(display, hop)
            display.print()

    app.finish()
