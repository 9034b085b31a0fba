"""Cookies command - show request, response and stored cookies."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from ..app import AppContext
from ..errors import FileIOError, NoFileError
from ..probe import HttpCookie, WebRequestResult
from ..probe.inputs import COOKIE_SEPARATOR
from ..visualization import (
    Display,
    escape_rich,
    print_cookies,
    print_headers,
    print_hop_title,
    request_cookies,
    select_cookies,
    select_headers,
)
from ..visualization.console import HEADER_INDENT


@click.command("cookies")
@click.argument("urls", nargs=-1, required=True)
@click.option("--follow", "-f", is_flag=True, help="Follow redirects and show cookies of all hops")
@click.option("--show-cookie", "-D", multiple=True, help="Show only cookie NAME (repeatable)")
@click.option("--save-cookies", "-S", "save_file", default=None,
              type=click.Path(dir_okay=False), help="Save stored cookies of the last hop to FILE")
@click.pass_obj
def cookies(
    app: AppContext,
    urls: tuple[str, ...],
    follow: bool,
    show_cookie: tuple[str, ...],
    save_file: Optional[str],
) -> None:
    """Show the request and response cookies of a http request.

    With --follow the cookies of every hop are displayed. Stored cookies
    are only available with the global --accept-cookies flag. Saved files
    use the 'name:value' format read by --cookie-file.
    """
    display = app.display

    for hops in app.probe(urls, follow=follow):
        display.print()
        for index, hop in enumerate(hops):
            print_hop_title(display, hop, index)
            _print_hop_cookies(display, hop, show_cookie, app.setup.accept_cookies)
            display.print()

        if save_file:
            save_cookies(save_file, hops[-1].cookies)
            display.print(f"Save cookie list to {escape_rich(save_file)}: [green]Done[/green]")

    app.finish()


def _print_hop_cookies(
    display: Display,
    hop: WebRequestResult,
    names: tuple[str, ...],
    jar_active: bool,
) -> None:
    if names:
        print_cookies(display, HEADER_INDENT, "", "Selected Cookies:", select_cookies(names, hop.cookies))
        return

    print_cookies(display, HEADER_INDENT, "", "Request Cookies:", request_cookies(hop.request))

    if hop.response.headers.get_list("set-cookie"):
        print_headers(
            display, HEADER_INDENT, "",
            "[yellow]Cookie Store Request Detected:[/yellow]",
            select_headers(["Set-Cookie"], hop.response.headers),
        )

    if jar_active:
        print_cookies(display, HEADER_INDENT, "", "Stored Cookies:", hop.cookies)


def save_cookies(path: str | Path, cookie_list: list[HttpCookie]) -> None:
    """Write cookies as 'name:value' lines.

    Raises:
        NoFileError: If the target directory does not exist
        FileIOError: If the file cannot be written
    """
    target = Path(path)
    try:
        with open(target, "w", encoding="utf-8") as f:
            for cookie in cookie_list:
                f.write(f"{cookie.name}{COOKIE_SEPARATOR}{cookie.value}\n")
    except FileNotFoundError as e:
        raise NoFileError("Cannot create cookie file", str(target)) from e
    except OSError as e:
        raise FileIOError(f"Cannot write cookie file: {e}", str(target)) from e
