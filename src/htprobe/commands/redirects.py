"""Redirects command - follow and show the redirect chain of a request."""

from __future__ import annotations

from dataclasses import dataclass

import click

from ..app import AppContext
from ..probe import WebRequestResult
from ..visualization import (
    Display,
    color_status,
    header_items,
    print_certificate_summary,
    print_content,
    print_cookies,
    print_headers,
    request_cookies,
    select_cookies,
    select_headers,
)
from ..visualization.console import HOP_TAB, format_hop_title, format_request


@dataclass
class ChainOptions:
    """What to show for the hops of a chain."""

    response_headers: bool = False
    request_headers: bool = False
    response_cookies: bool = False
    request_cookies: bool = False
    certificates: bool = False
    all_hops: bool = False
    display_headers: tuple[str, ...] = ()
    display_cookies: tuple[str, ...] = ()


@click.command("redirects")
@click.argument("urls", nargs=-1, required=True)
@click.option("--show-cookies", "-c", is_flag=True, help="Show response cookies")
@click.option("--show-cert", "-C", is_flag=True, help="Show certificate(s)")
@click.option("--response-headers", "-H", is_flag=True, help="Show response headers")
@click.option("--request-headers", "-R", is_flag=True, help="Show request headers")
@click.option("--request-cookies", "-Z", "show_request_cookies", is_flag=True,
              help="Show request cookies")
@click.option("--show-content", "-O", is_flag=True,
              help="Show content of last hop (prints to stderr)")
@click.option("--all", "-a", "all_hops", is_flag=True, help="Show details for all hops")
@click.option("--display-header", "-S", multiple=True,
              help="Show only response header NAME (repeatable)")
@click.option("--display-cookie", "-D", multiple=True,
              help="Show only response cookie NAME (repeatable)")
@click.pass_obj
def redirects(
    app: AppContext,
    urls: tuple[str, ...],
    show_cookies: bool,
    show_cert: bool,
    response_headers: bool,
    request_headers: bool,
    show_request_cookies: bool,
    show_content: bool,
    all_hops: bool,
    display_header: tuple[str, ...],
    display_cookie: tuple[str, ...],
) -> None:
    """Follow and show the redirect chain of a http request.

    Every hop of the chain is displayed with its status code. Details like
    headers, cookies and certificates are shown for the last hop, or for
    all hops with --all.

    \b
    Examples:
        htprobe redirects example.com
        htprobe -a redirects -c -H https://example.com/login
        htprobe redirects -S location -S server http://example.com
    """
    options = ChainOptions(
        response_headers=response_headers or bool(display_header),
        request_headers=request_headers,
        response_cookies=show_cookies or bool(display_cookie),
        request_cookies=show_request_cookies,
        certificates=show_cert,
        all_hops=all_hops,
        display_headers=display_header,
        display_cookies=display_cookie,
    )

    for hops in app.probe(urls, follow=True):
        print_chain(app.display, hops, options, app.setup.trust_invalid_certificates)

        if show_content:
            err = app.error_display
            err.print()
            print_content(err, hops[-1])

    app.finish()


def print_chain(
    display: Display,
    hops: list[WebRequestResult],
    options: ChainOptions,
    trust_forced: bool = False,
) -> None:
    """Print a hop chain as a tree, one line per hop."""
    glyphs = display.glyphs
    last_index = len(hops) - 1

    display.print()
    first = hops[0]
    display.print(format_hop_title(first, 0, display.resolve))
    _print_hop_details(
        display, first, options, trust_forced,
        first_hop=True,
        show_response=options.all_hops or last_index == 0,
    )

    last_status = first.status_code
    for index, hop in enumerate(hops[1:], start=1):
        display.print(
            f"{HOP_TAB}{glyphs.tee} ({color_status(last_status)}) {glyphs.right_arrow}  "
            f"\\[{hop.method}] {format_request(hop, display.resolve)}"
        )
        _print_hop_details(
            display, hop, options, trust_forced,
            first_hop=False,
            show_response=options.all_hops or index == last_index,
        )
        last_status = hop.status_code

    last = hops[last_index]
    display.print(
        f"{HOP_TAB}{glyphs.corner} ({color_status(last.status_code)}) {glyphs.right_arrow}  "
        f"[bold]{last.status_code} {last.reason}[/bold]"
    )
    display.print()


def _print_hop_details(
    display: Display,
    hop: WebRequestResult,
    options: ChainOptions,
    trust_forced: bool,
    first_hop: bool,
    show_response: bool,
) -> None:
    indent = HOP_TAB
    frame = display.glyphs.vbar

    # Request details exist only once, on the first hop
    if first_hop and options.request_headers:
        print_headers(display, indent, frame, "Request Header:", header_items(hop.request.headers))
    if first_hop and options.request_cookies:
        print_cookies(display, indent, frame, "Request Cookies:", request_cookies(hop.request))

    if not show_response:
        return

    if options.certificates:
        print_certificate_summary(display, indent, frame, "Certificate(s):", hop.tls, trust_forced)

    if options.response_headers:
        if options.display_headers:
            items = select_headers(options.display_headers, hop.response.headers)
            print_headers(display, indent, frame, "Selected Headers:", items)
        else:
            print_headers(display, indent, frame, "Response Header:", header_items(hop.response.headers))

    if options.response_cookies:
        if options.display_cookies:
            selected = select_cookies(options.display_cookies, hop.cookies)
            print_cookies(display, indent, frame, "Selected Cookies:", selected)
        else:
            print_cookies(display, indent, frame, "Stored Cookies:", hop.cookies)
