"""Headers command - show request and response headers."""

import click

from ..visualization import header_items, print_headers, print_hop_title, select_headers
from ..visualization.console import HEADER_INDENT


@click.command("headers")
@click.argument("urls", nargs=-1, required=True)
@click.option("--follow", "-f", is_flag=True, help="Follow redirects and show all hops")
@click.option("--show-header", "-S", multiple=True,
              help="Show only response header NAME (repeatable)")
@click.pass_obj
def headers(app, urls, follow, show_header):
    """Show the request and response headers of a http request."""
    display = app.display

    for hops in app.probe(urls, follow=follow):
        display.print()
        for index, hop in enumerate(hops):
            print_hop_title(display, hop, index)
            if show_header:
                items = select_headers(show_header, hop.response.headers)
                print_headers(display, HEADER_INDENT, "", "Selected Headers:", items)
            else:
                print_headers(display, HEADER_INDENT, "", "Request Header:",
                              header_items(hop.request.headers))
                print_headers(display, HEADER_INDENT, "", "Response Header:",
                              header_items(hop.response.headers))
            display.print()

    app.finish()
