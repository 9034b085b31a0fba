"""Certificate command - show and check the server certificate."""

import click

from ..visualization import print_certificate_details, print_hop_title
from ..visualization.console import HEADER_INDENT


@click.command("certificate")
@click.argument("urls", nargs=-1, required=True)
@click.option("--follow", "-f", is_flag=True, help="Follow redirects and show certificates of all hops")
@click.option("--show-details", "-s", is_flag=True,
              help="Show issuer, validity period and the certificate chain")
@click.option("--validated-chain", "-V", is_flag=True,
              help="Show the chain(s) verified by the client (needs --show-details)")
@click.pass_obj
def certificate(app, urls, follow, show_details, validated_chain):
    """Show the certificate of a https connection.

    The common name and alternative names are checked against the host name,
    the expiry date is colored by the remaining validity.

    \b
    Examples:
        htprobe certificate example.com
        htprobe cert -s -V https://example.com
    """
    display = app.display
    trust_forced = app.setup.trust_invalid_certificates

    for hops in app.probe(urls, follow=follow):
        display.print()
        for index, hop in enumerate(hops):
            print_hop_title(display, hop, index)
            print_certificate_details(
                display, HEADER_INDENT, "", "Certificate(s):", hop.tls,
                trust_forced=trust_forced,
                show_details=show_details,
                show_validated=validated_chain,
            )
            display.print()

    app.finish()
