"""htprobe CLI entry point."""

from __future__ import annotations

import click
from rich.console import Console

from .app import AppContext
from .commands import (
    COMMAND_ALIASES,
    certificate,
    config,
    content,
    cookies,
    headers,
    redirects,
    version,
)
from .config import MAX_TIMEOUT, ConnectionSetup, load_config
from .errors import ProbeError
from .log import setup_logging
from .probe import WebRequest, normalize_method
from .probe.inputs import collect_body, collect_cookies, collect_headers
from .visualization import ASCII_GLYPHS, UNICODE_GLYPHS, Display, escape_rich, make_console

err_console = Console(stderr=True)

# Sub-commands that never send a request
OFFLINE_COMMANDS = {"config", "version"}


class AliasedGroup(click.Group):
    """Group that accepts the short command aliases and reports typed errors."""

    def get_command(self, ctx, cmd_name):
        cmd_name = COMMAND_ALIASES.get(cmd_name, cmd_name)
        return super().get_command(ctx, cmd_name)

    def resolve_command(self, ctx, args):
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except ProbeError as e:
            err_console.print(f"[red]*** Error: {escape_rich(str(e))}[/red]", highlight=False)
            ctx.exit(e.exit_code)


@click.group(cls=AliasedGroup)
@click.option("--verbose", "-v", is_flag=True, help="Show progress messages")
@click.option("--debug", is_flag=True, hidden=True)
@click.option("--ascii", "ascii_only", is_flag=True, help="Use ASCII characters for the layout")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--no-fancy", is_flag=True, help="Plain output: no colors, ASCII layout")
@click.option("--trust", "-t", is_flag=True,
              help="Accept invalid and self-signed certificates")
@click.option("--resolve", is_flag=True, help="Show the addresses of every host")
@click.option("--full", is_flag=True, help="Show values uncut")
@click.option("--accept-cookies", "-a", is_flag=True,
              help="Store response cookies and send them on following hops")
@click.option("--user", "-u", default=None, help="Basic auth user name")
@click.option("--pass", "-p", "password", default=None, help="Basic auth password")
@click.option("--agent", default=None, help="User agent to send")
@click.option("--lang", "-L", default=None, help="Accept-Language header value")
@click.option("--proxy", "-P", default=None, help="Proxy as host[:port]")
@click.option("--timeout", "-T", type=click.IntRange(0, MAX_TIMEOUT), default=None,
              help="Connection timeout in seconds (0 = disabled)")
@click.option("--method", "-m", default=None, help="HTTP method (default: GET)")
@click.option("--cookie", multiple=True, help="Cookie to send as name:value (repeatable)")
@click.option("--cookie-file", default=None, help="File with one name:value cookie per line")
@click.option("--body", "-b", multiple=True, help="Request body line (repeatable)")
@click.option("--body-file", "-B", default=None, help="File with the request body")
@click.option("--add-header", "-A", multiple=True, help="Extra header as 'Name: Value' (repeatable)")
@click.option("--header-file", default=None, help="File with one 'Name: Value' header per line")
@click.option("--config", "-c", "config_path", default=None, help="Config file path (htprobe.yaml)")
@click.pass_context
def main(ctx, verbose, debug, ascii_only, no_color, no_fancy, trust, resolve, full,
         accept_cookies, user, password, agent, lang, proxy, timeout, method,
         cookie, cookie_file, body, body_file, add_header, header_file, config_path):
    """htprobe - HTTP request inspector.

    Sends a request to every URL and shows redirects, headers, cookies,
    certificates or content of the response.
    """
    setup_logging(verbose=verbose, debug=debug)

    if ctx.invoked_subcommand in OFFLINE_COMMANDS:
        return

    if (user is None) != (password is None):
        raise click.UsageError("--user and --pass must be given together")

    settings = load_config(config_path).merge({
        "agent": agent,
        "lang": lang,
        "method": method,
        "timeout": timeout,
        "proxy": proxy,
    })

    request_template = WebRequest(
        method=normalize_method(settings.method),
        agent=settings.agent,
        lang=settings.lang,
        auth_user=user or "",
        auth_pass=password or "",
        body=collect_body(body, body_file),
        headers=settings.headers + collect_headers(add_header, header_file),
        cookies=collect_cookies(cookie, cookie_file),
    )

    setup = ConnectionSetup.create(
        timeout=settings.timeout,
        proxy_host=settings.proxy,
        trust_invalid_certificates=trust or settings.trust,
        accept_cookies=accept_cookies or settings.accept_cookies,
    )

    plain = no_color or no_fancy
    display = Display(
        console=make_console(no_color=plain),
        glyphs=ASCII_GLYPHS if ascii_only or no_fancy else UNICODE_GLYPHS,
        full=full or settings.full,
        resolve=resolve or settings.resolve,
    )

    ctx.obj = AppContext(
        setup=setup,
        template=request_template,
        display=display,
        err_console=make_console(no_color=plain, stderr=True),
    )


main.add_command(redirects)
main.add_command(headers)
main.add_command(cookies)
main.add_command(content)
main.add_command(certificate)
main.add_command(version)
main.add_command(config)


if __name__ == "__main__":
    main()
