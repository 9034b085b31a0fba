"""Renderers for the blocks shown per hop (headers, cookies, certificates, content)."""

from __future__ import annotations

from typing import Iterable, Optional

import httpx

from ..certs import CertificateReport, ChainEntry, analyze_tls
from ..probe.models import HttpCookie, TLSState, WebRequestResult
from .console import (
    Display,
    canonical_header_name,
    color_marker,
    color_status,
    escape_rich,
    format_datetime,
    format_hop_title,
    plain_length,
    shorten,
)

NONE_TEXT = "(None)"


def _line(display: Display, indent: str, frame: str, text: str) -> None:
    display.print(f"{indent}{frame}   {text}")


def _close(display: Display, indent: str, frame: str) -> None:
    display.print(f"{indent}{frame}")


# --- Hop titles ---


def print_hop_title(display: Display, hop: WebRequestResult, index: int) -> None:
    """Print a numbered hop title with an underline."""
    title = (
        f"{index + 1}:  {format_hop_title(hop, index, display.resolve)} "
        f"({color_status(hop.status_code)})"
    )
    display.print(title)
    display.print(display.glyphs.rule * plain_length(title))
    display.print()


# --- Headers ---


def header_items(headers: httpx.Headers) -> list[tuple[str, str]]:
    """Group headers by name and sort them; repeated values are comma-joined."""
    grouped: dict[str, list[str]] = {}
    for raw_name, raw_value in headers.raw:
        name = canonical_header_name(raw_name.decode("latin-1"))
        grouped.setdefault(name, []).append(raw_value.decode("latin-1"))
    return [(name, ", ".join(grouped[name])) for name in sorted(grouped)]


def select_headers(names: Iterable[str], headers: httpx.Headers) -> list[tuple[str, str]]:
    """Pick the named headers; missing ones are shown as N/A."""
    result = []
    for name in names:
        values = headers.get_list(name)
        value = ", ".join(values) if values else "N/A"
        result.append((canonical_header_name(name.strip()), value))
    return result


def print_headers(
    display: Display,
    indent: str,
    frame: str,
    title: str,
    items: list[tuple[str, str]],
) -> None:
    _line(display, indent, frame, f"[bold]{title}[/bold]")
    for name, value in items:
        room = display.width - len(indent) - len(name) - 12
        shown = escape_rich(shorten(value, room, display.full))
        if value == "N/A":
            shown = "[yellow]N/A[/yellow]"
        _line(display, indent, frame, f"{display.glyphs.bullet} {escape_rich(name)}: {shown}")
    _close(display, indent, frame)


# --- Cookies ---


def request_cookies(request: httpx.Request) -> list[HttpCookie]:
    """Parse the cookies sent with an outgoing request."""
    cookies = []
    for header in request.headers.get_list("cookie"):
        for pair in header.split(";"):
            name, sep, value = pair.strip().partition("=")
            if sep and name:
                cookies.append(HttpCookie(name=name, value=value))
    return cookies


def select_cookies(names: Iterable[str], cookies: list[HttpCookie]) -> list[HttpCookie]:
    """Pick cookies whose name is in ``names`` (whitespace-insensitive)."""
    wanted = {n.strip() for n in names}
    return [c for c in cookies if c.name.strip() in wanted]


def print_cookies(
    display: Display,
    indent: str,
    frame: str,
    title: str,
    cookies: list[HttpCookie],
) -> None:
    _line(display, indent, frame, f"[bold]{title}[/bold]")
    if cookies:
        for cookie in cookies:
            text = f"{cookie.name}: {cookie.full_value()}"
            text = shorten(text, display.width - len(indent) - 10, display.full)
            _line(display, indent, frame, f"{display.glyphs.bullet} {escape_rich(text)}")
    else:
        _line(display, indent, frame, f"{display.glyphs.bullet} {NONE_TEXT}")
    _close(display, indent, frame)


# --- Certificates ---


def _validity_text(report: CertificateReport) -> str:
    return color_marker(format_datetime(report.leaf.valid_until), report.validity_marker)


def print_certificate_summary(
    display: Display,
    indent: str,
    frame: str,
    title: str,
    tls: Optional[TLSState],
    trust_forced: bool = False,
) -> None:
    """Compact certificate block used inside a redirect chain."""
    _line(display, indent, frame, f"[bold]{title}[/bold]")
    bullet = display.glyphs.bullet
    report = analyze_tls(tls, trust_forced)
    if report is None:
        _line(display, indent, frame, f"{bullet} {NONE_TEXT}")
        _close(display, indent, frame)
        return

    sans = ", ".join(report.leaf.subject_alt_names) or "None"
    ca_chain = " <<< ".join(e.common_name for e in report.peer_chain)
    room = display.width - len(indent) - 28

    _line(display, indent, frame, f"{bullet} CN:          {escape_rich(report.leaf.common_name)}")
    _line(display, indent, frame, f"  SANs:        {escape_rich(shorten(sans, room, display.full))}")
    _line(display, indent, frame, f"  Valid until: {_validity_text(report)}")
    _line(display, indent, frame, f"  CA-Chain:    {escape_rich(shorten(ca_chain, room, display.full))}")
    _close(display, indent, frame)


def _print_chain(
    display: Display,
    indent: str,
    frame: str,
    number: int,
    heading: str,
    chain: list[ChainEntry],
) -> None:
    if not chain:
        return
    leaf = chain[0]
    _line(display, indent, frame, f"  {heading:<9} \\[{number}] {escape_rich(leaf.common_name)}")
    for entry in chain[1:]:
        _line(
            display, indent, frame,
            f"                {display.glyphs.left_arrow}  "
            f"{escape_rich(entry.common_name)} ({escape_rich(entry.organization)})",
        )


def _identity_texts(report: CertificateReport, room: int, full: bool) -> tuple[str, str]:
    """Return (CN, SANs) markup, colored as one unit by the identity marker."""
    leaf = report.leaf
    if not report.name_matched:
        cn = color_marker(escape_rich(shorten(leaf.common_name, room, full)), report.identity_marker)
        sans = ", ".join(leaf.subject_alt_names) or "None"
        return cn, color_marker(escape_rich(shorten(sans, room, full)), report.identity_marker)

    cn = escape_rich(shorten(leaf.common_name, room, full))
    if report.cn_matched:
        cn = color_marker(cn, report.identity_marker)

    parts = []
    for name in leaf.subject_alt_names:
        text = escape_rich(name.strip())
        parts.append(color_marker(text, report.identity_marker) if name in report.matched_sans else text)
    return cn, ", ".join(parts) or "None"


def print_certificate_details(
    display: Display,
    indent: str,
    frame: str,
    title: str,
    tls: Optional[TLSState],
    trust_forced: bool = False,
    show_details: bool = False,
    show_validated: bool = False,
) -> None:
    """Full certificate block of the certificate command."""
    _line(display, indent, frame, f"[bold]{title}[/bold]")
    bullet = display.glyphs.bullet
    report = analyze_tls(tls, trust_forced)
    if report is None:
        _line(display, indent, frame, f"{bullet} {NONE_TEXT}")
        _close(display, indent, frame)
        return

    leaf = report.leaf
    cn, sans = _identity_texts(report, display.width - 25, display.full)

    _line(display, indent, frame, f"{bullet} CN:           {cn}")
    if show_details:
        _line(display, indent, frame, f"  Organization: {escape_rich(leaf.organization)}")
        if leaf.organization_units:
            _line(display, indent, frame, f"  Unit:         {escape_rich(leaf.organization_units)}")
        if leaf.country:
            _line(display, indent, frame, f"  Country:      {escape_rich(leaf.country)}")

    _line(display, indent, frame, f"  SANs:         {sans}")

    if show_details:
        display.print()
        _line(display, indent, frame, f"  Issuer:       {escape_rich(leaf.issuer_name)}")
        _line(display, indent, frame, f"  Organization: {escape_rich(leaf.issuer_org)}")
        if leaf.issuer_ou:
            _line(display, indent, frame, f"  Unit:         {escape_rich(leaf.issuer_ou)}")
        if leaf.issuer_country:
            _line(display, indent, frame, f"  Country:      {escape_rich(leaf.issuer_country)}")
        display.print()
        _line(display, indent, frame, f"  Valid from:   {format_datetime(leaf.valid_from)}")

    _line(display, indent, frame, f"  Valid until:  {_validity_text(report)}")

    if show_details:
        display.print()
        status = report.chain_status
        _line(
            display, indent, frame,
            f"  Certificate Chain ({color_marker(status.label, status.marker)}):",
        )
        heading = ""
    else:
        heading = "CA-Chain:"
    _print_chain(display, indent, frame, 0, heading, report.peer_chain)

    if show_details and show_validated:
        display.print()
        if report.verified_chains:
            _line(display, indent, frame, "  Verified Chain(s) ([green]checked by client[/green]):")
            for number, chain in enumerate(report.verified_chains):
                _print_chain(display, indent, frame, number, heading, chain)
        else:
            _line(display, indent, frame, "  Verified Chain(s): None")

    _close(display, indent, frame)


# --- Content ---


def print_content(display: Display, hop: WebRequestResult) -> None:
    """Print the buffered response body of a hop."""
    display.print("[bold]Content:[/bold]")
    display.print(f"[bold]{display.glyphs.rule * 8}[/bold]")
    display.print()
    display.console.print(hop.text, markup=False, highlight=False, soft_wrap=True)
