"""Visualization utilities for htprobe."""

from .console import (
    ASCII_GLYPHS,
    UNICODE_GLYPHS,
    Display,
    Glyphs,
    color_status,
    escape_rich,
    make_console,
    shorten,
)
from .blocks import (
    header_items,
    print_certificate_details,
    print_certificate_summary,
    print_content,
    print_cookies,
    print_headers,
    print_hop_title,
    request_cookies,
    select_cookies,
    select_headers,
)

__all__ = [
    "ASCII_GLYPHS",
    "UNICODE_GLYPHS",
    "Display",
    "Glyphs",
    "color_status",
    "escape_rich",
    "make_console",
    "shorten",
    "header_items",
    "print_certificate_details",
    "print_certificate_summary",
    "print_content",
    "print_cookies",
    "print_headers",
    "print_hop_title",
    "request_cookies",
    "select_cookies",
    "select_headers",
]
