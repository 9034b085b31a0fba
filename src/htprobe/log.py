"""Logging setup: stdlib logging routed through rich on stderr."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure the root logger.

    WARNING by default, INFO with --verbose, DEBUG with --debug.
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=debug,
        markup=False,
        rich_tracebacks=debug,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)
