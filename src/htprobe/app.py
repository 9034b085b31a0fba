"""Per-invocation context and the per-URL processing loop."""

from __future__ import annotations

import dataclasses
import logging
import sys
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from rich.console import Console

from .config import ConnectionSetup
from .errors import PER_URL_ERRORS, ProbeError
from .probe import ProbeHttpClient, WebRequest, WebRequestResult, check_url, walk
from .visualization import Display, escape_rich

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything a command needs, built once by the CLI group."""

    setup: ConnectionSetup
    template: WebRequest
    display: Display
    err_console: Console
    failures: list[ProbeError] = field(default_factory=list)

    @property
    def error_display(self) -> Display:
        """A display writing to stderr with the same glyphs and options."""
        return Display(
            console=self.err_console,
            glyphs=self.display.glyphs,
            full=self.display.full,
            resolve=self.display.resolve,
        )

    def probe(self, urls: Iterable[str], follow: bool) -> Iterator[list[WebRequestResult]]:
        """Yield the hop chain for every URL, one URL at a time.

        Per-URL errors are reported and the loop continues with the next URL.
        """
        setup = dataclasses.replace(self.setup, follow_redirects=follow)
        client = ProbeHttpClient(setup)

        for raw_url in urls:
            try:
                request = self.template.copy_for(check_url(raw_url))
                logger.info("Probing %s", request)
                hops = walk(client, request, setup.follow_redirects)
            except PER_URL_ERRORS as e:
                self.report_error(e)
                continue
            yield hops

    def report_error(self, error: ProbeError) -> None:
        self.failures.append(error)
        self.err_console.print(f"[red]*** Error: {escape_rich(str(error))}[/red]", highlight=False)

    @property
    def exit_code(self) -> int:
        """Exit code of the first per-URL failure, 0 if every URL succeeded."""
        if not self.failures:
            return 0
        return self.failures[0].exit_code

    def finish(self) -> None:
        if self.failures:
            sys.exit(self.exit_code)
