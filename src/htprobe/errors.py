"""Error taxonomy for htprobe.

Every failure the core can produce is a ``ProbeError`` subclass tagged with an
``ErrorKind``. The kind doubles as the process exit code; the core only
raises, the CLI decides whether to continue or exit.
"""

from __future__ import annotations

from enum import IntEnum


class ErrorKind(IntEnum):
    """Error categories and their exit codes."""

    UNDEFINED = 1
    NO_ARG = 2
    COOKIE_JAR = 3
    REQUEST = 4
    RESPONSE = 5
    RESOLVE = 6
    GET_FLAG = 7
    TIME_FORMAT = 8
    NO_URL = 9
    FILE_IO = 10
    NO_FILE = 11
    NO_METHOD = 12


class ProbeError(Exception):
    """Base exception carrying an error kind and its context."""

    kind: ErrorKind = ErrorKind.UNDEFINED

    def __init__(self, message: str, context: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    @property
    def exit_code(self) -> int:
        return int(self.kind)

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} ({self.context})"
        return self.message


class NoURLError(ProbeError):
    """Target could not be parsed as a URL."""

    kind = ErrorKind.NO_URL


class RequestFailedError(ProbeError):
    """Network, TLS or transport level failure."""

    kind = ErrorKind.REQUEST


class ResponseInvalidError(ProbeError):
    """Response could not be interpreted, e.g. a redirect without Location."""

    kind = ErrorKind.RESPONSE


class ResolveFailedError(ProbeError):
    """DNS lookup for the resolve display failed."""

    kind = ErrorKind.RESOLVE


class FileIOError(ProbeError):
    """An input file exists but could not be read."""

    kind = ErrorKind.FILE_IO


class NoFileError(ProbeError):
    """An input file does not exist."""

    kind = ErrorKind.NO_FILE


class UnknownMethodError(ProbeError):
    """HTTP method is not in the allow-list."""

    kind = ErrorKind.NO_METHOD


# Errors that only abort the current URL; the run continues with the next one.
PER_URL_ERRORS = (NoURLError, RequestFailedError, ResponseInvalidError)
