"""Input normalisation: target URLs, methods and the cookie/header/body inputs."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Optional, Union

import httpx

from ..errors import FileIOError, NoFileError, NoURLError, UnknownMethodError
from .models import HttpCookie, method_names

logger = logging.getLogger(__name__)

COOKIE_SEPARATOR = ":"
HEADER_SEPARATOR = ":"

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def check_url(raw_url: str) -> str:
    """Normalize a target URL, adding ``http://`` if no scheme is given.

    Raises:
        NoURLError: If the URL cannot be parsed or has no host
    """
    url = raw_url.strip()
    if not _SCHEME_RE.match(url):
        logger.debug("Added protocol prefix to %s", url)
        url = "http://" + url

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise NoURLError(f"Not a valid URL: {e}", raw_url) from e

    if not parsed.host:
        raise NoURLError("Not a valid URL: no host", raw_url)

    return str(parsed)


def normalize_method(method: str) -> str:
    """Uppercase and validate an HTTP method against the allow-list."""
    name = method.strip().upper()
    if name not in method_names():
        raise UnknownMethodError(
            f"Unknown http method, use one of {', '.join(method_names())}",
            method,
        )
    return name


def split_header(raw: str) -> tuple[str, str]:
    """Split ``Name: Value`` on the first colon, trimming both sides."""
    name, sep, value = raw.partition(HEADER_SEPARATOR)
    return name.strip(), value.strip() if sep else ""


def parse_cookie(raw: str, sep: str = COOKIE_SEPARATOR) -> Optional[HttpCookie]:
    """Parse ``name<sep>value`` into a cookie, or None if there is no separator."""
    name, found, value = raw.partition(sep)
    if not found:
        return None
    name = name.strip()
    if not name:
        return None
    return HttpCookie(name=name, value=value.strip())


def read_lines(path: Union[str, Path]) -> list[str]:
    """Read a text input file line by line.

    Raises:
        NoFileError: If the file does not exist
        FileIOError: If the file cannot be read or decoded
    """
    file_path = Path(path)
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return [line.rstrip("\r\n") for line in f]
    except FileNotFoundError as e:
        raise NoFileError("Input file not found", str(file_path)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise FileIOError(f"Cannot read input file: {e}", str(file_path)) from e


def collect_cookies(
    values: Iterable[str] = (),
    cookie_file: Optional[Union[str, Path]] = None,
) -> list[HttpCookie]:
    """Collect request cookies from option values and an optional file.

    Entries without a separator are skipped.
    """
    raw = list(values)
    if cookie_file:
        raw.extend(read_lines(cookie_file))

    cookies = []
    for entry in raw:
        cookie = parse_cookie(entry)
        if cookie is None:
            logger.debug("Skipping malformed cookie entry: %r", entry)
            continue
        cookies.append(cookie)
    return cookies


def collect_headers(
    values: Iterable[str] = (),
    header_file: Optional[Union[str, Path]] = None,
) -> list[str]:
    """Collect extra ``Name: Value`` headers; blank lines are dropped."""
    raw = list(values)
    if header_file:
        raw.extend(read_lines(header_file))
    return [h for h in raw if h.strip()]


def collect_body(
    values: Iterable[str] = (),
    body_file: Optional[Union[str, Path]] = None,
) -> str:
    """Join body entries and body file lines with newlines."""
    lines = list(values)
    if body_file:
        lines.extend(read_lines(body_file))
    return "\n".join(lines)
