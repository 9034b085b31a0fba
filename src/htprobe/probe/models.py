"""Data models for requests, hops and TLS state."""

from __future__ import annotations

from dataclasses import dataclass, field
from http.cookiejar import Cookie
from typing import Optional

import httpx
from cryptography import x509

REDIRECT_LIMIT_STATUS = 999


@dataclass(frozen=True)
class RequestMethod:
    """An allowed HTTP method and whether it carries a body."""

    name: str
    needs_body: bool


ALLOWED_METHODS = (
    RequestMethod("GET", False),
    RequestMethod("HEAD", False),
    RequestMethod("POST", True),
    RequestMethod("PUT", True),
    RequestMethod("PATCH", True),
    RequestMethod("DELETE", False),
    RequestMethod("CONNECT", False),
    RequestMethod("OPTIONS", False),
    RequestMethod("TRACE", False),
)


def method_names() -> list[str]:
    return [m.name for m in ALLOWED_METHODS]


def method_needs_body(method: str) -> bool:
    """Return True if ``method`` is a body-carrying method."""
    for m in ALLOWED_METHODS:
        if m.name == method:
            return m.needs_body
    return False


@dataclass
class HttpCookie:
    """A cookie as supplied by the caller or held in the jar."""

    name: str
    value: str
    path: str = ""
    domain: str = ""

    @classmethod
    def from_jar(cls, cookie: Cookie) -> HttpCookie:
        return cls(
            name=cookie.name,
            value=cookie.value or "",
            path=cookie.path if cookie.path_specified else "",
            domain=cookie.domain if cookie.domain_specified else "",
        )

    def header_value(self) -> str:
        """Return the ``name=value`` pair sent in a Cookie header."""
        return f"{self.name}={self.value}"

    def full_value(self) -> str:
        """Return the value with path and domain attributes for display."""
        value = self.value
        if self.path:
            value = f"{value}; path={self.path}"
        if self.domain:
            value = f"{value}; domain={self.domain}"
        return value


@dataclass
class WebRequest:
    """One intended HTTP call.

    A template instance is built once from the command line and copied per
    target URL with ``copy_for``. The cookie list of a copy shrinks while a
    redirect chain is walked, so copies never share list objects.
    """

    url: str = ""
    method: str = "GET"
    agent: str = ""
    lang: str = ""
    auth_user: str = ""
    auth_pass: str = ""
    body: str = ""
    headers: list[str] = field(default_factory=list)
    cookies: list[HttpCookie] = field(default_factory=list)

    def copy_for(self, url: str) -> WebRequest:
        return WebRequest(
            url=url,
            method=self.method,
            agent=self.agent,
            lang=self.lang,
            auth_user=self.auth_user,
            auth_pass=self.auth_pass,
            body=self.body,
            headers=list(self.headers),
            cookies=list(self.cookies),
        )

    @property
    def has_auth(self) -> bool:
        return bool(self.auth_user) and bool(self.auth_pass)

    def __str__(self) -> str:
        return f"{self.url} ({self.method})"


@dataclass
class TLSState:
    """TLS details of one connection.

    ``peer_certificates`` is the chain as sent by the server, leaf first.
    ``verified_chains`` holds the chain(s) built by the local trust store;
    it is empty when verification was skipped.
    """

    server_name: str
    peer_certificates: list[x509.Certificate] = field(default_factory=list)
    verified_chains: list[list[x509.Certificate]] = field(default_factory=list)
    version: Optional[str] = None
    cipher: Optional[str] = None


@dataclass
class WebRequestResult:
    """Outcome of one HTTP exchange (one hop).

    The response body is read in full before the connection closes, so
    ``content`` can be used by any number of display paths.
    """

    request: httpx.Request
    response: httpx.Response
    tls: Optional[TLSState] = None
    cookies: list[HttpCookie] = field(default_factory=list)
    status_code: int = 0

    def __post_init__(self) -> None:
        if not self.status_code:
            self.status_code = self.response.status_code

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def url(self) -> str:
        return str(self.request.url)

    @property
    def host(self) -> str:
        return self.request.url.host

    @property
    def content(self) -> bytes:
        return self.response.content

    @property
    def text(self) -> str:
        return self.response.text

    @property
    def reason(self) -> str:
        if self.redirect_limit_hit:
            return "Redirect limit exceeded"
        return self.response.reason_phrase

    @property
    def is_redirect(self) -> bool:
        return 301 <= self.status_code <= 399

    @property
    def redirect_limit_hit(self) -> bool:
        return self.status_code == REDIRECT_LIMIT_STATUS

    def __str__(self) -> str:
        return f"{self.url} ({self.status_code} {self.reason})"
