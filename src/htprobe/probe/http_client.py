"""HTTP client for sending a single probe request."""

from __future__ import annotations

import logging
import time
import urllib.request
from http.cookiejar import CookieJar
from typing import Any, Optional

import httpx
from cryptography import x509

from ..config import ConnectionSetup
from ..errors import NoURLError, RequestFailedError
from .inputs import split_header
from .models import HttpCookie, TLSState, WebRequest, WebRequestResult, method_needs_body

logger = logging.getLogger(__name__)


class ProbeHttpClient:
    """Request executor.

    Wraps httpx to send exactly one request per call. Redirects are never
    followed here; the first response is returned verbatim so the redirect
    walker can inspect it. A transport may be injected for testing.
    """

    def __init__(
        self,
        setup: ConnectionSetup,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._setup = setup
        self._transport = transport
        self._jar = setup.session_jar()

    @property
    def setup(self) -> ConnectionSetup:
        return self._setup

    def send(self, request: WebRequest) -> WebRequestResult:
        """Send an HTTP request and return the hop result.

        Cookies from ``request.cookies`` that the jar owns after the exchange
        are removed from the request, so the next hop does not send them twice.

        Raises:
            NoURLError: If the request URL is invalid
            RequestFailedError: On connection, TLS and timeout errors
        """
        with httpx.Client(
            timeout=self._setup.timeout_or_none,
            verify=not self._setup.trust_invalid_certificates,
            proxy=self._setup.proxy_url,
            follow_redirects=False,
            cookies=self._jar,
            transport=self._transport,
        ) as client:
            try:
                outgoing = self._build_request(client, request)
            except httpx.InvalidURL as e:
                raise NoURLError(f"Not a valid URL: {e}", request.url) from e

            logger.debug("Request: %s %s", outgoing.method, outgoing.url)
            logger.debug("Request headers: %s", dict(outgoing.headers))
            logger.debug("Jar cookies: %s", [c.name for c in self._jar])

            auth = httpx.BasicAuth(request.auth_user, request.auth_pass) if request.has_auth else None
            try:
                response = client.send(outgoing, auth=auth, stream=True)
            except httpx.HTTPError as e:
                logger.debug("Request error %s: %r", type(e).__name__, e.__cause__ or e.__context__)
                raise RequestFailedError(f"Request failed: {e}", request.url) from e

            # The connection may be released once the body is read
            try:
                tls = capture_tls_state(response, verified=not self._setup.trust_invalid_certificates)
                response.read()
            except httpx.HTTPError as e:
                raise RequestFailedError(f"Reading response failed: {e}", request.url) from e
            finally:
                response.close()

        stored: list[HttpCookie] = []
        if self._setup.cookie_jar is not None:
            stored = cookies_for_url(self._setup.cookie_jar, str(response.request.url))
            request.cookies = reconcile_cookies(request.cookies, stored)

        return WebRequestResult(
            request=response.request,
            response=response,
            tls=tls,
            cookies=stored,
        )

    def _build_request(self, client: httpx.Client, request: WebRequest) -> httpx.Request:
        content = None
        if method_needs_body(request.method) and request.body:
            content = request.body.encode("utf-8")

        outgoing = client.build_request(request.method, request.url, content=content)
        outgoing.headers["User-Agent"] = request.agent
        if request.lang:
            outgoing.headers["Accept-Language"] = request.lang

        for raw in request.headers:
            name, value = split_header(raw)
            if name:
                outgoing.headers[name] = value

        if request.cookies:
            supplied = "; ".join(c.header_value() for c in request.cookies)
            existing = outgoing.headers.get("Cookie")
            outgoing.headers["Cookie"] = f"{existing}; {supplied}" if existing else supplied

        return outgoing


def reconcile_cookies(
    supplied: list[HttpCookie],
    stored: list[HttpCookie],
) -> list[HttpCookie]:
    """Drop supplied cookies whose name is now held by the jar."""
    stored_names = {c.name for c in stored}
    return [c for c in supplied if c.name not in stored_names]


def cookies_for_url(jar: CookieJar, url: str) -> list[HttpCookie]:
    """Return the jar cookies that would be sent to ``url``.

    Selection is left to the jar and its policy, the same way
    ``CookieJar.add_cookie_header`` picks cookies for the Cookie header.
    """
    lookup = urllib.request.Request(url)
    with jar._cookies_lock:
        jar._policy._now = jar._now = int(time.time())
        selected = jar._cookies_for_request(lookup)
    selected.sort(key=lambda c: len(c.path), reverse=True)
    return [HttpCookie.from_jar(c) for c in selected]


def capture_tls_state(response: httpx.Response, verified: bool = True) -> Optional[TLSState]:
    """Extract the TLS state of the connection that carried ``response``.

    Must be called before the body is read: afterwards the connection may
    already be closed. Returns None for plain HTTP or when the transport
    exposes no stream.
    """
    stream = response.extensions.get("network_stream")
    if stream is None:
        return None
    ssl_object = stream.get_extra_info("ssl_object")
    if ssl_object is None:
        return None
    return tls_state_from_ssl(ssl_object, response.request.url.host, verified)


def load_certificate(cert: Any) -> x509.Certificate:
    """Load DER bytes or an ``_ssl.Certificate`` as returned by the chain getters."""
    if isinstance(cert, (bytes, bytearray)):
        return x509.load_der_x509_certificate(bytes(cert))
    # _ssl.Certificate.public_bytes() defaults to PEM text
    return x509.load_pem_x509_certificate(cert.public_bytes().encode("ascii"))


def tls_state_from_ssl(ssl_object: Any, host: str, verified: bool = True) -> TLSState:
    """Build a TLSState from the ssl object of a connection.

    httpcore hands out the low-level ``_ssl._SSLSocket``; its chain getters
    exist from Python 3.10 on. Without them only the leaf is available.
    """
    if hasattr(ssl_object, "get_unverified_chain"):
        peer = list(ssl_object.get_unverified_chain() or [])
    else:
        leaf = ssl_object.getpeercert(True)
        peer = [leaf] if leaf else []

    verified_chains: list[list[x509.Certificate]] = []
    if verified and hasattr(ssl_object, "get_verified_chain"):
        chain = list(ssl_object.get_verified_chain() or [])
        if chain:
            verified_chains.append([load_certificate(c) for c in chain])

    cipher = ssl_object.cipher()
    return TLSState(
        server_name=ssl_object.server_hostname or host,
        peer_certificates=[load_certificate(c) for c in peer],
        verified_chains=verified_chains,
        version=ssl_object.version(),
        cipher=cipher[0] if cipher else None,
    )
