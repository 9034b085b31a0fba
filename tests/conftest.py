"""Pytest fixtures for htprobe tests."""

from __future__ import annotations

import ipaddress
import ssl
import threading
from datetime import datetime, timedelta, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from io import StringIO

import httpx
import pytest
from click.testing import CliRunner
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, NoEncryption, PrivateFormat
from cryptography.x509.oid import NameOID
from rich.console import Console

from htprobe.config import ConnectionSetup
from htprobe.probe import ProbeHttpClient
from htprobe.visualization import ASCII_GLYPHS, Display

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time for validity checks."""
    return NOW


@pytest.fixture
def make_cert():
    """Factory for self-signed test certificates."""
    key = ec.generate_private_key(ec.SECP256R1())

    def _make(
        common_name: str | None = "example.com",
        sans: list[str] | None = None,
        not_after: datetime | None = None,
        organization: str | None = None,
        is_ca: bool = False,
    ) -> x509.Certificate:
        attrs = []
        if common_name is not None:
            attrs.append(x509.NameAttribute(NameOID.COMMON_NAME, common_name))
        if organization:
            attrs.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization))
        name = x509.Name(attrs)

        builder = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(NOW - timedelta(days=365))
            .not_valid_after(not_after or NOW + timedelta(days=365))
            .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
        )
        if sans:
            builder = builder.add_extension(
                x509.SubjectAlternativeName([x509.DNSName(n) for n in sans]),
                critical=False,
            )
        return builder.sign(key, hashes.SHA256())

    return _make


@pytest.fixture
def setup():
    """Default connection setup (no cookies, verification on)."""
    return ConnectionSetup.create()


@pytest.fixture
def cookie_setup():
    """Connection setup that accepts cookies."""
    return ConnectionSetup.create(accept_cookies=True)


@pytest.fixture
def make_client():
    """Build a ProbeHttpClient on top of an httpx.MockTransport handler."""

    def _make(handler, setup: ConnectionSetup | None = None) -> ProbeHttpClient:
        return ProbeHttpClient(setup or ConnectionSetup.create(), transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def redirect_handler():
    """Handler serving /start -> 302 /next -> 200 on any host."""

    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/start":
            return httpx.Response(302, headers={"Location": "/next"})
        return httpx.Response(200, headers={"Server": "test"}, text="hello")

    return _handler


@pytest.fixture
def display():
    """Plain ASCII display writing to a buffer; read it with ``display.console.file``."""
    console = Console(file=StringIO(), width=120, no_color=True, highlight=False)
    return Display(console=console, glyphs=ASCII_GLYPHS)


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def tls_server(tmp_path):
    """Start local HTTPS servers with a self-signed ``localhost`` certificate.

    Call the factory with the protocol version to serve; it returns the port.
    HTTP/1.0 responses carry no Content-Length and end with the connection.
    """
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")])
    now = datetime.now(timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=90))
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(
            x509.SubjectAlternativeName([
                x509.DNSName("localhost"),
                x509.IPAddress(ipaddress.ip_address("127.0.0.1")),
            ]),
            critical=False,
        )
        .sign(key, hashes.SHA256())
    )
    cert_file = tmp_path / "server.pem"
    key_file = tmp_path / "server.key"
    cert_file.write_bytes(cert.public_bytes(Encoding.PEM))
    key_file.write_bytes(key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()))

    servers = []

    def _start(protocol_version: str = "HTTP/1.1") -> int:
        class Handler(BaseHTTPRequestHandler):
            def do_GET(self):
                body = b"secure hello"
                self.send_response(200)
                self.send_header("Content-Type", "text/plain")
                if self.protocol_version == "HTTP/1.1":
                    self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, format, *args):
                pass

        Handler.protocol_version = protocol_version
        server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        context.load_cert_chain(str(cert_file), str(key_file))
        server.socket = context.wrap_socket(server.socket, server_side=True)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return server.server_address[1]

    yield _start

    for server in servers:
        server.shutdown()
        server.server_close()
