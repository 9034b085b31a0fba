"""Tests for the request executor (with httpx.MockTransport)."""

from __future__ import annotations

import httpx
import pytest
from cryptography.hazmat.primitives.serialization import Encoding

from htprobe.certs import ChainStatus, analyze_tls
from htprobe.config import ConnectionSetup
from htprobe.errors import RequestFailedError
from htprobe.probe import HttpCookie, ProbeHttpClient, WebRequest, reconcile_cookies
from htprobe.probe.http_client import capture_tls_state, load_certificate, tls_state_from_ssl


def _request(url="https://example.com/", **kwargs) -> WebRequest:
    kwargs.setdefault("agent", "probe-test/1.0")
    return WebRequest(url=url, **kwargs)


class _Recorder:
    """MockTransport handler that keeps the requests it has seen."""

    def __init__(self, response: httpx.Response | None = None):
        self.requests: list[httpx.Request] = []
        self.response = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.response is not None:
            return self.response
        return httpx.Response(200, text="ok")


class TestRequestHeaders:
    def test_user_agent_always_set(self, make_client):
        recorder = _Recorder()
        make_client(recorder).send(_request())
        assert recorder.requests[0].headers["User-Agent"] == "probe-test/1.0"

    def test_accept_language_only_when_given(self, make_client):
        recorder = _Recorder()
        client = make_client(recorder)
        client.send(_request())
        client.send(_request(lang="de-DE"))
        assert "Accept-Language" not in recorder.requests[0].headers
        assert recorder.requests[1].headers["Accept-Language"] == "de-DE"

    def test_extra_headers_later_wins(self, make_client):
        recorder = _Recorder()
        make_client(recorder).send(_request(headers=["X-Test: one", "X-Test: two", "X-Url: a:b"]))
        sent = recorder.requests[0].headers
        assert sent.get_list("X-Test") == ["two"]
        assert sent["X-Url"] == "a:b"

    def test_basic_auth(self, make_client):
        recorder = _Recorder()
        make_client(recorder).send(_request(auth_user="user", auth_pass="pass"))
        assert recorder.requests[0].headers["Authorization"] == "Basic dXNlcjpwYXNz"

    def test_no_auth_without_password(self, make_client):
        recorder = _Recorder()
        make_client(recorder).send(_request(auth_user="user"))
        assert "Authorization" not in recorder.requests[0].headers

    def test_supplied_cookies(self, make_client):
        recorder = _Recorder()
        cookies = [HttpCookie("a", "1"), HttpCookie("b", "2")]
        make_client(recorder).send(_request(cookies=cookies))
        assert recorder.requests[0].headers["Cookie"] == "a=1; b=2"


class TestRequestBody:
    def test_body_sent_for_post(self, make_client):
        recorder = _Recorder()
        make_client(recorder).send(_request(method="POST", body="x=1"))
        assert recorder.requests[0].content == b"x=1"

    def test_body_dropped_for_get(self, make_client):
        recorder = _Recorder()
        make_client(recorder).send(_request(method="GET", body="x=1"))
        assert recorder.requests[0].content == b""


class TestResult:
    def test_result_fields(self, make_client):
        recorder = _Recorder(httpx.Response(404, headers={"Server": "mock"}, text="missing"))
        result = make_client(recorder).send(_request("https://example.com/x"))
        assert result.status_code == 404
        assert result.reason == "Not Found"
        assert result.method == "GET"
        assert result.url == "https://example.com/x"
        assert result.host == "example.com"
        assert result.text == "missing"
        assert result.content == b"missing"
        assert result.response.headers["Server"] == "mock"
        assert result.is_redirect is False

    def test_no_tls_state_without_stream(self, make_client):
        result = make_client(_Recorder()).send(_request())
        assert result.tls is None

    def test_transport_error_wrapped(self, make_client):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RequestFailedError) as exc:
            make_client(handler).send(_request())
        assert exc.value.exit_code == 4
        assert exc.value.context == "https://example.com/"

    def test_timeout_wrapped(self, make_client):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(RequestFailedError):
            make_client(handler).send(_request())


class TestCookieJar:
    @staticmethod
    def _set_cookie(request):
        return httpx.Response(200, headers={"Set-Cookie": "sid=server; Path=/"})

    def test_stored_cookies_reported(self, make_client, cookie_setup):
        result = make_client(self._set_cookie, cookie_setup).send(_request())
        assert [(c.name, c.value) for c in result.cookies] == [("sid", "server")]

    def test_supplied_cookie_dropped_when_jar_owns_it(self, make_client, cookie_setup):
        request = _request(cookies=[HttpCookie("sid", "mine"), HttpCookie("other", "1")])
        make_client(self._set_cookie, cookie_setup).send(request)
        assert [c.name for c in request.cookies] == ["other"]

    def test_jar_replayed_on_next_request(self, make_client, cookie_setup):
        seen = []

        def handler(request):
            seen.append(request.headers.get("Cookie"))
            return self._set_cookie(request)

        client = make_client(handler, cookie_setup)
        client.send(_request())
        client.send(_request())
        assert seen == [None, "sid=server"]

    def test_nothing_stored_without_acceptance(self, make_client, setup):
        seen = []

        def handler(request):
            seen.append(request.headers.get("Cookie"))
            return self._set_cookie(request)

        client = make_client(handler, setup)
        result = client.send(_request())
        client.send(_request())
        assert result.cookies == []
        assert seen == [None, None]

    def test_secure_cookie_not_reported_for_http(self, make_client, cookie_setup):
        def handler(request):
            return httpx.Response(200, headers={"Set-Cookie": "token=t; Secure; Path=/"})

        result = make_client(handler, cookie_setup).send(_request("http://example.com/"))
        assert result.cookies == []

    def test_path_boundary(self, make_client, cookie_setup):
        def handler(request):
            if request.url.path == "/foo/set":
                return httpx.Response(200, headers={"Set-Cookie": "p=1; Path=/foo"})
            return httpx.Response(200, text=request.headers.get("Cookie", ""))

        client = make_client(handler, cookie_setup)
        client.send(_request("https://example.com/foo/set"))

        sibling = _request("https://example.com/foobar", cookies=[HttpCookie("p", "mine")])
        result = client.send(sibling)
        assert result.cookies == []
        assert [c.name for c in sibling.cookies] == ["p"]
        assert result.text == "p=mine"

        below = client.send(_request("https://example.com/foo/bar"))
        assert [(c.name, c.path) for c in below.cookies] == [("p", "/foo")]

    def test_longest_path_first(self, make_client, cookie_setup):
        def handler(request):
            return httpx.Response(200, headers=[
                ("Set-Cookie", "a=root; Path=/"),
                ("Set-Cookie", "b=deep; Path=/app/admin"),
            ])

        result = make_client(handler, cookie_setup).send(_request("https://example.com/app/admin/x"))
        assert [c.name for c in result.cookies] == ["b", "a"]

    def test_template_keeps_cookies(self, make_client, cookie_setup):
        template = _request(cookies=[HttpCookie("sid", "mine")])
        first = template.copy_for("https://example.com/one")
        second = template.copy_for("https://example.com/two")

        make_client(self._set_cookie, cookie_setup).send(first)

        assert first.cookies == []
        assert template.cookies == [HttpCookie("sid", "mine")]
        assert second.cookies == [HttpCookie("sid", "mine")]


class TestReconcileCookies:
    def test_drops_by_name(self):
        supplied = [HttpCookie("a", "1"), HttpCookie("b", "2")]
        stored = [HttpCookie("b", "server")]
        assert reconcile_cookies(supplied, stored) == [HttpCookie("a", "1")]

    def test_nothing_stored(self):
        supplied = [HttpCookie("a", "1")]
        assert reconcile_cookies(supplied, []) == supplied


class _FakeSSLObject:
    server_hostname = "example.com"

    def __init__(self, peer, verified):
        self._peer = peer
        self._verified = verified

    def get_unverified_chain(self):
        return self._peer

    def get_verified_chain(self):
        return self._verified

    def cipher(self):
        return ("TLS_AES_128_GCM_SHA256", "TLSv1.3", 128)

    def version(self):
        return "TLSv1.3"


class _LegacySSLObject:
    server_hostname = None

    def __init__(self, leaf):
        self._leaf = leaf

    def getpeercert(self, der=False, /):
        return self._leaf

    def cipher(self):
        return None

    def version(self):
        return "TLSv1.2"


class _Certificate:
    """Stand-in for ``_ssl.Certificate``: PEM text from ``public_bytes()``."""

    def __init__(self, cert):
        self._pem = cert.public_bytes(Encoding.PEM).decode("ascii")

    def public_bytes(self):
        return self._pem


class TestTLSCapture:
    def test_certificate_objects_in_chain(self, make_cert):
        leaf = make_cert("example.com")
        ca = make_cert("Test CA", is_ca=True)
        peer = [_Certificate(leaf), _Certificate(ca)]
        state = tls_state_from_ssl(_FakeSSLObject(peer, peer), "example.com")
        assert state.peer_certificates == [leaf, ca]
        assert state.verified_chains == [[leaf, ca]]

    def test_load_certificate_from_der(self, make_cert):
        cert = make_cert("example.com")
        assert load_certificate(cert.public_bytes(Encoding.DER)) == cert

    def test_chains_from_ssl_object(self, make_cert):
        leaf = make_cert("example.com").public_bytes(Encoding.DER)
        ca = make_cert("Test CA", is_ca=True).public_bytes(Encoding.DER)
        state = tls_state_from_ssl(_FakeSSLObject([leaf, ca], [leaf, ca]), "example.com")
        assert len(state.peer_certificates) == 2
        assert len(state.verified_chains) == 1
        assert state.version == "TLSv1.3"
        assert state.cipher == "TLS_AES_128_GCM_SHA256"
        assert state.server_name == "example.com"

    def test_no_verified_chain_when_trust_forced(self, make_cert):
        leaf = make_cert("example.com").public_bytes(Encoding.DER)
        state = tls_state_from_ssl(_FakeSSLObject([leaf], [leaf]), "example.com", verified=False)
        assert state.verified_chains == []

    def test_leaf_only_fallback(self, make_cert):
        leaf = make_cert("example.com").public_bytes(Encoding.DER)
        state = tls_state_from_ssl(_LegacySSLObject(leaf), "fallback.example.com")
        assert len(state.peer_certificates) == 1
        assert state.verified_chains == []
        assert state.server_name == "fallback.example.com"
        assert state.cipher is None

    def test_capture_from_network_stream(self, make_cert):
        leaf = make_cert("example.com").public_bytes(Encoding.DER)

        class Stream:
            def get_extra_info(self, name):
                return _FakeSSLObject([leaf], []) if name == "ssl_object" else None

        response = httpx.Response(
            200,
            request=httpx.Request("GET", "https://example.com/"),
            extensions={"network_stream": Stream()},
        )
        state = capture_tls_state(response)
        assert state is not None
        assert len(state.peer_certificates) == 1

    def test_capture_plain_http(self):
        response = httpx.Response(200, request=httpx.Request("GET", "http://example.com/"))
        assert capture_tls_state(response) is None


class TestLocalTLSServer:
    @pytest.mark.parametrize("protocol_version", ["HTTP/1.1", "HTTP/1.0"])
    def test_certificate_captured(self, tls_server, protocol_version):
        port = tls_server(protocol_version)
        client = ProbeHttpClient(ConnectionSetup.create(timeout=10, trust_invalid_certificates=True))

        result = client.send(_request(f"https://localhost:{port}/"))

        assert result.status_code == 200
        assert result.text == "secure hello"
        assert result.tls is not None
        assert result.tls.server_name == "localhost"
        assert result.tls.version
        assert len(result.tls.peer_certificates) >= 1
        assert result.tls.verified_chains == []

        report = analyze_tls(result.tls, trust_forced=True)
        assert report is not None
        assert report.leaf.common_name == "localhost"
        assert report.cn_matched
        assert report.chain_status is ChainStatus.TRUST_FORCED

    def test_untrusted_certificate_fails(self, tls_server):
        port = tls_server()
        client = ProbeHttpClient(ConnectionSetup.create(timeout=10))
        with pytest.raises(RequestFailedError):
            client.send(_request(f"https://localhost:{port}/"))


def test_setup_passed_through(make_client):
    setup = ConnectionSetup.create(timeout=7, trust_invalid_certificates=True)
    client = make_client(_Recorder(), setup)
    assert client.setup.timeout == 7
    assert client.setup.trust_invalid_certificates is True
