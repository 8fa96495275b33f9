"""Tests for the HTTP transport."""

from __future__ import annotations

import io
from http.client import IncompleteRead
from urllib.error import HTTPError, URLError

import pytest

from signal_export.core import transport as transport_module
from signal_export.core.errors import TransportError
from signal_export.core.transport import FilePart, HttpTransport, TransportResponse, encode_multipart


class FakeResponse:
    def __init__(self, status: int, body: bytes) -> None:
        self.status = status
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *_args: object) -> None:
        return None


def test_encode_multipart_layout() -> None:
    body, content_type = encode_multipart(
        {"model": "m1"},
        {"file": FilePart("submission.csv", b"a,b\n")},
        boundary="XYZ",
    )

    assert content_type == "multipart/form-data; boundary=XYZ"
    assert body == (
        b"--XYZ\r\n"
        b'Content-Disposition: form-data; name="model"\r\n'
        b"\r\n"
        b"m1\r\n"
        b"--XYZ\r\n"
        b'Content-Disposition: form-data; name="file"; filename="submission.csv"\r\n'
        b"Content-Type: text/csv\r\n"
        b"\r\n"
        b"a,b\n\r\n"
        b"--XYZ--\r\n"
    )


def test_post_json_sends_request(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = {}

    def fake_urlopen(req, timeout, context):  # noqa: ANN001
        captured["request"] = req
        captured["timeout"] = timeout
        return FakeResponse(200, b'{"ok":"1"}')

    monkeypatch.setattr(transport_module.request, "urlopen", fake_urlopen)
    transport = HttpTransport(timeout=3.0)

    response = transport.post_json("https://example.test/api", '{"a":1}')

    req = captured["request"]
    assert req.get_method() == "POST"
    assert req.data == b'{"a":1}'
    assert req.get_header("Content-type") == "application/json"
    assert captured["timeout"] == 3.0
    assert response == TransportResponse(status=200, body=b'{"ok":"1"}')
    assert response.json() == {"ok": "1"}


def test_http_error_becomes_transport_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_urlopen(req, timeout, context):  # noqa: ANN001
        raise HTTPError(req.full_url, 401, "Unauthorized", {}, io.BytesIO(b"bad key"))

    monkeypatch.setattr(transport_module.request, "urlopen", fake_urlopen)

    with pytest.raises(TransportError, match="HTTP 401: bad key"):
        HttpTransport().put("https://example.test/upload", b"data")


def test_network_error_becomes_transport_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_urlopen(req, timeout, context):  # noqa: ANN001
        raise URLError("connection refused")

    monkeypatch.setattr(transport_module.request, "urlopen", fake_urlopen)

    with pytest.raises(TransportError, match="connection refused"):
        HttpTransport().post_json("https://example.test/api", "{}")


def test_closed_transport_refuses_requests() -> None:
    transport = HttpTransport()
    transport.close()

    assert transport.closed
    with pytest.raises(TransportError):
        transport.post_json("https://example.test/api", "{}")


def test_malformed_json_body() -> None:
    with pytest.raises(TransportError):
        TransportResponse(status=200, body=b"<html>").json()
    assert TransportResponse(status=204, body=b"").json() is None


def test_unparseable_url_becomes_transport_error() -> None:
    """A relative URL fails while building the request."""
    with pytest.raises(TransportError, match="/relative/upload"):
        HttpTransport().put("/relative/upload", b"data")


def test_broken_http_response_becomes_transport_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_urlopen(req, timeout, context):  # noqa: ANN001
        raise IncompleteRead(b"par", 10)

    monkeypatch.setattr(transport_module.request, "urlopen", fake_urlopen)

    with pytest.raises(TransportError):
        HttpTransport().post_json("https://example.test/api", "{}")
