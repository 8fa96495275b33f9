"""HTTP transport used by destination exports."""

from __future__ import annotations

import json
import ssl
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from http.client import HTTPException
from typing import Any, Protocol
from urllib import request
from urllib.error import HTTPError, URLError

from loguru import logger

from signal_export.core.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS
from signal_export.core.errors import TransportError


@dataclass(slots=True, frozen=True)
class TransportResponse:
    """Status and raw body returned by a destination."""

    status: int
    body: bytes

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            TransportError: If the body is not valid JSON
        """
        if not self.body:
            return None
        try:
            return json.loads(self.body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise TransportError(f"Malformed response body: {exc}") from exc


@dataclass(slots=True, frozen=True)
class FilePart:
    """File field of a multipart form."""

    filename: str
    content: bytes
    content_type: str = "text/csv"


class Transport(Protocol):
    """Transport interface for destination delivery."""

    def post_json(
        self, url: str, payload: str, headers: Mapping[str, str] | None = None
    ) -> TransportResponse: ...

    def post_multipart(
        self,
        url: str,
        fields: Mapping[str, str],
        files: Mapping[str, FilePart],
        headers: Mapping[str, str] | None = None,
    ) -> TransportResponse: ...

    def put(
        self, url: str, content: bytes, headers: Mapping[str, str] | None = None
    ) -> TransportResponse: ...

    def close(self) -> None: ...


def encode_multipart(
    fields: Mapping[str, str],
    files: Mapping[str, FilePart],
    boundary: str | None = None,
) -> tuple[bytes, str]:
    """Encode form fields and files as multipart/form-data.

    Returns:
        Tuple of (body, content type header value)
    """
    boundary = boundary or uuid.uuid4().hex
    lines: list[bytes] = []
    for name, value in fields.items():
        lines.append(f"--{boundary}".encode())
        lines.append(f'Content-Disposition: form-data; name="{name}"'.encode())
        lines.append(b"")
        lines.append(value.encode("utf-8"))
    for name, part in files.items():
        lines.append(f"--{boundary}".encode())
        lines.append(
            f'Content-Disposition: form-data; name="{name}"; filename="{part.filename}"'.encode()
        )
        lines.append(f"Content-Type: {part.content_type}".encode())
        lines.append(b"")
        lines.append(part.content)
    lines.append(f"--{boundary}--".encode())
    lines.append(b"")
    return b"\r\n".join(lines), f"multipart/form-data; boundary={boundary}"


class HttpTransport:
    """Synchronous urllib transport. No retries and no connection reuse."""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        verify_ssl: bool = True,
    ) -> None:
        self._timeout = timeout
        self._ssl_context = (
            ssl.create_default_context() if verify_ssl else ssl._create_unverified_context()
        )  # type: ignore[attr-defined]
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def post_json(
        self, url: str, payload: str, headers: Mapping[str, str] | None = None
    ) -> TransportResponse:
        merged = {"Content-Type": "application/json"}
        merged.update(headers or {})
        return self._request("POST", url, payload.encode("utf-8"), merged)

    def post_multipart(
        self,
        url: str,
        fields: Mapping[str, str],
        files: Mapping[str, FilePart],
        headers: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        body, content_type = encode_multipart(fields, files)
        merged = {"Content-Type": content_type}
        merged.update(headers or {})
        return self._request("POST", url, body, merged)

    def put(
        self, url: str, content: bytes, headers: Mapping[str, str] | None = None
    ) -> TransportResponse:
        return self._request("PUT", url, content, dict(headers or {}))

    def close(self) -> None:
        self._closed = True

    def _request(
        self, method: str, url: str, data: bytes, headers: dict[str, str]
    ) -> TransportResponse:
        if self._closed:
            raise TransportError("Transport has been closed")
        try:
            req = request.Request(url, data=data, headers=headers, method=method)
            with request.urlopen(req, timeout=self._timeout, context=self._ssl_context) as response:
                status = response.status
                body = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace") if exc.fp is not None else ""
            raise TransportError(f"{method} {url} returned HTTP {exc.code}: {detail}") from exc
        except (URLError, TimeoutError, OSError, HTTPException, ValueError) as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        logger.debug("{} {} -> {}", method, url, status)
        return TransportResponse(status=status, body=body)
