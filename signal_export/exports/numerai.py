"""Numerai Signals submission export."""

from __future__ import annotations

import csv
import io
import json
from typing import Any
from urllib.parse import urlparse

from signal_export.core.constants import (
    DEFAULT_NUMERAI_FILENAME,
    NUMERAI_MINIMUM_TARGETS,
    NUMERAI_URL,
)
from signal_export.core.errors import TransportError
from signal_export.core.transport import Transport
from signal_export.exports.base import BaseSignalExport
from signal_export.models import SecurityType, SignalExportTargetParameters, Symbol
from signal_export.tickers import format_decimal, numerai_country_code

UPLOAD_AUTH_QUERY = """
query ($filename: String!, $modelId: String) {
  submissionUploadSignalsAuth(filename: $filename, modelId: $modelId) {
    filename
    url
  }
}
"""

CREATE_SUBMISSION_MUTATION = """
mutation ($filename: String!, $modelId: String) {
  createSignalsSubmission(filename: $filename, modelId: $modelId) {
    id
    firstEffectiveDate
  }
}
"""


class NumeraiSignalExport(BaseSignalExport):
    """Upload equity weights to Numerai Signals.

    Delivery is a three step exchange: request a presigned upload URL, PUT
    the CSV there, then register the uploaded file as a submission.
    """

    name = "numerai"
    allowed_security_types = frozenset({SecurityType.EQUITY})
    minimum_targets = NUMERAI_MINIMUM_TARGETS

    def __init__(
        self,
        public_id: str,
        secret_id: str,
        model_id: str,
        filename: str = DEFAULT_NUMERAI_FILENAME,
        *,
        url: str = NUMERAI_URL,
        transport: Transport | None = None,
    ) -> None:
        self._require(public_id, "public_id")
        self._require(secret_id, "secret_id")
        self._require(model_id, "model_id")
        super().__init__(transport=transport)
        self._public_id = public_id
        self._secret_id = secret_id
        self._model_id = model_id
        self._filename = filename or DEFAULT_NUMERAI_FILENAME
        self._url = url

    def translate(self, symbol: Symbol) -> str:
        return f"{symbol.value} {numerai_country_code(symbol)}"

    def build_message(self, parameters: SignalExportTargetParameters) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["numerai_ticker", "signal"])
        for target in parameters.targets:
            writer.writerow([self.translate(target.symbol), format_decimal(target.quantity)])
        return buffer.getvalue()

    def _deliver(self, message: str) -> None:
        auth = self._graphql(
            UPLOAD_AUTH_QUERY, {"filename": self._filename, "modelId": self._model_id}
        )
        upload = auth.get("submissionUploadSignalsAuth") or {}
        upload_url = upload.get("url")
        if not isinstance(upload_url, str) or not upload_url:
            raise TransportError("Numerai did not return an upload URL")
        parsed = urlparse(upload_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise TransportError(f"Numerai returned an invalid upload URL: {upload_url!r}")

        self._transport.put(upload_url, message.encode("utf-8"))

        self._graphql(
            CREATE_SUBMISSION_MUTATION,
            {"filename": upload.get("filename", self._filename), "modelId": self._model_id},
        )

    def _graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        payload = json.dumps({"query": query, "variables": variables})
        response = self._transport.post_json(
            self._url,
            payload,
            headers={"Authorization": f"Token {self._public_id}${self._secret_id}"},
        )
        body = response.json()
        if not isinstance(body, dict):
            raise TransportError("Numerai returned an empty response")
        errors = body.get("errors")
        if errors:
            messages = "; ".join(
                str(error.get("message", error)) if isinstance(error, dict) else str(error)
                for error in errors
            )
            raise TransportError(f"Numerai rejected request: {messages}")
        return body.get("data") or {}
