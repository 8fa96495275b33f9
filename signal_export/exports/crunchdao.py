"""CrunchDAO alpha submission export."""

from __future__ import annotations

import csv
import io
from datetime import date
from urllib.parse import quote

from loguru import logger

from signal_export.core.constants import CRUNCHDAO_FILENAME, CRUNCHDAO_URL
from signal_export.core.errors import TargetRejectedError
from signal_export.core.transport import FilePart, Transport
from signal_export.exports.base import BaseSignalExport
from signal_export.models import SecurityType, SignalExportTargetParameters, Symbol
from signal_export.tickers import format_decimal


class CrunchDAOSignalExport(BaseSignalExport):
    """Submit equity weights to the CrunchDAO tournament as a CSV file."""

    name = "crunchdao"
    allowed_security_types = frozenset({SecurityType.EQUITY})

    def __init__(
        self,
        api_key: str,
        model: str,
        submission_name: str = "",
        comment: str = "",
        *,
        url: str = CRUNCHDAO_URL,
        transport: Transport | None = None,
    ) -> None:
        self._require(api_key, "api_key")
        self._require(model, "model")
        super().__init__(transport=transport)
        self._api_key = api_key
        self._model = model
        self._submission_name = submission_name or ""
        self._comment = comment or ""
        self._url = url.rstrip("/")

    def translate(self, symbol: Symbol) -> str:
        if not symbol.security_id:
            raise TargetRejectedError(f"{symbol.value} has no CrunchDAO instrument code")
        return f"{symbol.value} {symbol.security_id}"

    def build_message(self, parameters: SignalExportTargetParameters) -> str:
        as_of = parameters.account.as_of
        if as_of is None:
            as_of = date.today()
            logger.debug("{}: no account date supplied, using {}", self.name, as_of)

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["ticker", "date", "signal"])
        for target in parameters.targets:
            writer.writerow(
                [
                    self.translate(target.symbol),
                    as_of.isoformat(),
                    format_decimal(target.quantity),
                ]
            )
        return buffer.getvalue()

    def _deliver(self, message: str) -> None:
        url = f"{self._url}/v3/alpha-submissions?apiKey={quote(self._api_key, safe='')}"
        self._transport.post_multipart(
            url,
            fields={
                "model": self._model,
                "label": self._submission_name,
                "comment": self._comment,
            },
            files={"file": FilePart(CRUNCHDAO_FILENAME, message.encode("utf-8"))},
        )
