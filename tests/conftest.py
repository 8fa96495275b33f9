"""Pytest configuration for shared fixtures."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

import pytest
from loguru import logger

from signal_export.core.errors import TransportError
from signal_export.core.transport import FilePart, TransportResponse
from signal_export.models import AccountContext, OptionRight, SecurityHolding, Symbol

REFERENCE_DATE = date(2016, 2, 16)


@pytest.fixture(scope="session", autouse=True)
def silence_loguru_handlers() -> None:
    """Route Loguru output to a no-op sink during tests to avoid closed stream errors."""
    logger.remove()
    logger.add(lambda _: None, catch=True)
    yield


@dataclass
class RecordedRequest:
    method: str
    url: str
    body: bytes | str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    fields: dict[str, str] = field(default_factory=dict)
    files: dict[str, FilePart] = field(default_factory=dict)


class RecordingTransport:
    """In-memory transport that records requests and replays canned responses."""

    def __init__(
        self, responses: list[TransportResponse | Exception] | None = None
    ) -> None:
        self.requests: list[RecordedRequest] = []
        self._responses = list(responses or [])
        self.closed = False

    def _next(self) -> TransportResponse:
        if self.closed:
            raise TransportError("Transport has been closed")
        if not self._responses:
            return TransportResponse(status=200, body=b"")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def post_json(
        self, url: str, payload: str, headers: Mapping[str, str] | None = None
    ) -> TransportResponse:
        self.requests.append(RecordedRequest("POST", url, payload, dict(headers or {})))
        return self._next()

    def post_multipart(
        self,
        url: str,
        fields: Mapping[str, str],
        files: Mapping[str, FilePart],
        headers: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        self.requests.append(
            RecordedRequest(
                "POST", url, None, dict(headers or {}), fields=dict(fields), files=dict(files)
            )
        )
        return self._next()

    def put(
        self, url: str, content: bytes, headers: Mapping[str, str] | None = None
    ) -> TransportResponse:
        self.requests.append(RecordedRequest("PUT", url, content, dict(headers or {})))
        return self._next()

    def close(self) -> None:
        self.closed = True


class Symbols:
    """Reference symbols shared across tests."""

    SPY = Symbol.equity("SPY", security_id="R735QTJ8XC9X")
    AAPL = Symbol.equity("AAPL", security_id="R735QTJ8XC9X")
    CAT = Symbol.equity("CAT", security_id="2T")
    IBM = Symbol.equity("IBM")
    GOOG = Symbol.equity("GOOG")
    MSFT = Symbol.equity("MSFT")
    ZNGA = Symbol.equity("ZNGA")
    FXE = Symbol.equity("FXE")
    LODE = Symbol.equity("LODE")
    NFLX = Symbol.equity("NFLX")
    SGX = Symbol.equity("SGX", market="sgx")
    EURUSD = Symbol.forex("EURUSD")
    BTCUSD = Symbol.crypto("BTCUSD")
    ES_FUTURE_CHAIN = Symbol.future("ES")
    FUTURE_ESZ18_DEC2018 = Symbol.future("ES", date(2018, 12, 21))
    SPY_OPTION_CHAIN = Symbol.option("SPY")
    SPY_C_192_FEB19_2016 = Symbol.option("SPY", OptionRight.CALL, 192, date(2016, 2, 19))


@pytest.fixture
def symbols() -> type[Symbols]:
    return Symbols


def make_account(
    symbols: list[Symbol],
    cash: Decimal | int = 50000,
    price: Decimal = Decimal("100"),
    as_of: date | None = REFERENCE_DATE,
) -> AccountContext:
    """Account with no positions and one priced entry per symbol."""
    holdings = [SecurityHolding(symbol=symbol, price=price) for symbol in symbols]
    return AccountContext.from_cash(cash, holdings, as_of)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()
