"""Tests for the CrunchDAO export."""

from __future__ import annotations

from decimal import Decimal

from conftest import RecordingTransport, Symbols, make_account

from signal_export.core.errors import TransportError
from signal_export.exports import CrunchDAOSignalExport
from signal_export.models import PortfolioTarget, SignalExportTargetParameters, Symbol

EXPECTED_MESSAGE = (
    "ticker,date,signal\n"
    "SPY R735QTJ8XC9X,2016-02-16,0.2\n"
    "AAPL R735QTJ8XC9X,2016-02-16,0.2\n"
    "CAT 2T,2016-02-16,0.2\n"
)


def _parameters(symbols: list[Symbol], weight: str = "0.2") -> SignalExportTargetParameters:
    targets = tuple(PortfolioTarget(symbol=symbol, quantity=Decimal(weight)) for symbol in symbols)
    return SignalExportTargetParameters(targets=targets, account=make_account(symbols))


def test_builds_crunchdao_message() -> None:
    """Weights pass through unconverted next to the account date."""
    export = CrunchDAOSignalExport("", "", transport=RecordingTransport())
    parameters = _parameters([Symbols.SPY, Symbols.AAPL, Symbols.CAT])

    assert export.build_message(parameters) == EXPECTED_MESSAGE


def test_send_uploads_csv(transport: RecordingTransport) -> None:
    export = CrunchDAOSignalExport(
        "secret key",
        "model-1",
        "weekly",
        "rebalance",
        url="https://crunch.test/",
        transport=transport,
    )

    assert export.send(_parameters([Symbols.SPY, Symbols.AAPL, Symbols.CAT])) is True

    request = transport.requests[0]
    assert request.url == "https://crunch.test/v3/alpha-submissions?apiKey=secret%20key"
    assert request.fields == {"model": "model-1", "label": "weekly", "comment": "rebalance"}
    upload = request.files["file"]
    assert upload.filename == "submission.csv"
    assert upload.content.decode("utf-8") == EXPECTED_MESSAGE


def test_returns_false_when_symbol_is_not_allowed(transport: RecordingTransport) -> None:
    export = CrunchDAOSignalExport("", "", transport=transport)
    parameters = _parameters(
        [Symbols.ES_FUTURE_CHAIN, Symbols.SPY_OPTION_CHAIN, Symbols.EURUSD, Symbols.BTCUSD],
        weight="0.1",
    )

    assert export.send(parameters) is False
    assert transport.requests == []


def test_returns_false_when_one_symbol_is_not_allowed(transport: RecordingTransport) -> None:
    export = CrunchDAOSignalExport("", "", transport=transport)

    assert export.send(_parameters([Symbols.SPY, Symbols.EURUSD])) is False
    assert transport.requests == []


def test_returns_false_when_target_list_is_empty(transport: RecordingTransport) -> None:
    export = CrunchDAOSignalExport("", "", transport=transport)

    assert export.send(_parameters([])) is False


def test_returns_false_without_instrument_code(transport: RecordingTransport) -> None:
    """Symbols unknown to CrunchDAO invalidate the whole batch."""
    export = CrunchDAOSignalExport("", "", transport=transport)

    assert export.send(_parameters([Symbols.SPY, Symbols.IBM])) is False
    assert transport.requests == []


def test_transport_failure_returns_false() -> None:
    transport = RecordingTransport([TransportError("HTTP 401")])
    export = CrunchDAOSignalExport("", "", transport=transport)

    assert export.send(_parameters([Symbols.SPY])) is False
