"""Collective2 desired-positions export."""

from __future__ import annotations

import json
from typing import Any

from signal_export.core.constants import COLLECTIVE2_URL
from signal_export.core.errors import TargetRejectedError, TransportError
from signal_export.core.transport import Transport
from signal_export.exports.base import BaseSignalExport
from signal_export.models import SecurityType, SignalExportTargetParameters, Symbol
from signal_export.quantity import convert_percentage_to_quantity
from signal_export.tickers import future_ticker, option_ticker

COLLECTIVE2_SYMBOL_TYPES: dict[SecurityType, str] = {
    SecurityType.EQUITY: "stock",
    SecurityType.FOREX: "forex",
    SecurityType.FUTURE: "future",
    SecurityType.OPTION: "option",
}


class Collective2SignalExport(BaseSignalExport):
    """Mirror target positions on a Collective2 system.

    Weights are converted to share quantities against the account value
    before being sent.
    """

    name = "collective2"
    allowed_security_types = frozenset(COLLECTIVE2_SYMBOL_TYPES)

    def __init__(
        self,
        api_key: str,
        system_id: int,
        platform_id: str | None = None,
        *,
        url: str = COLLECTIVE2_URL,
        transport: Transport | None = None,
    ) -> None:
        self._require(api_key, "api_key")
        self._require(system_id, "system_id")
        super().__init__(transport=transport)
        self._api_key = api_key
        self._system_id = system_id
        self._platform_id = platform_id
        self._url = url

    def translate(self, symbol: Symbol) -> str:
        if symbol.security_type == SecurityType.FUTURE:
            return future_ticker(symbol)
        if symbol.security_type == SecurityType.OPTION:
            return option_ticker(symbol)
        if symbol.security_type in (SecurityType.EQUITY, SecurityType.FOREX):
            return symbol.value
        raise TargetRejectedError(
            f"{symbol.security_type.value} symbols cannot be sent to Collective2"
        )

    def convert_targets(self, parameters: SignalExportTargetParameters) -> list[dict[str, Any]]:
        """Convert weighted targets into Collective2 position entries."""
        positions: list[dict[str, Any]] = []
        for target in parameters.targets:
            quantity = convert_percentage_to_quantity(parameters.account, target)
            if quantity is None:
                raise TargetRejectedError(
                    f"No reference price for {target.symbol.value}; cannot convert weight"
                )
            positions.append(
                {
                    "symbol": self.translate(target.symbol),
                    "typeofsymbol": COLLECTIVE2_SYMBOL_TYPES[target.symbol.security_type],
                    "quant": quantity,
                }
            )
        return positions

    def build_message(self, parameters: SignalExportTargetParameters) -> str:
        payload: dict[str, Any] = {
            "positions": self.convert_targets(parameters),
            "systemid": self._system_id,
            "apikey": self._api_key,
        }
        if self._platform_id is not None:
            payload["platformid"] = self._platform_id
        return json.dumps(payload, separators=(",", ":"))

    def _deliver(self, message: str) -> None:
        response = self._transport.post_json(self._url, message)
        body = response.json()
        if not isinstance(body, dict):
            return
        if body.get("ok") in ("0", 0):
            raise TransportError(f"Collective2 rejected positions: {body.get('message', body)}")
        status = body.get("ResponseStatus")
        if not isinstance(status, dict):
            return
        error_code = str(status.get("ErrorCode") or "200")
        errors = status.get("Errors") or []
        if error_code != "200" or errors:
            detail = "; ".join(
                str(error.get("Message", error)) if isinstance(error, dict) else str(error)
                for error in errors
            )
            raise TransportError(
                f"Collective2 rejected positions ({status.get('ErrorCode')}): "
                f"{status.get('Message') or detail or body}"
            )
