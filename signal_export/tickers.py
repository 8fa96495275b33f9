"""Ticker conventions used by the signal destinations."""

from __future__ import annotations

from decimal import Decimal

from signal_export.core.errors import TargetRejectedError
from signal_export.models import OptionRight, Symbol

FUTURES_MONTH_CODES = "FGHJKMNQUVXZ"
CALL_MONTH_CODES = "ABCDEFGHIJKL"
PUT_MONTH_CODES = "MNOPQRSTUVWX"

# Listing market -> country code appended to Numerai tickers.
NUMERAI_COUNTRY_CODES: dict[str, str] = {
    "usa": "US",
    "sgx": "SP",
    "hkfe": "HK",
    "india": "IN",
    "lse": "LN",
    "tsx": "CN",
    "asx": "AU",
    "ose": "JT",
    "euronext": "FP",
    "eurex": "GY",
}


def format_decimal(value: Decimal) -> str:
    """Render a decimal without exponent or trailing zeros."""
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


def future_ticker(symbol: Symbol) -> str:
    """Return ``@`` + root + month code + last digit of the expiry year."""
    if symbol.expiry is None:
        raise TargetRejectedError(f"Future {symbol.value} has no expiry")
    month = FUTURES_MONTH_CODES[symbol.expiry.month - 1]
    return f"@{symbol.root}{month}{symbol.expiry.year % 10}"


def option_ticker(symbol: Symbol) -> str:
    """Return the compact option code, e.g. ``SPY1619B192``.

    Layout is root, two digit year, two digit day, month letter (A-L calls,
    M-X puts) and strike.
    """
    if symbol.expiry is None or symbol.strike is None or symbol.right is None:
        raise TargetRejectedError(f"Option {symbol.value} is missing contract details")
    codes = CALL_MONTH_CODES if symbol.right == OptionRight.CALL else PUT_MONTH_CODES
    month = codes[symbol.expiry.month - 1]
    return f"{symbol.root}{symbol.expiry:%y%d}{month}{format_decimal(symbol.strike)}"


def numerai_country_code(symbol: Symbol) -> str:
    try:
        return NUMERAI_COUNTRY_CODES[symbol.market]
    except KeyError as exc:
        raise TargetRejectedError(
            f"No Numerai country code for market {symbol.market!r} ({symbol.value})"
        ) from exc
