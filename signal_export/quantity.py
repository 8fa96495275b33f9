"""Conversion between portfolio weights and share quantities."""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal

from signal_export.core.constants import MARGIN_BUFFER
from signal_export.models import AccountContext, PortfolioTarget, SecurityHolding


def convert_percentage_to_quantity(
    account: AccountContext,
    target: PortfolioTarget,
    *,
    margin_buffer: Decimal = MARGIN_BUFFER,
) -> int | None:
    """Convert a target weight into a signed number of shares.

    The weight is applied to the total account value reduced by the margin
    buffer, divided by the contract value, and truncated toward zero to a
    whole number of lots.

    Args:
        account: Account the weight refers to
        target: Target with quantity expressed as a fraction of account value
        margin_buffer: Multiplier applied before conversion

    Returns:
        Signed share quantity, or None when the symbol has no usable price
    """
    holding = account.holding(target.symbol)
    if holding is None or holding.price <= 0:
        return None

    contract_value = holding.price * holding.contract_multiplier
    raw = target.quantity * account.total_value * margin_buffer / contract_value
    lots = (raw / holding.lot_size).to_integral_value(rounding=ROUND_DOWN)
    return int(lots * holding.lot_size)


def percentage_of_holdings(account: AccountContext, holding: SecurityHolding) -> Decimal:
    """Weight of a holding relative to the total account value.

    Raises:
        ZeroDivisionError: If the account value is zero
    """
    if account.total_value == 0:
        raise ZeroDivisionError("Total account value is zero")
    return holding.holdings_value / account.total_value
