"""Signal export models using Pydantic v2."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator


class SecurityType(str, Enum):
    """Security type enumeration."""

    EQUITY = "equity"
    FOREX = "forex"
    FUTURE = "future"
    OPTION = "option"
    CRYPTO = "crypto"
    CFD = "cfd"
    INDEX = "index"


class OptionRight(str, Enum):
    """Option right enumeration."""

    CALL = "call"
    PUT = "put"


class Symbol(BaseModel):
    """Tradable instrument supplied by the symbol reference."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., description="Ticker")
    security_type: SecurityType = Field(default=SecurityType.EQUITY)
    market: str = Field(default="usa", description="Listing market code")
    security_id: str | None = Field(default=None, description="Opaque instrument code")
    underlying: str | None = Field(default=None, description="Root ticker for derivatives")
    expiry: date | None = Field(default=None)
    strike: Decimal | None = Field(default=None)
    right: OptionRight | None = Field(default=None)
    canonical: bool = Field(default=False, description="Chain symbol without a contract")

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        """Ensure ticker is uppercase and non-empty."""
        if not v or not v.strip():
            raise ValueError("Symbol cannot be empty")
        return v.upper().strip()

    @field_validator("market")
    @classmethod
    def validate_market(cls, v: str) -> str:
        return v.lower().strip()

    @model_validator(mode="after")
    def validate_contract_fields(self) -> Symbol:
        """Require contract descriptors on concrete derivatives."""
        if self.canonical:
            return self
        if self.security_type in (SecurityType.FUTURE, SecurityType.OPTION) and self.expiry is None:
            raise ValueError(f"{self.security_type.value} symbol {self.value} requires an expiry")
        if self.security_type == SecurityType.OPTION:
            if self.strike is None or self.right is None:
                raise ValueError(f"Option symbol {self.value} requires strike and right")
            if self.strike <= 0:
                raise ValueError(f"Option strike must be positive, got {self.strike}")
        return self

    @property
    def root(self) -> str:
        """Underlying root ticker, or the ticker itself."""
        return self.underlying or self.value

    def __str__(self) -> str:
        return self.value

    @classmethod
    def equity(cls, ticker: str, market: str = "usa", security_id: str | None = None) -> Symbol:
        return cls(value=ticker, market=market, security_id=security_id)

    @classmethod
    def forex(cls, pair: str, market: str = "oanda") -> Symbol:
        return cls(value=pair, security_type=SecurityType.FOREX, market=market)

    @classmethod
    def crypto(cls, pair: str, market: str = "coinbase") -> Symbol:
        return cls(value=pair, security_type=SecurityType.CRYPTO, market=market)

    @classmethod
    def future(
        cls, root: str, expiry: date | None = None, market: str = "cme"
    ) -> Symbol:
        """Create a future contract, or the canonical chain when expiry is None."""
        if expiry is None:
            return cls(
                value=f"/{root}",
                security_type=SecurityType.FUTURE,
                market=market,
                underlying=root,
                canonical=True,
            )
        return cls(
            value=f"{root}{expiry:%y%m%d}",
            security_type=SecurityType.FUTURE,
            market=market,
            underlying=root,
            expiry=expiry,
        )

    @classmethod
    def option(
        cls,
        underlying: str,
        right: OptionRight | None = None,
        strike: Decimal | int | str | None = None,
        expiry: date | None = None,
        market: str = "usa",
    ) -> Symbol:
        """Create an option contract, or the canonical chain when no contract is given."""
        if expiry is None:
            return cls(
                value=f"?{underlying}",
                security_type=SecurityType.OPTION,
                market=market,
                underlying=underlying,
                canonical=True,
            )
        strike_value = Decimal(str(strike)) if strike is not None else None
        flag = "C" if right == OptionRight.CALL else "P"
        return cls(
            value=f"{underlying} {expiry:%y%m%d}{flag}{strike_value}",
            security_type=SecurityType.OPTION,
            market=market,
            underlying=underlying,
            expiry=expiry,
            strike=strike_value,
            right=right,
        )


class SecurityHolding(BaseModel):
    """Reference price and current holdings for one symbol."""

    model_config = ConfigDict(frozen=True)

    symbol: Symbol
    price: Decimal = Field(..., description="Last traded price")
    quantity: Decimal = Field(default=Decimal("0"), description="Held quantity (negative=short)")
    lot_size: Decimal = Field(default=Decimal("1"), gt=0)
    contract_multiplier: Decimal = Field(default=Decimal("1"), gt=0)

    @property
    def holdings_value(self) -> Decimal:
        """Signed market value of the holding."""
        return self.quantity * self.price * self.contract_multiplier

    @property
    def invested(self) -> bool:
        return self.quantity != 0


class AccountContext(BaseModel):
    """Frozen view of the account handed to one export cycle."""

    model_config = ConfigDict(frozen=True)

    total_value: Decimal = Field(..., description="Total account value")
    holdings: tuple[SecurityHolding, ...] = Field(default_factory=tuple)
    as_of: date | None = Field(default=None, description="Current algorithm date")

    _by_symbol: dict[Symbol, SecurityHolding] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: object) -> None:
        """Index holdings by symbol; the first entry wins on duplicates."""
        lookup: dict[Symbol, SecurityHolding] = {}
        for holding in self.holdings:
            lookup.setdefault(holding.symbol, holding)
        self._by_symbol = lookup

    @classmethod
    def from_cash(
        cls,
        cash: Decimal | int | str,
        holdings: Iterable[SecurityHolding] = (),
        as_of: date | None = None,
    ) -> AccountContext:
        """Build a context whose total value is cash plus holdings value."""
        holdings = tuple(holdings)
        total = Decimal(str(cash)) + sum(
            (holding.holdings_value for holding in holdings), Decimal("0")
        )
        return cls(total_value=total, holdings=holdings, as_of=as_of)

    def holding(self, symbol: Symbol) -> SecurityHolding | None:
        return self._by_symbol.get(symbol)

    def price(self, symbol: Symbol) -> Decimal | None:
        holding = self.holding(symbol)
        return holding.price if holding is not None else None

    def invested(self) -> list[SecurityHolding]:
        """Holdings with a non-zero quantity, in insertion order."""
        return [holding for holding in self.holdings if holding.invested]


class PortfolioTarget(BaseModel):
    """Desired weight (or quantity) for a symbol in one export cycle."""

    model_config = ConfigDict(frozen=True)

    symbol: Symbol
    quantity: Decimal = Field(..., description="Portfolio weight or absolute quantity")
    tag: str = Field(default="")

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Target quantity must be finite")
        return v


class SignalExportTargetParameters(BaseModel):
    """Input of a single send call: the targets and the account they refer to."""

    model_config = ConfigDict(frozen=True)

    targets: tuple[PortfolioTarget, ...]
    account: AccountContext
