"""Load portfolio snapshots exported by the trading engine."""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator

from signal_export.models import AccountContext, PortfolioTarget, SecurityHolding


def _expand_symbol(entry: Any) -> Any:
    if isinstance(entry, dict) and isinstance(entry.get("symbol"), str):
        return {**entry, "symbol": {"value": entry["symbol"]}}
    return entry


class PortfolioSnapshot(BaseModel):
    """JSON document holding account value, holdings and optional targets.

    Symbols may be given as a plain ticker string for US equities.
    """

    cash: Decimal | None = Field(default=None, description="Cash balance")
    total_value: Decimal | None = Field(default=None, description="Total account value")
    as_of: date | None = Field(default=None)
    holdings: list[SecurityHolding] = Field(default_factory=list)
    targets: list[PortfolioTarget] | None = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def expand_symbols(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ("holdings", "targets"):
            if isinstance(data.get(key), list):
                data[key] = [_expand_symbol(entry) for entry in data[key]]
        return data

    @model_validator(mode="after")
    def validate_account_value(self) -> PortfolioSnapshot:
        if self.cash is None and self.total_value is None:
            raise ValueError("Snapshot requires either cash or total_value")
        return self

    def account(self) -> AccountContext:
        """Build the account context; an explicit total value wins over cash."""
        if self.total_value is not None:
            return AccountContext(
                total_value=self.total_value, holdings=tuple(self.holdings), as_of=self.as_of
            )
        return AccountContext.from_cash(self.cash or Decimal("0"), self.holdings, self.as_of)


def load_snapshot(path: Path) -> PortfolioSnapshot:
    """Read and validate a snapshot file.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the content is malformed
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"), parse_float=Decimal)
    return PortfolioSnapshot.model_validate(data)
