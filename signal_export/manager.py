"""Dispatch portfolio targets to registered signal destinations."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from types import TracebackType

from loguru import logger

from signal_export.exports.base import BaseSignalExport
from signal_export.models import AccountContext, PortfolioTarget, SignalExportTargetParameters
from signal_export.quantity import percentage_of_holdings


@dataclass(slots=True)
class ExportReport:
    """Per-destination outcome of one export cycle."""

    accepted: bool
    results: list[tuple[str, bool]] = field(default_factory=list)
    targets: tuple[PortfolioTarget, ...] = ()

    @property
    def succeeded(self) -> list[str]:
        return [name for name, ok in self.results if ok]

    @property
    def failed(self) -> list[str]:
        return [name for name, ok in self.results if not ok]

    def __bool__(self) -> bool:
        return self.accepted and all(ok for _, ok in self.results)


class SignalExportManager:
    """Holds signal exports and sends each cycle's targets to all of them.

    Destinations are independent: a rejection by one does not prevent
    delivery to the others.
    """

    def __init__(self, *exports: BaseSignalExport, enabled: bool = True) -> None:
        self._exports: list[BaseSignalExport] = list(exports)
        self.enabled = enabled

    @property
    def exports(self) -> tuple[BaseSignalExport, ...]:
        return tuple(self._exports)

    def add_signal_export(self, export: BaseSignalExport) -> None:
        if export is None:
            raise ValueError("export is required")
        self._exports.append(export)

    register_destination = add_signal_export

    def get_portfolio_targets(self, account: AccountContext) -> list[PortfolioTarget] | None:
        """Derive one weighted target per invested holding.

        Returns:
            Targets in holdings order, or None when the total account value is
            not strictly positive
        """
        if account.total_value <= 0:
            logger.error(
                "Total account value is {}; signal targets cannot be derived",
                account.total_value,
            )
            return None
        return [
            PortfolioTarget(symbol=holding.symbol, quantity=percentage_of_holdings(account, holding))
            for holding in account.invested()
        ]

    def set_target_portfolio(
        self,
        account: AccountContext,
        targets: Iterable[PortfolioTarget] | None = None,
    ) -> ExportReport:
        """Send targets to every registered destination.

        Args:
            account: Account snapshot for this cycle
            targets: Explicit targets; derived from holdings when omitted

        Returns:
            Report with one entry per destination
        """
        if not self.enabled:
            logger.info("Signal exports disabled; skipping export cycle")
            return ExportReport(accepted=False)

        if targets is None:
            derived = self.get_portfolio_targets(account)
            if derived is None:
                return ExportReport(accepted=False)
            batch: Sequence[PortfolioTarget] = derived
        else:
            if account.total_value <= 0:
                logger.error(
                    "Total account value is {}; refusing to export signals",
                    account.total_value,
                )
                return ExportReport(accepted=False)
            batch = list(targets)

        parameters = SignalExportTargetParameters(targets=tuple(batch), account=account)
        report = ExportReport(accepted=True, targets=parameters.targets)
        for export in list(self._exports):
            try:
                ok = export.send(parameters)
            except Exception:
                logger.exception("{}: unexpected error while sending signals", export.name)
                ok = False
            report.results.append((export.name, ok))

        if report.failed:
            logger.warning("Signal export failed for: {}", ", ".join(report.failed))
        return report

    def export_current_targets(self, account: AccountContext) -> ExportReport:
        """Derive targets from current holdings and send them."""
        return self.set_target_portfolio(account)

    def close(self) -> None:
        for export in self._exports:
            export.close()

    def __enter__(self) -> SignalExportManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
