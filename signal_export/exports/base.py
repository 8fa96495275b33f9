"""Shared send pipeline for signal export destinations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from types import TracebackType
from typing import ClassVar

from loguru import logger

from signal_export.core.errors import TargetRejectedError, TransportError
from signal_export.core.transport import HttpTransport, Transport
from signal_export.models import PortfolioTarget, SecurityType, SignalExportTargetParameters, Symbol


class BaseSignalExport(ABC):
    """Validate, translate and deliver portfolio targets to one destination.

    Subclasses only hold static configuration. Every call to ``send`` builds
    its own message so an instance can be shared between export cycles.
    """

    name: ClassVar[str]
    allowed_security_types: ClassVar[frozenset[SecurityType]]
    minimum_targets: ClassVar[int] = 1

    def __init__(self, *, transport: Transport | None = None) -> None:
        self._transport: Transport = transport if transport is not None else HttpTransport()

    @staticmethod
    def _require(value: object, field: str) -> None:
        if value is None:
            raise ValueError(f"{field} is required")

    def validate(self, targets: Sequence[PortfolioTarget]) -> bool:
        """Check a batch of targets before any conversion.

        Returns:
            False if the batch is empty, too small, or holds any symbol the
            destination cannot represent
        """
        if not targets:
            logger.warning("{}: portfolio target list is empty", self.name)
            return False
        if len(targets) < self.minimum_targets:
            logger.warning(
                "{}: {} targets supplied, at least {} required",
                self.name,
                len(targets),
                self.minimum_targets,
            )
            return False
        for target in targets:
            symbol = target.symbol
            if symbol.security_type not in self.allowed_security_types:
                logger.warning(
                    "{}: {} security type {} is not supported",
                    self.name,
                    symbol.value,
                    symbol.security_type.value,
                )
                return False
            try:
                self.translate(symbol)
            except TargetRejectedError as exc:
                logger.warning("{}: {}", self.name, exc)
                return False
        return True

    @abstractmethod
    def translate(self, symbol: Symbol) -> str:
        """Return the destination ticker for a symbol.

        Raises:
            TargetRejectedError: If the symbol has no representation
        """

    @abstractmethod
    def build_message(self, parameters: SignalExportTargetParameters) -> str:
        """Serialize targets into the destination payload.

        Raises:
            TargetRejectedError: If a target cannot be converted
        """

    @abstractmethod
    def _deliver(self, message: str) -> None:
        """Transmit a message.

        Raises:
            TransportError: If the destination could not be reached or refused it
        """

    def send(self, parameters: SignalExportTargetParameters) -> bool:
        """Send targets to the destination.

        Returns:
            True if the message was built and delivered
        """
        if not self.validate(parameters.targets):
            return False
        try:
            message = self.build_message(parameters)
        except TargetRejectedError as exc:
            logger.warning("{}: {}", self.name, exc)
            return False

        logger.debug("{} message: {}", self.name, message)
        try:
            self._deliver(message)
        except TransportError as exc:
            logger.error("{}: failed to deliver signals: {}", self.name, exc)
            return False

        logger.info("{}: sent {} targets", self.name, len(parameters.targets))
        return True

    def close(self) -> None:
        """Release the transport held by this export."""
        self._transport.close()

    def __enter__(self) -> BaseSignalExport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
