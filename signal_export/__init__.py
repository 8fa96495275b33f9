"""Signal Export - translate portfolio targets for signal-copying services."""

__version__ = "0.1.0"

from signal_export.core.config import SignalExportConfig, load_config
from signal_export.core.errors import SignalExportError, TargetRejectedError, TransportError
from signal_export.exports import (
    BaseSignalExport,
    Collective2SignalExport,
    CrunchDAOSignalExport,
    NumeraiSignalExport,
)
from signal_export.manager import ExportReport, SignalExportManager
from signal_export.models import (
    AccountContext,
    OptionRight,
    PortfolioTarget,
    SecurityHolding,
    SecurityType,
    SignalExportTargetParameters,
    Symbol,
)
from signal_export.quantity import convert_percentage_to_quantity, percentage_of_holdings

__all__ = [
    "SignalExportConfig",
    "load_config",
    "SignalExportError",
    "TargetRejectedError",
    "TransportError",
    "BaseSignalExport",
    "Collective2SignalExport",
    "CrunchDAOSignalExport",
    "NumeraiSignalExport",
    "ExportReport",
    "SignalExportManager",
    "AccountContext",
    "OptionRight",
    "PortfolioTarget",
    "SecurityHolding",
    "SecurityType",
    "SignalExportTargetParameters",
    "Symbol",
    "convert_percentage_to_quantity",
    "percentage_of_holdings",
]
