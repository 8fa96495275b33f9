"""Destination exports for portfolio signals."""

from .base import BaseSignalExport
from .collective2 import Collective2SignalExport
from .crunchdao import CrunchDAOSignalExport
from .numerai import NumeraiSignalExport

__all__ = [
    "BaseSignalExport",
    "Collective2SignalExport",
    "CrunchDAOSignalExport",
    "NumeraiSignalExport",
]
