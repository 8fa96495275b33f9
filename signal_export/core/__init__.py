"""Core infrastructure modules for signal exports."""

from .config import SignalExportConfig, load_config
from .constants import (
    COLLECTIVE2_URL,
    CRUNCHDAO_URL,
    MARGIN_BUFFER,
    NUMERAI_MINIMUM_TARGETS,
    NUMERAI_URL,
)
from .errors import SignalExportError, TargetRejectedError, TransportError
from .transport import FilePart, HttpTransport, Transport, TransportResponse, encode_multipart

__all__ = [
    "SignalExportConfig",
    "load_config",
    "COLLECTIVE2_URL",
    "CRUNCHDAO_URL",
    "NUMERAI_URL",
    "MARGIN_BUFFER",
    "NUMERAI_MINIMUM_TARGETS",
    "SignalExportError",
    "TargetRejectedError",
    "TransportError",
    "FilePart",
    "HttpTransport",
    "Transport",
    "TransportResponse",
    "encode_multipart",
]
