"""Exception types raised by the signal export package."""


class SignalExportError(Exception):
    """Base error for the signal export package."""


class TransportError(SignalExportError):
    """Raised when a destination request fails or is rejected."""


class TargetRejectedError(SignalExportError):
    """Raised when a target cannot be expressed for a destination."""
