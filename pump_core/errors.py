"""Exception types for pump_core."""


class PumpError(Exception):
    """Base class for pump_core errors."""


class NoActiveDraftError(PumpError):
    """Raised when a draft operation is attempted with no workout in progress."""


class ImportFormatError(PumpError):
    """Raised when import text is not a JSON array of workout logs."""
