"""Exception hierarchy for the validation engine."""


class PacketValidationError(Exception):
    """Base class for all packet validation errors."""


class NoSuccessfulPassesError(PacketValidationError):
    """Raised when a merge is attempted with zero successful report variants."""


class ReportLoadError(PacketValidationError):
    """Raised when input cannot be parsed into a DiagnosticReport."""
