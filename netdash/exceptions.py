"""Exception hierarchy for the telemetry service."""


class NetdashError(Exception):
    """Base exception for all telemetry service errors."""


class ExternalToolError(NetdashError):
    """A host utility was missing, failed, timed out or produced unusable output."""

    def __init__(self, message: str, command: str | None = None, returncode: int | None = None):
        self.command = command
        self.returncode = returncode
        super().__init__(message)


class MeasurementError(NetdashError):
    """Speed-test tool output could not be turned into a measurement."""


class RegistryError(NetdashError):
    """Infrastructure registry definition or update is invalid."""
