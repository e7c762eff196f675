"""
Exceptions raised by Timelapse.

TimelapseError and its subclasses are user-facing: the CLI prints them and
exits non-zero. RecordingInvariantError is a programming error and is kept
outside that hierarchy on purpose.
"""


class TimelapseError(Exception):
    """Base class for errors reported to the user."""

    pass


class UnsupportedPlatformError(TimelapseError):
    """Raised when the host OS has no screen-grab driver or opener."""

    def __init__(self, system: str, what: str = "Platform"):
        super().__init__(f"Unsupported {what.lower()}: {system}")
        self.system = system


class InvalidTransitionError(TimelapseError):
    """Raised when a start/stop request does not fit the current state."""

    def __init__(self, source, target):
        super().__init__(
            f"Cannot go from {source.value} to {target.value}"
        )
        self.source = source
        self.target = target


class SettingsError(TimelapseError):
    """Raised for invalid configuration values."""

    pass


class RecordingInvariantError(RuntimeError):
    """Raised when stop/finalize runs without an active recording."""

    pass
