"""Exception hierarchy for poly-watcher."""


class PolyWatcherError(Exception):
    """Base class for all poly-watcher errors."""


class ScanError(PolyWatcherError):
    """Raised when a tree scan cannot even start (missing or unreadable root)."""


class CommandError(PolyWatcherError):
    """Raised when a shell command exits non-zero or cannot be spawned."""

    def __init__(self, command: str, returncode: int | None, reason: str | None = None):
        self.command = command
        self.returncode = returncode
        self.reason = reason
        if returncode is None:
            message = f"could not run {command!r}: {reason}"
        else:
            message = f"{command!r} exited with status {returncode}"
        super().__init__(message)


class ProcessStartError(PolyWatcherError):
    """Raised when the run process cannot be spawned."""


class ConfigError(PolyWatcherError, ValueError):
    """Raised for malformed durations or config file content."""
