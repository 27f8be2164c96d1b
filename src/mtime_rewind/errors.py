"""Custom exceptions for mtime-rewind.

Every error aborts the run. The only error-shaped condition handled as normal
control flow is StateNotFoundError, which marks a first run.
"""

from pathlib import Path


class RewindError(RuntimeError):
    """Base class for all mtime-rewind errors."""
    pass


# Scan Errors
class ScanError(RewindError):
    """A file under the root could not be opened, read or stat-ed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not hash {path}: {reason}")


# State Errors
class StateError(RewindError):
    """Base class for state file errors."""
    pass


class StateNotFoundError(StateError):
    """No state file exists for the root (first run)."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"No state file at {path}")


class StateIOError(StateError):
    """State file could not be read or written."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not access state file {path}: {reason}")


class StateDecodeError(StateError):
    """State file is corrupt or written by an incompatible version."""
    pass


class RootMismatchError(StateError):
    """State file was recorded for a different root."""

    def __init__(self, stored: Path, requested: Path):
        self.stored = stored
        self.requested = requested
        super().__init__(
            f"Mismatching roots found: {str(stored)!r} (stored) vs {str(requested)!r}. "
            f"The state file was probably copied from another directory; "
            f"delete it to record a new baseline."
        )


# Rewind Errors
class RewindApplyError(RewindError):
    """Setting a file's mtime failed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not rewind mtime of {path}: {reason}")


# Configuration Errors
class ConfigError(RewindError):
    """Invalid configuration."""
    pass
