"""Custom exceptions for dotlocal."""


class DotLocalError(Exception):
    """Base exception for all dotlocal errors."""
    pass


class EntryParseError(DotLocalError):
    """Raised when a proxy entry does not match `domain[/path]:port`."""

    def __init__(self, entry: str, reason: str):
        super().__init__(f"Invalid proxy entry '{entry}': {reason}")
        self.entry = entry
        self.reason = reason


class ConfigLoadError(DotLocalError):
    """Raised when the persisted configuration cannot be read or parsed."""
    pass


class ProcessError(DotLocalError):
    """Raised when a supervised process cannot be spawned or commanded."""
    pass


class BinaryNotFoundError(DotLocalError):
    """Raised when an external binary is not found or not executable."""
    pass


class AddressResolutionError(DotLocalError):
    """Raised when the LAN-facing address of this host cannot be determined."""
    pass


class ControlPlaneError(DotLocalError):
    """Raised when the running daemon cannot be reached."""
    pass


class ConfigWriteError(DotLocalError):
    """Raised when the configuration or the Caddyfile cannot be written."""
    pass
