"""Common utilities and shared functionality."""

from .exceptions import (
    AddressResolutionError,
    BinaryNotFoundError,
    ConfigLoadError,
    ConfigWriteError,
    ControlPlaneError,
    DotLocalError,
    EntryParseError,
    ProcessError,
)
from .logging import get_logger, setup_logging
from .settings import DotLocalSettings
from .utils import (
    LOOPBACK_IP,
    MAX_PORT,
    MIN_PORT,
    find_binary,
    get_lan_ip,
    resolve_ip,
    validate_port,
)

__all__ = [
    # Settings
    "DotLocalSettings",
    # Exceptions
    "DotLocalError",
    "EntryParseError",
    "ConfigLoadError",
    "ConfigWriteError",
    "ProcessError",
    "BinaryNotFoundError",
    "AddressResolutionError",
    "ControlPlaneError",
    # Logging
    "get_logger",
    "setup_logging",
    # Utils
    "validate_port",
    "get_lan_ip",
    "resolve_ip",
    "find_binary",
    "LOOPBACK_IP",
    "MIN_PORT",
    "MAX_PORT",
]
