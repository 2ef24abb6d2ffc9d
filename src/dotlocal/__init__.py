"""dotlocal - serve local development servers on friendly .local domains."""

from .common.exceptions import (
    AddressResolutionError,
    BinaryNotFoundError,
    ConfigLoadError,
    ConfigWriteError,
    ControlPlaneError,
    DotLocalError,
    EntryParseError,
    ProcessError,
)
from .common.logging import get_logger, setup_logging
from .common.settings import DotLocalSettings
from .daemon import ControlClient, ControlServer, Daemon, DaemonState
from .proxy import CaddyfileBuilder, ProcessSupervisor, SubprocessBackend
from .records import (
    ConfigStore,
    DotLocalConfig,
    ProxyEntry,
    Record,
    RecordRegistry,
    parse_entry,
)

__version__ = "0.1.0"


__all__ = [
    # Records
    "Record",
    "DotLocalConfig",
    "ProxyEntry",
    "parse_entry",
    "RecordRegistry",
    "ConfigStore",
    # Proxy
    "CaddyfileBuilder",
    "ProcessSupervisor",
    "SubprocessBackend",
    # Daemon
    "Daemon",
    "DaemonState",
    "ControlServer",
    "ControlClient",
    # Settings and logging
    "DotLocalSettings",
    "get_logger",
    "setup_logging",
    # Exceptions
    "DotLocalError",
    "EntryParseError",
    "ConfigLoadError",
    "ConfigWriteError",
    "ProcessError",
    "BinaryNotFoundError",
    "AddressResolutionError",
    "ControlPlaneError",
]
