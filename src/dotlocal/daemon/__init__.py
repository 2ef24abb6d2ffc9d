"""Daemon, control plane server and client."""

from .client import ControlClient
from .daemon import Daemon, DaemonState, build_daemon, spawn_detached
from .server import ControlRequestHandler, ControlServer, DaemonController

__all__ = [
    "Daemon",
    "DaemonState",
    "build_daemon",
    "spawn_detached",
    "ControlServer",
    "ControlRequestHandler",
    "DaemonController",
    "ControlClient",
]
