"""Caddy configuration and process supervision."""

from .caddyfile import EMPTY_CADDYFILE, CaddyfileBuilder
from .process import ProcessBackend, ProcessHandle, SubprocessBackend
from .supervisor import (
    HELPER_ADVERTISED_PORT,
    HELPER_SERVICE_TYPE,
    ProcessSupervisor,
)

__all__ = [
    "CaddyfileBuilder",
    "EMPTY_CADDYFILE",
    "ProcessBackend",
    "ProcessHandle",
    "SubprocessBackend",
    "ProcessSupervisor",
    "HELPER_SERVICE_TYPE",
    "HELPER_ADVERTISED_PORT",
]
