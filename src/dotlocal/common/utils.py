"""Utility functions for dotlocal."""

import os
import shutil
import socket
from collections.abc import Iterable
from pathlib import Path

from .exceptions import AddressResolutionError, BinaryNotFoundError

# Port range constants
MIN_PORT = 1
MAX_PORT = 65535

LOOPBACK_IP = "127.0.0.1"

# Any routable address works, a UDP connect sends no packets
_PROBE_ADDRESS = ("10.255.255.255", 1)


def validate_port(port: int, port_name: str = "Port") -> None:
    """Validate port number range.

    Args:
        port: Port number to validate
        port_name: Name of the port for error messages

    Raises:
        ValueError: If port is not in valid range (1-65535)
    """
    if not isinstance(port, int) or not (MIN_PORT <= port <= MAX_PORT):
        raise ValueError(f"{port_name} must be between {MIN_PORT} and {MAX_PORT}")


def get_lan_ip() -> str:
    """Return the IPv4 address of the interface that holds the default route.

    Raises:
        AddressResolutionError: If the host has no usable network interface
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(_PROBE_ADDRESS)
            address: str = sock.getsockname()[0]
    except OSError as e:
        raise AddressResolutionError(f"Could not determine LAN address: {e}") from e

    if address.startswith("0."):
        raise AddressResolutionError("Could not determine LAN address: no route")
    return address


def resolve_ip(lan_enabled: bool) -> str:
    """Pick the address routes and advertisements are bound to."""
    if lan_enabled:
        return get_lan_ip()
    return LOOPBACK_IP


def find_binary(
    name: str,
    explicit_path: str | None = None,
    common_paths: Iterable[str | Path] = (),
) -> str:
    """Find an external binary.

    Lookup order is the explicit path, then ``PATH``, then ``common_paths``.

    Args:
        name: Executable name to look up on ``PATH``
        explicit_path: Configured path that must exist if given
        common_paths: Well-known install locations to try last

    Returns:
        Path to the binary

    Raises:
        BinaryNotFoundError: If the binary cannot be found or is not executable
    """
    if explicit_path:
        if Path(explicit_path).is_file() and os.access(explicit_path, os.X_OK):
            return explicit_path
        raise BinaryNotFoundError(f"Binary not found or not executable: {explicit_path}")

    found = shutil.which(name)
    if found:
        return found

    for path in common_paths:
        if Path(path).is_file() and os.access(path, os.X_OK):
            return str(path)

    raise BinaryNotFoundError(
        f"{name} binary not found. Install it or set its path explicitly."
    )
