"""Narrow process interface used by the supervisor.

The supervisor only ever spawns, runs to completion and terminates
processes. Keeping that behind :class:`ProcessBackend` lets tests swap in a
fake backend instead of real OS processes.
"""

import subprocess
from pathlib import Path
from typing import Protocol

from ..common.logging import get_logger

logger = get_logger(__name__)


class ProcessHandle(Protocol):
    """The part of ``subprocess.Popen`` the supervisor relies on."""

    @property
    def pid(self) -> int: ...

    def poll(self) -> int | None: ...

    def terminate(self) -> None: ...

    def wait(self) -> int: ...


class ProcessBackend(Protocol):
    """Spawns and terminates external processes."""

    def spawn(
        self, argv: list[str], cwd: Path | None = None, quiet: bool = False
    ) -> ProcessHandle:
        """Start ``argv`` without waiting for it. Raises OSError on failure."""
        ...

    def run(self, argv: list[str], cwd: Path | None = None) -> int:
        """Run ``argv`` to completion and return its exit code."""
        ...

    def terminate(self, handle: ProcessHandle) -> None:
        """Terminate a spawned process and wait for it to exit."""
        ...


class SubprocessBackend:
    """:class:`ProcessBackend` on top of :mod:`subprocess`."""

    def spawn(
        self, argv: list[str], cwd: Path | None = None, quiet: bool = False
    ) -> "subprocess.Popen[bytes]":
        output = subprocess.DEVNULL if quiet else None
        process = subprocess.Popen(argv, cwd=cwd, stdout=output, stderr=output)
        logger.debug("Process spawned", argv=argv, pid=process.pid)
        return process

    def run(self, argv: list[str], cwd: Path | None = None) -> int:
        completed = subprocess.run(argv, cwd=cwd, check=False)
        logger.debug("Process finished", argv=argv, returncode=completed.returncode)
        return completed.returncode

    def terminate(self, handle: ProcessHandle) -> None:
        # Plain SIGTERM, no escalation to SIGKILL
        handle.terminate()
        handle.wait()
