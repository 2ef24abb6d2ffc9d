"""Daemon state machine tying the store, supervisor and control plane together."""

import signal
import subprocess
import sys
import threading
from enum import Enum
from types import FrameType
from typing import Any

from ..common.exceptions import DotLocalError
from ..common.logging import get_logger
from ..common.settings import PROXY_BINARY_NAME, PROXY_COMMON_PATHS, DotLocalSettings
from ..common.utils import find_binary
from ..proxy.caddyfile import CaddyfileBuilder
from ..proxy.supervisor import ProcessSupervisor
from ..records.store import ConfigStore
from .server import ControlServer

logger = get_logger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class DaemonState(str, Enum):
    """Daemon lifecycle states."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    RESTARTING = "restarting"
    STOPPING = "stopping"


class Daemon:
    """Runs the supervised processes behind a loopback control plane.

    The daemon holds the only live copy of the configuration while it runs
    and reloads it from disk on every restart.
    """

    def __init__(
        self,
        store: ConfigStore,
        supervisor: ProcessSupervisor,
        host: str = "127.0.0.1",
        port: int = 2023,
    ):
        self.store = store
        self.supervisor = supervisor
        self.host = host
        self.port = port
        self.state = DaemonState.STOPPED
        self.stop_event = threading.Event()
        self.server: ControlServer | None = None

    def _transition(self, state: DaemonState) -> None:
        logger.debug("Daemon state change", old=self.state.value, new=state.value)
        self.state = state

    def start(self) -> None:
        """Write the Caddyfile, launch caddy and spawn helpers."""
        self._transition(DaemonState.STARTING)
        config = self.store.load()
        self.supervisor.start(config)
        self._transition(DaemonState.RUNNING)

    def restart(self) -> None:
        """Reload configuration from disk and restart supervised processes."""
        self._transition(DaemonState.RESTARTING)
        config = self.store.load()
        self.supervisor.restart(config)
        self._transition(DaemonState.RUNNING)

    def quit(self) -> None:
        """Stop helpers and caddy, then end the accept loop."""
        if self.state is DaemonState.STOPPED:
            self.stop_event.set()
            return

        self._transition(DaemonState.STOPPING)
        try:
            self.supervisor.shutdown()
        finally:
            self._transition(DaemonState.STOPPED)
            self.stop_event.set()

    def request_shutdown(self) -> None:
        """Ask the accept loop to stop. Safe to call from a signal handler."""
        logger.info("Shutdown requested")
        self.stop_event.set()

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        self.request_shutdown()

    def bind(self) -> ControlServer:
        """Bind the control listener so a busy port fails before anything is spawned."""
        self.server = ControlServer((self.host, self.port), self, self.stop_event)
        return self.server

    def run(self, install_signal_handlers: bool = True) -> None:
        """Start everything and serve control requests until told to quit.

        Raises:
            DotLocalError: If startup fails or a control operation failed,
                after the supervised processes have been stopped
        """
        previous: dict[int, Any] = {}
        if install_signal_handlers:
            for signum in SHUTDOWN_SIGNALS:
                previous[signum] = signal.signal(signum, self._handle_signal)

        server = self.server or self.bind()
        try:
            self.start()
            server.serve_until_stopped()
        except BaseException:
            self._teardown(server, previous, suppress_errors=True)
            raise

        self._teardown(
            server, previous, suppress_errors=server.fatal_error is not None
        )
        if server.fatal_error is not None:
            raise server.fatal_error

    def _teardown(
        self,
        server: ControlServer,
        previous: dict[int, Any],
        suppress_errors: bool = False,
    ) -> None:
        server.server_close()
        self.server = None
        for signum, handler in previous.items():
            signal.signal(signum, handler)

        # Interrupted or failed: do not leave caddy or helpers orphaned
        if self.state is DaemonState.STOPPED:
            return
        try:
            self.quit()
        except DotLocalError as e:
            logger.error("Cleanup after shutdown failed", error=str(e))
            if not suppress_errors:
                raise


def build_daemon(settings: DotLocalSettings) -> Daemon:
    """Wire a daemon from settings.

    Raises:
        BinaryNotFoundError: If caddy cannot be found
    """
    proxy_binary = find_binary(
        PROXY_BINARY_NAME, settings.proxy_binary, PROXY_COMMON_PATHS
    )
    supervisor = ProcessSupervisor(
        proxy_binary,
        CaddyfileBuilder(settings.caddyfile_path),
        helper_binary=settings.helper_binary,
        cwd=settings.root,
    )
    return Daemon(
        ConfigStore(settings.config_path),
        supervisor,
        host=settings.control_host,
        port=settings.control_port,
    )


def spawn_detached(settings: DotLocalSettings) -> int:
    """Re-invoke dotlocal with ``run`` in a new session and return immediately.

    Returns:
        PID of the detached daemon
    """
    settings.root.mkdir(parents=True, exist_ok=True)
    argv = [
        sys.executable,
        "-m",
        "dotlocal",
        "--root",
        str(settings.root),
        "--log-level",
        settings.log_level,
        "run",
        "--log-file",
        str(settings.log_path),
    ]
    process = subprocess.Popen(
        argv,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )
    logger.info("Daemon detached", pid=process.pid, log_file=str(settings.log_path))
    return process.pid
