"""Loopback HTTP control plane for a running daemon.

Requests are handled strictly one at a time on the calling thread. A
``/restart`` or ``/quit`` runs to completion, including spawning and
killing processes, before the next connection is accepted.
"""

import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Protocol
from urllib.parse import urlsplit

from ..common.exceptions import DotLocalError
from ..common.logging import get_logger

logger = get_logger(__name__)

POLL_INTERVAL = 0.5


class DaemonController(Protocol):
    """Operations the control plane can trigger."""

    def restart(self) -> None:
        """Reload configuration and restart supervised processes."""
        ...

    def quit(self) -> None:
        """Stop supervised processes and end the accept loop."""
        ...


class ControlRequestHandler(BaseHTTPRequestHandler):
    """Routes GET requests to the controller, rejects every other method."""

    server: "ControlServer"

    def do_GET(self) -> None:
        self._log_request()
        status = self.server.dispatch(urlsplit(self.path).path)
        self._respond(status, b"ok" if status == 200 else b"error")

    def _reject(self) -> None:
        self._log_request()
        self._respond(405, b"")

    def __getattr__(self, name: str) -> Any:
        # http.server looks up do_<METHOD>, any method but GET is rejected
        if name.startswith("do_"):
            return self._reject
        raise AttributeError(name)

    def _log_request(self) -> None:
        logger.info("[DotLocal] control request", method=self.command, path=self.path)

    def _respond(self, status: int, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if body:
            self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:
        # Requests are already logged before dispatch
        logger.debug("http.server", message=format % args)


class ControlServer(HTTPServer):
    """Single-threaded control listener bound to the loopback interface."""

    timeout = POLL_INTERVAL

    def __init__(
        self,
        address: tuple[str, int],
        controller: DaemonController,
        stop_event: threading.Event | None = None,
    ):
        """Bind the control listener.

        Args:
            address: (host, port) to bind, port 0 picks a free one
            controller: Receiver of ``/restart`` and ``/quit``
            stop_event: Ends :meth:`serve_until_stopped` once set
        """
        super().__init__(address, ControlRequestHandler)
        self.controller = controller
        self.stop_event = stop_event or threading.Event()
        self.fatal_error: DotLocalError | None = None
        self._routes = {
            "/restart": controller.restart,
            "/quit": controller.quit,
        }

    @property
    def port(self) -> int:
        return int(self.server_address[1])

    def dispatch(self, path: str) -> int:
        """Run the operation for ``path``.

        Unknown paths are a no-op. A failing operation is fatal: it is kept
        in :attr:`fatal_error` and the accept loop is stopped.

        Returns:
            HTTP status for the response
        """
        operation = self._routes.get(path)
        if operation is None:
            return 200

        try:
            operation()
        except DotLocalError as e:
            logger.error("Control operation failed", path=path, error=str(e))
            self.fatal_error = e
            self.stop_event.set()
            return 500
        return 200

    def serve_until_stopped(self) -> None:
        """Accept requests until the stop event is set."""
        logger.info("Control plane listening", address=self.server_address)
        while not self.stop_event.is_set():
            self.handle_request()
        logger.info("Control plane stopped")
