"""Tests for the loopback control server."""

import threading
from unittest.mock import Mock

import httpx
import pytest

from dotlocal.common.exceptions import ProcessError
from dotlocal.daemon.server import ControlServer


@pytest.fixture
def controller():
    return Mock(spec=["restart", "quit"])


@pytest.fixture
def control_server(controller):
    """ControlServer on an ephemeral port, served from a background thread."""
    server = ControlServer(("127.0.0.1", 0), controller)
    thread = threading.Thread(target=server.serve_until_stopped, daemon=True)
    thread.start()
    yield server
    server.stop_event.set()
    thread.join(timeout=5)
    server.server_close()


def _url(server: ControlServer, path: str) -> str:
    return f"http://127.0.0.1:{server.port}{path}"


class TestControlServer:
    """Test control plane routing"""

    def test_restart(self, control_server, controller):
        response = httpx.get(_url(control_server, "/restart"))

        assert response.status_code == 200
        assert response.text == "ok"
        controller.restart.assert_called_once_with()
        controller.quit.assert_not_called()

    def test_unknown_path_is_a_no_op(self, control_server, controller):
        response = httpx.get(_url(control_server, "/status"))

        assert response.status_code == 200
        assert response.text == "ok"
        controller.restart.assert_not_called()
        controller.quit.assert_not_called()

    def test_query_string_is_ignored_for_routing(self, control_server, controller):
        httpx.get(_url(control_server, "/restart?now=1"))

        controller.restart.assert_called_once()

    @pytest.mark.parametrize(
        "method",
        ["POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "TRACE", "PURGE"],
    )
    def test_non_get_is_rejected(self, control_server, controller, method):
        response = httpx.request(method, _url(control_server, "/restart"))

        assert response.status_code == 405
        controller.restart.assert_not_called()

    def test_quit_answers_then_stops_loop(self, controller):
        server = ControlServer(("127.0.0.1", 0), controller)
        controller.quit.side_effect = server.stop_event.set
        thread = threading.Thread(target=server.serve_until_stopped, daemon=True)
        thread.start()

        response = httpx.get(_url(server, "/quit"))
        thread.join(timeout=5)
        server.server_close()

        assert response.status_code == 200
        assert response.text == "ok"
        assert not thread.is_alive()

    def test_failed_operation_is_fatal(self, controller):
        server = ControlServer(("127.0.0.1", 0), controller)
        controller.restart.side_effect = ProcessError("reload failed")
        thread = threading.Thread(target=server.serve_until_stopped, daemon=True)
        thread.start()

        response = httpx.get(_url(server, "/restart"))
        thread.join(timeout=5)
        server.server_close()

        assert response.status_code == 500
        assert isinstance(server.fatal_error, ProcessError)
        assert not thread.is_alive()

    def test_requests_are_logged_before_dispatch(self, control_server, controller):
        from unittest.mock import patch  # noqa: PLC0415

        with patch("dotlocal.daemon.server.logger") as mock_logger:
            httpx.get(_url(control_server, "/restart"))

        mock_logger.info.assert_any_call(
            "[DotLocal] control request", method="GET", path="/restart"
        )
