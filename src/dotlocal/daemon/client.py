"""CLI side of the control plane."""

import httpx

from ..common.exceptions import ControlPlaneError
from ..common.logging import get_logger

logger = get_logger(__name__)


class ControlClient:
    """Issues control requests to a locally running daemon.

    No timeout is applied: a daemon busy with a restart answers only once
    the restart has finished.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:2023"):
        self.base_url = base_url.rstrip("/")

    def _get(self, path: str) -> str:
        url = f"{self.base_url}{path}"
        try:
            response = httpx.get(url, timeout=None)
        except httpx.HTTPError as e:
            raise ControlPlaneError(
                f"Could not reach dotlocal daemon at {self.base_url}. "
                f"Is it running? ({e})"
            ) from e

        if response.status_code != 200:
            raise ControlPlaneError(
                f"Daemon answered {path} with HTTP {response.status_code}"
            )

        logger.debug("Control request sent", url=url)
        return response.text

    def restart(self) -> None:
        self._get("/restart")

    def stop(self) -> None:
        self._get("/quit")
