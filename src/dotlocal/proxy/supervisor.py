"""Supervision of the caddy process and the per-domain dns-sd helpers."""

import time
from pathlib import Path

from ..common.exceptions import ProcessError
from ..common.logging import get_logger
from ..common.utils import resolve_ip
from ..records.models import DotLocalConfig
from .caddyfile import CaddyfileBuilder
from .process import ProcessBackend, ProcessHandle, SubprocessBackend

logger = get_logger(__name__)

HELPER_SERVICE_TYPE = "_http._tcp"
HELPER_ADVERTISED_PORT = 80
LOCAL_SUFFIX = ".local"


class ProcessSupervisor:
    """Owns the caddy process and one name advertisement helper per domain.

    The helper set is replaced as a whole on every (re)start, it is never
    patched incrementally. Callers must not use one supervisor from more
    than one thread.
    """

    def __init__(
        self,
        proxy_binary: str,
        caddyfile: CaddyfileBuilder,
        helper_binary: str = "dns-sd",
        backend: ProcessBackend | None = None,
        cwd: Path | None = None,
    ):
        """Initialize ProcessSupervisor.

        Args:
            proxy_binary: Path to the caddy binary
            caddyfile: Builder for the Caddyfile caddy is pointed at
            helper_binary: Name advertisement helper, looked up on PATH
            backend: Process backend, real subprocesses by default
            cwd: Working directory for every spawned process
        """
        self.proxy_binary = proxy_binary
        self.caddyfile = caddyfile
        self.helper_binary = helper_binary
        self.backend: ProcessBackend = backend or SubprocessBackend()
        self.cwd = cwd
        self._helpers: dict[str, ProcessHandle] = {}

    @property
    def helpers(self) -> dict[str, ProcessHandle]:
        """Currently supervised helpers by domain."""
        return dict(self._helpers)

    # Proxy process

    def proxy_command(self, verb: str) -> list[str]:
        argv = [self.proxy_binary, verb]
        if verb in ("start", "run", "reload"):
            argv += ["--config", str(self.caddyfile.path), "--adapter", "caddyfile"]
        return argv

    def _spawn_proxy_verb(self, verb: str) -> ProcessHandle:
        argv = self.proxy_command(verb)
        try:
            return self.backend.spawn(argv, cwd=self.cwd, quiet=True)
        except OSError as e:
            logger.error("Failed to issue proxy verb", verb=verb, error=str(e))
            raise ProcessError(f"Failed to run '{' '.join(argv)}': {e}") from e

    def _run_proxy_verb(self, verb: str) -> int:
        argv = self.proxy_command(verb)
        try:
            returncode = self.backend.run(argv, cwd=self.cwd)
        except OSError as e:
            logger.error("Failed to issue proxy verb", verb=verb, error=str(e))
            raise ProcessError(f"Failed to run '{' '.join(argv)}': {e}") from e

        if returncode != 0:
            logger.warning("Proxy verb exited non-zero", verb=verb, returncode=returncode)
        return returncode

    def start_proxy(self) -> None:
        """Launch caddy in the background with the current Caddyfile."""
        handle = self._spawn_proxy_verb("start")
        logger.info("Proxy started", pid=handle.pid)

    def reload_proxy(self) -> None:
        """Ask caddy to reload its Caddyfile. Does not wait for the result."""
        self._spawn_proxy_verb("reload")
        logger.info("Proxy reload issued")

    def stop_proxy(self) -> None:
        """Stop caddy and wait for the stop command to finish."""
        self._run_proxy_verb("stop")
        logger.info("Proxy stopped")

    # Helper processes

    def helper_command(self, domain: str, ip: str) -> list[str]:
        name = domain.removesuffix(LOCAL_SUFFIX)
        return [
            self.helper_binary,
            "-P",
            name,
            HELPER_SERVICE_TYPE,
            "",
            str(HELPER_ADVERTISED_PORT),
            domain,
            ip,
        ]

    def spawn_helpers(
        self, config: DotLocalConfig, ip: str | None = None
    ) -> dict[str, ProcessHandle]:
        """Spawn one helper per unique domain.

        A helper that fails to spawn is logged and skipped, leaving that
        domain unadvertised.

        Returns:
            Spawned handles by domain
        """
        if ip is None:
            ip = resolve_ip(config.lan_enabled)

        handles: dict[str, ProcessHandle] = {}
        for record in config.records_list():
            if record.domain in handles:
                continue

            try:
                handle = self.backend.spawn(
                    self.helper_command(record.domain, ip), cwd=self.cwd
                )
            except OSError as e:
                logger.error(
                    "Error spawning dns responder", domain=record.domain, error=str(e)
                )
                continue

            handles[record.domain] = handle
            logger.debug("Helper spawned", domain=record.domain, pid=handle.pid)

        return handles

    def stop_all_helpers(self) -> None:
        """Terminate every helper, ignoring individual failures."""
        for domain, handle in self._helpers.items():
            try:
                self.backend.terminate(handle)
            except OSError as e:
                logger.warning("Failed to stop helper", domain=domain, error=str(e))
        self._helpers = {}

    # Lifecycle

    def start(self, config: DotLocalConfig) -> None:
        """Write the Caddyfile, launch caddy and advertise every domain."""
        ip = resolve_ip(config.lan_enabled)
        self.caddyfile.build(config, ip)
        self.start_proxy()
        self._helpers = self.spawn_helpers(config, ip)
        logger.info("Started proxy successfully", helpers=len(self._helpers))

    def restart(self, config: DotLocalConfig) -> None:
        """Regenerate the Caddyfile, reload caddy and respawn all helpers."""
        ip = resolve_ip(config.lan_enabled)
        self.caddyfile.build(config, ip)
        self.reload_proxy()
        self.stop_all_helpers()
        self._helpers = self.spawn_helpers(config, ip)
        logger.info("Proxy restarted", helpers=len(self._helpers))

    def shutdown(self) -> None:
        """Stop all helpers, then caddy."""
        self.stop_all_helpers()
        self.stop_proxy()

    def trust(self, config: DotLocalConfig, settle_seconds: float = 2.0) -> int:
        """Install caddy's local CA into the system trust store.

        caddy has to be running for ``trust`` to find its CA, so a foreground
        caddy is started for the duration of the call.

        Returns:
            Exit code of ``caddy trust``
        """
        self.caddyfile.build(config)
        server = self._spawn_proxy_verb("run")
        try:
            time.sleep(settle_seconds)
            returncode = self._run_proxy_verb("trust")
        finally:
            self.backend.terminate(server)
        logger.info("Local certificate authority trusted", returncode=returncode)
        return returncode
