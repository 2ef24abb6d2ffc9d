"""Caddyfile generation from the record set."""

from pathlib import Path

from ..common.exceptions import ConfigWriteError
from ..common.logging import get_logger
from ..common.utils import resolve_ip
from ..records.models import DotLocalConfig
from ..records.store import write_atomically

logger = get_logger(__name__)

# caddy refuses a strictly empty Caddyfile
EMPTY_CADDYFILE = "\n"


class CaddyfileBuilder:
    """Renders a :class:`DotLocalConfig` into the Caddyfile caddy is started with."""

    def __init__(self, path: str | Path):
        """Initialize CaddyfileBuilder.

        Args:
            path: Where the generated Caddyfile is written
        """
        self.path = Path(path)

    def render(self, config: DotLocalConfig, ip: str | None = None) -> str:
        """Render one site block per record in registry order.

        Args:
            config: Configuration to render
            ip: Upstream address, resolved from ``config.lan_enabled`` if None

        Returns:
            Caddyfile text, a single newline when there are no records
        """
        if ip is None:
            ip = resolve_ip(config.lan_enabled)

        blocks = [
            record.to_caddy_block(ip, config.automatic_https_redirect) + "\n"
            for record in config.records_list()
        ]
        if not blocks:
            return EMPTY_CADDYFILE
        return "".join(blocks)

    def build(self, config: DotLocalConfig, ip: str | None = None) -> Path:
        """Render and write the Caddyfile, replacing any previous one.

        Returns:
            Path to the written Caddyfile

        Raises:
            ConfigWriteError: If the Caddyfile cannot be written
        """
        content = self.render(config, ip)
        try:
            write_atomically(self.path, content)
        except OSError as e:
            raise ConfigWriteError(f"Cannot write Caddyfile {self.path}: {e}") from e
        logger.info(
            "Caddyfile written", path=str(self.path), records=len(config.records)
        )
        return self.path
