"""Parsing of `domain[/path]:port` proxy entries."""

import re
from dataclasses import dataclass

from ..common.exceptions import EntryParseError
from ..common.utils import validate_port

_PORT_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ProxyEntry:
    """A parsed proxy entry. ``path`` is None for a default route."""

    domain: str
    port: int
    path: str | None = None

    @property
    def is_path_route(self) -> bool:
        return self.path is not None


def parse_entry(entry: str) -> ProxyEntry:
    """Parse ``domain[/pathRemainder]:port``.

    The port is split off at the first ``:`` and the path remainder at the
    first ``/`` of what is left. A present remainder is re-prefixed with ``/``
    so ``app.local/api:4000`` routes ``/api``.

    Raises:
        EntryParseError: If the entry has no port, the port is not an
            integer in 1-65535 or the domain is empty
    """
    target, sep, port_text = entry.partition(":")
    if not sep:
        raise EntryParseError(entry, "expected the form domain[/path]:port")

    port_text = port_text.strip()
    if not _PORT_PATTERN.fullmatch(port_text):
        raise EntryParseError(entry, "port part should be a number")
    port = int(port_text)

    try:
        validate_port(port)
    except ValueError as e:
        raise EntryParseError(entry, str(e)) from e

    domain, slash, remainder = target.partition("/")
    domain = domain.strip()
    if not domain:
        raise EntryParseError(entry, "domain cannot be empty")

    path = f"/{remainder}" if slash else None
    return ProxyEntry(domain=domain, port=port, path=path)


def parse_entries(entries: list[str]) -> list[ProxyEntry]:
    """Parse a whole batch, failing before anything is applied."""
    return [parse_entry(entry) for entry in entries]
