"""In-memory domain to route mapping with add/remove semantics."""

from ..common.logging import get_logger
from .entry import ProxyEntry
from .models import NO_DEFAULT_PORT, Record

logger = get_logger(__name__)


class RecordRegistry:
    """Applies proxy entries to a record mapping.

    The registry works on the mapping it is given, so wrapping
    ``DotLocalConfig.records`` mutates the configuration in place. The mapping
    keeps insertion order, which is the order site blocks are generated in.
    """

    def __init__(self, records: dict[str, Record] | None = None):
        self.records: dict[str, Record] = records if records is not None else {}

    def add(self, entry: ProxyEntry) -> Record:
        """Add a route.

        A default route sets or overwrites the domain's default port and
        leaves its path routes alone. A path route replaces any route with the
        same prefix and is appended last.

        Returns:
            The created or updated record
        """
        record = self.records.get(entry.domain)

        if entry.path is None:
            if record is None:
                record = Record(domain=entry.domain, default_port=entry.port)
                self.records[entry.domain] = record
            else:
                record.default_port = entry.port
        else:
            route = (entry.path, entry.port)
            if record is None:
                record = Record(domain=entry.domain, paths=[route])
                self.records[entry.domain] = record
            else:
                record.paths = [p for p in record.paths if p[0] != entry.path] + [
                    route
                ]

        logger.debug(
            "Route added", domain=entry.domain, path=entry.path, port=entry.port
        )
        return record

    def remove(self, entry: ProxyEntry) -> None:
        """Remove a route if it exists.

        Unknown domains are ignored. A path route is removed only when both
        prefix and port match. A default route is removed only when the port
        matches; a record that still has path routes is demoted to path-only,
        otherwise it is deleted.
        """
        record = self.records.get(entry.domain)
        if record is None:
            logger.debug("No record to remove", domain=entry.domain)
            return

        if entry.path is not None:
            record.paths = [p for p in record.paths if p != (entry.path, entry.port)]
        elif entry.port == record.default_port:
            record.default_port = NO_DEFAULT_PORT

        if record.is_empty:
            del self.records[entry.domain]
            logger.debug("Record deleted", domain=entry.domain)

    def add_all(self, entries: list[ProxyEntry]) -> None:
        for entry in entries:
            self.add(entry)

    def remove_all(self, entries: list[ProxyEntry]) -> None:
        for entry in entries:
            self.remove(entry)

    def clear(self) -> None:
        self.records.clear()

    def get(self, domain: str) -> Record | None:
        return self.records.get(domain)

    def domains(self) -> list[str]:
        return list(self.records)

    def __len__(self) -> int:
        return len(self.records)
