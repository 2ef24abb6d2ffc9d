"""Persisted mutations behind the `add`, `remove`, `access` and `https` commands.

Each operation loads the configuration fresh from disk, applies the whole
batch and saves exactly once. Entries are parsed before anything is applied,
so a malformed entry leaves the file untouched.
"""

from ..common.logging import get_logger
from .entry import parse_entries
from .models import DotLocalConfig
from .registry import RecordRegistry
from .store import ConfigStore

logger = get_logger(__name__)


def add_proxies(store: ConfigStore, entries: list[str]) -> DotLocalConfig:
    parsed = parse_entries(entries)
    config = store.load()
    RecordRegistry(config.records).add_all(parsed)
    store.save(config)
    logger.debug("Added proxies", count=len(parsed))
    return config


def remove_proxies(store: ConfigStore, entries: list[str]) -> DotLocalConfig:
    parsed = parse_entries(entries)
    config = store.load()
    RecordRegistry(config.records).remove_all(parsed)
    store.save(config)
    logger.debug("Removed proxies", count=len(parsed))
    return config


def remove_all_proxies(store: ConfigStore) -> DotLocalConfig:
    config = store.load()
    RecordRegistry(config.records).clear()
    store.save(config)
    logger.debug("Removed all proxies")
    return config


def set_lan_access(store: ConfigStore, enabled: bool) -> DotLocalConfig:
    """Bind routes to the LAN address when enabled, to loopback otherwise."""
    config = store.load()
    config.lan_enabled = enabled
    store.save(config)
    logger.debug("Access changed", lan_enabled=enabled)
    return config


def set_https_redirect(store: ConfigStore, automatic: bool) -> DotLocalConfig:
    config = store.load()
    config.automatic_https_redirect = automatic
    store.save(config)
    logger.debug("HTTPS redirect changed", automatic_https_redirect=automatic)
    return config
