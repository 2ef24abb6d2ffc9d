"""Record model, registry and persistence."""

from .entry import ProxyEntry, parse_entries, parse_entry
from .models import NO_DEFAULT_PORT, DotLocalConfig, Record
from .operations import (
    add_proxies,
    remove_all_proxies,
    remove_proxies,
    set_https_redirect,
    set_lan_access,
)
from .registry import RecordRegistry
from .store import ConfigStore, write_atomically

__all__ = [
    "Record",
    "DotLocalConfig",
    "NO_DEFAULT_PORT",
    "ProxyEntry",
    "parse_entry",
    "parse_entries",
    "RecordRegistry",
    "ConfigStore",
    "write_atomically",
    "add_proxies",
    "remove_proxies",
    "remove_all_proxies",
    "set_lan_access",
    "set_https_redirect",
]
