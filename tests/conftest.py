"""Shared pytest fixtures for dotlocal tests."""

import pytest

from dotlocal.proxy.caddyfile import CaddyfileBuilder
from dotlocal.proxy.supervisor import ProcessSupervisor
from dotlocal.records.models import DotLocalConfig, Record
from dotlocal.records.store import ConfigStore

LAN_IP = "192.168.1.50"


class FakeHandle:
    """Stand-in for a spawned process."""

    def __init__(self, argv, pid):
        self.argv = argv
        self.pid = pid
        self.returncode = None

    def poll(self):
        return self.returncode

    def terminate(self):
        self.returncode = -15

    def wait(self):
        return self.returncode


class FakeBackend:
    """Process backend that records calls instead of starting processes."""

    def __init__(self):
        self.calls = []
        self.spawned = []
        self.terminated = []
        self.run_returncode = 0
        self.spawn_error = None
        self.terminate_error = None

    def spawn(self, argv, cwd=None, quiet=False):
        self.calls.append(("spawn", list(argv)))
        if self.spawn_error is not None and self.spawn_error(argv):
            raise OSError(f"cannot spawn {argv[0]}")
        handle = FakeHandle(list(argv), 1000 + len(self.spawned))
        self.spawned.append(handle)
        return handle

    def run(self, argv, cwd=None):
        self.calls.append(("run", list(argv)))
        if self.spawn_error is not None and self.spawn_error(argv):
            raise OSError(f"cannot run {argv[0]}")
        return self.run_returncode

    def terminate(self, handle):
        self.calls.append(("terminate", handle.argv))
        if self.terminate_error is not None and self.terminate_error(handle):
            raise ProcessLookupError("no such process")
        handle.terminate()
        self.terminated.append(handle)

    def verbs(self):
        """Proxy verbs in call order, e.g. ['start', 'reload', 'stop']."""
        return [
            argv[1]
            for kind, argv in self.calls
            if kind != "terminate" and argv[0] == "caddy"
        ]

    def helper_argvs(self):
        return [h.argv for h in self.spawned if h.argv[0] == "dns-sd"]


@pytest.fixture(autouse=True)
def fixed_lan_ip(monkeypatch):
    """Keep tests off the network when a config has LAN access enabled."""
    monkeypatch.setattr("dotlocal.common.utils.get_lan_ip", lambda: LAN_IP)
    return LAN_IP


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path / "dotlocal.json")


@pytest.fixture
def caddyfile(tmp_path):
    return CaddyfileBuilder(tmp_path / "Caddyfile")


@pytest.fixture
def supervisor(fake_backend, caddyfile, tmp_path):
    return ProcessSupervisor(
        "caddy", caddyfile, helper_binary="dns-sd", backend=fake_backend, cwd=tmp_path
    )


@pytest.fixture
def sample_config():
    """Local-only config with a default route and a mixed record."""
    return DotLocalConfig(
        records={
            "app.local": Record(domain="app.local", default_port=3000),
            "api.local": Record(
                domain="api.local",
                default_port=4000,
                paths=[("/v1", 4001), ("/v2", 4002)],
            ),
        },
        lan_enabled=False,
    )
