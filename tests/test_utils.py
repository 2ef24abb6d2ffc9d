"""Tests for common utilities and settings."""

import os
from unittest.mock import MagicMock, patch

import pytest

from dotlocal.common.exceptions import AddressResolutionError, BinaryNotFoundError
from dotlocal.common.settings import DotLocalSettings
from dotlocal.common.utils import (
    LOOPBACK_IP,
    find_binary,
    get_lan_ip,
    resolve_ip,
    validate_port,
)


class TestValidatePort:
    def test_valid_ports(self):
        validate_port(1)
        validate_port(65535)

    @pytest.mark.parametrize("port", [0, -1, 65536, "80"])
    def test_invalid_ports(self, port):
        with pytest.raises(ValueError, match="Port must be between 1 and 65535"):
            validate_port(port)

    def test_custom_name(self):
        with pytest.raises(ValueError, match="Control port"):
            validate_port(0, "Control port")


class TestAddresses:
    def test_resolve_local_is_loopback(self):
        assert resolve_ip(False) == LOOPBACK_IP == "127.0.0.1"

    def test_resolve_lan_uses_lan_address(self, fixed_lan_ip):
        assert resolve_ip(True) == fixed_lan_ip

    @patch("dotlocal.common.utils.socket.socket")
    def test_get_lan_ip_reads_socket_address(self, mock_socket):
        sock = MagicMock()
        sock.getsockname.return_value = ("192.168.0.12", 54321)
        mock_socket.return_value.__enter__.return_value = sock

        assert get_lan_ip() == "192.168.0.12"
        sock.connect.assert_called_once()

    @patch("dotlocal.common.utils.socket.socket")
    def test_get_lan_ip_without_network(self, mock_socket):
        sock = MagicMock()
        sock.connect.side_effect = OSError("Network is unreachable")
        mock_socket.return_value.__enter__.return_value = sock

        with pytest.raises(AddressResolutionError, match="unreachable"):
            get_lan_ip()


class TestFindBinary:
    @pytest.fixture
    def executable(self, tmp_path):
        path = tmp_path / "caddy"
        path.write_text("#!/bin/sh\n")
        os.chmod(path, 0o755)
        return path

    def test_explicit_path(self, executable):
        assert find_binary("caddy", str(executable)) == str(executable)

    def test_explicit_path_must_exist(self, tmp_path):
        with pytest.raises(BinaryNotFoundError):
            find_binary("caddy", str(tmp_path / "missing"))

    def test_explicit_path_must_be_executable(self, tmp_path):
        path = tmp_path / "caddy"
        path.write_text("")
        os.chmod(path, 0o644)

        with pytest.raises(BinaryNotFoundError, match="not executable"):
            find_binary("caddy", str(path))

    @patch("dotlocal.common.utils.shutil.which", return_value="/usr/bin/caddy")
    def test_path_lookup(self, mock_which):
        assert find_binary("caddy") == "/usr/bin/caddy"

    @patch("dotlocal.common.utils.shutil.which", return_value=None)
    def test_common_paths(self, mock_which, tmp_path, executable):
        assert find_binary("caddy", None, [tmp_path / "nope", executable]) == str(
            executable
        )

    @patch("dotlocal.common.utils.shutil.which", return_value=None)
    def test_not_found(self, mock_which):
        with pytest.raises(BinaryNotFoundError, match="caddy binary not found"):
            find_binary("caddy")


class TestSettings:
    """Test DotLocalSettings"""

    def test_defaults(self):
        settings = DotLocalSettings()

        assert settings.control_url == "http://127.0.0.1:2023"
        assert settings.config_path == settings.root / "dotlocal.json"
        assert settings.caddyfile_path == settings.root / "Caddyfile"
        assert settings.helper_binary == "dns-sd"

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DOTLOCAL_HOME", str(tmp_path))
        monkeypatch.setenv("DOTLOCAL_CONTROL_PORT", "3023")
        monkeypatch.setenv("DOTLOCAL_LOG_LEVEL", "debug")

        settings = DotLocalSettings.from_env()

        assert settings.root == tmp_path
        assert settings.control_port == 3023
        assert settings.log_level == "DEBUG"

    def test_overrides_win_over_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DOTLOCAL_HOME", "/somewhere/else")

        settings = DotLocalSettings.from_env(root=tmp_path, log_level=None)

        assert settings.root == tmp_path
        assert settings.log_level == "INFO"

    def test_root_expands_user(self):
        settings = DotLocalSettings(root="~/dotlocal-test")

        assert "~" not in str(settings.root)

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            DotLocalSettings(control_port=0)
        with pytest.raises(ValueError):
            DotLocalSettings(log_level="LOUD")
        with pytest.raises(ValueError):
            DotLocalSettings(unknown=True)
