"""Tests for server startup: port check, LAN discovery, logging setup."""

import logging
import socket
from unittest.mock import patch

import pytest
from rich.logging import RichHandler

from filedrop.api.app import run_server
from filedrop.config import Settings
from filedrop.logging_setup import setup_logging
from filedrop.network import get_local_ip_addresses, is_port_in_use


# ---------------------------------------------------------------------------
# run_server
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path):
    return Settings(storage_dir=tmp_path / "uploads", port=3999)


class TestRunServer:
    @patch("filedrop.network.is_port_in_use", return_value=True)
    def test_port_in_use(self, _mock, settings, caplog):
        with patch("uvicorn.run") as uv_run, caplog.at_level(logging.ERROR):
            assert run_server(settings) == 1
        uv_run.assert_not_called()
        assert "3999" in caplog.text

    @patch("filedrop.network.get_local_ip_addresses", return_value=["192.168.1.20"])
    @patch("filedrop.network.is_port_in_use", return_value=False)
    def test_starts_uvicorn(self, _port, _ips, settings, capsys):
        with patch("uvicorn.run") as uv_run:
            assert run_server(settings) == 0
        kwargs = uv_run.call_args.kwargs
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 3999
        assert kwargs["log_config"] is None
        assert "http://192.168.1.20:3999" in capsys.readouterr().out
        assert settings.storage_dir.is_dir()


# ---------------------------------------------------------------------------
# Network helpers
# ---------------------------------------------------------------------------


class TestNetwork:
    def test_port_in_use(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 0))
            s.listen(1)
            port = s.getsockname()[1]
            assert is_port_in_use(port) is True

    def test_port_free(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 0))
            port = s.getsockname()[1]
        assert is_port_in_use(port) is False

    def test_loopback_excluded(self):
        with patch("filedrop.network._primary_ip", return_value="127.0.0.1"), patch(
            "socket.getaddrinfo",
            return_value=[(socket.AF_INET, 0, 0, "", ("10.0.0.7", 0))],
        ):
            assert get_local_ip_addresses() == ["10.0.0.7"]

    def test_no_network(self):
        with patch("filedrop.network._primary_ip", return_value=None), patch(
            "socket.getaddrinfo", side_effect=OSError("no route")
        ):
            assert get_local_ip_addresses() == []

    def test_primary_first_no_duplicates(self):
        with patch("filedrop.network._primary_ip", return_value="192.168.1.20"), patch(
            "socket.getaddrinfo",
            return_value=[
                (socket.AF_INET, 0, 0, "", ("10.0.0.7", 0)),
                (socket.AF_INET, 0, 0, "", ("192.168.1.20", 0)),
            ],
        ):
            assert get_local_ip_addresses() == ["192.168.1.20", "10.0.0.7"]


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    def test_single_rich_handler(self, restore_root_logger):
        setup_logging("DEBUG")
        setup_logging("WARNING")
        rich = [h for h in restore_root_logger.handlers if isinstance(h, RichHandler)]
        assert len(rich) == 1
        assert restore_root_logger.level == logging.WARNING

    def test_uvicorn_routed_through_root(self, restore_root_logger):
        logging.getLogger("uvicorn.access").addHandler(logging.NullHandler())
        setup_logging()
        access = logging.getLogger("uvicorn.access")
        assert access.handlers == []
        assert access.propagate is True
