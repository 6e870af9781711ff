# Network discovery — LAN addresses for the startup banner, port checks.
# Created: 2026-10-19

from __future__ import annotations

import ipaddress
import logging
import socket

logger = logging.getLogger(__name__)


def _primary_ip() -> str | None:
    """IP of the interface that carries the default route.

    A UDP connect sends no packets; it only makes the OS pick a source address.
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect(("8.8.8.8", 80))
            return s.getsockname()[0]
    except OSError:
        return None


def get_local_ip_addresses() -> list[str]:
    """Non-loopback IPv4 addresses of this machine, primary first."""
    found: list[str] = []
    primary = _primary_ip()
    if primary:
        found.append(primary)

    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError as e:
        logger.debug("Hostname lookup failed: %s", e)
        infos = []

    for info in infos:
        ip = info[4][0]
        if ip not in found:
            found.append(ip)

    return [ip for ip in found if not ipaddress.ip_address(ip).is_loopback]


def is_port_in_use(port: int, host: str = "127.0.0.1") -> bool:
    """True if something already accepts connections on *host*:*port*."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.settimeout(0.5)
        return s.connect_ex((host, port)) == 0
