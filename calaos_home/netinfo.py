"""Description of a network interface and its JSON form."""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from typing import Any

log = logging.getLogger(__name__)


def netmask_to_cidr(netmask: str) -> int:
    """Count the leading one bits of a dotted IPv4 netmask; invalid gives 0."""
    try:
        mask = int(ipaddress.IPv4Address(netmask))
    except ValueError:
        return 0
    cidr = 0
    while cidr < 32 and mask & (1 << (31 - cidr)):
        cidr += 1
    return cidr


def _split_list(text: str) -> list[str]:
    return [part.strip() for part in text.split(",") if part]


@dataclass
class NetworkInfo:
    """Settings of one network interface."""

    netinterface: str = ""
    ipv4: str = ""
    netmask: str = ""
    ipv6: str = ""
    mac: str = ""
    gateway: str = ""
    netstate: str = ""
    is_dhcp: bool = False
    dns_servers: str = ""
    search_domains: str = ""
    is_loopback: bool = False

    def set_ipv4_cidr(self, cidr: str) -> None:
        """Set address and netmask from ``a.b.c.d/prefix``; invalid input is ignored."""
        parts = cidr.split("/")
        if len(parts) != 2:
            log.warning("invalid CIDR format: %s", cidr)
            return
        address, prefix_text = parts
        try:
            prefix = int(prefix_text)
        except ValueError:
            prefix = 0
        if not 0 <= prefix <= 32:
            log.warning("invalid prefix length: %d", prefix)
            return
        mask = (0xFFFFFFFF << (32 - prefix)) & 0xFFFFFFFF
        self.ipv4 = address
        self.netmask = str(ipaddress.IPv4Address(mask))

    def to_json(self) -> dict[str, Any]:
        """JSON-ready dictionary of the interface settings."""
        return {
            "name": self.netinterface,
            "ipv4": f"{self.ipv4}/{netmask_to_cidr(self.netmask)}",
            "gateway": self.gateway,
            "dhcp": self.is_dhcp,
            "dns_servers": _split_list(self.dns_servers),
            "search_domains": _split_list(self.search_domains),
        }