"""Source address validation against the configured allow-list."""
import ipaddress

import structlog

from ..config import ListenerConfig
from ..metrics import Metrics

log = structlog.get_logger()


class SourceValidator:
    """Decides whether a caller address may submit events."""

    def __init__(self, config: ListenerConfig, metrics: Metrics | None = None):
        self.networks = config.valid_ips
        self.metrics = metrics

    def valid_ip(self, address: str | None) -> bool:
        """
        Check an address against the allow-list.

        An empty allow-list disables the check, so every address is valid.
        Addresses that cannot be parsed are never valid.
        """
        if not self.networks:
            return True

        try:
            ip = ipaddress.ip_address(address or "")
        except ValueError:
            return False

        # Dual-stack sockets report IPv4 clients as ::ffff:a.b.c.d
        if ip.version == 6 and ip.ipv4_mapped:
            ip = ip.ipv4_mapped

        return any(ip in network for network in self.networks)

    def check(self, address: str | None) -> bool:
        """Validate an address, recording the result."""
        valid = self.valid_ip(address)
        if self.metrics is not None:
            self.metrics.record_ip_check(valid)
        if not valid:
            log.info("ip.invalid", address=address)
        return valid
