"""
Local Address Registry Module

Tracks which IP addresses count as local to this host. The web layer uses
it to decide whether a request comes from the machine itself; a forced bind
interface must be registered here before bootstrap completes.
"""

from __future__ import annotations

import ipaddress
import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class LocalAddressRegistry:
    """Set of addresses treated as local, seeded with loopback ranges."""

    def __init__(self):
        self._lock = threading.Lock()
        self._extra: set[str] = set()

    def add(self, address: str) -> None:
        """Register an additional local address."""
        with self._lock:
            self._extra.add(address)
        logger.debug(f"Registered local address: {address}")

    def is_local(self, address: str) -> bool:
        """
        Check whether an address belongs to this host.

        Loopback and private ranges are always local; anything else only when
        registered.
        """
        if address.startswith("::ffff:"):
            address = address[len("::ffff:"):]
        with self._lock:
            if address in self._extra:
                return True
        try:
            ip = ipaddress.ip_address(address)
        except ValueError:
            return False
        return ip.is_loopback or ip.is_private

    @property
    def registered(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._extra)


# Global registry instance
_registry: Optional[LocalAddressRegistry] = None


def get_local_address_registry() -> LocalAddressRegistry:
    """
    Get the global local-address registry.

    Returns:
        LocalAddressRegistry: The registry instance.
    """
    global _registry
    if _registry is None:
        _registry = LocalAddressRegistry()
    return _registry
