"""Per hardware address traffic counters."""

import threading
from typing import Dict, Optional

from .utils import _is_zero_mac, _normalize_mac


class TrafficStats:
    """Cumulative byte counts keyed by hardware address.

    Counters never decrease while the process lives and
    are independent of the registries: an address may collect bytes before
    it is registered or after it has been removed.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._bytes: Dict[str, int] = {}

    def collect(self, mac: Optional[str], n_bytes: int):
        if _is_zero_mac(mac):
            return
        key = _normalize_mac(mac)
        with self._lock:
            self._bytes[key] = self._bytes.get(key, 0) + n_bytes

    def for_address(self, mac: Optional[str]) -> int:
        if not mac:
            return 0
        with self._lock:
            return self._bytes.get(_normalize_mac(mac), 0)

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._bytes)
