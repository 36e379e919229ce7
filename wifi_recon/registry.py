"""Live endpoint registry shared by the LAN host table and the WiFi station table.

One ``EndpointRegistry`` class serves both: the differences between Ethernet
hosts and 802.11 stations are captured by a small ``RegistryKind`` record
(key extraction, name update policy, membership test, which optional fields
exist) instead of subclasses.
"""

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Set

from .aliases import AliasStore
from .constants import _MISSED_AFTER
from .errors import SerializationError
from .lookup import get_oui_vendor
from .utils import _iso, _normalize_mac

logger = logging.getLogger(__name__)


@dataclass
class Interface:
    """Descriptor of the local network interface a registry is bound to."""
    name: str
    hw_address: str = ""
    ip_address: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "mac": _normalize_mac(self.hw_address),
            "ipv4": self.ip_address,
        }


@dataclass
class Endpoint:
    hw_address: str
    first_seen: float
    last_seen: float
    ip_address: str = ""
    hostname: str = ""
    vendor: str = ""
    channel: int = 0

    @property
    def essid(self) -> str:
        return self.hostname

    @property
    def display_name(self) -> str:
        return self.hostname or self.vendor or ""

    def to_dict(self, kind: "RegistryKind", alias: str = "") -> dict:
        d = {
            "mac": self.hw_address,
            "hostname": self.hostname,
            "alias": alias,
            "vendor": self.vendor,
            "first_seen": _iso(self.first_seen),
            "last_seen": _iso(self.last_seen),
        }
        if kind.has_network_address:
            d["ipv4"] = self.ip_address
        if kind.has_channel:
            d["channel"] = self.channel
        return d


EndpointCallback = Callable[[Endpoint], None]


class RegistryKind(NamedTuple):
    name: str
    key: Callable[[str], str]
    accepts_name: Callable[[Endpoint, str, bool], bool]
    matches: Callable[[Endpoint, str], bool]
    has_network_address: bool
    has_channel: bool


def _first_name_wins(endpoint: Endpoint, name: str, has_name: bool) -> bool:
    # data frames carry no SSID, beacons do: keep the first one we get
    return has_name and bool(name) and not endpoint.hostname


def _match_hw(endpoint: Endpoint, query: str) -> bool:
    return endpoint.hw_address == _normalize_mac(query)


def _match_hw_or_ip(endpoint: Endpoint, query: str) -> bool:
    return _match_hw(endpoint, query) or (
        bool(endpoint.ip_address) and endpoint.ip_address == query)


LAN = RegistryKind(
    name="lan",
    key=_normalize_mac,
    accepts_name=_first_name_wins,
    matches=_match_hw_or_ip,
    has_network_address=True,
    has_channel=False,
)

WIFI = RegistryKind(
    name="wifi",
    key=_normalize_mac,
    accepts_name=_first_name_wins,
    matches=_match_hw,
    has_network_address=False,
    has_channel=True,
)


class EndpointRegistry:
    """Thread-safe table of live endpoints keyed by hardware address.

    ``on_new`` fires once per endpoint creation.  ``on_lost`` fires once when
    an endpoint goes from present to missed; that transition is detected
    lazily by ``was_missed()`` rather than by a timer.  Callbacks run outside
    the registry lock so they may call back into the registry.
    """

    def __init__(self, kind: RegistryKind, iface: Interface,
                 on_new: Optional[EndpointCallback] = None,
                 on_lost: Optional[EndpointCallback] = None,
                 aliases: Optional[AliasStore] = None,
                 gateway: Optional[Endpoint] = None,
                 missed_after: float = _MISSED_AFTER,
                 clock: Callable[[], float] = time.time,
                 vendor_lookup: Callable[[str], Optional[str]] = get_oui_vendor):
        self.kind = kind
        self.iface = iface
        self.gateway = gateway
        self.missed_after = missed_after
        self._aliases = aliases if aliases is not None else AliasStore()
        self._on_new = on_new
        self._on_lost = on_lost
        self._clock = clock
        self._vendor_lookup = vendor_lookup
        self._lock = threading.Lock()
        self._endpoints: Dict[str, Endpoint] = {}
        self._lost: Set[str] = set()

    @property
    def aliases(self) -> AliasStore:
        return self._aliases

    def add_if_new(self, name: str, mac: str, has_name: bool,
                   channel: int = 0, ip: str = "") -> Endpoint:
        key = self.kind.key(mac)
        now = self._clock()
        with self._lock:
            endpoint = self._endpoints.get(key)
            if endpoint is not None:
                endpoint.last_seen = now
                if channel:
                    endpoint.channel = channel
                if self.kind.accepts_name(endpoint, name, has_name):
                    endpoint.hostname = name
                if ip and self.kind.has_network_address:
                    endpoint.ip_address = ip
                self._lost.discard(key)
                return endpoint

            endpoint = Endpoint(
                hw_address=key,
                first_seen=now,
                last_seen=now,
                ip_address=ip if self.kind.has_network_address else "",
                hostname=name if has_name else "",
                vendor=self._vendor_lookup(key) or "",
                channel=channel,
            )
            self._endpoints[key] = endpoint

        logger.debug("new %s endpoint %s %s", self.kind.name, key, endpoint.hostname)
        if self._on_new is not None:
            self._on_new(endpoint)
        return endpoint

    def get(self, mac: str) -> Optional[Endpoint]:
        with self._lock:
            return self._endpoints.get(self.kind.key(mac))

    def list(self) -> List[Endpoint]:
        with self._lock:
            return list(self._endpoints.values())

    def has(self, addr: str) -> bool:
        with self._lock:
            return any(self.kind.matches(e, addr) for e in self._endpoints.values())

    def set_alias_for(self, mac: str, alias: str) -> bool:
        key = self.kind.key(mac)
        with self._lock:
            if key not in self._endpoints:
                return False
        return self._aliases.set(key, alias)

    def was_missed(self, mac: str) -> bool:
        key = self.kind.key(mac)
        lost = None
        with self._lock:
            endpoint = self._endpoints.get(key)
            if endpoint is None:
                return False
            missed = self._clock() - endpoint.last_seen > self.missed_after
            if missed and key not in self._lost:
                self._lost.add(key)
                lost = endpoint

        if lost is not None:
            logger.debug("%s endpoint %s missed", self.kind.name, key)
            if self._on_lost is not None:
                self._on_lost(lost)
        return missed

    def prune_missed(self) -> List[Endpoint]:
        """Evaluate liveness of every endpoint; return the missed ones."""
        return [e for e in self.list() if self.was_missed(e.hw_address)]

    def remove(self, mac: str) -> Optional[Endpoint]:
        key = self.kind.key(mac)
        with self._lock:
            self._lost.discard(key)
            return self._endpoints.pop(key, None)

    def clear(self):
        with self._lock:
            self._endpoints.clear()
            self._lost.clear()

    def to_dict(self) -> dict:
        aliases = self._aliases.to_dict()
        d = {"interface": self.iface.to_dict()}
        if self.kind.has_network_address:
            d["gateway"] = (self.gateway.to_dict(self.kind,
                                                 aliases.get(self.gateway.hw_address, ""))
                            if self.gateway is not None else None)
        d["hosts"] = [e.to_dict(self.kind, aliases.get(e.hw_address, ""))
                      for e in self.list()]
        d["aliases"] = aliases
        return d

    def to_json(self) -> str:
        try:
            return json.dumps(self.to_dict())
        except (TypeError, ValueError) as e:
            raise SerializationError(f"could not encode {self.kind.name} registry: {e}") from e

    def __len__(self) -> int:
        with self._lock:
            return len(self._endpoints)

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self.list())

    def __contains__(self, mac: str) -> bool:
        return self.get(mac) is not None


def new_lan(iface: Interface, gateway: Optional[Endpoint],
            on_new: Optional[EndpointCallback] = None,
            on_lost: Optional[EndpointCallback] = None,
            **kwargs) -> EndpointRegistry:
    return EndpointRegistry(LAN, iface, on_new, on_lost, gateway=gateway, **kwargs)


def new_wifi(iface: Interface,
             on_new: Optional[EndpointCallback] = None,
             on_lost: Optional[EndpointCallback] = None,
             **kwargs) -> EndpointRegistry:
    return EndpointRegistry(WIFI, iface, on_new, on_lost, **kwargs)
