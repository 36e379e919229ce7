"""Monitor-mode capture device for wifi-recon.

The device is the only thing in the engine that touches the radio: the
capture loop reads from it and the deauth routine writes to it.
"""

import logging
import os
import select
import subprocess
from typing import Callable, List, Optional, Tuple

from scapy.config import conf
from scapy.error import Scapy_Exception

from .constants import _READ_TIMEOUT, _SNAPLEN
from .errors import ConfigurationError, TransientIOError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Interface helpers
# ---------------------------------------------------------------------------

def find_wireless_interfaces() -> List[str]:
    """Discover wireless interfaces via iw or /sys/class/net."""
    try:
        r = subprocess.run(["iw", "dev"], capture_output=True, text=True, timeout=5)
        ifaces = []
        for line in r.stdout.splitlines():
            s = line.strip()
            if s.startswith("Interface "):
                ifaces.append(s[len("Interface "):].strip())
        if ifaces:
            return ifaces
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("iw dev failed: %s", e)
    try:
        return [
            iface for iface in os.listdir("/sys/class/net")
            if os.path.exists(f"/sys/class/net/{iface}/wireless")
        ]
    except OSError:
        return []


def get_interface_mode(iface: str) -> Optional[str]:
    """Return the current iw mode of an interface (e.g. 'managed', 'monitor')."""
    try:
        r = subprocess.run(["iw", "dev", iface, "info"],
                           capture_output=True, text=True, timeout=5)
    except (OSError, subprocess.SubprocessError):
        return None
    for line in r.stdout.splitlines():
        s = line.strip()
        if s.startswith("type "):
            return s[5:].strip()
    return None


def _run_quiet(*cmds: List[str]):
    for cmd in cmds:
        try:
            subprocess.run(cmd, capture_output=True, timeout=5)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("%s failed: %s", " ".join(cmd), e)


def setup_monitor(iface: str) -> Tuple[str, Callable[[], None]]:
    """Put ``iface`` (or a virtual sibling) into monitor mode.

    Strategy (in order):
    1. Already in monitor mode: use it as-is, nothing to undo.
    2. Add a virtual ``<iface>mon`` monitor interface next to the managed one.
    3. Switch ``iface`` itself to monitor mode.

    Returns ``(monitor_iface, cleanup_fn)``; ``cleanup_fn()`` undoes whatever
    was set up.  Raises RuntimeError when no strategy works.
    """
    if get_interface_mode(iface) == "monitor":
        return iface, lambda: None

    mon_iface = iface + "mon"
    try:
        subprocess.run(
            ["iw", "dev", iface, "interface", "add", mon_iface, "type", "monitor"],
            check=True, capture_output=True, timeout=10,
        )
        subprocess.run(["ip", "link", "set", mon_iface, "up"],
                       check=True, capture_output=True, timeout=10)

        def _cleanup_virtual():
            _run_quiet(["ip", "link", "set", mon_iface, "down"],
                       ["iw", "dev", mon_iface, "del"])

        return mon_iface, _cleanup_virtual
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("virtual monitor interface on %s failed: %s", iface, e)

    try:
        subprocess.run(["ip", "link", "set", iface, "down"],
                       check=True, capture_output=True, timeout=10)
        subprocess.run(["iw", "dev", iface, "set", "type", "monitor"],
                       check=True, capture_output=True, timeout=10)
        subprocess.run(["ip", "link", "set", iface, "up"],
                       check=True, capture_output=True, timeout=10)

        def _cleanup_restore():
            _run_quiet(["ip", "link", "set", iface, "down"],
                       ["iw", "dev", iface, "set", "type", "managed"],
                       ["ip", "link", "set", iface, "up"])

        return iface, _cleanup_restore
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("switching %s to monitor mode failed: %s", iface, e)

    raise RuntimeError(
        f"Could not configure {iface} for monitor mode.\n"
        f"  Try manually:  sudo iw dev {iface} set type monitor"
    )


# ---------------------------------------------------------------------------
# CaptureDevice
# ---------------------------------------------------------------------------

class CaptureDevice:
    """Raw 802.11 socket bound to a monitor-mode interface.

    ``open()`` is all-or-nothing: if any step fails, whatever was already
    acquired (monitor interface, socket) is released before
    ConfigurationError is raised.
    """

    def __init__(self, iface: str, snaplen: int = _SNAPLEN,
                 timeout: Optional[float] = _READ_TIMEOUT, monitor: bool = True):
        self.iface = iface
        self.snaplen = snaplen
        self.timeout = timeout
        self.monitor = monitor
        self.monitor_iface: Optional[str] = None
        self._sock = None
        self._cleanup: Optional[Callable[[], None]] = None

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def open(self):
        if self.is_open:
            return
        cleanup = None
        sock = None
        try:
            if self.monitor:
                mon_iface, cleanup = setup_monitor(self.iface)
            else:
                mon_iface = self.iface
            sock = conf.L2socket(iface=mon_iface)
            if self.snaplen <= 0:
                raise ValueError(f"invalid capture length {self.snaplen}")
            if self.timeout is not None and self.timeout < 0:
                raise ValueError(f"invalid read timeout {self.timeout}")
        except (RuntimeError, OSError, ValueError, Scapy_Exception) as e:
            if sock is not None:
                sock.close()
            if cleanup is not None:
                cleanup()
            raise ConfigurationError(f"could not open {self.iface}: {e}") from e

        self._sock = sock
        self._cleanup = cleanup
        self.monitor_iface = mon_iface
        logger.info("capture device open on %s", mon_iface)

    def read(self):
        """Next frame as a scapy packet, or None when nothing was decoded."""
        if not self.is_open:
            raise OSError(f"capture device {self.iface} is closed")
        if self.timeout is not None:
            ready, _, _ = select.select([self._sock], [], [], self.timeout)
            if not ready:
                return None
        return self._sock.recv(self.snaplen)

    def write(self, data: bytes):
        if not self.is_open:
            raise TransientIOError(f"capture device {self.iface} is closed")
        try:
            self._sock.send(data)
        except (OSError, Scapy_Exception) as e:
            raise TransientIOError(f"could not send frame on {self.monitor_iface}: {e}") from e

    def close(self):
        sock, self._sock = self._sock, None
        cleanup, self._cleanup = self._cleanup, None
        if sock is not None:
            sock.close()
            logger.info("capture device on %s closed", self.monitor_iface)
        if cleanup is not None:
            cleanup()
