"""802.11 frame classification for wifi-recon.

Pure functions over scapy packets captured in monitor mode.  A frame that
does not match is not an error: the functions return ``None`` and the caller
moves on, since most frames on the air are irrelevant to any given mode.
"""

from typing import List, Optional, Tuple

from scapy.layers.dot11 import Dot11, Dot11Elt, RadioTap

from .constants import (
    _BROADCAST_MAC, _DOT11_ELT_SSID, _DOT11_FC_FROM_DS, _DOT11_FC_TO_DS,
    _DOT11_TYPE_DATA, _MAX_24GHZ_FREQ,
)
from .utils import _normalize_mac


def mhz_to_channel(freq: int) -> int:
    """Convert a centre frequency (MHz) to a 2.4 GHz channel number.

    Anything above 2484 MHz (5 GHz and up) is reported as 0, unknown.
    """
    if freq <= _MAX_24GHZ_FREQ:
        return ((freq - 2412) // 5) + 1
    return 0


def get_channel(pkt) -> int:
    """Channel from the RadioTap ChannelFrequency field, 0 when absent."""
    freq = getattr(pkt[RadioTap], "ChannelFrequency", None)
    if not freq:
        return 0
    return mhz_to_channel(int(freq))


def get_ssid(elt) -> str:
    try:
        return bytes(elt.info or b"").decode("utf-8", errors="replace")
    except (TypeError, ValueError):
        return ""


def discover_access_point(pkt) -> Optional[Tuple[str, str, int]]:
    """Return ``(ssid, bssid, channel)`` for a broadcast frame carrying an SSID.

    Beacons (and anything else sent to broadcast with an SSID element first)
    match.  BSSID is taken from address 3.
    """
    if not pkt.haslayer(RadioTap):
        return None
    elt = pkt.getlayer(Dot11Elt)
    if elt is None or elt.ID != _DOT11_ELT_SSID:
        return None
    if not pkt.haslayer(Dot11):
        return None

    dot11 = pkt[Dot11]
    ssid = get_ssid(elt)
    if _normalize_mac(dot11.addr1) != _BROADCAST_MAC or not ssid:
        return None
    return ssid, _normalize_mac(dot11.addr3), get_channel(pkt)


def discover_client(pkt, bssid: str) -> Optional[Tuple[str, int]]:
    """Return ``(station, channel)`` for a data frame sent by a station to ``bssid``."""
    if not pkt.haslayer(RadioTap) or not pkt.haslayer(Dot11):
        return None

    dot11 = pkt[Dot11]
    if dot11.type != _DOT11_TYPE_DATA:
        return None

    flags = int(dot11.FCfield)
    to_ds = bool(flags & _DOT11_FC_TO_DS)
    from_ds = bool(flags & _DOT11_FC_FROM_DS)
    if not to_ds or from_ds:
        return None

    if _normalize_mac(dot11.addr1) != _normalize_mac(bssid):
        return None
    return _normalize_mac(dot11.addr2), get_channel(pkt)


def frame_addresses(pkt) -> List[Optional[str]]:
    """The four 802.11 address fields; absent ones are None."""
    if not pkt.haslayer(Dot11):
        return []
    dot11 = pkt[Dot11]
    return [getattr(dot11, f, None) for f in ("addr1", "addr2", "addr3", "addr4")]


def frame_length(pkt) -> int:
    """Captured length of the whole frame, radiotap header included."""
    original = getattr(pkt, "original", None)
    if original:
        return len(original)
    return len(pkt)
