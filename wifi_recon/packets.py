"""Forged 802.11 management frames."""

import struct

from scapy.compat import raw
from scapy.error import Scapy_Exception
from scapy.layers.dot11 import Dot11, Dot11Deauth, RadioTap

from .constants import _DOT11_TYPE_MGMT
from .errors import TransientIOError


def new_dot11_deauth(a1: str, a2: str, a3: str, subtype: int,
                     reason: int, seq: int) -> bytes:
    """Encode a RadioTap-framed deauthentication frame.

    ``a1`` is the destination, ``a2`` the (spoofed) source and ``a3`` the
    BSSID.  The sequence number goes in the upper 12 bits of the
    sequence-control field.
    """
    try:
        pkt = (
            RadioTap()
            / Dot11(type=_DOT11_TYPE_MGMT, subtype=subtype,
                    addr1=a1, addr2=a2, addr3=a3, SC=(seq & 0x0FFF) << 4)
            / Dot11Deauth(reason=reason)
        )
        return raw(pkt)
    except (Scapy_Exception, ValueError, TypeError, struct.error) as e:
        raise TransientIOError(f"could not build deauth frame {a2} -> {a1}: {e}") from e
