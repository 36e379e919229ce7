"""Global constants for wifi-recon."""

from typing import Dict

_BROADCAST_MAC = "FF:FF:FF:FF:FF:FF"
_ZERO_MAC = "00:00:00:00:00:00"

# Capture device
_SNAPLEN = 65536
_READ_TIMEOUT = None        # block until a frame arrives
_STOP_JOIN_TIMEOUT = 2.0

# Liveness bands (seconds)
_JUST_JOINED_INTERVAL = 10.0
_ALIVE_INTERVAL = 10.0
_PRESENT_INTERVAL = 60.0
_MISSED_AFTER = 120.0

# 802.11 frame types and management subtypes
_DOT11_TYPE_MGMT = 0
_DOT11_TYPE_DATA = 2
_DOT11_SUBTYPE_DEAUTH = 0x0C
_DOT11_FC_TO_DS = 0x01
_DOT11_FC_FROM_DS = 0x02
_DOT11_ELT_SSID = 0

# Reason code 6: class 2 frame received from nonauthenticated station
_REASON_CLASS2_FROM_NONAUTH = 6

# Deauth burst
_DEAUTH_SEQUENCES = 64
_DEAUTH_PACKET_DELAY = 0.002

# Highest 2.4 GHz centre frequency (channel 14)
_MAX_24GHZ_FREQ = 2484

_TABLE_HEADER = ["BSSID", "SSID", "Vendor", "Channel", "Traffic", "Last Seen"]

_ANSI: Dict[str, str] = {
    "bold": "\033[1m",
    "dim": "\033[2m",
    "reset": "\033[0m",
}

_BANNER = r"""
 __      __ _  ___  _     ___  ___  ___  ___   _  _
 \ \    / /(_)| __|(_)   | _ \| __|/ __|/ _ \ | \| |
  \ \/\/ / | || _| | |   |   /| _|| (__| (_) || .` |
   \_/\_/  |_||_|  |_|   |_|_\|___|\___|\___/ |_|\_|
"""
