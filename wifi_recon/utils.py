"""Utility helpers for wifi-recon."""

import re
from datetime import datetime, timezone
from typing import Optional

from .constants import _ZERO_MAC

_MAC_RE = re.compile(r"^[0-9A-F]{12}$")


def _timestamp() -> str:
    """Return ISO 8601 timestamp with timezone offset."""
    now = datetime.now(timezone.utc).astimezone()
    return now.strftime("%Y-%m-%dT%H:%M:%S%z")


def _iso(ts: float) -> str:
    """Render an epoch timestamp the way _timestamp() renders 'now'."""
    when = datetime.fromtimestamp(ts, timezone.utc).astimezone()
    return when.strftime("%Y-%m-%dT%H:%M:%S%z")


def _clock(ts: float) -> str:
    """HH:MM:SS local time, used for the Last Seen column."""
    return datetime.fromtimestamp(ts).strftime("%H:%M:%S")


def _normalize_mac(mac: Optional[str]) -> str:
    """Normalize MAC to upper-case colon-separated format."""
    clean = re.sub(r"[:\-\.]", "", mac or "").upper()
    if len(clean) == 12:
        return ":".join(clean[i:i+2] for i in range(0, 12, 2))
    return (mac or "").upper()


def _is_valid_mac(mac: Optional[str]) -> bool:
    clean = re.sub(r"[:\-\.]", "", mac or "").upper()
    return bool(_MAC_RE.match(clean))


def _parse_mac(mac: str) -> str:
    """Normalize ``mac`` or raise ValueError if it is not a hardware address."""
    if not _is_valid_mac(mac):
        raise ValueError(f"invalid MAC address: {mac!r}")
    return _normalize_mac(mac)


def _is_zero_mac(mac: Optional[str]) -> bool:
    return not mac or _normalize_mac(mac) == _ZERO_MAC


def _human_bytes(n: int) -> str:
    """SI-formatted byte count: 0 B, 999 B, 1.2 kB, 34 MB."""
    if n < 10:
        return f"{n} B"
    value = float(n)
    for unit in ("B", "kB", "MB", "GB", "TB", "PB"):
        if value < 1000:
            if unit == "B":
                return f"{int(value)} B"
            return f"{value:.1f} {unit}" if value < 10 else f"{value:.0f} {unit}"
        value /= 1000
    return f"{value:.0f} EB"
