"""Station table rendering for wifi-recon: sorting, liveness emphasis, printing."""

import os
import sys
from typing import TYPE_CHECKING, List, NamedTuple, Optional

from .constants import (
    _ALIVE_INTERVAL, _ANSI, _JUST_JOINED_INTERVAL, _PRESENT_INTERVAL,
)
from .utils import _clock, _human_bytes

if TYPE_CHECKING:
    from .registry import Endpoint
    from .stats import TrafficStats


class Thresholds(NamedTuple):
    """Display bands, in seconds."""
    just_joined: float = _JUST_JOINED_INTERVAL
    alive: float = _ALIVE_INTERVAL
    present: float = _PRESENT_INTERVAL


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

def by_essid(stations: List["Endpoint"]) -> List["Endpoint"]:
    """Sort by display name, ties broken by hardware address."""
    return sorted(stations, key=lambda s: (s.display_name, s.hw_address))


def by_seen(stations: List["Endpoint"]) -> List["Endpoint"]:
    """Most recently seen first."""
    return sorted(stations, key=lambda s: (-s.last_seen, s.hw_address))


_SORTERS = {"essid": by_essid, "seen": by_seen}


def sort_stations(stations: List["Endpoint"], by: str = "essid") -> List["Endpoint"]:
    return _SORTERS.get(by, by_essid)(stations)


# ---------------------------------------------------------------------------
# Emphasis
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    return "NO_COLOR" not in os.environ and sys.stdout.isatty()


def _style(text: str, style: str, color: bool) -> str:
    if not color:
        return text
    return f"{_ANSI[style]}{text}{_ANSI['reset']}"


def is_just_joined(station: "Endpoint", started_at: float, now: float,
                   thresholds: Thresholds = Thresholds()) -> bool:
    # only meaningful once the session has been up for a while,
    # otherwise everything would be "new"
    since_started = now - started_at
    return (since_started > thresholds.just_joined * 2
            and now - station.first_seen <= thresholds.just_joined)


def liveness(station: "Endpoint", started_at: float, now: float,
             thresholds: Thresholds = Thresholds()) -> str:
    """'alive', 'stale' or '' (present, no emphasis)."""
    since_last = now - station.last_seen
    if now - started_at > thresholds.alive and since_last <= thresholds.alive:
        return "alive"
    if since_last > thresholds.present:
        return "stale"
    return ""


def build_row(station: "Endpoint", stats: "TrafficStats", started_at: float,
              now: float, thresholds: Thresholds = Thresholds(),
              color: Optional[bool] = None) -> List[str]:
    if color is None:
        color = _use_color()

    bssid = station.hw_address
    if is_just_joined(station, started_at, now, thresholds):
        bssid = _style(bssid, "bold", color)

    seen = _clock(station.last_seen)
    state = liveness(station, started_at, now, thresholds)
    if state == "alive":
        seen = _style(seen, "bold", color)
    elif state == "stale":
        seen = _style(seen, "dim", color)

    n_bytes = stats.for_address(station.hw_address)
    traffic = _human_bytes(n_bytes) if n_bytes > 0 else ""

    return [
        bssid,
        station.essid,
        station.vendor,
        str(station.channel),
        traffic,
        seen,
    ]


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

def _visible_len(cell: str) -> int:
    for code in _ANSI.values():
        cell = cell.replace(code, "")
    return len(cell)


def format_table(header: List[str], rows: List[List[str]]) -> str:
    widths = [len(h) for h in header]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], _visible_len(cell))

    def _line(cells):
        padded = [c + " " * (widths[i] - _visible_len(c)) for i, c in enumerate(cells)]
        return "| " + " | ".join(padded) + " |"

    rule = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [rule, _line([h.upper() for h in header]), rule]
    lines.extend(_line(r) for r in rows)
    lines.append(rule)
    return "\n".join(lines)


def print_table(header: List[str], rows: List[List[str]]):
    print()
    print(format_table(header, rows))
