"""wifi-recon: 802.11 reconnaissance with monitor-mode capture, live
station registry, traffic accounting and deauthentication."""

from .aliases import AliasStore
from .capture import CaptureDevice
from .detection import (
    discover_access_point, discover_client, frame_addresses, mhz_to_channel,
)
from .errors import (
    AlreadyRunningError, ConfigurationError, LifecycleError, NotRunningError,
    ReconError, SerializationError, TargetError, TransientIOError,
)
from .packets import new_dot11_deauth
from .recon import WiFiRecon
from .registry import (
    Endpoint, EndpointRegistry, Interface, RegistryKind, new_lan, new_wifi,
)
from .stats import TrafficStats

__version__ = "1.0.0"
__all__ = [
    "AliasStore",
    "CaptureDevice",
    "discover_access_point",
    "discover_client",
    "frame_addresses",
    "mhz_to_channel",
    "AlreadyRunningError",
    "ConfigurationError",
    "LifecycleError",
    "NotRunningError",
    "ReconError",
    "SerializationError",
    "TargetError",
    "TransientIOError",
    "new_dot11_deauth",
    "WiFiRecon",
    "Endpoint",
    "EndpointRegistry",
    "Interface",
    "RegistryKind",
    "new_lan",
    "new_wifi",
    "TrafficStats",
]
