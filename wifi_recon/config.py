"""Configuration loading for wifi-recon."""

import json
import logging
import os
import sys
from typing import Any, Dict, Optional

from .output import Thresholds

logger = logging.getLogger(__name__)

_CONFIG_ENV_VAR = "WIFI_RECON_CONFIG"
_CONFIG_PATHS = [
    os.path.expanduser("~/.config/wifi-recon/config.toml"),
    os.path.expanduser("~/.config/wifi-recon/config.json"),
]
_CONFIG_KEYS = {
    "interface", "alias_file", "missed_after", "just_joined", "alive",
    "present", "status", "status_port", "verbose", "quiet",
}


def _load_toml(path: str) -> Dict[str, Any]:
    if sys.version_info >= (3, 11):
        import tomllib
    else:
        import tomli as tomllib
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from file (TOML or JSON).

    Search order:
    1. Explicit ``config_path`` argument
    2. ``$WIFI_RECON_CONFIG`` environment variable
    3. ``~/.config/wifi-recon/config.toml``
    4. ``~/.config/wifi-recon/config.json``

    The first existing file wins; an unreadable one yields ``{}``.
    """
    if config_path:
        paths = [config_path]
    else:
        env = os.environ.get(_CONFIG_ENV_VAR)
        paths = [env] if env else _CONFIG_PATHS

    for path in paths:
        if not os.path.exists(path):
            continue
        try:
            if path.endswith(".toml"):
                return _load_toml(path)
            with open(path) as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("ignoring config file %s: %s", path, e)
            return {}
    return {}


def merge_with_cli(args, config: Dict[str, Any]):
    """Merge config file values into the argparse namespace.

    CLI arguments take precedence: config values only fill in attributes
    that are still ``None`` or at their argparse default.
    """
    from .cli import _build_parser
    defaults = vars(_build_parser().parse_args([]))

    for key, value in config.items():
        if key not in _CONFIG_KEYS:
            continue
        if not hasattr(args, key):
            continue
        current = getattr(args, key)
        if current is None or current == defaults.get(key):
            setattr(args, key, value)


def thresholds_from(args) -> Thresholds:
    base = Thresholds()
    return Thresholds(
        just_joined=float(getattr(args, "just_joined", None) or base.just_joined),
        alive=float(getattr(args, "alive", None) or base.alive),
        present=float(getattr(args, "present", None) or base.present),
    )
