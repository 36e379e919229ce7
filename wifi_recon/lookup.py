"""OUI vendor lookup for wifi-recon."""

import json
import logging
import os
import re
from typing import Optional

logger = logging.getLogger(__name__)

_DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
_OUI_ENV_VAR = "WIFI_RECON_OUI_DB"

_oui_cache: Optional[dict] = None


def _load_oui() -> dict:
    global _oui_cache
    if _oui_cache is None:
        path = os.environ.get(_OUI_ENV_VAR) or os.path.join(_DATA_DIR, "oui.json")
        try:
            with open(path) as f:
                _oui_cache = json.load(f)
        except (OSError, ValueError) as e:
            logger.debug("OUI database unavailable (%s): %s", path, e)
            _oui_cache = {}
    return _oui_cache


def get_oui_vendor(mac: str) -> Optional[str]:
    """Look up vendor name from the OUI (first 6 hex chars) of a MAC address."""
    clean = re.sub(r"[:\-\.]", "", mac or "").upper()[:6]
    if not clean:
        return None
    return _load_oui().get(clean)
