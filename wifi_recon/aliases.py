"""Hardware address -> user label mapping, optionally backed by a JSON file."""

import json
import logging
import os
import threading
from typing import Dict, Optional

from .utils import _is_valid_mac, _normalize_mac

logger = logging.getLogger(__name__)


class AliasStore:
    """Thread-safe alias table.

    Aliases outlive the endpoints they decorate: clearing a registry leaves
    them alone, only ``clear()`` drops them.  When ``path`` is given the
    table is loaded from it on creation and saved after every change; the
    file accumulates labels, so ``clear(persist=False)`` empties the live
    table without forgetting what was saved.
    """

    def __init__(self, path: Optional[str] = None):
        self._path = os.path.expanduser(path) if path else None
        self._data: Dict[str, str] = {}
        self._saved: Dict[str, str] = {}
        self._lock = threading.Lock()
        if self._path:
            self._load()

    def _load(self):
        if not os.path.exists(self._path):
            return
        try:
            with open(self._path) as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("could not load aliases from %s: %s", self._path, e)
            return
        if not isinstance(raw, dict):
            logger.warning("ignoring aliases file %s: not a JSON object", self._path)
            return
        for mac, label in raw.items():
            if _is_valid_mac(mac) and isinstance(label, str):
                self._data[_normalize_mac(mac)] = label
        self._saved.update(self._data)

    def _save(self):
        # caller holds the lock
        if not self._path:
            return
        try:
            directory = os.path.dirname(self._path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self._path, "w") as f:
                json.dump(self._saved, f, indent=2, sort_keys=True)
        except OSError as e:
            logger.warning("could not save aliases to %s: %s", self._path, e)

    def set(self, mac: str, label: str) -> bool:
        if not _is_valid_mac(mac):
            return False
        with self._lock:
            key = _normalize_mac(mac)
            self._data[key] = label
            self._saved[key] = label
            self._save()
        return True

    def get(self, mac: str) -> str:
        with self._lock:
            return self._data.get(_normalize_mac(mac), "")

    def clear(self, persist: bool = True):
        with self._lock:
            self._data.clear()
            if persist:
                self._saved.clear()
                self._save()

    def to_dict(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
