from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from .base import normalize_key


log = logging.getLogger(__name__)


class MemoryStorage:
    """Dict-backed storage for tests and throwaway sessions. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self._data: Dict[str, bytes] = {}
        self._lock = threading.Lock()
        for key, value in (initial or {}).items():
            self._data[normalize_key(key)] = bytes(value)

    def read(self, key: str) -> Optional[bytes]:
        k = normalize_key(key)
        with self._lock:
            return self._data.get(k)

    def write(self, key: str, data: bytes) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"data must be bytes-like, got {type(data).__name__}")
        k = normalize_key(key)
        with self._lock:
            self._data[k] = bytes(data)
        log.debug("memory write %s (%d bytes)", k, len(data))

    def delete(self, key: str) -> None:
        k = normalize_key(key)
        with self._lock:
            self._data.pop(k, None)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)
