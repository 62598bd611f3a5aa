"""
In-process store. Default backend for development and tests.
"""

import threading
import time
from typing import Callable, Dict, Optional

from skillnexis.store.base import KeyValueStore


class InMemoryStore(KeyValueStore):
    def __init__(self, prefix: str = "", timer: Callable[[], float] = time.monotonic):
        super().__init__(prefix)
        self._data: Dict[str, str] = {}
        self._expires: Dict[str, float] = {}
        self._timer = timer
        self._lock = threading.RLock()

    def _expired(self, full_key: str) -> bool:
        deadline = self._expires.get(full_key)
        return deadline is not None and deadline <= self._timer()

    def _evict_expired(self) -> None:
        now = self._timer()
        for full_key in [k for k, deadline in self._expires.items() if deadline <= now]:
            self._data.pop(full_key, None)
            self._expires.pop(full_key, None)

    def get(self, key: str) -> Optional[str]:
        full_key = self._k(key)
        with self._lock:
            if self._expired(full_key):
                self._data.pop(full_key, None)
                self._expires.pop(full_key, None)
                return None
            return self._data.get(full_key)

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        with self._lock:
            self._evict_expired()
            full_key = self._k(key)
            self._data[full_key] = value
            if ttl:
                self._expires[full_key] = self._timer() + ttl
            else:
                self._expires.pop(full_key, None)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(self._k(key), None)
            self._expires.pop(self._k(key), None)

    def set_many(self, items: Dict[str, str]) -> None:
        with self._lock:
            for key, value in items.items():
                self._data[self._k(key)] = value
                self._expires.pop(self._k(key), None)

    def lock(self):
        return self._lock

    def keys(self):
        with self._lock:
            self._evict_expired()
            return list(self._data.keys())
