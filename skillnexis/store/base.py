# store/base.py
"""
Key-value store contract used by the data manager.

Values are JSON text. Backends raise StoreUnavailableError when the
underlying service cannot be reached; they never swallow failures.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional


class StoreError(Exception):
    pass


class StoreUnavailableError(StoreError, ConnectionError):
    """Raised when the backing service is down or refuses the operation."""


class KeyValueStore(ABC):
    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def _k(self, key: str) -> str:
        return f"{self.prefix}{key}"

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Write one key; with ``ttl`` (seconds) the key expires on its own."""

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    @abstractmethod
    def set_many(self, items: Dict[str, str]) -> None:
        """Write several keys in one call (atomically where the backend allows)."""

    @abstractmethod
    def lock(self):
        """Return a context manager serialising writers."""

    def ensure_indexes(self) -> None:
        pass

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass
