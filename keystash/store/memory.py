"""
In-memory backend — the default Memory.

Dict-based storage. Data lost when process exits.
Python dicts keep insertion order, which is exactly the order keys()
has to report.
"""

from __future__ import annotations

import threading

from keystash.core.errors import StoreError
from keystash.store.base import Memory


class InMemory(Memory):
    """
    In-memory key-value store, safe to share between threads.

    Usage:
        memory = InMemory()
        memory.set("key", b"value")
        assert memory.get("key") == b"value"
    """

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}
        self._lock = threading.Lock()
        self._closed = False

    def get(self, key: str) -> bytes | None:
        with self._lock:
            self._check_open()
            return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._check_open()
            self._data[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            self._check_open()
            return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        with self._lock:
            self._check_open()
            return list(self._data)

    def close(self) -> None:
        with self._lock:
            self._data.clear()
            self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise StoreError("storage is closed")
