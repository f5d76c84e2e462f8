"""
Memory interface — the byte-level backend behind Storage.

Simple key-value store. Keys are strings: "identity/facts/001".
Values are bytes (serialization is the encoder's responsibility).

Backends that can answer prefix queries natively (e.g. a sorted or
indexed store) additionally satisfy PrefixAwareMemory. Everything else
gets prefix search through filter_keys_by_prefix.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Protocol, runtime_checkable


class Memory(ABC):
    """
    Abstract base class for storage backends.

    keys() must return keys in first-insertion order: overwriting a key
    keeps its position, deleting and re-inserting moves it to the end.

    Implementations:
        InMemory — dict-based, default
        SQLiteMemory — file-based, durable
    """

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Get raw bytes by key. Returns None if not found."""
        ...

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Set raw bytes. Overwrites if exists."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key. Returns True if existed."""
        ...

    @abstractmethod
    def keys(self) -> list[str]:
        """List all keys in insertion order."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release backend resources. Safe to call more than once."""
        ...


@runtime_checkable
class PrefixAwareMemory(Protocol):
    """A backend that can list keys by prefix without a full scan."""

    def keys_with_prefix(self, prefix: str) -> list[str]:
        """Keys starting with prefix, sorted ascending."""
        ...


def filter_keys_by_prefix(keys: Iterable[str], prefix: str) -> list[str]:
    """Generic prefix search: keep keys starting with prefix, sorted ascending."""
    return sorted(k for k in keys if k.startswith(prefix))
