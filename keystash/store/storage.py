"""
Storage — the facade callers talk to.

Composes one Memory (where bytes live) and one Encoder (how values
become bytes). Typed get/set calls are translated into encode/decode
plus raw byte operations on the Memory.

Storage itself does no locking: thread-safety of concurrent calls is
whatever the chosen Memory provides.
"""

from __future__ import annotations

import logging
from typing import Any

from keystash.core.errors import DecodeError, EncodeError
from keystash.encoding.base import Encoder
from keystash.encoding.json_encoder import JSONEncoder
from keystash.store.base import Memory, PrefixAwareMemory, filter_keys_by_prefix
from keystash.store.memory import InMemory


class Storage:
    """
    Typed key-value storage over a pluggable backend and codec.

    Usage:
        storage = Storage()                            # InMemory + JSON
        storage.set("user/langs", ["python", "go"])

        found, langs = storage.get("user/langs", list[str])
        found, _ = storage.get("user/langs")           # existence only

        storage.keys_with_prefix("user/")              # ["user/langs"]
        storage.close()

    Passing no target to get() is an existence check: the stored bytes
    are never decoded, so it cannot fail on malformed data.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        memory: Memory | None = None,
        encoder: Encoder | None = None,
    ) -> None:
        self._logger = logger or logging.getLogger("keystash.storage")
        self._memory = memory if memory is not None else InMemory()
        self._encoder = encoder if encoder is not None else JSONEncoder()

    @property
    def memory(self) -> Memory:
        return self._memory

    @property
    def encoder(self) -> Encoder:
        return self._encoder

    # ── Configuration ────────────────────────────────────────────────────────

    def set_memory(self, memory: Memory) -> None:
        """
        Replace the backend for subsequent operations.

        The old backend is not closed and its entries are not copied.
        Not safe to call while other operations are in flight.
        """
        self._memory = memory
        self._logger.debug(f"Memory replaced with {type(memory).__name__}")

    def set_memory_encoder(self, encoder: Encoder) -> None:
        """
        Replace the encoder for subsequent operations.

        Entries already written by an incompatible encoder may fail to
        decode afterwards. Not safe to call while other operations are
        in flight.
        """
        self._encoder = encoder
        self._logger.debug(f"Encoder replaced with {type(encoder).__name__}")

    # ── Operations ───────────────────────────────────────────────────────────

    def get(self, key: str, target: Any = None) -> tuple[bool, Any]:
        """
        Look up a key.

        Args:
            key: The key to read
            target: Type to decode the value as, or None to only check
                that the key exists

        Returns:
            (found, value). value is None when not found or when no
            target was given.

        Raises:
            DecodeError: If the stored bytes cannot be decoded as target
        """
        self._logger.debug(f"Retrieving value from storage: key={key}")

        data = self._memory.get(key)
        if data is None:
            return False, None
        if target is None:
            return True, None

        try:
            value = self._encoder.decode(data, target)
        except Exception as e:
            raise DecodeError(f"decode data: {e}") from e
        return True, value

    def exists(self, key: str) -> bool:
        """Check if a key exists without decoding it."""
        found, _ = self.get(key)
        return found

    def set(self, key: str, value: Any) -> None:
        """
        Encode a value and store it under key. Overwrites if exists.

        Raises:
            EncodeError: If the encoder rejects the value. Nothing is written.
        """
        self._logger.debug(f"Writing data to storage: key={key}")

        try:
            data = self._encoder.encode(value)
        except Exception as e:
            raise EncodeError(f"encode data: {e}") from e

        self._memory.set(key, data)

    def delete(self, key: str) -> bool:
        """Delete a key. Returns True if existed."""
        self._logger.debug(f"Deleting data from storage: key={key}")
        return self._memory.delete(key)

    def keys(self) -> list[str]:
        """All keys in first-insertion order."""
        self._logger.debug("Listing keys from storage")
        return self._memory.keys()

    def keys_with_prefix(self, prefix: str) -> list[str]:
        """Keys starting with prefix, sorted ascending."""
        self._logger.debug(f"Listing keys from storage: prefix={prefix}")
        if isinstance(self._memory, PrefixAwareMemory):
            return self._memory.keys_with_prefix(prefix)

        return filter_keys_by_prefix(self._memory.keys(), prefix)

    def close(self) -> None:
        """Close the backend. The storage must not be used afterwards."""
        self._logger.debug("Closing storage")
        self._memory.close()
