"""
Encoder interface.

An encoder turns values into bytes for a Memory backend and back again.
Decoding takes a *target*: the type the caller wants the bytes read as
(str, list[str], a pydantic model, typing.Any, ...).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Encoder(ABC):
    """
    Abstract base class for value codecs.

    Implementations:
        JSONEncoder — textual JSON, default
        PickleEncoder — binary, carries Python types
    """

    @abstractmethod
    def encode(self, value: Any) -> bytes:
        """Serialize a value. None must be accepted."""
        ...

    @abstractmethod
    def decode(self, data: bytes, target: Any) -> Any:
        """
        Deserialize bytes as an instance of target.

        Raises:
            DecodeError: If data is malformed or does not fit target
        """
        ...
