"""
JSON encoder — the default value codec.

Built on pydantic so that anything pydantic can serialize (builtins,
dataclasses, BaseModel instances, datetimes, ...) can be stored, and
decoding validates the stored JSON against the requested target type.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from keystash.core.errors import DecodeError, EncodeError
from keystash.encoding.base import Encoder

logger = logging.getLogger(__name__)


class JSONEncoder(Encoder):
    """
    Self-describing JSON codec. No schema needs to be declared up front.

    Usage:
        enc = JSONEncoder()
        data = enc.encode(["foo", "bar"])          # b'["foo","bar"]'
        enc.decode(data, list[str])                 # ["foo", "bar"]
    """

    def encode(self, value: Any) -> bytes:
        try:
            return to_json(value)
        except PydanticSerializationError as e:
            raise EncodeError(str(e)) from e

    def decode(self, data: bytes, target: Any) -> Any:
        try:
            adapter = TypeAdapter(target)
        except PydanticSchemaGenerationError as e:
            raise DecodeError(f"unsupported target {target!r}: {e}") from e

        try:
            return adapter.validate_json(data)
        except ValidationError as e:
            raise DecodeError(str(e)) from e
