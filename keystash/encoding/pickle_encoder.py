"""
Pickle encoder — binary alternative to JSON.

The pickle stream records the Python type of every value, so decoding
does not need the target to rebuild the object; the target is only used
to check, in pydantic strict mode, that the stored value has the
expected shape (element types included).

Never decode data from an untrusted source with this encoder.
"""

from __future__ import annotations

import pickle
from typing import Any

from pydantic import (
    ConfigDict,
    PydanticSchemaGenerationError,
    TypeAdapter,
    ValidationError,
)

from keystash.core.errors import DecodeError, EncodeError
from keystash.encoding.base import Encoder


class PickleEncoder(Encoder):
    """Binary codec backed by the standard pickle module."""

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self._protocol = protocol

    def encode(self, value: Any) -> bytes:
        try:
            return pickle.dumps(value, protocol=self._protocol)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise EncodeError(str(e)) from e

    def decode(self, data: bytes, target: Any) -> Any:
        try:
            value = pickle.loads(data)
        except (
            pickle.UnpicklingError,
            EOFError,
            ValueError,
            TypeError,
            AttributeError,
            ImportError,
            IndexError,
        ) as e:
            raise DecodeError(f"malformed pickle data: {e}") from e

        try:
            return _adapter(target).validate_python(value, strict=True)
        except ValidationError as e:
            raise DecodeError(str(e)) from e


def _adapter(target: Any) -> TypeAdapter:
    """
    Validator for target.

    Plain classes pydantic has no schema for (pickle can store any of
    them) are checked with isinstance via arbitrary_types_allowed.
    """
    try:
        return TypeAdapter(target)
    except PydanticSchemaGenerationError:
        pass

    try:
        return TypeAdapter(target, config=ConfigDict(arbitrary_types_allowed=True))
    except PydanticSchemaGenerationError as e:
        raise DecodeError(f"unsupported target {target!r}: {e}") from e
