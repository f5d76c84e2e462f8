"""Tests for the JSON and pickle encoders."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Union

import pytest
from pydantic import BaseModel

from keystash.core.errors import DecodeError, EncodeError
from keystash.encoding.json_encoder import JSONEncoder
from keystash.encoding.pickle_encoder import PickleEncoder


class Note(BaseModel):
    title: str
    tags: list[str] = []


@dataclass
class Point:
    x: int
    y: int


# ━━━ JSON ━━━


def test_json_encodes_as_text():
    enc = JSONEncoder()
    assert enc.encode(["foo", "bar"]) == b'["foo","bar"]'
    assert enc.encode(None) == b"null"


def test_json_decodes_into_target():
    enc = JSONEncoder()
    assert enc.decode(b'["foo","bar"]', list[str]) == ["foo", "bar"]
    assert enc.decode(b'{"x": 1, "y": 2}', Point) == Point(x=1, y=2)
    assert enc.decode(b'{"a": [1, "b"]}', Any) == {"a": [1, "b"]}


def test_json_models_and_datetimes():
    enc = JSONEncoder()
    note = Note(title="groceries", tags=["home"])
    assert enc.decode(enc.encode(note), Note) == note

    when = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    assert enc.decode(enc.encode(when), datetime) == when


def test_json_rejects_unserializable_value():
    with pytest.raises(EncodeError):
        JSONEncoder().encode(object())


def test_json_rejects_malformed_bytes():
    with pytest.raises(DecodeError):
        JSONEncoder().decode(b"{not json", dict)


def test_json_rejects_wrong_shape():
    with pytest.raises(DecodeError):
        JSONEncoder().decode(b'"foo"', list[str])


def test_json_rejects_unsupported_target():
    class Opaque:
        pass

    with pytest.raises(DecodeError, match="unsupported target"):
        JSONEncoder().decode(b"{}", Opaque)


# ━━━ Pickle ━━━


def test_pickle_keeps_python_types():
    enc = PickleEncoder()
    value = {"point": Point(1, 2), "ids": {1, 2, 3}, "pair": (1, "a")}
    assert enc.decode(enc.encode(value), dict) == value


def test_pickle_none():
    enc = PickleEncoder()
    assert enc.decode(enc.encode(None), type(None)) is None


def test_pickle_checks_target_shape():
    enc = PickleEncoder()
    data = enc.encode("foo")

    assert enc.decode(data, str) == "foo"
    assert enc.decode(data, Any) == "foo"
    with pytest.raises(DecodeError):
        enc.decode(data, list[str])


def test_pickle_checks_element_types():
    enc = PickleEncoder()
    data = enc.encode([1, 2])

    assert enc.decode(data, list[int]) == [1, 2]
    with pytest.raises(DecodeError):
        enc.decode(data, list[str])
    with pytest.raises(DecodeError):
        enc.decode(enc.encode({"a": 1}), dict[str, str])


@pytest.mark.parametrize("target", [str | None, Optional[str], Union[int, str]])
def test_pickle_union_targets(target):
    enc = PickleEncoder()

    assert enc.decode(enc.encode("foo"), target) == "foo"
    with pytest.raises(DecodeError):
        enc.decode(enc.encode(3.5), target)


def test_pickle_plain_class_target():
    class Opaque:
        pass

    enc = PickleEncoder()
    value = Point(1, 2)
    assert enc.decode(enc.encode(value), Point) == value

    with pytest.raises(DecodeError):
        enc.decode(enc.encode("foo"), Opaque)


def test_pickle_rejects_malformed_bytes():
    with pytest.raises(DecodeError, match="malformed pickle data"):
        PickleEncoder().decode(b"not a pickle", str)


def test_pickle_rejects_unpicklable_value():
    with pytest.raises(EncodeError):
        PickleEncoder().encode(lambda: None)


def test_encoders_are_not_cross_compatible():
    data = PickleEncoder().encode(["foo"])
    with pytest.raises(DecodeError):
        JSONEncoder().decode(data, list[str])
