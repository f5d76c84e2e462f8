"""Shared test fixtures for keystash."""

import logging
from typing import Any

import pytest
from keystash.core.config import KeystashConfig
from keystash.core.registry import Registry
from keystash.encoding.pickle_encoder import PickleEncoder
from keystash.store.memory import InMemory
from keystash.store.sqlite import SQLiteMemory
from keystash.store.storage import Storage


class FlakyEncoder(PickleEncoder):
    """Pickle encoder that fails on demand."""

    def __init__(self) -> None:
        super().__init__()
        self.encode_err: Exception | None = None
        self.decode_err: Exception | None = None

    def encode(self, value: Any) -> bytes:
        if self.encode_err is not None:
            raise self.encode_err
        return super().encode(value)

    def decode(self, data: bytes, target: Any) -> Any:
        if self.decode_err is not None:
            raise self.decode_err
        return super().decode(data, target)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers that setup_logging() attached during a test."""
    yield
    logger = logging.getLogger("keystash")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def config():
    """Create a default config without loading from disk."""
    return KeystashConfig()


@pytest.fixture
def registry():
    """Create a fresh registry."""
    return Registry()


@pytest.fixture
def storage():
    """Storage with the default in-memory backend and JSON encoder."""
    store = Storage()
    yield store
    store.close()


@pytest.fixture
def flaky_encoder():
    return FlakyEncoder()


@pytest.fixture
def sqlite_memory(tmp_path):
    """Isolated SQLite backend for each test."""
    memory = SQLiteMemory(tmp_path / "test.db")
    memory.initialize()
    yield memory
    memory.close()


@pytest.fixture
def in_memory():
    memory = InMemory()
    yield memory
    memory.close()
