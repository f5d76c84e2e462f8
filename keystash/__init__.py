"""
keystash — a small key-value store with pluggable backends and encoders.

Public API:
    from keystash import Storage, InMemory, SQLiteMemory, JSONEncoder
"""

__version__ = "0.1.0"

# Core
from keystash.core.config import KeystashConfig
from keystash.core.errors import (
    ConfigError,
    DecodeError,
    EncodeError,
    KeystashError,
    StoreError,
)

# Encoding
from keystash.encoding.base import Encoder
from keystash.encoding.json_encoder import JSONEncoder
from keystash.encoding.pickle_encoder import PickleEncoder

# Store
from keystash.store.base import Memory, PrefixAwareMemory, filter_keys_by_prefix
from keystash.store.factory import open_storage
from keystash.store.memory import InMemory
from keystash.store.sqlite import SQLiteMemory
from keystash.store.storage import Storage

__all__ = [
    # Core
    "KeystashConfig",
    "KeystashError",
    "ConfigError",
    "EncodeError",
    "DecodeError",
    "StoreError",
    # Encoding
    "Encoder",
    "JSONEncoder",
    "PickleEncoder",
    # Store
    "Memory",
    "PrefixAwareMemory",
    "filter_keys_by_prefix",
    "InMemory",
    "SQLiteMemory",
    "Storage",
    "open_storage",
]
