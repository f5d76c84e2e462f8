"""
Build a Storage from configuration.

The built-in backends and encoders are registered under the names the
config refers to. Pass a custom Registry to add your own.
"""

from __future__ import annotations

import logging

from keystash.core.config import KeystashConfig
from keystash.core.registry import Registry
from keystash.encoding.json_encoder import JSONEncoder
from keystash.encoding.pickle_encoder import PickleEncoder
from keystash.store.memory import InMemory
from keystash.store.sqlite import SQLiteMemory
from keystash.store.storage import Storage

logger = logging.getLogger(__name__)


def default_registry() -> Registry:
    """A registry holding the built-in components."""
    registry = Registry()
    registry.register("memory", "memory", lambda config: InMemory())
    registry.register(
        "memory", "sqlite", lambda config: SQLiteMemory(config.get_storage_path())
    )
    registry.register("encoder", "json", lambda config: JSONEncoder())
    registry.register("encoder", "pickle", lambda config: PickleEncoder())
    return registry


def open_storage(
    config: KeystashConfig | None = None,
    registry: Registry | None = None,
    storage_logger: logging.Logger | None = None,
) -> Storage:
    """
    Create a Storage with the backend and encoder named in config.

    Usage:
        storage = open_storage(KeystashConfig.load())
    """
    config = config or KeystashConfig()
    registry = registry or default_registry()

    memory = registry.create("memory", config.storage.memory, config=config)
    encoder = registry.create("encoder", config.storage.encoder, config=config)
    logger.debug(
        f"Opening storage: memory={config.storage.memory} "
        f"encoder={config.storage.encoder}"
    )

    return Storage(logger=storage_logger, memory=memory, encoder=encoder)
