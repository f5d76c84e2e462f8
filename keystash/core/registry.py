"""
Keystash Registry — named component factories.

Backends and encoders register a factory by CATEGORY and NAME.
Configuration refers to them by name ("sqlite", "json", ...) and the
registry builds a fresh instance on request.

Categories: "memory", "encoder"
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

from keystash.core.errors import ProviderNotFoundError, RegistryError

logger = logging.getLogger(__name__)

Factory = Callable[..., Any]


class Registry:
    """
    Factory registry.

    Usage:
        registry = Registry()
        registry.register("memory", "memory", InMemory)
        registry.register("memory", "sqlite", SQLiteMemory)

        memory = registry.create("memory", "sqlite", db_path="data.db")
        registry.get_names("memory")              # ["memory", "sqlite"]
    """

    def __init__(self) -> None:
        self._factories: dict[str, dict[str, Factory]] = defaultdict(dict)
        self._registration_order: dict[str, list[str]] = defaultdict(list)

    def register(self, category: str, name: str, factory: Factory) -> None:
        """
        Register a factory.

        If a factory with the same category+name exists, it's replaced.
        """
        if not callable(factory):
            raise RegistryError(f"Factory for {category}/{name} is not callable")

        is_new = name not in self._factories[category]
        self._factories[category][name] = factory

        if is_new:
            self._registration_order[category].append(name)

        logger.debug(f"Registered {category}/{name}")

    def get(self, category: str, name: str) -> Factory:
        """
        Get a factory by category and name.

        Raises:
            ProviderNotFoundError: If category is empty or name not found
        """
        factories = self._factories.get(category)
        if not factories:
            raise ProviderNotFoundError(
                f"No components registered for category '{category}'"
            )

        if name not in factories:
            available = ", ".join(self._registration_order[category])
            raise ProviderNotFoundError(
                f"Component '{name}' not found in category '{category}'. "
                f"Available: {available}"
            )

        return factories[name]

    def create(self, category: str, name: str, **kwargs: Any) -> Any:
        """Build a new instance from the named factory."""
        return self.get(category, name)(**kwargs)

    def has(self, category: str, name: str) -> bool:
        return name in self._factories.get(category, {})

    def get_names(self, category: str) -> list[str]:
        """List all names in a category, in registration order."""
        return list(self._registration_order.get(category, []))
