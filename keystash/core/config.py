"""
Keystash Configuration — loads and merges config from multiple sources.

Precedence (highest to lowest):
1. Explicit overrides (passed in code)
2. Environment variables (KEYSTASH_*)
3. Project config (./keystash.toml)
4. User config (~/.keystash/config.toml)
5. Defaults (hardcoded)

Environment variable mapping:
    KEYSTASH_MEMORY → storage.memory
    KEYSTASH_PATH → storage.path
    KEYSTASH_ENCODER → storage.encoder
    KEYSTASH_LOG_LEVEL → logging.level
"""

from __future__ import annotations

import os
import re
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from keystash.core.errors import ConfigError

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Config Sub-Models
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class StorageConfig(BaseModel):
    """Which backend and encoder a Storage is built with."""

    memory: str = "memory"
    path: str = "~/.keystash/data.db"
    encoder: str = "json"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    log_dir: str | None = None

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level '{value}'")
        return level


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Main Config
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class KeystashConfig(BaseModel):
    """Root configuration for keystash."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @staticmethod
    def load(
        overrides: dict[str, Any] | None = None,
        project_path: Path | None = None,
        user_path: Path | None = None,
    ) -> KeystashConfig:
        """
        Load configuration from all sources and merge.

        Precedence: overrides > env vars > project toml > user toml > defaults
        """
        merged: dict[str, Any] = {}

        user_config_path = user_path or Path.home() / ".keystash" / "config.toml"
        if user_config_path.exists():
            _deep_merge(merged, _load_toml(user_config_path))

        project_config_path = project_path or Path.cwd() / "keystash.toml"
        if project_config_path.exists():
            _deep_merge(merged, _load_toml(project_config_path))

        _deep_merge(merged, _load_from_env())

        if overrides:
            _deep_merge(merged, overrides)

        # Substitute ${ENV_VAR} in string values
        _substitute_env_vars(merged)

        try:
            return KeystashConfig(**merged)
        except Exception as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def get_storage_path(self) -> Path:
        """Resolved path of the durable backend's file."""
        return Path(self.storage.path).expanduser()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Internal Helpers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e


def _load_from_env() -> dict[str, Any]:
    """Load configuration from KEYSTASH_* environment variables."""
    result: dict[str, Any] = {}

    env_mapping = {
        "KEYSTASH_MEMORY": ("storage", "memory"),
        "KEYSTASH_PATH": ("storage", "path"),
        "KEYSTASH_ENCODER": ("storage", "encoder"),
        "KEYSTASH_LOG_LEVEL": ("logging", "level"),
        "KEYSTASH_LOG_DIR": ("logging", "log_dir"),
    }

    for env_var, (section, key) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            result.setdefault(section, {})[key] = value

    return result


def _deep_merge(base: dict, override: dict) -> None:
    """Deep merge override into base (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def _substitute_env_vars(data: dict) -> None:
    """Recursively substitute ${ENV_VAR} patterns in string values."""
    pattern = re.compile(r"\$\{([^}]+)\}")

    def substitute(value: str) -> str:
        return pattern.sub(lambda m: os.environ.get(m.group(1), ""), value)

    for key, value in data.items():
        if isinstance(value, dict):
            _substitute_env_vars(value)
        elif isinstance(value, str):
            data[key] = substitute(value)
        elif isinstance(value, list):
            data[key] = [substitute(v) if isinstance(v, str) else v for v in value]
