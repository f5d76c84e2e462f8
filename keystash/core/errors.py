"""
Keystash exception hierarchy.

Every error raised by the library inherits from KeystashError.
"Not found" is never an error — lookups report it as a result.

Usage:
    try:
        storage.set("user/name", value)
    except EncodeError as e:
        # Value could not be serialized by the active encoder
    except KeystashError as e:
        # Any keystash error
"""


class KeystashError(Exception):
    """Base exception for all keystash errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ━━━ Setup Errors ━━━


class ConfigError(KeystashError):
    """Configuration is invalid, missing, or malformed."""

    pass


class RegistryError(KeystashError):
    """Component not found or registration conflict."""

    pass


class ProviderNotFoundError(RegistryError):
    """Requested component does not exist in registry."""

    pass


# ━━━ Storage Errors ━━━


class StoreError(KeystashError):
    """Memory backend failure — database errors, closed store, etc."""

    pass


class EncodeError(KeystashError):
    """A value could not be serialized. Not retryable without changing the value."""

    pass


class DecodeError(KeystashError):
    """Stored bytes are corrupted or do not fit the requested target."""

    pass
