"""minichain.core.exceptions

Errors are part of the interface.

Tampering is not an error. It is a finding, and findings are returned as data.
"""

from __future__ import annotations


class MinichainError(Exception):
    """Base exception for minichain."""


class ConfigError(MinichainError):
    """Configuration is missing, invalid, or inconsistent."""


class HashAlgorithmUnavailableError(MinichainError):
    """The required hash primitive is missing from this runtime."""


class StoreError(MinichainError):
    """Record store failures: IO, schema, or constraints."""


class StoreUnavailableError(StoreError):
    """The record store cannot be reached or initialized."""


class BlockStoreError(StoreError):
    """The record store rejected a block."""
