"""
Error handling for translation-sync.

- Structured error hierarchy
- Error tracking for non-fatal failures
"""

from .exceptions import (
    TranslationSyncError,
    TemporaryError,
    PermanentError,
    ConfigurationError,
    StorageError,
    CatalogWriteError,
    LedgerWriteError,
    TranslationGatewayError,
)

from .handlers import ErrorTracker

__all__ = [
    # Exceptions
    "TranslationSyncError",
    "TemporaryError",
    "PermanentError",
    "ConfigurationError",
    "StorageError",
    "CatalogWriteError",
    "LedgerWriteError",
    "TranslationGatewayError",

    # Handlers
    "ErrorTracker",
]
