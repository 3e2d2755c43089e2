"""
Error hierarchy for translation-sync.

Provides clear error classification and context so the orchestrator can
decide what degrades to an empty result and what must be surfaced.
"""

from typing import Any, Dict, Optional
from datetime import datetime, timezone


class TranslationSyncError(Exception):
    """
    Base exception for all translation-sync errors.

    Carries a machine-readable code and free-form context for structured
    logging.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        previous_error: Optional[Exception] = None,
    ):
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.previous_error = previous_error
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "previous_error": str(self.previous_error) if self.previous_error else None,
        }

    def is_retryable(self) -> bool:
        """Whether a later, independent change signal may succeed."""
        return isinstance(self, TemporaryError)


class TemporaryError(TranslationSyncError):
    """Base class for transient errors (I/O, network)."""
    pass


class PermanentError(TranslationSyncError):
    """Base class for errors that will not go away on their own."""
    pass


class ConfigurationError(PermanentError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        super().__init__(message, context={"config_key": config_key}, **kwargs)


class StorageError(TemporaryError):
    """Catalog, ledger and snapshot storage errors."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs
    ):
        super().__init__(
            message,
            context={"path": path, "operation": operation},
            **kwargs
        )


class CatalogWriteError(StorageError):
    """A catalog could not be written to disk."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, path=path, operation="write_catalog", **kwargs)


class LedgerWriteError(StorageError):
    """The fingerprint ledger or snapshot store could not be persisted."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, path=path, operation="persist_ledger", **kwargs)


class TranslationGatewayError(TemporaryError):
    """Translation provider failures: timeout, transport or bad response."""

    def __init__(
        self,
        message: str,
        source_lang: Optional[str] = None,
        target_lang: Optional[str] = None,
        **kwargs
    ):
        super().__init__(
            message,
            context={"source_lang": source_lang, "target_lang": target_lang},
            **kwargs
        )
