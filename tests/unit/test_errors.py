"""
Unit tests for the error hierarchy and tracker.
"""

from translation_sync.errors import (
    CatalogWriteError,
    ConfigurationError,
    ErrorTracker,
    LedgerWriteError,
    PermanentError,
    StorageError,
    TemporaryError,
    TranslationGatewayError,
    TranslationSyncError,
)


class TestErrorHierarchy:
    """Test error class hierarchy."""

    def test_base_error(self):
        error = TranslationSyncError("Test error", error_code="TEST_ERROR", context={"key": "value"})

        assert error.message == "Test error"
        assert error.error_code == "TEST_ERROR"
        assert error.context == {"key": "value"}
        assert error.timestamp is not None
        assert not error.is_retryable()

    def test_default_error_code(self):
        assert ConfigurationError("bad").error_code == "ConfigurationError"

    def test_to_dict(self):
        cause = OSError("disk full")
        error = CatalogWriteError("Cannot write", path="/tmp/es.json", previous_error=cause)

        error_dict = error.to_dict()

        assert error_dict["error_type"] == "CatalogWriteError"
        assert error_dict["context"] == {"path": "/tmp/es.json", "operation": "write_catalog"}
        assert error_dict["previous_error"] == "disk full"
        assert "timestamp" in error_dict

    def test_classification(self):
        assert isinstance(ConfigurationError("x"), PermanentError)
        assert isinstance(CatalogWriteError("x"), StorageError)
        assert isinstance(LedgerWriteError("x"), StorageError)
        assert isinstance(TranslationGatewayError("x"), TemporaryError)

        assert StorageError("x").is_retryable()
        assert TranslationGatewayError("x").is_retryable()
        assert not ConfigurationError("x").is_retryable()


class TestErrorTracker:
    """Test error tracking."""

    def test_record_and_stats(self):
        tracker = ErrorTracker()

        tracker.record_error(TranslationGatewayError("timeout", source_lang="en", target_lang="es"), {"key": "a.b"})
        tracker.record_error(TranslationGatewayError("timeout"), {"key": "a.c"})
        tracker.record_error(ValueError("odd"))

        stats = tracker.get_error_stats()
        assert stats["total_errors"] == 3
        assert stats["error_counts"] == {"TranslationGatewayError": 2, "ValueError": 1}
        assert stats["most_common"] == ("TranslationGatewayError", 2)
        assert tracker.error_history[0]["context"] == {
            "source_lang": "en",
            "target_lang": "es",
            "key": "a.b",
        }

    def test_history_bounded(self):
        tracker = ErrorTracker(max_history=2)
        for i in range(5):
            tracker.record_error(RuntimeError(str(i)))

        assert [e["message"] for e in tracker.error_history] == ["3", "4"]
        assert tracker.error_counts["RuntimeError"] == 5
