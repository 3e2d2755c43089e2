"""
Error tracking for translation-sync.

Records per-key translation fallbacks and other non-fatal failures so a
sync run can report what degraded without aborting.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog

from .exceptions import TranslationSyncError

logger = structlog.get_logger(__name__)


class ErrorTracker:
    """
    Tracks error occurrences across a sync run.

    Keeps a bounded history plus per-type counts for summaries.
    """

    def __init__(self, max_history: int = 1000):
        self.max_history = max_history
        self.error_history: List[Dict[str, Any]] = []
        self.error_counts: Dict[str, int] = {}

    def record_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """Record an error occurrence with context."""
        if isinstance(error, TranslationSyncError):
            base_context = error.context
            message = error.message
        else:
            base_context = {}
            message = str(error) or error.__class__.__name__

        error_type = error.__class__.__name__
        error_record = {
            "timestamp": datetime.now(timezone.utc),
            "error_type": error_type,
            "message": message,
            "context": {**base_context, **(context or {})},
        }

        self.error_history.append(error_record)
        if len(self.error_history) > self.max_history:
            self.error_history.pop(0)

        self.error_counts[error_type] = self.error_counts.get(error_type, 0) + 1

        logger.debug(
            "Error recorded",
            error_type=error_type,
            message=message,
            context=error_record["context"],
            total_count=self.error_counts[error_type],
        )

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics."""
        return {
            "total_errors": len(self.error_history),
            "error_counts": self.error_counts.copy(),
            "most_common": max(self.error_counts.items(), key=lambda x: x[1]) if self.error_counts else None,
        }
