"""Change detection and synchronization."""

from .orchestrator import CompletionCallback, SyncOrchestrator, SyncOutcome, SyncResult
from .watcher import ChangeEvent, ChangeKind, PollingChangeSource

__all__ = [
    "ChangeEvent",
    "ChangeKind",
    "CompletionCallback",
    "PollingChangeSource",
    "SyncOrchestrator",
    "SyncOutcome",
    "SyncResult",
]
