"""Persistent side-car state: fingerprints and source snapshots."""

from .ledger import FingerprintLedger, fingerprint_of
from .snapshots import SnapshotStore

__all__ = ["FingerprintLedger", "SnapshotStore", "fingerprint_of"]
