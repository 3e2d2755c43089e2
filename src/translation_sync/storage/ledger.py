"""Fingerprint ledger: the last observed content digest per catalog file."""

import hashlib
import json
from typing import Any, Mapping, Optional

from .sidecar import JsonSideCar


def fingerprint_of(catalog: Mapping[str, Any]) -> str:
    """Deterministic digest of catalog content, independent of key order."""
    canonical = json.dumps(catalog, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class FingerprintLedger(JsonSideCar):
    """Maps catalog path to fingerprint.

    An entry is only ever set after the content it describes is on disk,
    so a failed write is re-attempted on the next change signal.
    """

    def _accepts(self, value: Any) -> bool:
        return isinstance(value, str)

    def get(self, filename: str) -> Optional[str]:
        return self.entries.get(filename)

    def set(self, filename: str, fingerprint: str) -> None:
        self.entries[filename] = fingerprint

    async def record(self, filename: str, fingerprint: str) -> None:
        """Set and persist in one step.

        If the ledger cannot be written the in-memory entry is left as it
        was, so the same content is not mistaken for already synced.
        """
        await self._update(filename, fingerprint)
