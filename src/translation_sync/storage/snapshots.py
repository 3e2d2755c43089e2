"""Last-synced content of source catalogs, the "old" side of every diff."""

import copy
from typing import Any

from ..catalogs.store import Catalog
from .sidecar import JsonSideCar


class SnapshotStore(JsonSideCar):
    """Maps source catalog path to the content last propagated."""

    def _accepts(self, value: Any) -> bool:
        return isinstance(value, dict)

    def get(self, filename: str) -> Catalog:
        """Copy of the snapshot, or an empty catalog if none exists."""
        return copy.deepcopy(self.entries.get(filename, {}))

    def set(self, filename: str, catalog: Catalog) -> None:
        self.entries[filename] = copy.deepcopy(catalog)

    async def record(self, filename: str, catalog: Catalog) -> Any:
        """Set and persist; the in-memory entry is unchanged on failure.

        Returns:
            Token for :meth:`revert`
        """
        return await self._update(filename, copy.deepcopy(catalog))

    async def revert(self, filename: str, previous: Any) -> None:
        """Put back the snapshot replaced by :meth:`record`."""
        await self._revert(filename, previous)
