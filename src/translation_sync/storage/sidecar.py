"""Base class for JSON side-car files kept next to the catalogs."""

import json
from pathlib import Path
from typing import Any, Dict

import aiofiles
import aiofiles.os
import structlog

from ..catalogs.store import write_text_atomic
from ..errors import LedgerWriteError

logger = structlog.get_logger(__name__)

_MISSING = object()


class JsonSideCar:
    """A ``key -> value`` mapping persisted as one JSON object.

    Keys are catalog paths relative to the catalog directory. Loading never
    fails: a missing or corrupt file yields an empty mapping. Changes made
    with ``set`` stay in memory until :meth:`persist` is called.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.entries: Dict[str, Any] = {}

    async def load(self) -> None:
        """Load entries from disk, falling back to empty."""
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                data = json.loads(await f.read())
        except FileNotFoundError:
            self.entries = {}
            return
        except (OSError, UnicodeDecodeError, ValueError, RecursionError) as e:
            logger.warning("Unreadable side-car file, starting empty", file=str(self.path), error=str(e))
            self.entries = {}
            return

        if not isinstance(data, dict):
            logger.warning("Side-car file is not a JSON object, starting empty", file=str(self.path))
            data = {}
        self.entries = {key: value for key, value in data.items() if self._accepts(value)}

    def _accepts(self, value: Any) -> bool:
        return True

    async def persist(self) -> None:
        """Write all entries atomically.

        Raises:
            LedgerWriteError: If the file could not be written
        """
        try:
            await write_text_atomic(
                self.path, json.dumps(self.entries, ensure_ascii=False, indent=2, sort_keys=True) + "\n"
            )
        except OSError as e:
            logger.error("Failed to persist side-car file", file=str(self.path), error=str(e))
            raise LedgerWriteError(
                f"Cannot write {self.path}: {e}", path=str(self.path), previous_error=e
            ) from e

    async def _update(self, key: str, value: Any) -> Any:
        """Set ``key`` and persist, restoring the old entry if persisting fails.

        Returns:
            The replaced value, for :meth:`_revert`
        """
        previous = self.entries.get(key, _MISSING)
        self.entries[key] = value
        try:
            await self.persist()
        except LedgerWriteError:
            self._restore(key, previous)
            raise
        return previous

    async def _revert(self, key: str, previous: Any) -> None:
        """Undo a successful :meth:`_update` in memory and on disk."""
        self._restore(key, previous)
        await self.persist()

    def _restore(self, key: str, previous: Any) -> None:
        if previous is _MISSING:
            self.entries.pop(key, None)
        else:
            self.entries[key] = previous

    async def discard(self) -> None:
        """Forget every entry and remove the file from disk."""
        self.entries = {}
        try:
            await aiofiles.os.remove(self.path)
            logger.info("Deleted side-car file", file=str(self.path))
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not delete side-car file", file=str(self.path), error=str(e))

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)
