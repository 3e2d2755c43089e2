"""Polling change-signal source for a catalog directory."""

import asyncio
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import AsyncIterator, Dict, List, Optional, Tuple

import structlog

from ..catalogs.store import find_catalog_files

logger = structlog.get_logger(__name__)

FileStamp = Tuple[int, int]


class ChangeKind(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"


@dataclass(frozen=True)
class ChangeEvent:
    kind: ChangeKind
    path: Path


class PollingChangeSource:
    """Emits change events by comparing mtime/size stamps between polls.

    Visible ``*.json`` files anywhere under ``directory`` are watched, except
    inside hidden directories. Stamps are keyed by relative POSIX path.
    Files present when watching starts do not produce events.
    """

    def __init__(self, directory: Path, interval: float = 1.0):
        self.directory = Path(directory)
        self.interval = interval
        self._stamps: Optional[Dict[str, FileStamp]] = None
        self._stopped = asyncio.Event()

    def scan(self) -> Dict[str, FileStamp]:
        if not os.path.isdir(self.directory):
            logger.warning("Watched directory disappeared", directory=str(self.directory))
            return {}

        stamps: Dict[str, FileStamp] = {}
        for relative in find_catalog_files(self.directory):
            try:
                stat = os.stat(self.directory / relative)
            except FileNotFoundError:
                continue
            stamps[relative] = (stat.st_mtime_ns, stat.st_size)
        return stamps

    def prime(self) -> None:
        """Record the current state without emitting events."""
        self._stamps = self.scan()

    def poll(self) -> List[ChangeEvent]:
        """Events since the previous poll, in relative path order."""
        current = self.scan()
        if self._stamps is None:
            self._stamps = current
            return []

        events = []
        for name in sorted(current):
            previous = self._stamps.get(name)
            if previous is None:
                events.append(ChangeEvent(ChangeKind.ADDED, self.directory / name))
            elif previous != current[name]:
                events.append(ChangeEvent(ChangeKind.MODIFIED, self.directory / name))

        self._stamps = current
        return events

    def stop(self) -> None:
        self._stopped.set()

    def __aiter__(self) -> AsyncIterator[ChangeEvent]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[ChangeEvent]:
        if self._stamps is None:
            self.prime()

        while not self._stopped.is_set():
            for event in self.poll():
                yield event

            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
