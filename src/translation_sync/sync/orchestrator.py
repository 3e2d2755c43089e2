"""Synchronization engine: drives a file-change signal to updated targets."""

import asyncio
import inspect
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, AsyncIterable, Awaitable, Callable, Dict, List, Optional, Tuple, Union

import aiofiles.os
import structlog

from ..catalogs import (
    Catalog,
    CatalogStore,
    ChangeSet,
    apply_changes,
    diff,
    find_catalog_files,
    is_catalog_filename,
    language_tag_from_filename,
    removed_paths,
    target_filename,
)
from ..config import Settings
from ..errors import (
    ConfigurationError,
    ErrorTracker,
    LedgerWriteError,
    TranslationGatewayError,
    TranslationSyncError,
)
from ..gateway import TranslationGateway
from ..storage import FingerprintLedger, SnapshotStore, fingerprint_of
from .watcher import ChangeEvent, ChangeKind

logger = structlog.get_logger(__name__)

CompletionCallback = Callable[[str, ChangeSet], Union[None, Awaitable[None]]]


class SyncOutcome(str, Enum):
    SKIPPED = "skipped"                  # not a catalog file
    NO_OP = "no_op"                      # fingerprint unchanged
    TARGET_ACCEPTED = "target_accepted"  # target edited directly, taken as-is
    NO_CHANGES = "no_changes"            # source changed but nothing to propagate
    SYNCED = "synced"
    FAILED = "failed"


@dataclass
class SyncResult:
    """What happened to one file-change signal."""

    filename: str
    outcome: SyncOutcome
    changes: ChangeSet = field(default_factory=dict)
    targets_written: List[str] = field(default_factory=list)
    # target language -> keys that fell back to the source text
    fallbacks: Dict[str, List[str]] = field(default_factory=dict)
    error: Optional[str] = None


class SyncOrchestrator:
    """Propagates source-catalog changes to every target catalog.

    Each signal is classified, fingerprinted and, for the source language,
    diffed against the last-synced snapshot; the change set is translated
    and merged into each target in configured order. Fingerprints are
    recorded only after the content they describe has been written.

    Args:
        settings: Immutable configuration
        gateway: Translation capability
        on_complete: Called with ``(filename, changes)`` after each source
            sync; may be a coroutine function
        store: Catalog store, replaceable in tests
    """

    def __init__(
        self,
        settings: Settings,
        gateway: TranslationGateway,
        on_complete: Optional[CompletionCallback] = None,
        store: Optional[CatalogStore] = None,
    ):
        self.settings = settings
        self.directory = Path(settings.directory)
        self.gateway = gateway
        self.on_complete = on_complete
        self.store = store or CatalogStore()
        self.ledger = FingerprintLedger(settings.ledger_path)
        self.snapshots = SnapshotStore(settings.snapshot_path)
        self.errors = ErrorTracker()
        self._lock = asyncio.Lock()

    async def init(self) -> None:
        """Prepare the catalog directory and load persisted state.

        Raises:
            ConfigurationError: If the directory cannot be created or used
        """
        try:
            await aiofiles.os.makedirs(self.directory, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot create catalog directory {self.directory}: {e}",
                config_key="directory",
                previous_error=e,
            ) from e

        if not os.access(self.directory, os.R_OK | os.W_OK | os.X_OK):
            raise ConfigurationError(
                f"Catalog directory {self.directory} is not readable and writable",
                config_key="directory",
            )

        await self.ledger.load()
        await self.snapshots.load()

        logger.info(
            "Translation sync initialized",
            directory=str(self.directory),
            source_language=self.settings.source_language,
            target_languages=self.settings.target_languages,
            known_files=len(self.ledger),
        )

    async def process_file_change(self, path: Union[str, Path]) -> SyncResult:
        """Run one change signal through the state machine.

        Signals are serialized: a second call waits for the first to finish.

        Raises:
            CatalogWriteError: A target catalog could not be written
            LedgerWriteError: Fingerprints or snapshots could not be persisted
        """
        async with self._lock:
            return await self._process(Path(path))

    def catalog_key(self, path: Path) -> str:
        """Ledger and snapshot key: POSIX path relative to the catalog directory.

        Paths outside the directory fall back to the bare filename.
        """
        relative = os.path.relpath(path, self.directory)
        if relative == os.pardir or relative.startswith(os.pardir + os.sep):
            return path.name
        return Path(relative).as_posix()

    async def _process(self, path: Path) -> SyncResult:
        key = self.catalog_key(path)
        language = language_tag_from_filename(path.name) if is_catalog_filename(path.name) else None
        log = logger.bind(filename=key)

        if language is None:
            log.info("Skipping non-translation file")
            return SyncResult(key, SyncOutcome.SKIPPED)

        current = await self.store.load(path)
        current_fingerprint = fingerprint_of(current)

        if current_fingerprint == self.ledger.get(key):
            log.info("No changes detected")
            return SyncResult(key, SyncOutcome.NO_OP)

        if language != self.settings.source_language:
            log.info("Accepting direct edit of non-source file", language=language)
            await self.ledger.record(key, current_fingerprint)
            return SyncResult(key, SyncOutcome.TARGET_ACCEPTED)

        previous = self.snapshots.get(key)
        changes = diff(previous, current)

        removed = removed_paths(previous, current)
        if removed:
            log.info("Removed keys are not propagated to targets", keys=removed)

        if not changes:
            log.info("No translatable changes")
            await self._commit_source(key, current, current_fingerprint)
            return SyncResult(key, SyncOutcome.NO_CHANGES)

        log.info("Found changes to translate", count=len(changes))
        result = SyncResult(key, SyncOutcome.SYNCED, changes=changes)

        for target_lang in self.settings.effective_targets:
            await self._sync_target(path, language, target_lang, changes, result)

        await self._commit_source(key, current, current_fingerprint)
        log.info("Translation sync completed", targets=result.targets_written)

        await self._notify(key, changes)
        return result

    async def _sync_target(
        self,
        source_path: Path,
        source_lang: str,
        target_lang: str,
        changes: ChangeSet,
        result: SyncResult,
    ) -> None:
        # Targets live next to their source, also in subdirectories
        target_path = source_path.with_name(target_filename(source_path.name, target_lang))
        target_key = self.catalog_key(target_path)
        log = logger.bind(filename=target_key, target_language=target_lang)

        if not await aiofiles.os.path.exists(target_path):
            log.info("Creating new file")
        target = await self.store.load(target_path)

        translations, fallbacks = await self.translate_changes(changes, source_lang, target_lang)
        apply_changes(target, translations)

        await self.store.save(target_path, target)
        await self.ledger.record(target_key, fingerprint_of(target))

        result.targets_written.append(target_key)
        if fallbacks:
            result.fallbacks[target_lang] = fallbacks
        log.info("Updated target file", keys=len(translations), fallbacks=len(fallbacks))

    async def translate_changes(
        self, changes: ChangeSet, source_lang: str, target_lang: str
    ) -> Tuple[Dict[str, Any], List[str]]:
        """Translate each changed value, falling back to the source text.

        Returns:
            Translated change set and the keys that fell back
        """
        translations: Dict[str, Any] = {}
        fallbacks: List[str] = []

        for key, value in changes.items():
            if not isinstance(value, str):
                translations[key] = value
                continue

            try:
                translated = await asyncio.wait_for(
                    self.gateway.translate(value, source_lang, target_lang),
                    timeout=self.settings.translate_timeout,
                )
                if not isinstance(translated, str):
                    raise TranslationGatewayError(
                        f"Gateway returned {type(translated).__name__}, expected str",
                        source_lang=source_lang,
                        target_lang=target_lang,
                    )
            except Exception as e:
                logger.error(
                    "Failed to translate key, keeping source text",
                    key=key,
                    source_language=source_lang,
                    target_language=target_lang,
                    error=str(e) or e.__class__.__name__,
                )
                self.errors.record_error(e, {"key": key, "target_language": target_lang})
                translations[key] = value
                fallbacks.append(key)
                continue

            translations[key] = translated
            if self.settings.verbose:
                logger.info(
                    "Translated key",
                    key=key,
                    source_text=value,
                    translated_text=translated,
                    source_language=source_lang,
                    target_language=target_lang,
                )

        return translations, fallbacks

    async def _commit_source(self, key: str, content: Catalog, fingerprint: str) -> None:
        """Record the snapshot, then the fingerprint; both or neither."""
        previous = await self.snapshots.record(key, content)
        try:
            await self.ledger.record(key, fingerprint)
        except LedgerWriteError:
            await self.snapshots.revert(key, previous)
            raise

    async def _notify(self, filename: str, changes: ChangeSet) -> None:
        if self.on_complete is None:
            return
        try:
            outcome = self.on_complete(filename, dict(changes))
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.error("Completion callback failed", filename=filename, error=str(e))

    async def sweep(self) -> List[SyncResult]:
        """Process every catalog under the directory once, then forget fingerprints.

        The ledger file is deleted afterwards so the next sweep re-validates
        every file against content. Source snapshots are kept, so unchanged
        keys are still not re-translated.

        Returns:
            One result per catalog file, in relative path order
        """
        logger.info("Checking for translation changes", directory=str(self.directory))

        if not await aiofiles.os.path.isdir(self.directory):
            raise ConfigurationError(
                f"Catalog directory {self.directory} does not exist",
                config_key="directory",
            )

        results = []
        for key in find_catalog_files(self.directory):
            try:
                results.append(await self.process_file_change(self.directory / key))
            except TranslationSyncError as e:
                logger.error("Failed to process file", filename=key, error=e.message)
                self.errors.record_error(e, {"filename": key})
                results.append(SyncResult(key, SyncOutcome.FAILED, error=e.message))

        await self.ledger.discard()

        logger.info(
            "Check complete",
            files=len(results),
            synced=sum(1 for r in results if r.outcome == SyncOutcome.SYNCED),
            failed=sum(1 for r in results if r.outcome == SyncOutcome.FAILED),
        )
        return results

    async def watch(
        self, source: AsyncIterable[ChangeEvent], stop_event: Optional[asyncio.Event] = None
    ) -> None:
        """Process change events until ``source`` ends or ``stop_event`` is set.

        Setting ``stop_event`` interrupts the wait for the next event only; a
        signal already being processed is allowed to finish.
        """
        logger.info("Watching for changes", directory=str(self.directory))

        events = source.__aiter__()
        stopper = asyncio.ensure_future(stop_event.wait()) if stop_event is not None else None
        try:
            while stopper is None or not stopper.done():
                next_event = asyncio.ensure_future(events.__anext__())
                pending = {next_event} if stopper is None else {next_event, stopper}
                await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)

                if not next_event.done():
                    next_event.cancel()
                    await asyncio.gather(next_event, return_exceptions=True)
                    break
                try:
                    event = next_event.result()
                except StopAsyncIteration:
                    break

                await self._handle_event(event)
        finally:
            if stopper is not None:
                stopper.cancel()

        logger.info("Stopped watching", directory=str(self.directory))

    async def _handle_event(self, event: ChangeEvent) -> None:
        name = self.catalog_key(event.path)
        if event.kind == ChangeKind.ADDED:
            logger.info("New translation file detected", filename=name)
        try:
            await self.process_file_change(event.path)
        except Exception as e:
            logger.error("Error processing file", filename=name, error=str(e), exc_info=True)
            self.errors.record_error(e, {"filename": name})
