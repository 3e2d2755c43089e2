"""Command-line entry point for translation-sync."""

import argparse
import asyncio
import signal
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from translation_sync import __version__
from translation_sync.catalogs import ChangeSet
from translation_sync.config import Settings, load_config
from translation_sync.errors import ConfigurationError, TranslationSyncError
from translation_sync.gateway import EchoGateway, GoogleTranslateGateway, TranslationGateway
from translation_sync.logging_config import setup_logging
from translation_sync.sync import PollingChangeSource, SyncOrchestrator, SyncOutcome

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="translation-sync",
        description="Propagate changed keys from a source translation catalog to target catalogs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version", action="version", version=f"translation-sync {__version__}"
    )
    parser.add_argument("--config-file", type=Path, help="Path to YAML configuration file")
    parser.add_argument("--directory", type=Path, help="Catalog directory")
    parser.add_argument("--source", dest="source_language", help="Source language tag, e.g. en")
    parser.add_argument("--targets", dest="target_languages", help="Comma-separated target tags, e.g. es,fr")
    parser.add_argument("--timeout", dest="translate_timeout", type=float, help="Per-key translation timeout (s)")
    parser.add_argument("--interval", dest="poll_interval", type=float, help="Watch polling interval (s)")
    parser.add_argument("--dry-run", action="store_true", default=None, help="Copy source text instead of translating")
    parser.add_argument("--debug", action="store_true", default=None, help="Enable debug logging")
    parser.add_argument("--silent", action="store_true", default=None, help="Only log warnings and errors")
    parser.add_argument("--verbose", action="store_true", default=None, help="Log every translated key")

    parser.add_argument("command", choices=["check", "watch"], help="check: sweep once; watch: follow changes")

    return parser.parse_args(argv)


def build_gateway(config: Settings) -> TranslationGateway:
    if config.dry_run:
        return EchoGateway()
    return GoogleTranslateGateway(url=config.translate_url, timeout=config.translate_timeout)


def log_completion(filename: str, changes: ChangeSet) -> None:
    structlog.get_logger("translation_sync").info(
        "Translation complete", filename=filename, keys=sorted(changes)
    )


async def run_check(orchestrator: SyncOrchestrator) -> int:
    results = await orchestrator.sweep()
    failed = [r.filename for r in results if r.outcome == SyncOutcome.FAILED]
    if failed:
        structlog.get_logger().error("Some files failed to sync", files=failed)
        return EXIT_FAILURE
    return EXIT_OK


async def run_watch(orchestrator: SyncOrchestrator, config: Settings) -> int:
    """Watch until SIGINT/SIGTERM; in-flight processing finishes first."""
    logger = structlog.get_logger()
    source = PollingChangeSource(config.directory, interval=config.poll_interval)
    stop_event = asyncio.Event()

    loop = asyncio.get_running_loop()

    def signal_handler(signum: int) -> None:
        logger.info("Shutdown signal received", signal=signum)
        stop_event.set()

    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, signal_handler, signum)
        except NotImplementedError:
            signal.signal(signum, lambda s, f: loop.call_soon_threadsafe(stop_event.set))

    try:
        await orchestrator.watch(source, stop_event)
    finally:
        source.stop()
    return EXIT_OK


async def run_application(config: Settings, command: str) -> int:
    """Create the orchestrator, run the command and release resources."""
    logger = structlog.get_logger()
    gateway = build_gateway(config)
    orchestrator = SyncOrchestrator(config, gateway, on_complete=log_completion)

    try:
        await orchestrator.init()
        if command == "check":
            return await run_check(orchestrator)
        return await run_watch(orchestrator, config)
    finally:
        await gateway.aclose()
        stats = orchestrator.errors.get_error_stats()
        if stats["total_errors"]:
            logger.warning("Errors during run", **stats)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    overrides = {
        key: value for key, value in vars(args).items()
        if key not in ("config_file", "command")
    }

    try:
        config = load_config(args.config_file, **overrides)
    except ConfigurationError as e:
        setup_logging(debug=bool(args.debug))
        structlog.get_logger().error("Configuration error", error=e.message, **e.context)
        return EXIT_CONFIG

    setup_logging(debug=config.debug, silent=config.silent)

    try:
        return asyncio.run(run_application(config, args.command))
    except ConfigurationError as e:
        structlog.get_logger().error("Configuration error", error=e.message, **e.context)
        return EXIT_CONFIG
    except TranslationSyncError as e:
        structlog.get_logger().error("Translation sync failed", **e.to_dict())
        return EXIT_FAILURE
    except KeyboardInterrupt:
        return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
