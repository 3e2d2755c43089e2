"""
Unit tests for the polling change source.
"""

import asyncio
import os
from pathlib import Path

import pytest

from translation_sync.sync import ChangeEvent, ChangeKind, PollingChangeSource


def touch(path: Path, content: str, mtime_ns: int) -> None:
    path.write_text(content, encoding="utf-8")
    os.utime(path, ns=(mtime_ns, mtime_ns))


class TestPollingChangeSource:
    """Test event detection."""

    def test_initial_files_do_not_emit(self, temp_dir: Path):
        touch(temp_dir / "en.json", "{}", 1_000_000_000)
        source = PollingChangeSource(temp_dir)

        source.prime()

        assert source.poll() == []

    def test_first_poll_without_prime_is_silent(self, temp_dir: Path):
        touch(temp_dir / "en.json", "{}", 1_000_000_000)

        assert PollingChangeSource(temp_dir).poll() == []

    def test_added_and_modified(self, temp_dir: Path):
        touch(temp_dir / "en.json", "{}", 1_000_000_000)
        source = PollingChangeSource(temp_dir)
        source.prime()

        touch(temp_dir / "en.json", '{"a": "b"}', 2_000_000_000)
        touch(temp_dir / "es.json", "{}", 2_000_000_000)

        assert source.poll() == [
            ChangeEvent(ChangeKind.MODIFIED, temp_dir / "en.json"),
            ChangeEvent(ChangeKind.ADDED, temp_dir / "es.json"),
        ]
        assert source.poll() == []

    def test_hidden_and_non_json_ignored(self, temp_dir: Path):
        source = PollingChangeSource(temp_dir)
        source.prime()

        touch(temp_dir / ".translation-hashes.json", "{}", 1_000_000_000)
        touch(temp_dir / "notes.txt", "hi", 1_000_000_000)
        (temp_dir / "nested.json").mkdir()

        assert source.poll() == []

    def test_nested_files_reported_by_full_path(self, temp_dir: Path):
        (temp_dir / "admin").mkdir()
        (temp_dir / ".git").mkdir()
        source = PollingChangeSource(temp_dir)
        source.prime()

        touch(temp_dir / "admin" / "en.json", "{}", 1_000_000_000)
        touch(temp_dir / ".git" / "en.json", "{}", 1_000_000_000)

        assert source.poll() == [ChangeEvent(ChangeKind.ADDED, temp_dir / "admin" / "en.json")]
        assert list(source.scan()) == ["admin/en.json"]

        touch(temp_dir / "admin" / "en.json", '{"a": "b"}', 2_000_000_000)

        assert source.poll() == [ChangeEvent(ChangeKind.MODIFIED, temp_dir / "admin" / "en.json")]

    def test_missing_directory(self, temp_dir: Path):
        source = PollingChangeSource(temp_dir / "gone")

        assert source.scan() == {}

    @pytest.mark.asyncio
    async def test_iteration_stops(self, temp_dir: Path):
        source = PollingChangeSource(temp_dir, interval=0.01)
        received = []

        async def consume():
            async for event in source:
                received.append(event)
                source.stop()

        task = asyncio.create_task(consume())
        await asyncio.sleep(0.05)
        touch(temp_dir / "en.json", "{}", 3_000_000_000)

        await asyncio.wait_for(task, timeout=2.0)

        assert received == [ChangeEvent(ChangeKind.ADDED, temp_dir / "en.json")]
