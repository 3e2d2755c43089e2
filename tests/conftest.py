"""
Pytest configuration and fixtures for translation-sync tests.
"""

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Set, Tuple

import pytest

from translation_sync.config import Settings
from translation_sync.errors import TranslationGatewayError
from translation_sync.gateway import TranslationGateway
from translation_sync.sync import SyncOrchestrator


class StubGateway(TranslationGateway):
    """Deterministic gateway: ``"Save"`` -> ``"[es] Save"``.

    Texts listed in ``fail_on`` raise a gateway error.
    """

    def __init__(self, fail_on: Optional[Set[str]] = None):
        self.calls: List[Tuple[str, str, str]] = []
        self.fail_on = fail_on or set()
        self.closed = False

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        self.calls.append((text, source_lang, target_lang))
        if text in self.fail_on:
            raise TranslationGatewayError("boom", source_lang=source_lang, target_lang=target_lang)
        return f"[{target_lang}] {text}"

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Settings:
    """Create test configuration."""
    return Settings(
        directory=temp_dir,
        source_language="en",
        target_languages=["es", "fr"],
        translate_timeout=1.0,
        poll_interval=0.01,
    )


@pytest.fixture
def gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def completions() -> List[Tuple[str, Dict[str, Any]]]:
    """Collects completion callback invocations."""
    return []


@pytest.fixture
def orchestrator(test_config: Settings, gateway: StubGateway, completions) -> SyncOrchestrator:
    """Orchestrator wired to the stub gateway; call ``await init()`` first."""
    return SyncOrchestrator(
        test_config,
        gateway,
        on_complete=lambda filename, changes: completions.append((filename, changes)),
    )


@pytest.fixture
def write_catalog(temp_dir: Path):
    """Helper to write catalog files."""
    def _write(filename: str, content: Any) -> Path:
        file_path = temp_dir / filename
        file_path.write_text(json.dumps(content, ensure_ascii=False, indent=2), encoding="utf-8")
        return file_path
    return _write


@pytest.fixture
def read_catalog(temp_dir: Path):
    """Helper to read catalog files."""
    def _read(filename: str) -> Any:
        return json.loads((temp_dir / filename).read_text(encoding="utf-8"))
    return _read
