"""Settings for translation-sync."""

import re
from pathlib import Path
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

LANGUAGE_TAG_RE = re.compile(r"^[a-z]{2}(-[A-Z]{2})?$")


class Settings(BaseSettings):
    """Runtime configuration, immutable for the lifetime of an orchestrator.

    Values come from (lowest to highest precedence) a YAML config file,
    ``TRANSLATION_SYNC_*`` environment variables and explicit overrides.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRANSLATION_SYNC_",
        extra="ignore",
        frozen=True,
    )

    directory: Path = Path("./translations")
    source_language: str = "en"
    target_languages: Annotated[List[str], NoDecode] = Field(default_factory=list)

    ledger_filename: str = ".translation-hashes.json"
    snapshot_filename: str = ".translation-snapshots.json"

    # Gateway
    translate_timeout: float = 5.0
    translate_url: str = "https://translate.googleapis.com/translate_a/single"
    dry_run: bool = False

    # Watch mode
    poll_interval: float = 1.0

    # Output
    debug: bool = False
    silent: bool = False
    verbose: bool = False

    @field_validator("source_language")
    @classmethod
    def _validate_source(cls, value: str) -> str:
        if not LANGUAGE_TAG_RE.match(value):
            raise ValueError(f"invalid language tag: {value!r}")
        return value

    @field_validator("target_languages", mode="before")
    @classmethod
    def _split_targets(cls, value):
        # Accept "es,fr" from env vars and CLI
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("target_languages")
    @classmethod
    def _validate_targets(cls, value: List[str]) -> List[str]:
        seen = []
        for tag in value:
            if not LANGUAGE_TAG_RE.match(tag):
                raise ValueError(f"invalid language tag: {tag!r}")
            if tag not in seen:
                seen.append(tag)
        return seen

    @field_validator("translate_timeout", "poll_interval")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @property
    def ledger_path(self) -> Path:
        return self.directory / self.ledger_filename

    @property
    def snapshot_path(self) -> Path:
        return self.directory / self.snapshot_filename

    @property
    def effective_targets(self) -> List[str]:
        """Targets in configured order, without the source language."""
        return [tag for tag in self.target_languages if tag != self.source_language]
