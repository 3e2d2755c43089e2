"""Configuration loading: YAML file, then environment, then explicit overrides."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
import yaml
from pydantic import ValidationError

from ..errors import ConfigurationError
from .settings import Settings

logger = structlog.get_logger(__name__)

ENV_PREFIX = "TRANSLATION_SYNC_"


def _read_config_file(config_file: Path) -> Dict[str, Any]:
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Cannot read config file {config_file}: {e}",
            config_key="config_file",
            previous_error=e,
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {config_file} must contain a mapping",
            config_key="config_file",
        )
    return data


def _env_overrides() -> Dict[str, Any]:
    return {
        key[len(ENV_PREFIX):].lower(): value
        for key, value in os.environ.items()
        if key.startswith(ENV_PREFIX) and key[len(ENV_PREFIX):].lower() in Settings.model_fields
    }


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> Settings:
    """Build :class:`Settings` from all configuration sources.

    Args:
        config_file: Optional YAML file with settings keys
        **overrides: Explicit values (usually CLI flags); ``None`` means unset

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If the file is unreadable or a value is invalid
    """
    data: Dict[str, Any] = {}
    if config_file is not None:
        data.update(_read_config_file(config_file))
        logger.debug("Loaded config file", file=str(config_file), keys=sorted(data))

    data.update(_env_overrides())
    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return Settings(**data)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(
            f"Invalid configuration: {first.get('msg')}",
            config_key=key or None,
            previous_error=e,
        ) from e
