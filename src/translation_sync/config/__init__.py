"""Configuration for translation-sync."""

from .loader import load_config
from .settings import LANGUAGE_TAG_RE, Settings

__all__ = ["LANGUAGE_TAG_RE", "Settings", "load_config"]
