"""Keeps per-language JSON translation catalogs in sync with a source catalog."""

__version__ = "1.0.0"
