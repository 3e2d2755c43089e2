"""Catalog model: storage, diffing and delta application."""

from .delta import apply_changes, set_nested_value
from .diff import ChangeSet, diff, flatten, removed_paths
from .store import (
    Catalog,
    CatalogStore,
    find_catalog_files,
    is_catalog_filename,
    language_tag_from_filename,
    target_filename,
)

__all__ = [
    "Catalog",
    "CatalogStore",
    "ChangeSet",
    "apply_changes",
    "diff",
    "find_catalog_files",
    "flatten",
    "is_catalog_filename",
    "language_tag_from_filename",
    "removed_paths",
    "set_nested_value",
    "target_filename",
]
