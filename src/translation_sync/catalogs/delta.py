"""Merging a change set into a target catalog."""

from typing import Any, Mapping

import structlog

from .store import Catalog

logger = structlog.get_logger(__name__)


def set_nested_value(catalog: Catalog, path: str, value: Any) -> None:
    """Set the leaf at dotted ``path``, creating intermediate nodes.

    Overwrite policy: a non-mapping value sitting where a node is needed is
    replaced by an empty node, discarding that value.
    """
    *parents, leaf = path.split(".")
    current = catalog

    for key in parents:
        node = current.get(key)
        if not isinstance(node, dict):
            if node is not None:
                logger.warning(
                    "Overwriting scalar to make room for nested key",
                    key=key,
                    path=path,
                    discarded=node,
                )
            node = {}
            current[key] = node
        current = node

    current[leaf] = value


def apply_changes(target: Catalog, changes: Mapping[str, Any]) -> Catalog:
    """Apply every ``(path, value)`` of ``changes`` to ``target`` in place.

    Untouched keys keep their values and position.

    Returns:
        The same ``target`` object, for chaining
    """
    for path, value in changes.items():
        set_nested_value(target, path, value)
    return target
