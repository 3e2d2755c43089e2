"""Nested diff between two catalogs, addressed by dotted paths."""

from typing import Any, Dict, List, Mapping

ChangeSet = Dict[str, Any]


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def diff(old: Mapping[str, Any], new: Mapping[str, Any], prefix: str = "") -> ChangeSet:
    """Compute added or modified leaves of ``new`` relative to ``old``.

    Walks ``new`` recursively. A leaf is reported when ``old`` has no equal
    leaf at the same path; a sub-tree missing from ``old`` (or shadowed there
    by a scalar) is compared against an empty one. Keys present only in
    ``old`` are never reported: deletions are not propagated.

    Args:
        old: Previously synced catalog
        new: Current catalog
        prefix: Dotted path of ``new`` within the full tree

    Returns:
        Mapping of dotted path to new leaf value
    """
    changes: ChangeSet = {}

    for key, value in new.items():
        path = _join(prefix, key)
        old_value = old.get(key)

        if isinstance(value, Mapping):
            old_node = old_value if isinstance(old_value, Mapping) else {}
            changes.update(diff(old_node, value, path))
        elif key not in old or isinstance(old_value, Mapping) or old_value != value:
            changes[path] = value
        elif type(old_value) is not type(value):
            # 1 == 1.0 == True in Python; a type change is still a change
            changes[path] = value

    return changes


def flatten(catalog: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Map every leaf of ``catalog`` to its dotted path."""
    leaves: Dict[str, Any] = {}
    for key, value in catalog.items():
        path = _join(prefix, key)
        if isinstance(value, Mapping):
            leaves.update(flatten(value, path))
        else:
            leaves[path] = value
    return leaves


def removed_paths(old: Mapping[str, Any], new: Mapping[str, Any]) -> List[str]:
    """Leaf paths present in ``old`` but gone from ``new``.

    Only used for reporting; removals are never applied to targets.
    """
    new_leaves = flatten(new)
    return sorted(path for path in flatten(old) if path not in new_leaves)
