"""
Network Design Planner - Snapshot Diff
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Structural diff between two design snapshots.

Mappings are compared by key and lists by index. Each difference is a
change entry:

    {"path": "requirements.segments[0].name", "operation": "modified",
     "old_value": "Staff", "new_value": "Guests"}
"""

from typing import Any

from ..models.version import ChangeOperation

# Bookkeeping keys that differ between any two captures
IGNORED_KEYS = frozenset({"id", "created_at", "updated_at"})


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else str(key)


def _walk(old: Any, new: Any, path: str, changes: list[dict[str, Any]]) -> None:
    if isinstance(old, dict) and isinstance(new, dict):
        for key in old:
            if key in IGNORED_KEYS:
                continue
            child = _join(path, key)
            if key not in new:
                changes.append(_change(child, ChangeOperation.REMOVED, old[key], None))
            else:
                _walk(old[key], new[key], child, changes)
        for key in new:
            if key in IGNORED_KEYS or key in old:
                continue
            changes.append(_change(_join(path, key), ChangeOperation.ADDED, None, new[key]))
        return

    if isinstance(old, list) and isinstance(new, list):
        for index in range(max(len(old), len(new))):
            child = f"{path}[{index}]"
            if index >= len(new):
                changes.append(_change(child, ChangeOperation.REMOVED, old[index], None))
            elif index >= len(old):
                changes.append(_change(child, ChangeOperation.ADDED, None, new[index]))
            else:
                _walk(old[index], new[index], child, changes)
        return

    if old != new or type(old) is not type(new):
        changes.append(_change(path, ChangeOperation.MODIFIED, old, new))


def _change(path: str, operation: str, old_value: Any, new_value: Any) -> dict[str, Any]:
    return {
        "path": path,
        "operation": operation,
        "old_value": old_value,
        "new_value": new_value,
    }


def diff_snapshots(old: dict[str, Any] | None, new: dict[str, Any] | None) -> list[dict[str, Any]]:
    """Return the change entries that turn `old` into `new`."""
    changes: list[dict[str, Any]] = []
    _walk(old or {}, new or {}, "", changes)
    return changes


def summarize(changes: list[dict[str, Any]]) -> dict[str, int]:
    """Count changes per operation; the counts always add up to the total."""
    summary = {
        "total_changes": len(changes),
        ChangeOperation.ADDED: 0,
        ChangeOperation.REMOVED: 0,
        ChangeOperation.MODIFIED: 0,
    }
    for change in changes:
        summary[change["operation"]] += 1
    return summary
