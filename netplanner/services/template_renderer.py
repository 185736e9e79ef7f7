"""
Network Design Planner - Template Renderer
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Pure text substitution of {{name}} placeholders. No I/O and no clock,
so the same template and variables always render the same text.

The renderer never rejects input. Callers run find_undeclared_placeholders
before rendering and find_unresolved_placeholders after it, and turn any
findings into ValidationError themselves.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _normalize(variables: Iterable[Any]) -> list[tuple[str, Any, Any]]:
    """Turn {name, value, default} items or (name, value) pairs into triples."""
    result = []
    for item in variables:
        if isinstance(item, Mapping):
            default = item.get("default", item.get("default_value"))
            result.append((item["name"], item.get("value"), default))
        else:
            name, value = item
            result.append((name, value, None))
    return result


def render(template: str, variables: Iterable[Any]) -> str:
    """
    Substitute declared variables into a template.

    Each {{name}} token is replaced by the variable's value, else its
    default, else left in place. Matching is on the whole token, so a
    variable named "vlan" never touches "{{vlan_id}}".
    """
    replacements: dict[str, str] = {}
    for name, value, default in _normalize(variables):
        if value is not None and value != "":
            replacements[name] = _as_text(value)
        elif default is not None and default != "":
            replacements[name] = _as_text(default)
        elif value is not None:
            # Explicit empty value resolves to empty text
            replacements[name] = ""

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        if name in replacements:
            return replacements[name]
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(substitute, template)


def find_placeholders(template: str | None) -> list[str]:
    """Distinct placeholder names in order of first appearance."""
    seen: list[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(template or ""):
        name = match.group(1)
        if name not in seen:
            seen.append(name)
    return seen


def find_undeclared_placeholders(template: str | None, declared_names: Iterable[str]) -> list[str]:
    """Placeholders whose name is not among declared_names."""
    declared = set(declared_names)
    return [name for name in find_placeholders(template) if name not in declared]


def find_unresolved_placeholders(rendered: str | None) -> list[str]:
    """Placeholders still present after a render."""
    return find_placeholders(rendered)
