"""
Network Design Planner - Template Variable Validation
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Checks template variable definitions and resolves the values used for a
render. All problems found in one pass are reported in a single
ValidationError so clients can fix a form in one round trip.
"""

import ipaddress
import re
from collections.abc import Mapping
from typing import Any

from ..core.exceptions import ValidationError
from ..core.logging import get_logger

logger = get_logger(__name__)

VARIABLE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")

DATA_TYPES = ("string", "number", "ip", "cidr", "boolean", "select")
SCOPES = ("global", "device", "interface")
BOOLEAN_VALUES = ("true", "false", "yes", "no", "1", "0")


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def validate_definitions(variables: list[Mapping[str, Any]]) -> None:
    """
    Validate a template's variable definitions.

    Raises:
        ValidationError: listing every invalid definition
    """
    errors = []
    seen: set[str] = set()

    for index, var in enumerate(variables):
        name = var.get("name") or ""
        field = f"variables[{index}]"

        if not VARIABLE_NAME_PATTERN.match(name):
            errors.append({"field": field, "name": name, "message": "Name may only contain letters, digits and underscores"})
        elif name in seen:
            errors.append({"field": field, "name": name, "message": "Duplicate variable name"})
        seen.add(name)

        data_type = var.get("data_type") or "string"
        if data_type not in DATA_TYPES:
            errors.append({"field": field, "name": name, "message": f"Unknown data type '{data_type}'"})

        scope = var.get("scope") or "global"
        if scope not in SCOPES:
            errors.append({"field": field, "name": name, "message": f"Unknown scope '{scope}'"})

        pattern = var.get("validation_regex")
        if pattern:
            try:
                re.compile(pattern)
            except re.error as e:
                errors.append({"field": field, "name": name, "message": f"Invalid validation regex: {e}"})

        if data_type == "select" and not var.get("options"):
            errors.append({"field": field, "name": name, "message": "Select variables need at least one option"})

    if errors:
        raise ValidationError(
            "Invalid variable definitions",
            details={"errors": errors},
        )


def _type_error(data_type: str, value: str, options: list[str] | None) -> str | None:
    """Return a message if value is not a valid instance of data_type."""
    if data_type == "number":
        try:
            float(value)
        except ValueError:
            return "Must be a number"
    elif data_type == "ip":
        try:
            ipaddress.ip_address(value)
        except ValueError:
            return "Must be an IP address"
    elif data_type == "cidr":
        try:
            ipaddress.ip_network(value, strict=False)
        except ValueError:
            return "Must be a network in CIDR notation"
    elif data_type == "boolean":
        if value.lower() not in BOOLEAN_VALUES:
            return "Must be a boolean (true/false)"
    elif data_type == "select":
        if value not in (options or []):
            return f"Must be one of: {', '.join(options or [])}"
    return None


def resolve_values(
    variables: list[Mapping[str, Any]],
    overrides: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Resolve the value of every declared variable.

    Each variable takes its override, else its default, else "".

    Raises:
        ValidationError: for unknown override names, missing required
            values, and values that fail their data type or regex
    """
    overrides = dict(overrides or {})
    declared = [var["name"] for var in variables]
    errors = []

    unknown = [name for name in overrides if name not in declared]
    for name in unknown:
        errors.append({"variable": name, "message": "Not declared by the template"})

    resolved: dict[str, Any] = {}
    for var in variables:
        name = var["name"]
        value = overrides.get(name)
        if _is_blank(value):
            value = var.get("default_value")

        if _is_blank(value):
            if var.get("required"):
                errors.append({"variable": name, "message": "Required variable has no value"})
            resolved[name] = ""
            continue

        text = "true" if value is True else "false" if value is False else str(value)
        problem = _type_error(var.get("data_type") or "string", text, var.get("options"))
        if problem is None and var.get("validation_regex"):
            if not re.fullmatch(var["validation_regex"], text):
                problem = "Does not match the required format"
        if problem:
            errors.append({"variable": name, "value": text, "message": problem})

        resolved[name] = value

    if errors:
        logger.warning(
            f"Variable validation rejected {len(errors)} value(s)",
            extra={"operation": "resolve_values"},
        )
        raise ValidationError(
            "Template variables failed validation",
            details={"errors": errors},
        )

    return resolved
