"""
Network Design Planner - Variable Validation Tests
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later
"""

import pytest

from netplanner.core.exceptions import ValidationError
from netplanner.services.variable_validation import resolve_values, validate_definitions


class TestValidateDefinitions:
    """Tests for validate_definitions()"""

    def test_valid_definitions(self):
        """Well-formed definitions pass."""
        validate_definitions([
            {"name": "hostname", "required": True},
            {"name": "mgmt_ip", "data_type": "ip"},
            {"name": "mode", "data_type": "select", "options": ["access", "trunk"]},
        ])

    def test_duplicate_names(self):
        """Names must be unique within a template."""
        with pytest.raises(ValidationError) as exc_info:
            validate_definitions([{"name": "a"}, {"name": "a"}])
        assert exc_info.value.details["errors"][0]["message"] == "Duplicate variable name"

    def test_invalid_name(self):
        """Names are limited to letters, digits and underscores."""
        with pytest.raises(ValidationError):
            validate_definitions([{"name": "vlan-id"}])

    def test_bad_regex(self):
        """Validation patterns must compile."""
        with pytest.raises(ValidationError):
            validate_definitions([{"name": "a", "validation_regex": "("}])

    def test_select_without_options(self):
        """Select variables need options."""
        with pytest.raises(ValidationError):
            validate_definitions([{"name": "mode", "data_type": "select"}])


class TestResolveValues:
    """Tests for resolve_values()"""

    def test_override_then_default_then_empty(self):
        """Each variable resolves override, then default, then empty."""
        variables = [
            {"name": "a", "default_value": "da"},
            {"name": "b", "default_value": "db"},
            {"name": "c"},
        ]
        assert resolve_values(variables, {"a": "x"}) == {"a": "x", "b": "db", "c": ""}

    def test_required_without_value(self):
        """A required variable with neither override nor default is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            resolve_values([{"name": "hostname", "required": True}], {})
        assert exc_info.value.details["errors"][0]["variable"] == "hostname"

    def test_required_satisfied_by_default(self):
        """A default satisfies a required variable."""
        result = resolve_values([{"name": "domain", "required": True, "default_value": "corp"}], None)
        assert result == {"domain": "corp"}

    def test_unknown_override(self):
        """Overrides for undeclared names are rejected."""
        with pytest.raises(ValidationError):
            resolve_values([{"name": "a"}], {"b": "1"})

    @pytest.mark.parametrize("data_type,good,bad", [
        ("number", "42", "forty-two"),
        ("ip", "10.0.0.1", "10.0.0.999"),
        ("cidr", "10.0.0.0/24", "10.0.0.0/33"),
        ("boolean", "yes", "maybe"),
    ])
    def test_data_types(self, data_type, good, bad):
        """Values are checked against their data type."""
        variables = [{"name": "v", "data_type": data_type}]
        assert resolve_values(variables, {"v": good}) == {"v": good}
        with pytest.raises(ValidationError):
            resolve_values(variables, {"v": bad})

    def test_select_options(self):
        """Select values must be one of the options."""
        variables = [{"name": "mode", "data_type": "select", "options": ["access", "trunk"]}]
        assert resolve_values(variables, {"mode": "trunk"}) == {"mode": "trunk"}
        with pytest.raises(ValidationError):
            resolve_values(variables, {"mode": "hybrid"})

    def test_validation_regex_full_match(self):
        """The pattern must match the whole value."""
        variables = [{"name": "vlan", "validation_regex": r"\d{1,4}"}]
        assert resolve_values(variables, {"vlan": "100"}) == {"vlan": "100"}
        with pytest.raises(ValidationError):
            resolve_values(variables, {"vlan": "100a"})

    def test_all_errors_reported_together(self):
        """Every problem is collected into one error."""
        variables = [
            {"name": "hostname", "required": True},
            {"name": "mgmt_ip", "data_type": "ip"},
        ]
        with pytest.raises(ValidationError) as exc_info:
            resolve_values(variables, {"mgmt_ip": "nope", "extra": "1"})
        assert len(exc_info.value.details["errors"]) == 3
