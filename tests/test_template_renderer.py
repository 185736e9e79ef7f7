"""
Network Design Planner - Template Renderer Tests
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Unit tests for placeholder substitution and detection.
"""

from netplanner.services.template_renderer import (
    find_placeholders,
    find_undeclared_placeholders,
    find_unresolved_placeholders,
    render,
)


class TestRender:
    """Tests for render()"""

    def test_replaces_all_occurrences(self):
        """Every occurrence of a placeholder is replaced."""
        result = render("vlan {{id}}\n name VLAN{{id}}", [{"name": "id", "value": "10"}])
        assert result == "vlan 10\n name VLAN10"

    def test_deterministic(self):
        """Same template and variables always give identical output."""
        template = "hostname {{host}}\ninterface {{port}}"
        variables = [{"name": "host", "value": "sw1"}, {"name": "port", "value": "Gi0/1"}]
        assert render(template, variables) == render(template, variables)

    def test_default_used_without_value(self):
        """The declared default fills in when no value is given."""
        result = render("ntp server {{ntp}}", [{"name": "ntp", "value": None, "default": "10.0.0.1"}])
        assert result == "ntp server 10.0.0.1"

    def test_all_defaults_leave_no_placeholders(self):
        """With a default for every variable, nothing is left unresolved."""
        template = "hostname {{host}}\nip domain-name {{domain}}"
        variables = [
            {"name": "host", "default": "edge-1"},
            {"name": "domain", "default": "corp.local"},
        ]
        assert find_unresolved_placeholders(render(template, variables)) == []

    def test_unresolvable_token_left_in_place(self):
        """No value and no default leaves the literal token for the caller to detect."""
        result = render("snmp community {{community}}", [{"name": "community"}])
        assert result == "snmp community {{community}}"
        assert find_unresolved_placeholders(result) == ["community"]

    def test_prefix_names_do_not_collide(self):
        """A variable named vlan never replaces part of {{vlan_id}}."""
        result = render(
            "{{vlan}} / {{vlan_id}}",
            [{"name": "vlan", "value": "A"}, {"name": "vlan_id", "value": "B"}],
        )
        assert result == "A / B"

        only_prefix = render("{{vlan_id}}", [{"name": "vlan", "value": "A"}])
        assert only_prefix == "{{vlan_id}}"

    def test_accepts_pairs(self):
        """(name, value) pairs work as well as mappings."""
        assert render("{{a}}-{{b}}", [("a", "1"), ("b", 2)]) == "1-2"

    def test_undeclared_tokens_untouched(self):
        """Placeholders without a declared variable stay as they are."""
        assert render("{{x}} {{y}}", [{"name": "x", "value": "1"}]) == "1 {{y}}"


class TestPlaceholderDetection:
    """Tests for placeholder scanning"""

    def test_undeclared_placeholders(self):
        """Names not in the declared list are reported."""
        assert find_undeclared_placeholders("Hello {{x}} {{y}}", ["x"]) == ["y"]

    def test_undeclared_reported_once_in_order(self):
        """Duplicates are reported once, in order of first appearance."""
        template = "{{b}} {{a}} {{b}} {{c}}"
        assert find_undeclared_placeholders(template, []) == ["b", "a", "c"]

    def test_whitespace_is_part_of_name(self):
        """Names are taken verbatim between the braces."""
        assert find_placeholders("{{ x }}") == [" x "]
        assert find_undeclared_placeholders("{{ x }}", ["x"]) == [" x "]

    def test_empty_template(self):
        """None and empty templates have no placeholders."""
        assert find_placeholders(None) == []
        assert find_undeclared_placeholders("", ["x"]) == []
