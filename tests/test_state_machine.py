"""
Network Design Planner - Deployment Lifecycle Tests
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Unit tests for the permissive deployment status machine.
"""

import itertools

import pytest

from netplanner.core.state_machine import DeploymentLifecycle, trigger_for
from netplanner.models.template import DeploymentStatus


class TestDeploymentLifecycle:
    """Tests for DeploymentLifecycle transitions."""

    def test_initial_state_pending(self):
        """New deployments start pending."""
        lifecycle = DeploymentLifecycle(deployment_id=1)
        assert lifecycle.current_state == DeploymentStatus.PENDING

    def test_initial_state_custom(self):
        """The machine starts from the stored status."""
        lifecycle = DeploymentLifecycle(deployment_id=1, initial_state=DeploymentStatus.FAILED)
        assert lifecycle.current_state == DeploymentStatus.FAILED

    @pytest.mark.parametrize(
        "source,dest",
        list(itertools.product(DeploymentStatus.ALL, DeploymentStatus.ALL)),
    )
    def test_any_status_to_any_status(self, source, dest):
        """No transition is rejected."""
        lifecycle = DeploymentLifecycle(deployment_id=1, initial_state=source)
        assert lifecycle.set_status(dest) == dest
        assert lifecycle.current_state == dest

    def test_rolled_back_to_active(self):
        """Re-activating a rolled-back deployment is allowed."""
        lifecycle = DeploymentLifecycle(deployment_id=1, initial_state=DeploymentStatus.ROLLED_BACK)
        lifecycle.set_status(DeploymentStatus.ACTIVE)
        assert lifecycle.current_state == DeploymentStatus.ACTIVE

    def test_unknown_status(self):
        """Statuses outside the enumeration are rejected."""
        lifecycle = DeploymentLifecycle(deployment_id=1)
        with pytest.raises(ValueError):
            lifecycle.set_status("archived")

    def test_callback_on_change(self):
        """The change callback receives old and new status."""
        calls = []
        lifecycle = DeploymentLifecycle(
            deployment_id=7,
            on_state_change=lambda dep_id, old, new: calls.append((dep_id, old, new)),
        )
        lifecycle.set_status(DeploymentStatus.ACTIVE)
        lifecycle.set_status(DeploymentStatus.ROLLED_BACK)
        assert calls == [
            (7, DeploymentStatus.PENDING, DeploymentStatus.ACTIVE),
            (7, DeploymentStatus.ACTIVE, DeploymentStatus.ROLLED_BACK),
        ]

    def test_no_callback_when_unchanged(self):
        """Setting the current status again is not reported as a change."""
        calls = []
        lifecycle = DeploymentLifecycle(
            deployment_id=7,
            initial_state=DeploymentStatus.ACTIVE,
            on_state_change=lambda *args: calls.append(args),
        )
        lifecycle.set_status(DeploymentStatus.ACTIVE)
        assert calls == []

    def test_status_change_logged(self, caplog):
        """Each change is logged at INFO."""
        lifecycle = DeploymentLifecycle(deployment_id=3)
        with caplog.at_level("INFO", logger="netplanner.core.state_machine"):
            lifecycle.set_status(DeploymentStatus.FAILED)
        assert "Deployment 3: pending -> failed" in caplog.text

    def test_trigger_names(self):
        """Hyphenated statuses map to valid trigger names."""
        assert trigger_for(DeploymentStatus.ROLLED_BACK) == "mark_rolled_back"
        assert trigger_for(DeploymentStatus.ACTIVE) == "mark_active"
