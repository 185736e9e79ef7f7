"""
Network Design Planner - Deployment Lifecycle
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Deployment status tracking using the transitions library.

Status changes are driven by operators reporting what happened on the
device, so the machine is intentionally permissive: every status can move
to every other status (including itself). The machine exists to give each
change a single entry point with logging and a change callback, not to
reject transitions.

    pending ◄──► active ◄──► failed ◄──► rolled-back
       ▲                                      │
       └──────────────────────────────────────┘
                  (any -> any)
"""

import logging
from datetime import UTC, datetime
from typing import Any, Callable

from transitions import Machine

from ..models.template import DeploymentStatus

logger = logging.getLogger(__name__)


def trigger_for(status: str) -> str:
    """Trigger name that moves a deployment to the given status."""
    return "mark_" + status.replace("-", "_")


class DeploymentLifecycle:
    """
    Status machine for a single deployment record.

    Example:
        lifecycle = DeploymentLifecycle(deployment_id=7, initial_state="pending")
        lifecycle.set_status("active")       # pending -> active
        lifecycle.set_status("rolled-back")  # active -> rolled-back
        lifecycle.set_status("active")       # allowed, no transition table
    """

    states = list(DeploymentStatus.ALL)

    transitions = [
        {
            "trigger": trigger_for(status),
            "source": "*",
            "dest": status,
            "before": "_before_change",
            "after": "_after_change",
        }
        for status in DeploymentStatus.ALL
    ]

    def __init__(
        self,
        deployment_id: int | None,
        initial_state: str = DeploymentStatus.PENDING,
        on_state_change: Callable[[int | None, str, str], None] | None = None,
    ):
        """
        Args:
            deployment_id: Deployment record id (for logging and callbacks)
            initial_state: Status currently stored on the record
            on_state_change: Callback (deployment_id, old_status, new_status)
        """
        self.deployment_id = deployment_id
        self.on_state_change = on_state_change
        self.state_since = datetime.now(UTC)
        self._previous_state: str | None = None

        self.machine = Machine(
            model=self,
            states=self.states,
            transitions=self.transitions,
            initial=initial_state,
            auto_transitions=False,
            ignore_invalid_triggers=False,
            send_event=True,
        )

    @property
    def current_state(self) -> str:
        return self.state

    def set_status(self, status: str) -> str:
        """Move to `status` from whatever the current status is."""
        if status not in DeploymentStatus.ALL:
            raise ValueError(f"Unknown deployment status: {status}")
        getattr(self, trigger_for(status))()
        return self.state

    def _before_change(self, event: Any) -> None:
        self._previous_state = event.transition.source

    def _after_change(self, event: Any) -> None:
        old_state = self._previous_state or DeploymentStatus.PENDING
        if old_state == self.state:
            return

        self.state_since = datetime.now(UTC)
        logger.info(
            f"Deployment {self.deployment_id}: {old_state} -> {self.state}",
            extra={"operation": "deployment_status"}
        )
        if self.on_state_change:
            self.on_state_change(self.deployment_id, old_state, self.state)
