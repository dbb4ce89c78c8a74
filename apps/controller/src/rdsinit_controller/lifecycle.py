"""
Lifecycle State Machine of the Initialization Resource.

The orchestrator sends one of three lifecycle events for the resource. Each
maps to exactly one action:

    Create -> Invoke
    Update -> Invoke   (Skip when the physical resource id did not change)
    Delete -> NoOp     (applied schema changes are never rolled back)

The Update/Skip rule is what gives "at most one invocation per identity": the
physical resource id embeds the invocation identity, so an Update whose newly
computed id equals the one the orchestrator already holds is a replay of a
configuration that was already applied.
"""

from __future__ import annotations

from enum import Enum


class LifecycleEvent(str, Enum):
    """Lifecycle events, spelled the way the orchestrator sends them."""

    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


class LifecycleAction(str, Enum):
    INVOKE = "invoke"
    SKIP = "skip"
    NOOP = "noop"


_TRANSITIONS: dict[LifecycleEvent, LifecycleAction] = {
    LifecycleEvent.CREATE: LifecycleAction.INVOKE,
    LifecycleEvent.UPDATE: LifecycleAction.INVOKE,
    LifecycleEvent.DELETE: LifecycleAction.NOOP,
}


def decide_action(
    event: LifecycleEvent,
    physical_resource_id: str,
    previous_physical_resource_id: str | None = None,
) -> LifecycleAction:
    """
    Decides what the controller does for a lifecycle event.

    Args:
        event: The lifecycle event being evaluated.
        physical_resource_id: The id computed from the current configuration
            and job version.
        previous_physical_resource_id: The id the orchestrator holds from the
            last successful evaluation, if any.

    Returns:
        LifecycleAction: INVOKE, SKIP or NOOP.
    """
    action = _TRANSITIONS[event]
    if action is LifecycleAction.INVOKE and previous_physical_resource_id == physical_resource_id:
        return LifecycleAction.SKIP
    return action
