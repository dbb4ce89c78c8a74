"""Tests for the lifecycle state machine."""

from __future__ import annotations

import pytest

from rdsinit_controller.lifecycle import LifecycleAction, LifecycleEvent, decide_action


@pytest.mark.parametrize(
    "event, expected",
    [
        (LifecycleEvent.CREATE, LifecycleAction.INVOKE),
        (LifecycleEvent.UPDATE, LifecycleAction.INVOKE),
        (LifecycleEvent.DELETE, LifecycleAction.NOOP),
    ],
)
def test_each_event_maps_to_one_action(event: LifecycleEvent, expected: LifecycleAction) -> None:
    """Test the action for each event."""
    assert decide_action(event, "id-b", "id-a") is expected


def test_update_with_unchanged_identity_is_skipped() -> None:
    """Test that an unchanged Update is skipped."""
    assert decide_action(LifecycleEvent.UPDATE, "id-a", "id-a") is LifecycleAction.SKIP


def test_create_without_previous_id_invokes() -> None:
    """Test Create without a previous id."""
    assert decide_action(LifecycleEvent.CREATE, "id-a") is LifecycleAction.INVOKE


def test_delete_is_noop_even_with_unchanged_identity() -> None:
    """Test that Delete is never skipped or invoked."""
    assert decide_action(LifecycleEvent.DELETE, "id-a", "id-a") is LifecycleAction.NOOP


def test_events_parse_from_orchestrator_spelling() -> None:
    """Test parsing the orchestrator's event names."""
    assert [LifecycleEvent(name) for name in ("Create", "Update", "Delete")] == list(LifecycleEvent)
