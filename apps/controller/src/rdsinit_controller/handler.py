"""
Orchestrator-Facing Entrypoint of the Trigger Controller.

The orchestrator calls `on_event` for every lifecycle event of the
initialization resource, with the custom-resource event shape:

    {
        "RequestType": "Create" | "Update" | "Delete",
        "PhysicalResourceId": "<id from the previous evaluation>",   # not on Create
        "ResourceProperties": {"params": {"databaseName", "endpoint", "dbSecretArn"}}
    }

and receives `{"PhysicalResourceId": ..., "Data": {"Payload": ...}}`. Any
exception raised from here fails the deployment.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from rdsinit_common.errors import ConfigurationError
from rdsinit_common.models import InitConfig

from .controller import TriggerController
from .lifecycle import LifecycleEvent

_controller: TriggerController | None = None


def get_controller() -> TriggerController:
    """Returns the process-wide controller, created on first use."""
    global _controller
    if _controller is None:
        _controller = TriggerController()
    return _controller


def reset_controller() -> None:
    """Drops the cached controller. Intended for tests."""
    global _controller
    _controller = None


def parse_event(event: dict[str, Any]) -> tuple[LifecycleEvent, InitConfig, str | None]:
    """
    Extracts the lifecycle event, configuration and previous id from an event.

    Raises:
        ConfigurationError: If the request type is unknown or the properties
            are not a valid configuration.
    """
    try:
        lifecycle_event = LifecycleEvent(event.get("RequestType"))
    except ValueError as e:
        raise ConfigurationError(f"Unsupported RequestType: {event.get('RequestType')!r}") from e

    properties = event.get("ResourceProperties") or {}
    params = properties.get("params", properties)
    try:
        config = InitConfig.model_validate(params)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid resource properties: {e}") from e
    return lifecycle_event, config, event.get("PhysicalResourceId")


def on_event(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """
    Handles one orchestrator event.

    Args:
        event: The lifecycle event (see module docstring).
        context: Runtime context object (unused).

    Returns:
        dict: `{"PhysicalResourceId": ..., "Data": {...}}`.
    """
    lifecycle_event, config, previous_id = parse_event(event)
    response = get_controller().handle_event(lifecycle_event, config, previous_id)
    return response.to_dict()
