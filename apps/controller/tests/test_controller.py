"""Tests for the Trigger Controller's decisions and result handling."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from rdsinit_common.config import RdsInitConfig
from rdsinit_common.errors import (
    ConfigurationError,
    InvocationPermissionError,
    InvocationTimeoutError,
    JobFailedError,
)
from rdsinit_common.identity import make_invocation_identity
from rdsinit_common.models import InitConfig, JobResult, JobStatus
from rdsinit_controller.controller import TriggerController
from rdsinit_controller.lifecycle import LifecycleAction, LifecycleEvent
from rdsinit_controller.permissions import InvokeScope

JOB_ARN = (
    "arn:aws:lambda:us-east-2:123456789012:function:dbInitResourceRdsInitRdsLambdaInitStack"
)


class TestIdentity:
    """Test identity and physical id derivation."""

    def test_physical_id_embeds_version_and_identity(
        self, controller: TriggerController, init_config: InitConfig
    ) -> None:
        """Test the physical id for the reference config."""
        identity = make_invocation_identity(init_config, "7", 12)

        assert controller.physical_resource_id(init_config) == (
            f"dbInitResource-AwsSdkCall-7{identity}"
        )

    def test_new_job_version_changes_physical_id(
        self, settings: RdsInitConfig, transport: MagicMock, init_config: InitConfig
    ) -> None:
        """Test that a version bump changes the physical id."""
        newer = TriggerController(
            settings=settings.model_copy(update={"job_version": "8"}), transport=transport
        )
        current = TriggerController(settings=settings, transport=transport)

        assert newer.physical_resource_id(init_config) != (
            current.physical_resource_id(init_config)
        )


class TestInvoke:
    """Test invoking the job."""

    def test_invokes_scoped_job_function(
        self, controller: TriggerController, transport: MagicMock, init_config: InitConfig
    ) -> None:
        """Test that the scoped ARN and request reach the transport."""
        result = controller.invoke(init_config)

        assert result.status is JobStatus.OK
        function_arn, request = transport.invoke.call_args.args
        assert function_arn == JOB_ARN
        assert request.params == init_config

    def test_job_error_fails_the_invocation(
        self, controller: TriggerController, transport: MagicMock, init_config: InitConfig
    ) -> None:
        """Test that a job ERROR raises by default."""
        transport.invoke.return_value = JobResult.error(
            "Secret string is empty.", "SecretResolutionError"
        )

        with pytest.raises(JobFailedError) as exc_info:
            controller.invoke(init_config)

        assert exc_info.value.job_message == "Secret string is empty."
        assert exc_info.value.detail == "SecretResolutionError"

    def test_job_error_passes_through_when_propagation_disabled(
        self, settings: RdsInitConfig, transport: MagicMock, init_config: InitConfig
    ) -> None:
        """Test passing a job ERROR through as output."""
        transport.invoke.return_value = JobResult.error("boom")
        controller = TriggerController(
            settings=settings.model_copy(update={"fail_on_job_error": False}), transport=transport
        )

        result = controller.invoke(init_config)

        assert result.status is JobStatus.ERROR

    def test_out_of_scope_target_is_never_invoked(
        self, settings: RdsInitConfig, transport: MagicMock, init_config: InitConfig
    ) -> None:
        """Test that an out-of-scope target is never called."""
        foreign_scope = InvokeScope(
            region="us-east-2", account_id="123456789012", stack_name="SomeOtherStack"
        )
        controller = TriggerController(settings=settings, transport=transport, scope=foreign_scope)

        with pytest.raises(InvocationPermissionError):
            controller.invoke(init_config)

        transport.invoke.assert_not_called()

    def test_timeout_propagates(
        self, controller: TriggerController, transport: MagicMock, init_config: InitConfig
    ) -> None:
        """Test that a timeout reaches the caller."""
        transport.invoke.side_effect = InvocationTimeoutError(JOB_ARN, 60)

        with pytest.raises(InvocationTimeoutError):
            controller.invoke(init_config)

        transport.invoke.assert_called_once()


class TestHandleEvent:
    """Test lifecycle event handling."""

    def test_create_invokes_and_exposes_payload(
        self, controller: TriggerController, transport: MagicMock, init_config: InitConfig
    ) -> None:
        """Test that Create invokes and exposes the payload."""
        response = controller.handle_event(LifecycleEvent.CREATE, init_config)

        assert response.action is LifecycleAction.INVOKE
        assert response.physical_resource_id == controller.physical_resource_id(init_config)
        assert json.loads(response.payload or "")["status"] == "OK"
        transport.invoke.assert_called_once()

    def test_update_with_changed_config_invokes(
        self, controller: TriggerController, transport: MagicMock, init_config: InitConfig
    ) -> None:
        """Test that a changed config invokes again."""
        previous = controller.physical_resource_id(init_config)
        changed = InitConfig.model_validate({**init_config.to_params(), "databaseName": "other"})

        response = controller.handle_event(LifecycleEvent.UPDATE, changed, previous)

        assert response.action is LifecycleAction.INVOKE
        assert response.physical_resource_id != previous
        transport.invoke.assert_called_once()

    def test_replayed_update_does_not_reinvoke(
        self, controller: TriggerController, transport: MagicMock, init_config: InitConfig
    ) -> None:
        """Test that replayed Updates do not reinvoke."""
        first = controller.handle_event(LifecycleEvent.CREATE, init_config)

        for _ in range(3):
            replay = controller.handle_event(
                LifecycleEvent.UPDATE, init_config, first.physical_resource_id
            )
            assert replay.action is LifecycleAction.SKIP
            assert replay.physical_resource_id == first.physical_resource_id

        transport.invoke.assert_called_once()

    def test_delete_is_a_noop(
        self, controller: TriggerController, transport: MagicMock, init_config: InitConfig
    ) -> None:
        """Test that Delete never invokes."""
        response = controller.handle_event(LifecycleEvent.DELETE, init_config, "previous-id")

        assert response.action is LifecycleAction.NOOP
        assert response.physical_resource_id == "previous-id"
        assert response.data == {}
        transport.invoke.assert_not_called()

    def test_response_uses_orchestrator_field_names(
        self, controller: TriggerController, init_config: InitConfig
    ) -> None:
        """Test the response field names."""
        response = controller.handle_event(LifecycleEvent.CREATE, init_config).to_dict()

        assert set(response) == {"PhysicalResourceId", "Data"}
        assert set(response["Data"]) == {"Payload"}


def test_controller_without_account_refuses_to_start(
    settings: RdsInitConfig, transport: MagicMock
) -> None:
    """Test that a controller with no account id fails before any invocation."""
    unscoped = settings.model_copy(update={"aws_account_id": ""})

    with pytest.raises(ConfigurationError, match="AWS_ACCOUNT_ID"):
        TriggerController(settings=unscoped, transport=transport)

    transport.invoke.assert_not_called()
