"""
The Initialization Trigger Controller.

The controller turns lifecycle events from the orchestrator into at most one
job invocation per distinct invocation identity, and turns the job's answer
into the resource output the orchestrator exposes downstream.

Flow for one event:
1.  Compute the invocation identity from the configuration and job version,
    and the physical resource id that embeds it.
2.  Ask the lifecycle state machine what to do (invoke, skip, no-op).
3.  To invoke, check the target against the least-privilege scope, call the
    job synchronously within the timeout, and inspect the reported status.
4.  Answer with `ControllerResponse`: the physical resource id plus the
    serialized `JobResult` as the `Payload` output.

A job that answers with status ERROR fails the invocation (`JobFailedError`)
unless `fail_on_job_error` is turned off, in which case the result is passed
through as the output unchanged.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rdsinit_common.config import RdsInitConfig, get_config
from rdsinit_common.errors import InvocationError, JobFailedError
from rdsinit_common.identity import make_invocation_identity, make_physical_resource_id
from rdsinit_common.models import InitConfig, InvocationRequest, JobResult

from .lifecycle import LifecycleAction, LifecycleEvent, decide_action
from .logger import log_event
from .permissions import InvokeScope
from .transport import LambdaTransport, build_lambda_client

PAYLOAD_OUTPUT = "Payload"


class ControllerResponse(BaseModel):
    """
    What the controller hands back to the orchestrator for one event.

    Serialized with `by_alias=True` this is the custom-resource provider shape:
    `{"PhysicalResourceId": ..., "Data": {"Payload": ...}}`.
    """

    model_config = ConfigDict(populate_by_name=True)

    physical_resource_id: str = Field(alias="PhysicalResourceId")
    data: dict[str, str] = Field(default_factory=dict, alias="Data")
    action: LifecycleAction = Field(exclude=True)

    @property
    def payload(self) -> str | None:
        return self.data.get(PAYLOAD_OUTPUT)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TriggerController:
    """
    Decides whether to run the Initialization Job and runs it.

    Args:
        settings: Job version, deployment scope and invocation tunables.
        transport: Invokes the job function. Defaults to a Lambda client
            configured with the controller timeout.
        scope: Functions this controller may invoke. Defaults to the scope
            derived from `settings`.
    """

    def __init__(
        self,
        settings: RdsInitConfig | None = None,
        transport: LambdaTransport | None = None,
        scope: InvokeScope | None = None,
    ):
        self.settings = settings or get_config()
        self.scope = scope or InvokeScope.from_config(self.settings)
        self.transport = transport or LambdaTransport(
            build_lambda_client(self.settings.aws_region, self.settings.invoke_timeout_sec),
            self.settings.invoke_timeout_sec,
        )

    @property
    def function_name(self) -> str:
        return self.settings.job_function_name

    def identity(self, config: InitConfig) -> str:
        return make_invocation_identity(
            config, self.settings.job_version, self.settings.identity_prefix_length
        )

    def physical_resource_id(self, config: InitConfig) -> str:
        return make_physical_resource_id(
            self.settings.init_resource_id, self.settings.job_version, self.identity(config)
        )

    def invoke(self, config: InitConfig) -> JobResult:
        """
        Invokes the job once for `config` and inspects its status.

        Returns:
            JobResult: The job's answer. With `fail_on_job_error` off this may
            carry status ERROR.

        Raises:
            InvocationPermissionError: The target is outside the invoke scope,
                or the transport denied the call.
            InvocationTimeoutError: The job did not answer in time.
            InvocationTransportError: The call failed or the function crashed.
            JobFailedError: The job reported ERROR and `fail_on_job_error` is on.
        """
        function_arn = self.scope.require(self.function_name)
        identity = self.identity(config)
        log_event(
            "INFO",
            "invoking_init_job",
            function=function_arn,
            identity=identity,
            timeout_sec=self.settings.invoke_timeout_sec,
        )
        try:
            result = self.transport.invoke(function_arn, InvocationRequest(params=config))
        except InvocationError as e:
            log_event("ERROR", "init_job_invocation_failed", identity=identity, error=str(e))
            raise

        log_event(
            "INFO" if result.is_ok else "ERROR",
            "init_job_completed",
            identity=identity,
            status=result.status.value,
            message=result.message,
        )
        if not result.is_ok and self.settings.fail_on_job_error:
            raise JobFailedError(result.message, result.detail)
        return result

    def handle_event(
        self,
        event: LifecycleEvent,
        config: InitConfig,
        previous_physical_resource_id: str | None = None,
    ) -> ControllerResponse:
        """
        Handles one lifecycle event from the orchestrator.

        Args:
            event: Create, Update or Delete.
            config: The resource's configuration for this evaluation.
            previous_physical_resource_id: The id from the previous evaluation
                (absent on Create).

        Returns:
            ControllerResponse: The id to store and the outputs to expose.
        """
        physical_resource_id = self.physical_resource_id(config)
        action = decide_action(event, physical_resource_id, previous_physical_resource_id)
        log_event(
            "INFO",
            "lifecycle_event",
            lifecycle_event=event.value,
            action=action.value,
            physical_resource_id=physical_resource_id,
            previous_physical_resource_id=previous_physical_resource_id,
        )

        if action is LifecycleAction.NOOP:
            return ControllerResponse(
                physical_resource_id=previous_physical_resource_id or physical_resource_id,
                action=action,
            )
        if action is LifecycleAction.SKIP:
            result = JobResult.ok(f"Already initialized as {physical_resource_id}")
            return ControllerResponse(
                physical_resource_id=physical_resource_id,
                data={PAYLOAD_OUTPUT: result.to_payload()},
                action=action,
            )

        result = self.invoke(config)
        return ControllerResponse(
            physical_resource_id=physical_resource_id,
            data={PAYLOAD_OUTPUT: result.to_payload()},
            action=action,
        )
