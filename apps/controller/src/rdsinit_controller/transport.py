"""
Synchronous Invocation Transport.

Calls the job function with `InvocationType=RequestResponse` and waits for its
answer. The wait is bounded by the controller timeout, configured as the HTTP
read timeout of the boto3 client. Transport-level retries are switched off:
retry policy, if any, belongs to the orchestrator.

A timeout only stops the controller from waiting. The job keeps running on the
function side.

Error mapping:
- read timeout                                 -> `InvocationTimeoutError`
- `AccessDeniedException` and friends          -> `InvocationPermissionError`
- any other client/transport error             -> `InvocationTransportError`
- a `FunctionError` in the response (crash)    -> `InvocationTransportError`
- a response that is not a `JobResult`         -> `InvocationTransportError`
"""

from __future__ import annotations

import json
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, ReadTimeoutError
from pydantic import ValidationError

from rdsinit_common.errors import (
    InvocationPermissionError,
    InvocationTimeoutError,
    InvocationTransportError,
)
from rdsinit_common.models import InvocationRequest, JobResult

_PERMISSION_ERROR_CODES = {"AccessDeniedException", "AccessDenied", "UnauthorizedOperation"}


def build_lambda_client(region_name: str, timeout_sec: int) -> Any:
    """Creates a Lambda client whose read timeout is the controller timeout."""
    config = Config(
        region_name=region_name,
        read_timeout=timeout_sec,
        connect_timeout=min(timeout_sec, 10),
        retries={"total_max_attempts": 1, "mode": "standard"},
    )
    return boto3.client("lambda", config=config)


class LambdaTransport:
    """
    Invokes the job function and decodes its `JobResult`.

    Args:
        client: A boto3 `lambda` client. Tests pass a stubbed or mocked client.
        timeout_sec: The bound the client was configured with, reported in
            timeout errors.
    """

    def __init__(self, client: Any, timeout_sec: int):
        self.client = client
        self.timeout_sec = timeout_sec

    def invoke(self, function_name: str, request: InvocationRequest) -> JobResult:
        """
        Invokes the function once and waits for the result.

        Args:
            function_name: Name or ARN of the job function.
            request: The payload to send.

        Returns:
            JobResult: The decoded job answer, whatever its status.

        Raises:
            InvocationTimeoutError: No answer within the timeout.
            InvocationPermissionError: The caller may not invoke the function.
            InvocationTransportError: Any other invocation failure.
        """
        try:
            response = self.client.invoke(
                FunctionName=function_name,
                InvocationType="RequestResponse",
                Payload=request.to_payload().encode("utf-8"),
            )
        except ReadTimeoutError as e:
            raise InvocationTimeoutError(function_name, self.timeout_sec) from e
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            if code in _PERMISSION_ERROR_CODES:
                raise InvocationPermissionError(
                    f"Not allowed to invoke {function_name}: {e}"
                ) from e
            raise InvocationTransportError(
                f"Invocation of {function_name} failed ({code}): {e}"
            ) from e
        except BotoCoreError as e:
            raise InvocationTransportError(f"Invocation of {function_name} failed: {e}") from e

        raw = _read_payload(response.get("Payload"))
        if response.get("FunctionError"):
            raise InvocationTransportError(
                f"{function_name} crashed ({response['FunctionError']}): {raw}"
            )
        try:
            return JobResult.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise InvocationTransportError(
                f"{function_name} returned an unreadable result: {raw!r}"
            ) from e


def _read_payload(payload: Any) -> str:
    if payload is None:
        return ""
    data = payload.read() if hasattr(payload, "read") else payload
    return data.decode("utf-8") if isinstance(data, bytes) else str(data)
