"""
Exception hierarchy for rdsinit.

Job-side errors (`ConfigurationError`, `SecretResolutionError`,
`InitScriptError`, `VerificationError`) never cross the job boundary: the job
converts them into a `JobResult` with status ERROR. Controller-side errors
(`InvocationError` and its subclasses) are raised to the orchestrator and fail
the deployment.
"""

from __future__ import annotations


class RdsInitError(Exception):
    """Base class for all rdsinit errors."""


class ConfigurationError(RdsInitError):
    """A required configuration value is missing or empty."""


class SecretResolutionError(RdsInitError):
    """The credential could not be retrieved or parsed from the secret store."""


class InitScriptError(RdsInitError):
    """The initialization script failed against the database."""


class VerificationError(RdsInitError):
    """The script was applied but its outcome could not be read back."""


class InvocationError(RdsInitError):
    """Base class for failures the controller reports to the orchestrator."""


class InvocationPermissionError(InvocationError):
    """The controller is not allowed to invoke the requested function."""


class InvocationTimeoutError(InvocationError):
    """The job did not answer within the controller's timeout."""

    def __init__(self, function_name: str, timeout_sec: int):
        super().__init__(
            f"Invocation of {function_name} did not complete within {timeout_sec}s"
        )
        self.function_name = function_name
        self.timeout_sec = timeout_sec


class InvocationTransportError(InvocationError):
    """The transport failed, or the function crashed before returning a result."""


class JobFailedError(InvocationError):
    """The job completed but reported status ERROR."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(f"Initialization job reported ERROR: {message}")
        self.job_message = message
        self.detail = detail
