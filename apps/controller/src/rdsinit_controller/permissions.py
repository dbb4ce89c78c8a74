"""
Least-Privilege Invocation Scope.

The controller may invoke only the job function that belongs to its own
deployment. The scope is a function ARN pattern anchored on the deployment's
region, account and stack name:

    arn:aws:lambda:{region}:{account}:function:*RdsInit{stack_name}

It is never a wildcard across unrelated deployments, so a scope without a
concrete account, region or stack name cannot be built. The same pattern is
used to render the IAM statement granted to the controller's role and to check
a target before any invocation is attempted.
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Any

from rdsinit_common.config import RdsInitConfig
from rdsinit_common.errors import ConfigurationError, InvocationPermissionError

INVOKE_ACTION = "lambda:InvokeFunction"


@dataclass(frozen=True)
class InvokeScope:
    """The set of functions a controller is allowed to invoke."""

    region: str
    account_id: str
    stack_name: str

    def __post_init__(self) -> None:
        if not (self.account_id.isdigit() and len(self.account_id) == 12):
            raise ConfigurationError(
                f"AWS_ACCOUNT_ID must be a 12-digit account id, got {self.account_id!r}"
            )
        if not self.region:
            raise ConfigurationError("AWS_REGION must not be empty.")
        if not self.stack_name:
            raise ConfigurationError("STACK_NAME must not be empty.")

    @classmethod
    def from_config(cls, config: RdsInitConfig) -> InvokeScope:
        return cls(
            region=config.aws_region,
            account_id=config.aws_account_id,
            stack_name=config.stack_name,
        )

    @property
    def resource_pattern(self) -> str:
        return f"arn:aws:lambda:{self.region}:{self.account_id}:function:*RdsInit{self.stack_name}"

    def function_arn(self, function_name: str) -> str:
        """Qualifies a bare function name with this scope's region and account."""
        if function_name.startswith("arn:"):
            return function_name
        return f"arn:aws:lambda:{self.region}:{self.account_id}:function:{function_name}"

    def allows(self, function_name: str) -> bool:
        return fnmatchcase(self.function_arn(function_name), self.resource_pattern)

    def require(self, function_name: str) -> str:
        """
        Checks a target against the scope.

        Args:
            function_name: Bare name or full ARN of the function to invoke.

        Returns:
            str: The fully qualified ARN.

        Raises:
            InvocationPermissionError: If the target is outside the scope.
        """
        arn = self.function_arn(function_name)
        if not self.allows(arn):
            raise InvocationPermissionError(
                f"{arn} is outside the invoke scope {self.resource_pattern}"
            )
        return arn

    def policy_statement(self) -> dict[str, Any]:
        """Renders the IAM statement that grants exactly this scope."""
        return {
            "Effect": "Allow",
            "Action": [INVOKE_ACTION],
            "Resource": [self.resource_pattern],
        }
