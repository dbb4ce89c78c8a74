"""
Centralized Configuration Management for rdsinit Services.

This module is the single source of truth for configuration of both the
Initialization Job and the Initialization Trigger Controller. It uses
Pydantic's `BaseSettings` so that every value is typed, validated, and read
from the environment the function runtime provides.

Core Features:
- **Type Safety**: Every parameter is strongly typed.
- **Environment Variable Loading**: The orchestrator injects the database
  endpoint, database name and secret reference as plain environment variables
  when it creates the job function; nothing is hardcoded.
- **Validation**: Tunables such as timeouts and the identity prefix length are
  clamped to sane ranges by field validators.
- **Singleton Access**: `get_config` lazily builds one shared instance;
  `reset_config` exists for tests.

Secrets are deliberately *not* configuration. Only the secret *reference*
(`DB_SECRET_ARN`) is configured; the credential itself is resolved at
invocation time by `rdsinit_common.secret_store`.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__


class RdsInitConfig(BaseSettings):
    """
    Defines the complete configuration schema for rdsinit services.

    The class is organized into logical sections:
    - Runtime Environment: environment name, job version and change description.
    - Database Target: endpoint, database name, port, secret reference.
    - Deployment Scope: region, account, stack and resource identifiers used to
      name the job function and to scope the controller's invoke permission.
    - Invocation Tunables: timeout and failure propagation for the controller.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Runtime Environment ---
    environment: Literal["local", "dev", "staging", "prod"] = Field(
        default="local",
        alias="RDSINIT_ENV",
        description="The deployment environment name, included in every log record.",
    )
    job_version: str = Field(
        default=__version__,
        alias="JOB_VERSION",
        description=(
            "Version or build tag of the Initialization Job. It is part of the "
            "invocation identity, so shipping new job code forces a new run."
        ),
    )
    change_description: str = Field(
        default="initial schema",
        alias="CHANGE_DESCRIPTION",
        description="Human-readable description embedded in the DDL header comment.",
    )

    # --- Database Target ---
    db_endpoint_address: str = Field(
        default="",
        alias="DB_ENDPOINT_ADDRESS",
        description="Endpoint of the connection-pooling proxy in front of the database.",
    )
    db_name: str = Field(default="", alias="DB_NAME", description="Name of the database.")
    db_secret_arn: str = Field(
        default="",
        alias="DB_SECRET_ARN",
        description="Reference (ARN) of the secret holding the database credential.",
    )
    db_port: int = Field(default=5432, alias="DB_PORT", description="Database port.")
    db_default_user: str = Field(
        default="postgres",
        alias="DB_DEFAULT_USER",
        description="User to connect as when the secret does not name one.",
    )
    db_connect_timeout_sec: int = Field(
        default=10,
        alias="DB_CONNECT_TIMEOUT_SEC",
        description="Driver-level connect timeout in seconds.",
    )

    # --- Deployment Scope ---
    aws_region: str = Field(default="us-east-2", alias="AWS_REGION")
    aws_account_id: str = Field(
        default="",
        alias="AWS_ACCOUNT_ID",
        description="Account that owns the job function. Required by the controller.",
    )
    stack_name: str = Field(
        default="RdsLambdaInitStack",
        alias="STACK_NAME",
        description="Deployment namespace; scopes the job function name and invoke permission.",
    )
    init_resource_id: str = Field(
        default="dbInitResource",
        alias="INIT_RESOURCE_ID",
        description="Logical id of the initialization resource inside the deployment.",
    )

    # --- Invocation Tunables ---
    invoke_timeout_sec: int = Field(
        default=60,
        alias="INVOKE_TIMEOUT_SEC",
        description="How long the controller waits for the job before failing the deployment.",
    )
    fail_on_job_error: bool = Field(
        default=True,
        alias="FAIL_ON_JOB_ERROR",
        description=(
            "When true, a job that reports status ERROR fails the invocation. "
            "When false, the result is passed through to the orchestrator unchanged."
        ),
    )
    identity_prefix_length: int = Field(
        default=12,
        alias="IDENTITY_PREFIX_LENGTH",
        description="Number of hex digits of the digest kept in the invocation identity.",
    )

    @field_validator("db_port")
    @classmethod
    def validate_db_port(cls, v: int) -> int:
        """
        Ensures that the database port is within the valid TCP port range.

        Raises:
            ValueError: If the port is not between 1 and 65535.
        """
        if not (1 <= v <= 65535):
            raise ValueError(f"Invalid database port: {v} (must be 1-65535)")
        return v

    @field_validator("db_connect_timeout_sec")
    @classmethod
    def validate_connect_timeout(cls, v: int) -> int:
        """Clamps the connect timeout to a reasonable range (1-60s)."""
        return max(1, min(v, 60))

    @field_validator("invoke_timeout_sec")
    @classmethod
    def validate_invoke_timeout(cls, v: int) -> int:
        """Clamps the invoke timeout to the function runtime limits (5-900s)."""
        return max(5, min(v, 900))

    @field_validator("identity_prefix_length")
    @classmethod
    def validate_identity_prefix_length(cls, v: int) -> int:
        """Clamps the identity prefix to between 6 and 64 hex digits."""
        return max(6, min(v, 64))

    @property
    def job_function_name(self) -> str:
        """Name of the job function, matched by the controller's invoke scope."""
        return f"{self.init_resource_id}RdsInit{self.stack_name}"

    def log_summary(self, redact_secrets: bool = True) -> dict[str, str | int | bool]:
        """
        Generates a configuration summary suitable for logging at startup.

        Args:
            redact_secrets (bool): If True (the default), the secret reference
                is replaced with '***'. The credential itself is never part of
                the configuration, so it can never appear here.

        Returns:
            dict[str, str | int | bool]: Key configuration values.
        """
        return {
            "environment": self.environment,
            "job_version": self.job_version,
            "db_endpoint_address": self.db_endpoint_address,
            "db_name": self.db_name,
            "db_port": self.db_port,
            "db_secret_arn": "***" if redact_secrets and self.db_secret_arn else self.db_secret_arn,
            "aws_region": self.aws_region,
            "stack_name": self.stack_name,
            "job_function_name": self.job_function_name,
            "invoke_timeout_sec": self.invoke_timeout_sec,
            "fail_on_job_error": self.fail_on_job_error,
        }


_config: RdsInitConfig | None = None


def get_config() -> RdsInitConfig:
    """
    Provides access to the global, singleton `RdsInitConfig` instance.

    Returns:
        RdsInitConfig: The process-wide configuration instance.

    Raises:
        pydantic.ValidationError: If the environment does not match the schema.
    """
    global _config
    if _config is None:
        _config = RdsInitConfig()
    return _config


def reset_config() -> None:
    """
    Resets the global configuration singleton.

    Intended for tests that change environment variables between cases.
    """
    global _config
    _config = None
