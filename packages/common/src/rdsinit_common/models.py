"""
Pydantic Contracts Shared by the Controller and the Job.

These models are the data contract on both sides of the invocation transport.
The controller serializes an `InvocationRequest` as the function payload; the
job parses it back, runs, and answers with a `JobResult` serialized the same
way. Keeping both sides on one set of models means the wire format cannot drift
between the two services.

Field names are snake_case in Python and camelCase on the wire, matching the
payload the orchestrator has always sent (`databaseName`, `endpoint`,
`dbSecretArn`).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr


class JobStatus(str, Enum):
    """Terminal status reported by the Initialization Job."""

    OK = "OK"
    ERROR = "ERROR"


class InitConfig(BaseModel):
    """
    Immutable input of one initialization.

    Supplied by the orchestrator at evaluation time and never mutated. Empty
    values are accepted here on purpose: the job must report them as a
    configuration ERROR through its result, not fail while parsing the payload.

    Attributes:
        database_name: Name of the database to initialize.
        endpoint: Endpoint of the connection-pooling proxy (not the raw instance).
        credential_reference: Secret store reference for the database credential.
            Travels as `dbSecretArn` on the wire; `credentialReference` is
            accepted as well.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    database_name: str = Field(default="", alias="databaseName")
    endpoint: str = Field(default="")
    credential_reference: str = Field(
        default="",
        alias="dbSecretArn",
        validation_alias=AliasChoices("dbSecretArn", "credentialReference", "credential_reference"),
    )

    def to_params(self) -> dict[str, str]:
        """Returns the wire representation used inside `{"params": ...}`."""
        return self.model_dump(by_alias=True)


class Credential(BaseModel):
    """
    Database credential resolved at invocation time.

    The password is a `SecretStr` so that `repr`, `str` and model dumps never
    reveal it. Instances are never persisted and live for one job invocation.
    """

    model_config = ConfigDict(frozen=True)

    username: str
    password: SecretStr


class JobResult(BaseModel):
    """
    Structured outcome of one job invocation.

    Attributes:
        status: `OK` or `ERROR`.
        message: Human-readable summary (the cause on ERROR).
        detail: Optional extra context, for example the exception type.
    """

    status: JobStatus
    message: str = ""
    detail: str | None = None

    @classmethod
    def ok(cls, message: str = "") -> JobResult:
        return cls(status=JobStatus.OK, message=message)

    @classmethod
    def error(cls, message: str, detail: str | None = None) -> JobResult:
        return cls(status=JobStatus.ERROR, message=message, detail=detail)

    @property
    def is_ok(self) -> bool:
        return self.status is JobStatus.OK

    def to_payload(self) -> str:
        """Serializes the result for the transport and the orchestrator output."""
        return self.model_dump_json(exclude_none=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class InvocationRequest(BaseModel):
    """The function payload: `{"params": {databaseName, endpoint, dbSecretArn}}`."""

    params: InitConfig

    def to_payload(self) -> str:
        return self.model_dump_json(by_alias=True)
