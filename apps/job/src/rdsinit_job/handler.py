"""
The Initialization Job.

This module is the job function's entrypoint. One invocation:

1.  Resolves the credential reference against the secret store. An empty
    reference, an empty or unparseable secret, or a secret without a password
    ends the invocation with ERROR before any connection attempt.
2.  Opens one connection to the pooling proxy on the fixed database port.
3.  Runs the guarded initialization script (see `rdsinit_common.ddl`) inside a
    transaction and reads back the seed row count.
4.  Releases the connection on every path.
5.  Answers with a `JobResult`.

Errors Never Escape:
Configuration, secret, connectivity, SQL and read-back failures are converted
into `JobResult(status=ERROR)` here, including an environment that does not
validate. The transport therefore only ever sees an invocation-level failure
for a genuine crash of the function itself.
"""

from __future__ import annotations

import time
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from rdsinit_common.config import RdsInitConfig, get_config
from rdsinit_common.db import (
    EngineFactory,
    build_database_url,
    create_job_engine,
    execute_script,
    open_connection,
)
from rdsinit_common.ddl import build_init_script
from rdsinit_common.errors import (
    ConfigurationError,
    InitScriptError,
    SecretResolutionError,
    VerificationError,
)
from rdsinit_common.models import InitConfig, JobResult
from rdsinit_common.repositories import SeedRepository
from rdsinit_common.secret_store import SecretStore

from .logger import log_event


def _driver_message(error: DBAPIError) -> str:
    """Returns the driver's own error text, without SQLAlchemy's wrapping."""
    return str(error.orig).strip() if error.orig is not None else str(error)


def validate_init_config(config: InitConfig) -> None:
    """
    Rejects configurations that cannot possibly work.

    Raises:
        ConfigurationError: If the endpoint, database name or credential
            reference is empty.
    """
    missing = [
        name
        for name, value in (
            ("endpoint", config.endpoint),
            ("databaseName", config.database_name),
            ("dbSecretArn", config.credential_reference),
        )
        if not value.strip()
    ]
    if missing:
        raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")


def resolve_init_config(event: dict[str, Any] | None, settings: RdsInitConfig) -> InitConfig:
    """
    Builds the `InitConfig` for an invocation.

    Values in the event's `params` take precedence; anything absent falls back
    to the environment the orchestrator configured on the function.

    Args:
        event: The invocation payload, `{"params": {...}}`, or None.
        settings: The job's environment configuration.

    Returns:
        InitConfig: The effective configuration.
    """
    params = (event or {}).get("params") or {}
    if not isinstance(params, dict):
        raise ConfigurationError("Invocation payload 'params' must be an object.")
    return InitConfig(
        databaseName=params.get("databaseName") or settings.db_name,
        endpoint=params.get("endpoint") or settings.db_endpoint_address,
        dbSecretArn=params.get("dbSecretArn")
        or params.get("credentialReference")
        or settings.db_secret_arn,
    )


def run(
    config: InitConfig,
    job_version: str,
    change_description: str,
    *,
    settings: RdsInitConfig | None = None,
    secret_store: SecretStore | None = None,
    engine_factory: EngineFactory = create_job_engine,
) -> JobResult:
    """
    Runs the initialization once and reports the outcome.

    Args:
        config: What to initialize.
        job_version: Version tag written into the script header and the logs.
        change_description: Description written into the script header.
        settings: Port, default user and timeouts. Defaults to `get_config()`.
        secret_store: Credential source. Defaults to Secrets Manager in the
            configured region.
        engine_factory: Builds the engine for the proxy URL. Tests substitute it.

    Returns:
        JobResult: OK on success, ERROR with the cause otherwise. This function
        does not raise for secret, connectivity or SQL failures.
    """
    settings = settings or get_config()
    started = time.perf_counter()
    log_event(
        "INFO",
        "init_job_started",
        job_version=job_version,
        change_description=change_description,
        endpoint=config.endpoint,
        database=config.database_name,
    )

    try:
        validate_init_config(config)
        store = secret_store or SecretStore(region_name=settings.aws_region)
        credential = store.resolve_credential(
            config.credential_reference, default_username=settings.db_default_user
        )
        url = build_database_url(
            endpoint=config.endpoint,
            database_name=config.database_name,
            credential=credential,
            port=settings.db_port,
        )
        script = build_init_script(job_version, change_description)
        log_event(
            "INFO",
            "executing_init_script",
            target=url.render_as_string(hide_password=True),
            script=script,
        )

        with open_connection(url, settings.db_connect_timeout_sec, engine_factory) as connection:
            try:
                execute_script(connection, script)
            except DBAPIError as e:
                raise InitScriptError(_driver_message(e)) from e
            try:
                seed_rows = SeedRepository(connection).count_seed_rows()
            except DBAPIError as e:
                raise VerificationError(_driver_message(e)) from e

    except ConfigurationError as e:
        return _failed(change_description, "configuration", e)
    except SecretResolutionError as e:
        return _failed(change_description, "secret", e)
    except InitScriptError as e:
        return _failed(change_description, "sql", e)
    except VerificationError as e:
        return _failed(change_description, "verification", e)
    except DBAPIError as e:
        return _failed(change_description, "connection", e, message=_driver_message(e))
    except SQLAlchemyError as e:
        return _failed(change_description, "database", e)

    log_event(
        "INFO",
        "init_job_succeeded",
        job_version=job_version,
        seed_rows=seed_rows,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return JobResult.ok(f"Applied '{change_description}' (job version {job_version})")


def _failed(
    change_description: str,
    category: str,
    error: Exception,
    message: str | None = None,
) -> JobResult:
    message = message or str(error)
    summary, _, rest = message.partition("\n")
    context = f"Error applying '{change_description}'" if change_description else "Error"
    log_event("ERROR", "init_job_failed", category=category, error=f"{context}: {summary}")
    return JobResult.error(summary, detail=rest.strip() or type(error).__name__)


def handler(event: dict[str, Any] | None, context: Any = None) -> dict[str, Any]:
    """
    Function entrypoint invoked by the transport.

    Args:
        event: `{"params": {"databaseName", "endpoint", "dbSecretArn"}}`.
        context: Runtime context object (unused).

    Returns:
        dict: The JSON-ready `JobResult`.
    """
    try:
        settings = get_config()
    except ValidationError as e:
        return _failed("", "configuration", e).to_dict()
    try:
        config = resolve_init_config(event, settings)
    except (ConfigurationError, ValidationError) as e:
        return _failed(settings.change_description, "configuration", e).to_dict()
    result = run(config, settings.job_version, settings.change_description, settings=settings)
    return result.to_dict()
