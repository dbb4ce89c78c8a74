"""
Short-Lived Database Connections Through the Pooling Proxy.

Unlike a long-running service, the Initialization Job opens exactly one
connection per invocation and releases it before returning. Connection pooling
is the proxy's job, not ours, so the engine built here uses `NullPool`: every
checkout is a fresh physical connection and every checkin closes it.

Key Components:
- **`build_database_url`**: assembles a `postgresql+psycopg2` URL with the
  resolved credential. `URL.create` quotes the password, so credentials with
  special characters are safe.
- **`open_connection`**: a context manager yielding a `Connection` inside a
  transaction. The transaction commits on success, rolls back on error, and the
  engine is disposed on every path, so no connection outlives the call.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from contextlib import contextmanager

from sqlalchemy import Connection, create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.pool import NullPool

from .models import Credential

DRIVER = "postgresql+psycopg2"

EngineFactory = Callable[[URL, int], Engine]


def build_database_url(
    endpoint: str,
    database_name: str,
    credential: Credential,
    port: int = 5432,
) -> URL:
    """
    Constructs the SQLAlchemy URL for the proxy endpoint.

    Args:
        endpoint: Proxy host name.
        database_name: Database to connect to.
        credential: Credential resolved for this invocation.
        port: Fixed database port.

    Returns:
        URL: The connection URL. Its string form masks the password.
    """
    return URL.create(
        DRIVER,
        username=credential.username,
        password=credential.password.get_secret_value(),
        host=endpoint,
        port=port,
        database=database_name,
    )


def create_job_engine(url: URL, connect_timeout_sec: int) -> Engine:
    """
    Creates an engine that never pools connections.

    Args:
        url: The connection URL.
        connect_timeout_sec: Driver-level connect timeout.

    Returns:
        Engine: A `NullPool` engine.
    """
    return create_engine(
        url,
        poolclass=NullPool,
        connect_args={"connect_timeout": connect_timeout_sec},
    )


@contextmanager
def open_connection(
    url: URL,
    connect_timeout_sec: int = 10,
    engine_factory: EngineFactory = create_job_engine,
) -> Generator[Connection, None, None]:
    """
    Provides one transactional connection and guarantees its release.

    Usage:
    ```
    with open_connection(url) as conn:
        conn.exec_driver_sql(script)
    # Committed on success, rolled back on error, closed in all cases.
    ```

    Yields:
        Connection: An open connection with a transaction in progress.
    """
    engine = engine_factory(url, connect_timeout_sec)
    try:
        with engine.begin() as connection:
            yield connection
    finally:
        engine.dispose()


def execute_script(connection: Connection, script: str) -> None:
    """
    Sends a multi-statement script to the server as-is.

    The script is passed to the driver without parameters, so neither
    SQLAlchemy bind markers (`:name`) nor driver placeholders (`%`) are
    interpreted inside it.
    """
    connection.exec_driver_sql(script)
