"""Pytest configuration for rdsinit_job tests."""

from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr

from rdsinit_common.config import RdsInitConfig, reset_config
from rdsinit_common.models import Credential, InitConfig
from rdsinit_common.secret_store import SecretStore


@pytest.fixture(autouse=True)
def reset_config_for_tests() -> Generator[None, None, None]:
    reset_config()
    yield
    reset_config()


@pytest.fixture
def settings() -> RdsInitConfig:
    """Job settings with explicit values for everything the tests assert on."""
    return RdsInitConfig(
        JOB_VERSION="7",
        CHANGE_DESCRIPTION="initial schema",
        DB_PORT=5432,
        DB_DEFAULT_USER="postgres",
        DB_CONNECT_TIMEOUT_SEC=3,
        AWS_REGION="us-east-2",
    )


@pytest.fixture
def init_config() -> InitConfig:
    return InitConfig(
        databaseName="rds_init_pg_db",
        endpoint="rdsinitpgdbproxy.proxy-abc123.us-east-2.rds.amazonaws.com",
        dbSecretArn="arn:aws:secretsmanager:us-east-2:123456789012:secret:rdsInitPgDbSecret",
    )


@pytest.fixture
def secret_store() -> MagicMock:
    """A secret store that resolves to a fixed credential."""
    store = MagicMock(spec=SecretStore)
    store.resolve_credential.return_value = Credential(
        username="postgres", password=SecretStr("s3cr3t")
    )
    return store


@pytest.fixture
def connection() -> MagicMock:
    conn = MagicMock(name="connection")
    conn.execute.return_value.scalar_one.return_value = 1
    return conn


@pytest.fixture
def engine(connection: MagicMock) -> MagicMock:
    eng = MagicMock(name="engine")
    eng.begin.return_value.__enter__.return_value = connection
    return eng


@pytest.fixture
def engine_factory(engine: MagicMock) -> MagicMock:
    return MagicMock(return_value=engine)
