"""Pytest configuration for rdsinit_common tests."""

from collections.abc import Generator

import pytest

from rdsinit_common.config import reset_config
from rdsinit_common.models import InitConfig


@pytest.fixture(autouse=True)
def reset_config_for_tests() -> Generator[None, None, None]:
    """Reset the config singleton before and after each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture(scope="session")
def secret_arn() -> str:
    """Standard secret reference."""
    return "arn:aws:secretsmanager:us-east-2:123456789012:secret:rdsInitPgDbSecret-AbCdEf"


@pytest.fixture(scope="session")
def init_config(secret_arn: str) -> InitConfig:
    """The configuration of the reference deployment."""
    return InitConfig(
        databaseName="rds_init_pg_db",
        endpoint="rdsinitpgdbproxy.proxy-abc123.us-east-2.rds.amazonaws.com",
        dbSecretArn=secret_arn,
    )
