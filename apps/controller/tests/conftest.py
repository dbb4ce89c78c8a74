"""Pytest configuration for rdsinit_controller tests."""

from collections.abc import Generator
from unittest.mock import MagicMock

import pytest

from rdsinit_common.config import RdsInitConfig, reset_config
from rdsinit_common.models import InitConfig, JobResult
from rdsinit_controller.controller import TriggerController
from rdsinit_controller.handler import reset_controller
from rdsinit_controller.transport import LambdaTransport


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    reset_config()
    reset_controller()
    yield
    reset_config()
    reset_controller()


@pytest.fixture
def settings() -> RdsInitConfig:
    return RdsInitConfig(
        JOB_VERSION="7",
        AWS_REGION="us-east-2",
        AWS_ACCOUNT_ID="123456789012",
        STACK_NAME="RdsLambdaInitStack",
        INIT_RESOURCE_ID="dbInitResource",
        INVOKE_TIMEOUT_SEC=60,
        FAIL_ON_JOB_ERROR=True,
        IDENTITY_PREFIX_LENGTH=12,
    )


@pytest.fixture
def init_config() -> InitConfig:
    return InitConfig(
        databaseName="rds_init_pg_db",
        endpoint="rdsinitpgdbproxy.proxy-abc123.us-east-2.rds.amazonaws.com",
        dbSecretArn="arn:aws:secretsmanager:us-east-2:123456789012:secret:rdsInitPgDbSecret",
    )


@pytest.fixture
def transport() -> MagicMock:
    mock = MagicMock(spec=LambdaTransport)
    mock.invoke.return_value = JobResult.ok("Applied 'initial schema' (job version 7)")
    return mock


@pytest.fixture
def controller(settings: RdsInitConfig, transport: MagicMock) -> TriggerController:
    return TriggerController(settings=settings, transport=transport)
