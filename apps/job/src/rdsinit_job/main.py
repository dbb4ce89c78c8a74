"""
Standalone Runner for the Initialization Job.

Runs the job once, outside the function runtime, using only the environment
configuration (`DB_ENDPOINT_ADDRESS`, `DB_NAME`, `DB_SECRET_ARN`, ...). This is
useful against a local database or from a bastion inside the isolated network.

Usage:
    python -m rdsinit_job.main

The process exits with 0 when the job reports OK and 1 when it reports ERROR.
"""

from __future__ import annotations

import sys

from pydantic import ValidationError

from rdsinit_common.config import get_config

from .handler import handler
from .logger import log_event


def main() -> int:
    """
    Runs the job from environment configuration and maps its status to an exit code.

    Returns:
        0 on OK, 1 on ERROR.
    """
    try:
        config = get_config()
    except ValidationError as e:
        log_event("ERROR", "invalid_configuration", error=str(e))
        return 1
    log_event("INFO", "starting_local_run", config_summary=config.log_summary(redact_secrets=True))
    result = handler({"params": {}})
    log_event("INFO", "finished_local_run", result=result)
    return 0 if result.get("status") == "OK" else 1


if __name__ == "__main__":
    sys.exit(main())
