"""
Deterministic Invocation Identity.

The orchestrator decides whether initialization already ran by comparing
physical resource ids. This module derives that id from the configuration and
the job version alone, so that:

- the same configuration with the same job version always yields the same id
  and the orchestrator treats the job as already satisfied;
- any change to a configuration field, or a new job version, yields a new id
  and therefore a new invocation.

The identity is a SHA256 digest over a canonical JSON rendering of the wire
payload, truncated to a short hex prefix. No timestamps or random values are
mixed in.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from .models import InitConfig, InvocationRequest

DEFAULT_PREFIX_LENGTH = 12


def stable_dumps(obj: dict[str, Any]) -> str:
    """
    Serializes a dictionary to a canonical JSON string.

    Args:
        obj: The dictionary to serialize.

    Returns:
        A compact, key-sorted JSON string.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"))


def make_invocation_identity(
    config: InitConfig,
    job_version: str,
    prefix_length: int = DEFAULT_PREFIX_LENGTH,
) -> str:
    """
    Computes the invocation identity for a configuration and job version.

    The digest input is:
        "{job_version}:{stable_json({"params": {...}})}"

    Args:
        config: The initialization configuration.
        job_version: Version or build tag of the Initialization Job.
        prefix_length: Number of hex digits to keep (1-64).

    Returns:
        A lowercase hex string of `prefix_length` characters.

    Example:
        >>> cfg = InitConfig(databaseName="db", endpoint="proxy", dbSecretArn="arn")
        >>> len(make_invocation_identity(cfg, "1"))
        12
    """
    if not 1 <= prefix_length <= 64:
        raise ValueError(f"prefix_length must be between 1 and 64, got {prefix_length}")
    payload = InvocationRequest(params=config).model_dump(by_alias=True)
    canonical = f"{job_version}:{stable_dumps(payload)}"
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:prefix_length]


def make_physical_resource_id(resource_id: str, job_version: str, identity: str) -> str:
    """
    Renders the physical resource id the orchestrator stores for the trigger.

    Returns:
        `{resource_id}-AwsSdkCall-{job_version}{identity}`
    """
    return f"{resource_id}-AwsSdkCall-{job_version}{identity}"
