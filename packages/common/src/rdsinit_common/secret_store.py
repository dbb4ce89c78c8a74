"""
Credential Resolution Against the Secret Store.

The job never receives a password in its configuration. It receives a secret
reference and dereferences it here, at invocation time, against AWS Secrets
Manager. The secret string is JSON, as written by the managed database's
generated secret: `{"username": ..., "password": ..., ...}`.

Any problem (unknown secret, denied access, empty string, invalid JSON, no
password) raises `SecretResolutionError`, which the job turns into an ERROR
result before any connection attempt is made.
"""

from __future__ import annotations

import json
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import SecretResolutionError
from .models import Credential


class SecretStore:
    """
    Thin wrapper over the Secrets Manager client.

    Args:
        client: A boto3 `secretsmanager` client. Tests pass a stubbed client.
        region_name: Region used when no client is supplied.
    """

    def __init__(self, client: Any | None = None, region_name: str | None = None):
        if client is None:
            try:
                client = boto3.client("secretsmanager", region_name=region_name)
            except BotoCoreError as e:
                raise SecretResolutionError(f"Unable to create a secret store client: {e}") from e
        self.client = client

    def get_secret(self, reference: str) -> dict[str, Any]:
        """
        Fetches and parses a JSON secret.

        Args:
            reference: Secret ARN or name.

        Returns:
            The decoded JSON object.

        Raises:
            SecretResolutionError: If the secret cannot be fetched, is empty, or
                is not a JSON object.
        """
        if not reference:
            raise SecretResolutionError("Secret reference is empty.")
        try:
            response = self.client.get_secret_value(SecretId=reference)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            raise SecretResolutionError(f"Unable to read secret ({code}): {e}") from e
        except BotoCoreError as e:
            raise SecretResolutionError(f"Unable to reach the secret store: {e}") from e

        secret_string = response.get("SecretString") or ""
        if not secret_string:
            raise SecretResolutionError("Secret string is empty.")
        try:
            secret = json.loads(secret_string)
        except json.JSONDecodeError as e:
            raise SecretResolutionError(f"Secret string is not valid JSON: {e.msg}") from e
        if not isinstance(secret, dict):
            raise SecretResolutionError("Secret string is not a JSON object.")
        return secret

    def resolve_credential(self, reference: str, default_username: str) -> Credential:
        """
        Resolves a database credential from a secret reference.

        Args:
            reference: Secret ARN or name.
            default_username: User to fall back to when the secret has none.

        Returns:
            The credential for this invocation.

        Raises:
            SecretResolutionError: If the secret is unusable or has no password.
        """
        secret = self.get_secret(reference)
        password = secret.get("password")
        if not password or not isinstance(password, str):
            raise SecretResolutionError("Secret does not contain a password.")
        username = secret.get("username") or default_username
        return Credential(username=str(username), password=password)
