"""
rdsinit Initialization Job Package.

This package is deployed as the job function. It receives one invocation per
distinct configuration from the Trigger Controller, resolves the database
credential, runs the initialization script through the pooling proxy, and
answers with a structured `JobResult`.

Key Responsibilities of this Module:
- **Service Identification**: `SERVICE_NAME` tags every log record emitted by
  the job so its output can be told apart from the controller's.
- **Version Management**: the version is read from the installed package
  metadata, with a fallback for running from a source checkout.
"""

from importlib import metadata
from typing import Final

SERVICE_NAME: Final[str] = "job"

try:
    __version__ = metadata.version("rdsinit")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["SERVICE_NAME", "__version__"]
