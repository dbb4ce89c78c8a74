"""
rdsinit Initialization Trigger Controller Package.

The controller is the thin element the deployment orchestrator calls for every
lifecycle event of the initialization resource. It derives the invocation
identity, decides whether the job has to run, invokes it synchronously within
a bounded timeout, and hands the job's result back as the resource output.

Key Responsibilities of this Module:
- **Service Identification**: `SERVICE_NAME` tags every controller log record.
- **Version Management**: the version is read from the installed package
  metadata, with a fallback for running from a source checkout.
"""

from importlib import metadata
from typing import Final

SERVICE_NAME: Final[str] = "controller"

try:
    __version__ = metadata.version("rdsinit")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["SERVICE_NAME", "__version__"]
