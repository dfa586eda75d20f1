"""
Shopdesk Command-Line Application Package.

This package is the interactive front end of the shop workflow: it owns the
process lifecycle (configuration, engine, startup probe, shutdown), the
numbered menu and the terminal surface the operator types into.

- **Service Identification**: `SERVICE_NAME` is stamped on every log record.
- **Version Management**: the version is read from the installed package
  metadata, with a fallback for running straight from a source checkout.
"""

from importlib import metadata
from typing import Final

SERVICE_NAME: Final[str] = "cli"

try:
    __version__ = metadata.version("shopdesk")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["SERVICE_NAME", "__version__"]
