"""c8ctl - command-line client for deploying to a Camunda 8 cluster."""

from importlib import metadata

__all__ = ["cli", "core"]

try:
    __version__ = metadata.version("c8ctl")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
