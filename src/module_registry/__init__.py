"""Validate learning modules and build them from a module registry."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("module-registry")
except PackageNotFoundError:
    __version__ = "0+unknown"

__all__ = ["__version__"]
