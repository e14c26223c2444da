"""Exception hierarchy for module registry tooling.

Fatal errors (configuration, registry fetch, missing external tools) stop a
run before any module is processed. Module build errors are raised per
registry entry and are counted by the builder without aborting the batch.

Hierarchy:
----------
- ModuleRegistryError
  ├── ConfigurationError
  ├── RegistryError
  │   └── RegistryFetchError
  ├── ExternalToolError
  └── ModuleBuildError
      ├── CloneError
      └── ModuleValidationError
"""

from typing import Optional


class ModuleRegistryError(Exception):
    """Base exception for all module registry errors."""

    pass


class ConfigurationError(ModuleRegistryError):
    """Missing or invalid configuration (fatal)."""

    pass


class RegistryError(ModuleRegistryError):
    """Registry document could not be read or has the wrong shape."""

    pass


class RegistryFetchError(RegistryError):
    """Registry document could not be downloaded."""

    pass


class ExternalToolError(ModuleRegistryError):
    """A required external tool is not installed."""

    pass


class ModuleBuildError(ModuleRegistryError):
    """Failure building a single registry entry (non-fatal for the batch).

    Attributes:
        module_id: Registry id of the entry that failed
    """

    def __init__(self, message: str, module_id: Optional[str] = None):
        super().__init__(message)
        self.module_id = module_id


class CloneError(ModuleBuildError):
    """git clone failed for a registry entry."""

    pass


class ModuleValidationError(ModuleBuildError):
    """A cloned module did not pass validation."""

    pass
