"""Domain models for module registry tooling.

Package Structure:
-----------------
- exceptions: Exception hierarchy (ModuleRegistryError and subclasses)
- validation: Validator findings and report (Finding, ValidationReport)
- registry: Registry, manifest and build result models

Import Patterns:
---------------
from module_registry.domain import Registry, Manifest, ValidationReport
from module_registry.domain.exceptions import CloneError
"""

from module_registry.domain.exceptions import (
    CloneError,
    ConfigurationError,
    ExternalToolError,
    ModuleBuildError,
    ModuleRegistryError,
    ModuleValidationError,
    RegistryError,
    RegistryFetchError,
)
from module_registry.domain.registry import (
    APPROVED_STATUS,
    LATEST_VERSION,
    MANIFEST_SCHEMA_VERSION,
    BuildResult,
    Manifest,
    ManifestEntry,
    Registry,
    RegistryEntry,
    RejectedEntry,
)
from module_registry.domain.validation import Finding, Section, Severity, ValidationReport, ValidationStatus

__all__ = [
    # Exceptions
    "ModuleRegistryError",
    "ConfigurationError",
    "RegistryError",
    "RegistryFetchError",
    "ExternalToolError",
    "ModuleBuildError",
    "CloneError",
    "ModuleValidationError",
    # Validation models
    "Finding",
    "Section",
    "Severity",
    "ValidationReport",
    "ValidationStatus",
    # Registry models
    "APPROVED_STATUS",
    "LATEST_VERSION",
    "MANIFEST_SCHEMA_VERSION",
    "Registry",
    "RegistryEntry",
    "RejectedEntry",
    "Manifest",
    "ManifestEntry",
    "BuildResult",
]
