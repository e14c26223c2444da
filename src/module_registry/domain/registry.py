"""Registry and manifest domain models.

The registry is the remote catalog consumed by the builder; the manifest is
the JSON record it produces. Both use the camelCase keys of their documents
on the wire (``repoUrl``, ``requestedVersion``...) and snake_case attributes
in Python.

Model Hierarchy:
---------------
- Registry
  ├── RegistryEntry
  └── RejectedEntry
- Manifest
  └── ManifestEntry
- BuildResult (manifest + counters)

Example:
--------
>>> entry = RegistryEntry.model_validate(
...     {"id": "intro-rust", "repoUrl": "https://github.com/org/intro-rust",
...      "version": "v1.0.0", "status": "approved"}
... )
>>> entry.is_approved
True
>>> Manifest(generated_at="2025-01-01T00:00:00Z").model_dump(by_alias=True)
{'schemaVersion': '1.0', 'generatedAt': '2025-01-01T00:00:00Z', 'modules': []}
"""

from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

MANIFEST_SCHEMA_VERSION = "1.0"
LATEST_VERSION = "latest"
APPROVED_STATUS = "approved"


class RegistryEntry(BaseModel):
    """One module listed in the registry."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(min_length=1)
    repo_url: str = Field(alias="repoUrl")
    version: str = LATEST_VERSION
    author: str = ""
    author_type: str = Field(default="", alias="authorType")
    status: str = ""

    @field_validator("id", "repo_url", "version", "author", "author_type", "status", mode="before")
    @classmethod
    def coerce_to_str(cls, v: Any) -> Any:
        """YAML scalars such as ``1.0`` or ``true`` are kept as their text."""
        if v is None:
            return v
        if isinstance(v, bool):
            return str(v).lower()
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("id")
    @classmethod
    def validate_single_segment(cls, v: str) -> str:
        """The id names the clone directory, so it must be one path segment."""
        if v in (".", "..") or "/" in v or "\\" in v or "\x00" in v:
            raise ValueError(f"id must be a single directory name, got {v!r}")
        return v

    @property
    def is_approved(self) -> bool:
        return self.status == APPROVED_STATUS

    @property
    def is_latest(self) -> bool:
        return self.version == LATEST_VERSION


class RejectedEntry(BaseModel):
    """An approved registry item that is not a usable entry.

    Attributes:
        position: 1-based index in the registry's ``modules`` list
        id: Raw id as text ("" when missing)
        reason: Validation errors, one per field
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    position: int
    id: str = ""
    reason: str


class Registry(BaseModel):
    """Approved items of a registry document, in document order.

    Items with any other status are dropped before validation. Approved items
    that fail validation are kept as RejectedEntry so they can be reported.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    modules: List[Union[RegistryEntry, RejectedEntry]] = Field(default_factory=list)

    def approved(self) -> List[RegistryEntry]:
        """Valid approved entries in document order."""
        return [entry for entry in self.modules if isinstance(entry, RegistryEntry) and entry.is_approved]

    def rejected(self) -> List[RejectedEntry]:
        return [entry for entry in self.modules if isinstance(entry, RejectedEntry)]


class ManifestEntry(BaseModel):
    """A module that was cloned and validated."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    id: str
    version: str
    requested_version: str = Field(alias="requestedVersion")
    author: str
    author_type: str = Field(alias="authorType")
    repo_url: str = Field(alias="repoUrl")
    cloned_at: str = Field(alias="clonedAt")


class Manifest(BaseModel):
    """Build manifest written to ``registry-manifest.json``."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    schema_version: str = Field(default=MANIFEST_SCHEMA_VERSION, alias="schemaVersion")
    generated_at: str = Field(alias="generatedAt")
    modules: List[ManifestEntry] = Field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        """Serialize with the document's camelCase keys."""
        return self.model_dump(by_alias=True)


class BuildResult(BaseModel):
    """Outcome of a builder run.

    Attributes:
        manifest: Manifest as written to disk
        manifest_path: Final manifest location
        processed: Entries cloned and validated successfully
        failed: Entries that failed to clone or validate
        failures: Failure reason per registry id
    """

    model_config = ConfigDict(extra="forbid")

    manifest: Manifest
    manifest_path: Path
    processed: int = 0
    failed: int = 0
    failures: Dict[str, str] = Field(default_factory=dict)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed > 0 else 0
