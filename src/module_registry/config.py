"""Builder configuration.

Settings resolve in priority order: explicit CLI flags (passed as keyword
arguments), environment variables, then defaults.

Environment variables:
----------------------
- MODULE_REGISTRY_URL: registry document URL (no default, mandatory)
- GITHUB_TOKEN: token embedded in github.com clone URLs
- MODULE_REGISTRY_OUTPUT_DIR, MODULE_REGISTRY_MANIFEST_PATH,
  MODULE_REGISTRY_VERBOSE, MODULE_REGISTRY_FETCH_TIMEOUT_S

Example:
--------
>>> settings = load_builder_settings(registry_url="https://example.com/registry.yaml")
>>> settings.output_dir
PosixPath('modules')
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from module_registry.domain import ConfigurationError

__all__ = [
    "BuilderSettings",
    "load_builder_settings",
    "ENV_PREFIX",
    "REGISTRY_URL_ENV",
    "TOKEN_ENV",
]

ENV_PREFIX = "MODULE_REGISTRY_"
REGISTRY_URL_ENV = "MODULE_REGISTRY_URL"
TOKEN_ENV = "GITHUB_TOKEN"

DEFAULT_OUTPUT_DIR = Path("./modules")
DEFAULT_MANIFEST_PATH = Path("./registry-manifest.json")


class BuilderSettings(BaseSettings):
    """Settings for one builder run."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, case_sensitive=False, extra="ignore", populate_by_name=True)

    registry_url: Optional[str] = Field(default=None, validation_alias=REGISTRY_URL_ENV, description="URL of registry.yaml")
    output_dir: Path = Field(default=DEFAULT_OUTPUT_DIR, description="Directory receiving module clones")
    manifest_path: Path = Field(default=DEFAULT_MANIFEST_PATH, description="Path of the generated manifest")
    token: Optional[str] = Field(default=None, validation_alias=TOKEN_ENV, description="GitHub token for private repositories")
    verbose: bool = Field(default=False, description="Print per-module details")
    fetch_timeout_s: Optional[float] = Field(default=None, gt=0, description="Registry download timeout; unset waits indefinitely")

    @field_validator("registry_url", "token", mode="before")
    @classmethod
    def blank_is_unset(cls, v: Any) -> Any:
        """Treat empty strings (e.g. ``GITHUB_TOKEN=``) as not configured."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("output_dir", "manifest_path", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Any:
        """Expand environment variables and user home in paths."""
        if isinstance(v, str):
            return Path(os.path.expandvars(os.path.expanduser(v)))
        return v

    def require_registry_url(self) -> str:
        """Return the registry URL or fail before any work starts.

        Raises:
            ConfigurationError: If no URL was given by flag or environment
        """
        if not self.registry_url:
            raise ConfigurationError(f"Registry URL not provided. Use -r option or set {REGISTRY_URL_ENV} environment variable.")
        return self.registry_url


def load_builder_settings(
    registry_url: Optional[str] = None,
    output_dir: Optional[Path] = None,
    manifest_path: Optional[Path] = None,
    token: Optional[str] = None,
    verbose: Optional[bool] = None,
) -> BuilderSettings:
    """Load settings, letting every non-None argument override the environment.

    Args:
        registry_url: ``-r/--registry-url``
        output_dir: ``-o/--output-dir``
        manifest_path: ``-m/--manifest-path``
        token: ``-t/--token``
        verbose: ``-v/--verbose`` (None keeps the environment value)

    Returns:
        Validated BuilderSettings
    """
    overrides: dict[str, Any] = {}
    # Aliased fields are passed under their alias so the override always wins
    if registry_url is not None:
        overrides[REGISTRY_URL_ENV] = registry_url
    if token is not None:
        overrides[TOKEN_ENV] = token
    if output_dir is not None:
        overrides["output_dir"] = output_dir
    if manifest_path is not None:
        overrides["manifest_path"] = manifest_path
    if verbose:
        overrides["verbose"] = True

    return BuilderSettings(**overrides)
