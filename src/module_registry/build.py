"""Module builder: fetch the registry, clone approved modules, write a manifest.

Workflow:
---------
1. Resolve settings (registry URL is mandatory)
2. Download the registry into a temporary directory removed on every exit path
3. Check that git is installed
4. Start an in-progress manifest next to the final manifest path
5. For each approved entry, in registry order:
   clone -> strip .git -> validate -> append to manifest
   A failing entry is counted and skipped; it never aborts the batch.
   Approved items that are not valid entries count as failures, except
   items without an id, which are skipped with a warning.
6. Move the in-progress manifest onto the final path
7. Report counts; exit code is 1 if any entry failed

Each entry only touches ``output_dir/<id>``, so ``build_entry`` depends on
nothing but its arguments.

Example:
--------
>>> from module_registry.config import load_builder_settings
>>> from module_registry.build import build_modules
>>> result = build_modules(load_builder_settings(registry_url="https://example.com/registry.yaml"))
>>> result.processed, result.failed
(3, 0)
"""

import logging
import os
from pathlib import Path
import tempfile
from typing import Callable, Optional

from module_registry.config import BuilderSettings
from module_registry.console import StatusReporter
from module_registry.domain import (
    BuildResult,
    CloneError,
    LATEST_VERSION,
    Manifest,
    ManifestEntry,
    ModuleBuildError,
    ModuleValidationError,
    RegistryEntry,
    RejectedEntry,
    ValidationReport,
)
from module_registry.git import GitClient
from module_registry.registry import authenticated_url, fetch_registry, load_registry
from module_registry.utils import read_json, remove_tree, utc_timestamp, write_json_atomic
from module_registry.validate import validate_module

logger = logging.getLogger(__name__)

Validator = Callable[[Path], ValidationReport]


class ManifestWriter:
    """In-progress manifest kept on disk next to its final location.

    Every append rewrites the in-progress file atomically; ``finalize`` renames
    it onto the final path.
    """

    def __init__(self, manifest_path: Path, generated_at: Optional[str] = None):
        self.manifest_path = Path(manifest_path)
        self.partial_path = self.manifest_path.with_name(f".{self.manifest_path.name}.partial")
        self.manifest = Manifest(generated_at=generated_at or utc_timestamp())
        write_json_atomic(self.manifest.to_document(), self.partial_path)

    def append(self, entry: ManifestEntry) -> None:
        self.manifest.modules.append(entry)
        write_json_atomic(self.manifest.to_document(), self.partial_path)

    def finalize(self) -> Manifest:
        os.replace(self.partial_path, self.manifest_path)
        return Manifest.model_validate(read_json(self.manifest_path))

    def discard(self) -> None:
        self.partial_path.unlink(missing_ok=True)


def _module_dir(output_dir: Path, module_id: str) -> Path:
    """``output_dir/<module_id>``, refusing anything that is not a direct child."""
    module_dir = output_dir / module_id
    if not module_id or module_dir.resolve().parent != output_dir.resolve():
        raise ModuleBuildError(f"Module id {module_id!r} does not name a directory inside {output_dir}", module_id=module_id)
    return module_dir


def build_entry(
    entry: RegistryEntry,
    output_dir: Path,
    git: GitClient,
    token: Optional[str] = None,
    validator: Validator = validate_module,
    reporter: Optional[StatusReporter] = None,
) -> ManifestEntry:
    """Clone, strip and validate one registry entry.

    Args:
        entry: Approved registry entry
        output_dir: Parent directory of module clones
        git: Git client used for cloning
        token: Optional GitHub token embedded in the clone URL
        validator: Module validator run against the clone
        reporter: Status output (silent if None)

    Returns:
        ManifestEntry for the validated clone

    Raises:
        CloneError: If the clone fails (partial content is removed)
        ModuleValidationError: If the clone fails validation (clone is removed)
    """
    reporter = reporter or StatusReporter(echo=False)
    module_dir = _module_dir(output_dir, entry.id)

    reporter.detail(f"  Repo: {entry.repo_url}")
    reporter.detail(f"  Version: {entry.version}")
    reporter.detail(f"  Author: {entry.author} ({entry.author_type})")

    clone_url = authenticated_url(entry.repo_url, token)
    if clone_url != entry.repo_url:
        reporter.detail("  Using authenticated clone URL")

    if module_dir.exists():
        reporter.detail("  Removing existing directory...")
        remove_tree(module_dir)

    reporter.detail("  Cloning repository...")
    try:
        if entry.is_latest:
            reporter.warning(f"Module {entry.id} uses 'latest' version - builds may not be reproducible")
            git.clone(clone_url, module_dir, ref=None, module_id=entry.id)
            resolved = git.short_head(module_dir) or LATEST_VERSION
        else:
            git.clone(clone_url, module_dir, ref=entry.version, module_id=entry.id)
            resolved = entry.version
    except CloneError:
        remove_tree(module_dir)
        raise

    remove_tree(module_dir / ".git")

    reporter.detail("  Validating module...")
    report = validator(module_dir)
    if not report.passed:
        remove_tree(module_dir)
        raise ModuleValidationError(f"Module validation failed for {entry.id} ({report.error_count} error(s))", module_id=entry.id)

    return ManifestEntry(
        id=entry.id,
        version=resolved,
        requested_version=entry.version,
        author=entry.author,
        author_type=entry.author_type,
        repo_url=entry.repo_url,
        cloned_at=utc_timestamp(),
    )


def build_modules(
    settings: BuilderSettings,
    git: Optional[GitClient] = None,
    validator: Validator = validate_module,
    reporter: Optional[StatusReporter] = None,
) -> BuildResult:
    """Run the full build workflow.

    Args:
        settings: Resolved builder settings
        git: Git client (default: system git)
        validator: Module validator run against each clone
        reporter: Status output (default: console, honouring settings.verbose)

    Returns:
        BuildResult with the written manifest and counters

    Raises:
        ConfigurationError: If no registry URL is configured
        RegistryError: If the registry cannot be fetched or parsed
        ExternalToolError: If git is not installed
    """
    registry_url = settings.require_registry_url()
    git = git or GitClient()
    reporter = reporter or StatusReporter(verbose=settings.verbose)
    output_dir = Path(settings.output_dir)
    manifest_path = Path(settings.manifest_path)

    reporter.info("Starting module build process")
    reporter.info(f"Registry URL: {registry_url}")
    reporter.info(f"Output directory: {output_dir}")
    reporter.info(f"Manifest path: {manifest_path}")

    output_dir.mkdir(parents=True, exist_ok=True)

    reporter.info("Fetching registry.yaml...")
    with tempfile.TemporaryDirectory(prefix="module-registry-") as tmp:
        registry_file = fetch_registry(registry_url, Path(tmp) / "registry.yaml", timeout=settings.fetch_timeout_s)
        reporter.success("Registry fetched successfully")
        registry = load_registry(registry_file)

    git.ensure_available()

    writer = ManifestWriter(manifest_path)
    processed = 0
    failed = 0
    failures: dict[str, str] = {}

    reporter.info("Processing modules from registry...")
    if not registry.modules:
        reporter.warning("No approved modules found in registry")

    try:
        for entry in registry.modules:
            if not entry.id:
                reporter.warning(f"Skipping approved registry item #{entry.position} without an id")
                continue

            reporter.info(f"Processing module: {entry.id}")
            try:
                if isinstance(entry, RejectedEntry):
                    raise ModuleBuildError(f"Invalid registry entry {entry.id}: {entry.reason}", module_id=entry.id)
                manifest_entry = build_entry(entry, output_dir, git, token=settings.token, validator=validator, reporter=reporter)
            except ModuleBuildError as e:
                reporter.error(str(e))
                failures[entry.id] = str(e)
                failed += 1
                continue

            writer.append(manifest_entry)
            reporter.success(f"Module {entry.id} cloned and validated")
            processed += 1
    except BaseException:
        writer.discard()
        raise

    manifest = writer.finalize()
    reporter.success(f"Manifest written to {manifest_path}")

    reporter.plain()
    reporter.heading("Build Summary")
    reporter.plain(f"Modules processed: {processed}")
    reporter.plain(f"Modules failed: {failed}")

    if failed:
        reporter.error(f"Build completed with {failed} failure(s)")
    else:
        reporter.success("Build completed successfully")

    logger.debug(f"Build finished: processed={processed} failed={failed}")
    return BuildResult(manifest=manifest, manifest_path=manifest_path, processed=processed, failed=failed, failures=failures)
