"""Command line interface for module registry tooling.

Commands:
---------
- validate: Check a module directory's structure and descriptors
- build: Fetch the registry, clone approved modules and write the manifest

Exit codes:
-----------
0 on success (warnings allowed), 1 on validation errors, bad arguments,
configuration errors, registry errors or any failed module.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click
import typer
from typer.core import TyperGroup

from module_registry.build import build_modules
from module_registry.config import REGISTRY_URL_ENV, TOKEN_ENV, load_builder_settings
from module_registry.console import StatusReporter
from module_registry.domain import ModuleRegistryError
from module_registry.utils import configure_logger
from module_registry.validate import render_validation_report, validate_module

logger = logging.getLogger(__name__)

USAGE_ERROR_EXIT_CODE = 1


class RegistryGroup(TyperGroup):
    """Command group whose usage errors (unknown options, bad values) exit with 1."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = USAGE_ERROR_EXIT_CODE
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = USAGE_ERROR_EXIT_CODE
            raise


app = typer.Typer(
    name="module-registry",
    cls=RegistryGroup,
    help="Validate learning modules and build them from a module registry.",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

BUILD_EPILOG = (
    f"Environment: {REGISTRY_URL_ENV} sets the default registry URL, {TOKEN_ENV} the token for private repos. "
    "Example: module-registry build -r https://example.com/registry.yaml -t ghp_xxxxxxxxxxxx"
)


@app.command()
def validate(
    module_path: Optional[Path] = typer.Argument(None, help="Module directory to validate", show_default=False),
) -> None:
    """Validate a learning module's structure and required files."""
    reporter = StatusReporter()
    if module_path is None:
        reporter.plain("Usage: module-registry validate <module-path>")
        reporter.plain("Example: module-registry validate ./modules/gpu-programming")
        raise typer.Exit(code=1)

    report = validate_module(module_path)
    render_validation_report(report, reporter)
    raise typer.Exit(code=report.exit_code)


@app.command(epilog=BUILD_EPILOG)
def build(
    registry_url: Optional[str] = typer.Option(None, "--registry-url", "-r", help=f"URL to registry.yaml (default: ${REGISTRY_URL_ENV})", show_default=False),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Output directory for modules (default: ./modules)", show_default=False),
    manifest_path: Optional[Path] = typer.Option(None, "--manifest-path", "-m", help="Path for generated manifest (default: ./registry-manifest.json)", show_default=False),
    token: Optional[str] = typer.Option(None, "--token", "-t", help=f"GitHub token for private repos (default: ${TOKEN_ENV})", show_default=False),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Fetch approved modules from the registry, validate them and write a manifest."""
    reporter = StatusReporter(verbose=verbose)
    try:
        settings = load_builder_settings(
            registry_url=registry_url,
            output_dir=output_dir,
            manifest_path=manifest_path,
            token=token,
            verbose=verbose,
        )
        reporter.verbose = settings.verbose
        if settings.verbose:
            configure_logger("module_registry", level="DEBUG")
        result = build_modules(settings, reporter=reporter)
    except ModuleRegistryError as e:
        reporter.error(str(e))
        raise typer.Exit(code=1)

    raise typer.Exit(code=result.exit_code)


def main() -> None:
    """Console script entry point."""
    app()
