"""Module directory validation.

Checks that a module directory has a ``track.yaml`` with the required
top-level keys, and inspects every ``module.yaml`` and ``step.yaml`` found
below it.

Required keys are detected by line prefix (``^id:``), not by parsing YAML:
duplicate keys, nested keys and commented-out lines are not told apart from
real top-level keys. Validation never prints; ``render_validation_report``
turns a report into console output.

Example:
--------
>>> from module_registry.validate import validate_module
>>> report = validate_module(Path("modules/intro-rust"))
>>> report.error_count, report.warning_count
(0, 1)
"""

import logging
from pathlib import Path
import re
from typing import List, Sequence, Union

from module_registry.console import StatusReporter
from module_registry.domain import Finding, Section, ValidationReport

logger = logging.getLogger(__name__)

TRACK_FILENAME = "track.yaml"
MODULE_FILENAME = "module.yaml"
STEP_FILENAME = "step.yaml"

TRACK_REQUIRED_KEYS = ("id", "name", "description", "modules")
DESCRIPTOR_REQUIRED_KEYS = ("id", "name")
STEP_CONTENT_FILENAMES = ("explanation.md", "instructions.md", "content.md", "README.md")

MODULE_NAME_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def has_key_line(text: str, key: str) -> bool:
    """True if any line of ``text`` starts with ``key:``."""
    return re.search(rf"^{re.escape(key)}:", text, re.MULTILINE) is not None


def is_canonical_name(name: str) -> bool:
    """Lowercase alphanumerics separated by single hyphens."""
    return MODULE_NAME_PATTERN.match(name) is not None


def find_descriptors(root: Path, filename: str) -> List[Path]:
    """Every file called ``filename`` under ``root``, sorted for stable output."""
    return sorted(p for p in root.rglob(filename) if p.is_file())


def validate_module(module_path: Union[str, Path]) -> ValidationReport:
    """Validate a module directory.

    Args:
        module_path: Directory to validate

    Returns:
        ValidationReport with findings in check order. A missing directory
        yields a single error and no further checks.
    """
    path = Path(module_path)
    findings: List[Finding] = []

    if not path.is_dir():
        findings.append(Finding(severity="error", message=f"Module directory does not exist: {path}"))
        return ValidationReport(module_path=path, findings=findings)

    findings.extend(_check_track(path))
    findings.extend(_check_modules(path))
    findings.extend(_check_steps(path))

    report = ValidationReport(module_path=path, findings=findings)
    logger.debug(f"Validated {path}: {report.error_count} error(s), {report.warning_count} warning(s)")
    return report


def _check_track(root: Path) -> List[Finding]:
    track_yaml = root / TRACK_FILENAME
    if not track_yaml.is_file():
        return [Finding(severity="error", message=f"{TRACK_FILENAME} not found at {track_yaml}")]

    findings = [Finding(severity="ok", message=f"{TRACK_FILENAME} exists")]
    text = _read_text(track_yaml)
    for key in TRACK_REQUIRED_KEYS:
        # "modules" is a section rather than a scalar field
        kind = "section" if key == "modules" else "field"
        if has_key_line(text, key):
            findings.append(Finding(severity="ok", message=f"{TRACK_FILENAME} has '{key}' {kind}"))
        else:
            findings.append(Finding(severity="error", message=f"{TRACK_FILENAME} missing required '{key}' {kind}"))
    return findings


def _check_modules(root: Path) -> List[Finding]:
    descriptors = find_descriptors(root, MODULE_FILENAME)
    if not descriptors:
        return [Finding(severity="warning", message=f"No {MODULE_FILENAME} files found - this may be a track without modules", section="modules")]

    findings: List[Finding] = []
    for descriptor in descriptors:
        module_dir = descriptor.parent
        findings.append(Finding(severity="info", message=f"Checking module: {module_dir.name}", section="modules"))
        findings.extend(_check_required_keys(descriptor, DESCRIPTOR_REQUIRED_KEYS, "modules"))

        if is_canonical_name(module_dir.name):
            findings.append(Finding(severity="ok", message=f"Directory name follows convention: {module_dir.name}", section="modules"))
        else:
            findings.append(Finding(severity="warning", message=f"Directory name should be lowercase with hyphens: {module_dir.name}", section="modules"))
    return findings


def _check_steps(root: Path) -> List[Finding]:
    descriptors = find_descriptors(root, STEP_FILENAME)
    if not descriptors:
        return [Finding(severity="warning", message=f"No {STEP_FILENAME} files found - this may be a track without steps", section="steps")]

    findings: List[Finding] = []
    for descriptor in descriptors:
        step_dir = descriptor.parent
        findings.append(Finding(severity="info", message=f"Checking step: {step_dir.name}", section="steps"))
        findings.extend(_check_required_keys(descriptor, DESCRIPTOR_REQUIRED_KEYS, "steps"))

        if any((step_dir / name).is_file() for name in STEP_CONTENT_FILENAMES):
            findings.append(Finding(severity="ok", message="Step has content file", section="steps"))
        else:
            expected = ", ".join(STEP_CONTENT_FILENAMES[:-1]) + f", or {STEP_CONTENT_FILENAMES[-1]}"
            findings.append(Finding(severity="warning", message=f"Step missing content file ({expected}) in {step_dir}", section="steps"))
    return findings


def _check_required_keys(descriptor: Path, keys: Sequence[str], section: Section) -> List[Finding]:
    text = _read_text(descriptor)
    findings = []
    for key in keys:
        if has_key_line(text, key):
            findings.append(Finding(severity="ok", message=f"{descriptor.name} has '{key}' field", section=section))
        else:
            findings.append(Finding(severity="error", message=f"{descriptor.name} missing '{key}' field in {descriptor.parent}", section=section))
    return findings


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def render_validation_report(report: ValidationReport, reporter: StatusReporter) -> None:
    """Print a report in check order followed by the summary block."""
    if not report.module_path.is_dir():
        for finding in report.errors:
            reporter.error(finding.message)
        return

    reporter.plain(f"Validating module: {report.module_path}")
    reporter.plain("=" * 32)

    headings = {
        "modules": ("Checking module directories...", "-" * 30),
        "steps": ("Checking step directories...", "-" * 28),
    }
    current: Section = "track"
    for finding in report.findings:
        if finding.section != current:
            current = finding.section
            title, rule = headings[current]
            reporter.plain()
            reporter.plain(title)
            reporter.plain(rule)
        _render_finding(finding, reporter)

    reporter.plain()
    reporter.heading("Validation Summary")
    if report.status == "failed":
        reporter.plain(f"FAILED: {report.error_count} error(s), {report.warning_count} warning(s)", fg="red")
    elif report.status == "passed_with_warnings":
        reporter.plain(f"PASSED WITH WARNINGS: {report.warning_count} warning(s)", fg="bright_yellow")
    else:
        reporter.plain("PASSED: All validations successful", fg="green")


def _render_finding(finding: Finding, reporter: StatusReporter) -> None:
    indent = "" if finding.section == "track" else "  "
    if finding.severity == "info":
        reporter.plain(f"  {finding.message}")
    elif finding.severity == "error":
        reporter.error(f"{indent}{finding.message}")
    elif finding.severity == "warning":
        reporter.warning(f"{indent}{finding.message}", err=True)
    else:
        reporter.success(f"{indent}{finding.message}")
