"""Validation report domain models.

A validation run produces an ordered list of findings. The report is plain
data: counting, status and exit code are derived from the findings, and
printing is done elsewhere (see module_registry.validate).

Model Hierarchy:
---------------
- ValidationReport
  └── Finding (severity + message + section)

Usage:
------
>>> from module_registry.validate import validate_module
>>> report = validate_module(Path("modules/intro-rust"))
>>> report.status
'passed_with_warnings'
>>> report.exit_code
0
"""

from pathlib import Path
from typing import List, Literal

from pydantic import BaseModel, Field

Severity = Literal["info", "ok", "warning", "error"]
Section = Literal["track", "modules", "steps"]
ValidationStatus = Literal["passed", "passed_with_warnings", "failed"]


class Finding(BaseModel):
    """One check outcome."""

    model_config = {"frozen": True, "extra": "forbid"}

    severity: Severity
    message: str
    section: Section = "track"


class ValidationReport(BaseModel):
    """Findings for one module directory, in check order.

    Attributes:
        module_path: Directory that was validated
        findings: Every check outcome, including successful ones
    """

    model_config = {"frozen": True, "extra": "forbid"}

    module_path: Path
    findings: List[Finding] = Field(default_factory=list)

    @property
    def errors(self) -> List[Finding]:
        return [f for f in self.findings if f.severity == "error"]

    @property
    def warnings(self) -> List[Finding]:
        return [f for f in self.findings if f.severity == "warning"]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def status(self) -> ValidationStatus:
        if self.error_count:
            return "failed"
        if self.warning_count:
            return "passed_with_warnings"
        return "passed"

    @property
    def passed(self) -> bool:
        return self.error_count == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1
