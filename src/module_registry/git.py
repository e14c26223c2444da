"""Thin wrapper around the ``git`` command line.

Clone URLs may embed credentials, so neither commands nor git's stderr are
copied into exceptions or log records.
"""

import logging
from pathlib import Path
import shutil
import subprocess
from typing import Callable, List, Optional

from module_registry.domain import CloneError, ExternalToolError

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


class GitClient:
    """Shallow clones and HEAD resolution.

    Args:
        executable: git binary name or path
        runner: subprocess.run compatible callable
    """

    def __init__(self, executable: str = "git", runner: Runner = subprocess.run):
        self.executable = executable
        self._runner = runner

    def ensure_available(self) -> None:
        """Raises ExternalToolError if git is not on PATH."""
        if shutil.which(self.executable) is None:
            raise ExternalToolError(f"{self.executable} is required but not installed")

    def clone(self, url: str, dest: Path, ref: Optional[str] = None, module_id: Optional[str] = None) -> None:
        """Clone ``url`` into ``dest`` at depth 1.

        Args:
            url: Repository URL (may contain a token)
            dest: Target directory (must not exist)
            ref: Branch or tag; None clones the default branch
            module_id: Registry id, attached to the raised error

        Raises:
            CloneError: If git exits non-zero
        """
        command = [self.executable, "clone", "--quiet", "--depth", "1"]
        if ref is not None:
            command += ["--branch", ref]
        command += ["--", url, str(dest)]

        result = self._run(command)
        if result.returncode != 0:
            at = f"version {ref}" if ref is not None else "latest"
            raise CloneError(f"Failed to clone {module_id or dest.name} at {at}", module_id=module_id)

    def short_head(self, repo: Path) -> Optional[str]:
        """Abbreviated commit hash of HEAD, or None if it cannot be resolved."""
        result = self._run([self.executable, "-C", str(repo), "rev-parse", "--short", "HEAD"])
        if result.returncode != 0:
            logger.debug(f"rev-parse failed in {repo}")
            return None
        return result.stdout.strip() or None

    def _run(self, command: List[str]) -> subprocess.CompletedProcess:
        try:
            return self._runner(command, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            raise ExternalToolError(f"{self.executable} is required but not installed") from e
