"""Pytest configuration and shared fixtures for module registry tests.

Provides:
- Module tree builders (track/module/step descriptors and content files)
- Registry documents served through a patched ``requests.get``
- A fake git client that "clones" from local template directories
- Environment isolation for settings tests
"""

from pathlib import Path
import shutil
from typing import Dict, Iterable, Optional

import pytest
import requests
import yaml

from module_registry.domain import CloneError
from module_registry.git import GitClient

REGISTRY_URL = "https://registry.example.com/registry.yaml"

VALID_TRACK = """id: intro-rust
name: Introduction to Rust
description: First steps with Rust
modules:
  - basics
"""


# ============================================================================
# Environment Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop configuration variables inherited from the developer or CI shell."""
    for name in ("MODULE_REGISTRY_URL", "GITHUB_TOKEN", "MODULE_REGISTRY_OUTPUT_DIR", "MODULE_REGISTRY_MANIFEST_PATH", "MODULE_REGISTRY_VERBOSE", "MODULE_REGISTRY_FETCH_TIMEOUT_S"):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# Module Trees
# ============================================================================


def write_module_tree(
    root: Path,
    track: Optional[str] = VALID_TRACK,
    modules: Iterable[str] = ("basics",),
    steps: Iterable[str] = ("hello",),
    content_file: Optional[str] = "instructions.md",
) -> Path:
    """Write a module directory.

    Layout::

        root/
        ├── track.yaml
        └── <module>/
            ├── module.yaml
            └── <step>/
                ├── step.yaml
                └── instructions.md
    """
    root.mkdir(parents=True, exist_ok=True)
    if track is not None:
        (root / "track.yaml").write_text(track)

    for module in modules:
        module_dir = root / module
        module_dir.mkdir(parents=True, exist_ok=True)
        (module_dir / "module.yaml").write_text(f"id: {module}\nname: {module.title()}\n")
        for step in steps:
            step_dir = module_dir / step
            step_dir.mkdir(parents=True, exist_ok=True)
            (step_dir / "step.yaml").write_text(f"id: {step}\nname: {step.title()}\n")
            if content_file:
                (step_dir / content_file).write_text(f"# {step}\n")
    return root


@pytest.fixture
def valid_module(tmp_path: Path) -> Path:
    """Module directory passing every check."""
    return write_module_tree(tmp_path / "intro-rust")


@pytest.fixture
def module_template(tmp_path: Path) -> Path:
    """Template copied by FakeGit for successful clones."""
    return write_module_tree(tmp_path / "templates" / "valid")


@pytest.fixture
def broken_template(tmp_path: Path) -> Path:
    """Template without track.yaml (fails validation)."""
    return write_module_tree(tmp_path / "templates" / "broken", track=None)


# ============================================================================
# Registry Documents
# ============================================================================


def registry_entry(module_id: str, version: str = "v1.0.0", status: str = "approved", **extra) -> Dict:
    entry = {
        "id": module_id,
        "repoUrl": f"https://github.com/org/{module_id}",
        "version": version,
        "author": "Jane Doe",
        "authorType": "community",
        "status": status,
    }
    entry.update(extra)
    return entry


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, content: bytes, status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


class RegistryServer:
    """Serves registry documents by URL through a patched ``requests.get``."""

    def __init__(self):
        self.documents: Dict[str, bytes] = {}
        self.requests = []

    def publish(self, entries: Iterable[Dict], url: str = REGISTRY_URL) -> str:
        self.documents[url] = yaml.safe_dump({"modules": list(entries)}).encode("utf-8")
        return url

    def publish_raw(self, text: str, url: str = REGISTRY_URL) -> str:
        self.documents[url] = text.encode("utf-8")
        return url

    def get(self, url, timeout=None, allow_redirects=True):
        self.requests.append((url, timeout))
        if url not in self.documents:
            return FakeResponse(b"Not Found", status_code=404)
        return FakeResponse(self.documents[url])


@pytest.fixture
def registry_server(monkeypatch) -> RegistryServer:
    server = RegistryServer()
    monkeypatch.setattr("module_registry.registry.requests.get", server.get)
    return server


# ============================================================================
# Fake Git
# ============================================================================


class FakeGit(GitClient):
    """Git client that copies local template directories instead of cloning.

    Args:
        sources: Clone URL -> template directory
        failing: Clone URLs that fail, leaving partial content behind
        head: Short hash reported for every clone
    """

    def __init__(self, sources: Dict[str, Path], failing: Iterable[str] = (), head: Optional[str] = "a1b2c3d"):
        super().__init__()
        self.sources = dict(sources)
        self.failing = set(failing)
        self.head = head
        self.clones = []

    def ensure_available(self) -> None:
        pass

    def clone(self, url, dest, ref=None, module_id=None):
        self.clones.append((url, Path(dest), ref))
        if url in self.failing or url not in self.sources:
            Path(dest).mkdir(parents=True)
            (Path(dest) / "partial-object").write_text("")
            raise CloneError(f"Failed to clone {module_id} at {'version ' + ref if ref else 'latest'}", module_id=module_id)
        shutil.copytree(self.sources[url], dest)
        (Path(dest) / ".git").mkdir()
        (Path(dest) / ".git" / "HEAD").write_text("ref: refs/heads/main\n")

    def short_head(self, repo):
        return self.head
