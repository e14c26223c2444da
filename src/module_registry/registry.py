"""Registry download and parsing.

The registry is a YAML document listing modules::

    modules:
      - id: intro-rust
        repoUrl: https://github.com/org/intro-rust
        version: v1.0.0
        author: Jane Doe
        authorType: community
        status: approved

Key Functions:
--------------
- fetch_registry: Download the document to a local file
- load_registry: Parse and validate a downloaded document
- authenticated_url: Embed a token in a github.com clone URL
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError
import requests
import yaml

from module_registry.domain import APPROVED_STATUS, Registry, RegistryEntry, RegistryError, RegistryFetchError, RejectedEntry

logger = logging.getLogger(__name__)

GITHUB_PREFIX = "https://github.com"


def fetch_registry(url: str, dest: Path, timeout: Optional[float] = None) -> Path:
    """Download the registry document to ``dest``.

    Redirects are followed and any HTTP error status is a failure.

    Args:
        url: Registry URL
        dest: File to write
        timeout: Seconds to wait for the server (None waits indefinitely)

    Returns:
        ``dest``

    Raises:
        RegistryFetchError: On connection errors or non-2xx responses
    """
    logger.debug(f"GET {url}")
    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
    except requests.RequestException as e:
        raise RegistryFetchError(f"Failed to fetch registry.yaml from {url}: {e}") from e

    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(response.content)
    return dest


def load_registry(path: Path) -> Registry:
    """Parse a registry document, keeping approved items only.

    A document without a ``modules`` key is an empty registry. Items whose
    status is not ``approved`` are never validated. An approved item that does
    not validate becomes a RejectedEntry instead of failing the whole document.

    Raises:
        RegistryError: If the YAML is malformed or has the wrong shape
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise RegistryError(f"Registry is not valid YAML: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise RegistryError(f"Registry must be a mapping, got {type(raw).__name__}")

    modules = raw.get("modules")
    if modules is None:
        modules = []
    if not isinstance(modules, list):
        raise RegistryError(f"Registry 'modules' must be a list, got {type(modules).__name__}")

    entries: List[Union[RegistryEntry, RejectedEntry]] = []
    for position, item in enumerate(modules, start=1):
        if not isinstance(item, dict) or item.get("status") != APPROVED_STATUS:
            continue
        try:
            entries.append(RegistryEntry.model_validate(item))
        except ValidationError as e:
            raw_id = item.get("id")
            entries.append(RejectedEntry(position=position, id="" if raw_id is None else str(raw_id), reason=_describe_errors(e)))

    return Registry(modules=entries)


def _describe_errors(error: ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors())


def authenticated_url(repo_url: str, token: Optional[str]) -> str:
    """Embed ``token`` in a github.com HTTPS URL.

    ``https://github.com/org/repo`` becomes ``https://<token>@github.com/org/repo``.
    URLs on other hosts, and any URL when no token is set, are returned as is.
    The result contains a secret and must not be logged.
    """
    if not token:
        return repo_url
    return repo_url.replace(GITHUB_PREFIX, f"https://{token}@github.com", 1)
