"""Utility functions shared by the validator and the builder.

Key Functions:
--------------
- utc_timestamp: Second-precision UTC timestamps used in the manifest
- write_json_atomic, read_json: JSON persistence with consistent formatting
- remove_tree: Delete a directory if present
- configure_logger: Stream logging setup (plain or JSON lines)

Example:
--------
>>> from module_registry.utils import utc_timestamp, write_json_atomic
>>> write_json_atomic({"generatedAt": utc_timestamp()}, "manifest.json")
"""

from datetime import datetime, timezone
import json
import logging
import os
from pathlib import Path
import shutil
import tempfile
from typing import Any, Dict, Optional, Union

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Format a UTC timestamp as ``YYYY-MM-DDTHH:MM:SSZ``.

    Args:
        now: Moment to format (default: current time)

    Returns:
        ISO-8601 timestamp with a ``Z`` suffix
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def write_json_atomic(data: Dict[str, Any], path: Union[str, Path], indent: int = 2) -> None:
    """Write JSON to a sibling temp file, then rename it over ``path``.

    Readers never observe a half-written file: the rename is atomic on the
    same filesystem.

    Args:
        data: Dictionary to write
        path: Output file path
        indent: JSON indentation (default: 2 spaces)
    """

    class PathEncoder(json.JSONEncoder):
        """Custom JSON encoder that handles Path objects."""

        def default(self, obj):
            if isinstance(obj, Path):
                return str(obj)
            return super().default(obj)

    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path_obj.name}.", suffix=".new", dir=path_obj.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, cls=PathEncoder)
            f.write("\n")
        os.replace(tmp_name, path_obj)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_json(path: Union[str, Path]) -> Dict[str, Any]:
    """Read JSON file into dictionary."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def remove_tree(path: Path) -> bool:
    """Remove a directory tree if it exists.

    Returns:
        True if something was removed
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False


def configure_logger(name: str, level: str = "INFO", structured: bool = False) -> logging.Logger:
    """Configure logger with specified settings.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: If True, use structured (JSON) logging

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler()

    if structured:
        formatter = logging.Formatter('{"timestamp":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","message":"%(message)s"}')
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
