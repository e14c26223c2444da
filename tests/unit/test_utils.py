"""Unit tests for utility functions."""

from datetime import datetime, timedelta, timezone
import json
import logging
from pathlib import Path

import pytest

from module_registry.utils import configure_logger, read_json, remove_tree, utc_timestamp, write_json_atomic

pytestmark = pytest.mark.unit


class TestTimestamps:
    def test_Should_FormatUtcWithZ_When_Given(self):
        moment = datetime(2025, 3, 4, 5, 6, 7, 890, tzinfo=timezone.utc)

        assert utc_timestamp(moment) == "2025-03-04T05:06:07Z"

    def test_Should_ConvertToUtc_When_OtherTimezone(self):
        moment = datetime(2025, 3, 4, 12, 0, 0, tzinfo=timezone(timedelta(hours=2)))

        assert utc_timestamp(moment) == "2025-03-04T10:00:00Z"


class TestJsonIO:
    def test_Should_WriteAndRead_When_PathObjectsPresent(self, tmp_path: Path):
        path = tmp_path / "nested" / "out.json"

        write_json_atomic({"path": Path("a/b"), "n": 1}, path)

        assert read_json(path) == {"path": "a/b", "n": 1}
        assert list(path.parent.iterdir()) == [path]

    def test_Should_KeepOldFile_When_SerializationFails(self, tmp_path: Path):
        path = tmp_path / "out.json"
        write_json_atomic({"ok": True}, path)

        with pytest.raises(TypeError):
            write_json_atomic({"bad": object()}, path)

        assert json.loads(path.read_text()) == {"ok": True}
        assert list(tmp_path.iterdir()) == [path]


class TestRemoveTree:
    def test_Should_RemoveDirectory_When_Present(self, tmp_path: Path):
        target = tmp_path / "dir"
        (target / "sub").mkdir(parents=True)
        (target / "sub" / "f.txt").write_text("x")

        assert remove_tree(target) is True
        assert not target.exists()

    def test_Should_ReturnFalse_When_Missing(self, tmp_path: Path):
        assert remove_tree(tmp_path / "missing") is False


class TestLogger:
    def test_Should_ReplaceHandlers_When_Reconfigured(self):
        configure_logger("module_registry.test", level="DEBUG")
        logger = configure_logger("module_registry.test", level="warning", structured=True)

        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
