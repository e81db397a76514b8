"""Pytest configuration and shared fixtures."""

import logging
import stat
from pathlib import Path
from typing import Callable, List, Union

import pytest

from zsnapfree.config import reset_settings
from zsnapfree.models import SnapshotItem


class FakeZfs:
    """A stand-in zfs executable that replays canned output and records its arguments."""

    def __init__(self, directory: Path):
        self.directory = directory
        self.path = directory / "zfs"
        self.calls_file = directory / "calls.log"

    def configure(
        self,
        list_output: Union[str, bytes] = "",
        destroy_output: Union[str, bytes] = "",
        stderr: Union[str, bytes] = "",
        exit_code: int = 0,
    ) -> "FakeZfs":
        for name, content in (
            ("list.out", list_output),
            ("destroy.out", destroy_output),
            ("stderr.out", stderr),
        ):
            if isinstance(content, str):
                content = content.encode("utf-8")
            (self.directory / name).write_bytes(content)
        script = "\n".join(
            [
                "#!/bin/sh",
                f'DIR="{self.directory}"',
                'echo "$*" >> "$DIR/calls.log"',
                'case "$1" in',
                '  list) cat "$DIR/list.out" ;;',
                '  destroy) cat "$DIR/destroy.out" ;;',
                "esac",
                'cat "$DIR/stderr.out" >&2',
                f"exit {exit_code}",
                "",
            ]
        )
        self.path.write_text(script)
        self.path.chmod(self.path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return self

    @property
    def calls(self) -> List[str]:
        if not self.calls_file.exists():
            return []
        return self.calls_file.read_text().splitlines()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Isolate every test from cached settings, config files and ZSNAPFREE_* variables."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    for var in ("ZSNAPFREE_ZFS", "ZSNAPFREE_IDLE_TIMEOUT_MS", "ZSNAPFREE_LOG_LEVEL", "ZSNAPFREE_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Detach and close handlers added by setup_logging during a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def fake_zfs(tmp_path) -> FakeZfs:
    """A configured stand-in zfs binary; call .configure() to change its output."""
    directory = tmp_path / "fakezfs"
    directory.mkdir()
    return FakeZfs(directory).configure()


@pytest.fixture
def make_items() -> Callable[..., List[SnapshotItem]]:
    """Build SnapshotItems from (name, marked) pairs."""

    def _make(pairs) -> List[SnapshotItem]:
        return [SnapshotItem(name=name, marked=marked) for name, marked in pairs]

    return _make
