"""Shared test fixtures for Karu tests.

Created: 2025-11-12
"""

import os
import shutil
from pathlib import Path
from typing import Any, List, Tuple

import pytest

from karu.config.settings import Settings
from karu.core.exceptions import IoFailure
from karu.core.file_ops import FileOps
from karu.core.modes import ModeStateMachine

from tests.utils import build_tree


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch, tmp_path_factory):
    """Point HOME at an empty directory and clear KARU_* overrides."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    for name in ("KARU_SHOW_HIDDEN", "KARU_LOG_LEVEL", "KARU_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def sample_tree(tmp_path):
    """Directory with hidden/normal directories and files of every kind.

    Layout::

        .cache/
        Alpha/
        beta/
            inner.txt
            nested/
        .env
        A.md
        b.txt
        data.bin
    """
    root = tmp_path / "root"
    build_tree(root, {
        ".cache": {},
        "Alpha": {},
        "beta": {"inner.txt": "inside\n", "nested": {}},
        ".env": "SECRET=1\n",
        "A.md": "# Title\n",
        "b.txt": "hello\nworld\nhello again\n",
        "data.bin": b"\x00\x01\x02binary",
    })
    return root


class RecordingTrash:
    """Trash fake that records and removes paths."""

    def __init__(self, fail: bool = False):
        self.deleted: List[Path] = []
        self.fail = fail

    def delete(self, path: Path) -> None:
        if self.fail:
            raise IoFailure(f"Could not move {path.name} to trash: refused")
        self.deleted.append(path)
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            os.remove(path)


class RecordingOpener:
    """Opener fake that records paths instead of spawning anything."""

    def __init__(self):
        self.opened: List[Path] = []

    def open(self, path: Path) -> None:
        self.opened.append(path)


class RecordingPlayback:
    """Playback fake; each play returns a new integer handle."""

    def __init__(self):
        self.calls: List[Tuple[str, Any]] = []
        self.current_position = 0.0
        self._next_handle = 1

    def play(self, path: Path) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self.calls.append(("play", path))
        return handle

    def pause(self, handle: int) -> None:
        self.calls.append(("pause", handle))

    def resume(self, handle: int) -> None:
        self.calls.append(("resume", handle))

    def stop(self, handle: int) -> None:
        self.calls.append(("stop", handle))

    def seek(self, handle: int, seconds: float) -> None:
        self.calls.append(("seek", seconds))

    def position(self, handle: int) -> float:
        return self.current_position


@pytest.fixture
def trash():
    return RecordingTrash()


@pytest.fixture
def opener():
    return RecordingOpener()


@pytest.fixture
def playback():
    return RecordingPlayback()


@pytest.fixture
def file_ops(trash, opener):
    """FileOps wired to recording fakes."""
    return FileOps(trash=trash, opener=opener)


@pytest.fixture
def machine(sample_tree, file_ops, playback):
    """State machine browsing the sample tree."""
    return ModeStateMachine.create(sample_tree, file_ops=file_ops, playback=playback)


@pytest.fixture
def test_settings(tmp_path):
    """Default settings with the log file inside the test directory."""
    settings = Settings()
    settings.logging.file = str(tmp_path / "logs" / "karu.log")
    return settings
