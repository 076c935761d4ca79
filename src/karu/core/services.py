"""
External collaborators behind narrow interfaces.

Trash, "open with default application" and audio playback are injected into
the browser so the core never depends on a concrete platform backend.

Modified: 2025-11-12
"""

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Protocol

from send2trash import send2trash

from karu.core.exceptions import IoFailure


logger = logging.getLogger(__name__)


class TrashService(Protocol):
    """Moves a path to a recoverable trash location."""

    def delete(self, path: Path) -> None: ...


class Opener(Protocol):
    """Hands a file to the desktop's default application."""

    def open(self, path: Path) -> None: ...


class PlaybackService(Protocol):
    """Audio backend contract used by the play/pause/seek keys."""

    def play(self, path: Path) -> Any: ...

    def pause(self, handle: Any) -> None: ...

    def resume(self, handle: Any) -> None: ...

    def stop(self, handle: Any) -> None: ...

    def seek(self, handle: Any, seconds: float) -> None: ...

    def position(self, handle: Any) -> float: ...


class Send2TrashService:
    """Trash backed by Send2Trash (freedesktop trash, macOS Finder, Windows recycle bin)."""

    def delete(self, path: Path) -> None:
        try:
            send2trash(str(path))
        except OSError as e:
            raise IoFailure(f"Could not move {path.name} to trash: {e}") from e
        logger.info(f"Moved {path} to trash")


class SystemOpener:
    """Spawns the platform opener and does not wait for it."""

    def open(self, path: Path) -> None:
        try:
            if sys.platform == "win32":
                os.startfile(path)  # type: ignore[attr-defined]
            elif sys.platform == "darwin":
                subprocess.Popen(
                    ["open", str(path)],
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
            else:
                subprocess.Popen(
                    ["xdg-open", str(path)],
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
        except FileNotFoundError as e:
            raise IoFailure(f"No opener available for {path.name}: {e}") from e
        except OSError as e:
            raise IoFailure(f"Could not open {path.name}: {e}") from e
        logger.info(f"Opened {path} with default application")
