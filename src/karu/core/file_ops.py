"""
File operations: clipboard, paste, trash, rename, move, create, open.

Every operation takes the acting directory explicitly and raises
IoFailure/InvalidInput; the caller decides how to present the failure.

Modified: 2025-11-12
"""

import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from karu.core.exceptions import InvalidInput, IoFailure
from karu.core.lister import expand_path
from karu.core.models import ClipboardEntry, Entry
from karu.core.services import Opener, SystemOpener, Send2TrashService, TrashService


logger = logging.getLogger(__name__)


@contextmanager
def _io_errors(action: str) -> Iterator[None]:
    """Re-raise OSError as IoFailure with a readable message."""
    try:
        yield
    except OSError as e:
        target = e.filename or ""
        reason = e.strerror or str(e)
        message = f"{action}: {reason}"
        if target:
            message += f" ({target})"
        raise IoFailure(message) from e


def require_entry(entry: Optional[Entry], action: str) -> Entry:
    if entry is None:
        raise InvalidInput(f"Nothing selected to {action}")
    if entry.is_parent:
        raise InvalidInput(f"Cannot {action} the parent entry '..'")
    return entry


class FileOps:
    """
    Synchronous file operations used by the mode state machine.

    Nothing here is retried; a failure leaves the filesystem as close to the
    starting point as the operation allows.
    """

    def __init__(
        self,
        trash: Optional[TrashService] = None,
        opener: Optional[Opener] = None,
    ):
        """
        Initialize file operations.

        Args:
            trash: Trash service (Send2Trash by default)
            opener: Default-application opener (xdg-open/open/startfile by default)
        """
        self.trash = trash or Send2TrashService()
        self.opener = opener or SystemOpener()

    # Clipboard

    def copy(self, entry: Optional[Entry]) -> ClipboardEntry:
        entry = require_entry(entry, "copy")
        return ClipboardEntry(path=entry.path, is_cut=False)

    def cut(self, entry: Optional[Entry]) -> ClipboardEntry:
        entry = require_entry(entry, "cut")
        return ClipboardEntry(path=entry.path, is_cut=True)

    def paste(self, clipboard: Optional[ClipboardEntry], directory: Path) -> Path:
        """
        Paste the clipboard into ``directory``.

        Directories are copied one level deep: files directly inside the source
        are copied, child directories are created empty and not descended into.
        A cut performs the same shallow copy, then removes the source
        permanently (recursively for directories, bypassing the trash).

        Args:
            clipboard: Pending copy/cut
            directory: Destination directory

        Returns:
            Path of the pasted entry

        Raises:
            InvalidInput: If the clipboard is empty
            IoFailure: If the source is gone, the destination exists, or the
                filesystem refuses
        """
        if clipboard is None:
            raise InvalidInput("Clipboard is empty")

        source = clipboard.path
        if not os.path.lexists(source):
            raise IoFailure(f"Source no longer exists: {source}")

        destination = directory / source.name
        if os.path.lexists(destination):
            raise IoFailure(f"Destination already exists: {destination}")

        if clipboard.is_cut:
            self._move_for_paste(source, destination)
        else:
            self._copy_for_paste(source, destination)

        logger.info(f"Pasted ({clipboard.operation}) {source} -> {destination}")
        return destination

    def _copy_for_paste(self, source: Path, destination: Path) -> None:
        if not source.is_dir():
            with _io_errors(f"Could not copy {source.name}"):
                shutil.copy2(source, destination)
            return

        with _io_errors(f"Could not create {destination.name}"):
            destination.mkdir()
        try:
            with _io_errors(f"Could not copy {source.name}"):
                with os.scandir(source) as it:
                    children = list(it)
                for child in children:
                    target = destination / child.name
                    if child.is_dir():
                        target.mkdir()
                    else:
                        shutil.copy2(child.path, target)
        except IoFailure:
            shutil.rmtree(destination, ignore_errors=True)
            raise

    def _move_for_paste(self, source: Path, destination: Path) -> None:
        self._copy_for_paste(source, destination)
        with _io_errors(f"Copied but could not remove {source.name}"):
            if source.is_dir() and not source.is_symlink():
                shutil.rmtree(source)
            else:
                source.unlink()

    # Destructive and renaming operations

    def delete(self, entry: Optional[Entry]) -> None:
        """Move the entry to the trash. Callers gate this behind a confirmation."""
        entry = require_entry(entry, "delete")
        self.trash.delete(entry.path)

    def rename(self, entry: Optional[Entry], new_name: str, directory: Path) -> Path:
        """
        Rename an entry inside ``directory``.

        Args:
            entry: Entry to rename
            new_name: New name, joined to ``directory``
            directory: Directory the entry lives in

        Returns:
            New path (unchanged when the name is the same)
        """
        entry = require_entry(entry, "rename")
        if not new_name:
            raise InvalidInput("New name cannot be empty")
        return self._rename(entry.path, directory / new_name)

    def move(self, entry: Optional[Entry], destination: str, directory: Path) -> Path:
        """
        Move an entry to a typed destination.

        Relative destinations resolve against ``directory``. An existing
        directory as destination receives the entry inside it.
        """
        entry = require_entry(entry, "move")
        if not destination:
            raise InvalidInput("Destination cannot be empty")
        target = expand_path(destination, directory)
        if target.is_dir() and target != entry.path:
            target = target / entry.name
        return self._rename(entry.path, target)

    def _rename(self, source: Path, target: Path) -> Path:
        if target == source:
            return source
        if os.path.lexists(target):
            raise IoFailure(f"Destination already exists: {target}")
        with _io_errors(f"Could not rename {source.name}"):
            os.rename(source, target)
        logger.info(f"Renamed {source} -> {target}")
        return target

    # Creation

    def create_file(self, name: str, directory: Path) -> Path:
        """Create an empty file; an existing file is never truncated."""
        if not name:
            raise InvalidInput("Name cannot be empty")
        target = directory / name
        with _io_errors(f"Could not create {name}"):
            target.touch(exist_ok=False)
        logger.info(f"Created file {target}")
        return target

    def create_directory(self, path: str, directory: Path) -> Path:
        """Create a directory and any missing intermediate segments."""
        if not path.strip(os.sep + "/"):
            raise InvalidInput("Directory name cannot be empty")
        target = directory / path
        with _io_errors(f"Could not create directory {path}"):
            target.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created directory {target}")
        return target

    def create(self, name: str, directory: Path) -> Path:
        """Trailing separator creates a directory tree, anything else an empty file."""
        if name.endswith(("/", os.sep)):
            return self.create_directory(name, directory)
        return self.create_file(name, directory)

    # Opening and text content

    def open(self, entry: Optional[Entry]) -> None:
        """Hand a file to the default application. Directories are navigated by the caller."""
        if entry is None:
            raise InvalidInput("Nothing selected to open")
        self.opener.open(entry.path)

    def read_text(self, path: Path) -> str:
        with _io_errors(f"Could not read {path.name}"):
            data = path.read_bytes()
        if b"\x00" in data[:1024]:
            raise InvalidInput(f"{path.name} is a binary file")
        return data.decode("utf-8", errors="replace")

    def write_text(self, path: Path, text: str) -> None:
        with _io_errors(f"Could not write {path.name}"):
            path.write_text(text, encoding="utf-8")
        logger.info(f"Wrote {len(text)} characters to {path}")
