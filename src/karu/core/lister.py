"""
Directory listing.

Reads one directory and orders it into four groups: hidden directories,
directories, hidden files, files. Each group is sorted case-insensitively.

Modified: 2025-11-12
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from karu.core.exceptions import IoFailure
from karu.core.models import Entry, Listing, PARENT_NAME


logger = logging.getLogger(__name__)


def expand_path(raw: str, base: Optional[Path] = None) -> Path:
    """
    Turn user input into an absolute path.

    ``~`` expands against the home directory; relative paths resolve against
    ``base`` (the browsing directory) rather than the process working directory.

    Args:
        raw: Path as typed
        base: Directory relative paths are joined to

    Returns:
        Absolute, normalized path
    """
    path = Path(os.path.expanduser(raw))
    if not path.is_absolute():
        path = (base or Path.cwd()) / path
    return Path(os.path.normpath(path))


def parent_of(path: Path) -> Path:
    """Parent directory; the root is its own parent."""
    return path.parent


def _sort_key(entry: Entry):
    return (entry.name.lower(), entry.name)


class DirectoryLister:
    """Builds deterministic listings for ``(directory, show_hidden)``."""

    def list(self, path: Path, show_hidden: bool = True) -> Listing:
        """
        List a directory.

        Args:
            path: Directory to read
            show_hidden: Include names starting with '.'

        Returns:
            Listing starting with the synthetic '..' entry

        Raises:
            IoFailure: If the directory itself cannot be read
        """
        try:
            with os.scandir(path) as it:
                raw_entries = list(it)
        except OSError as e:
            raise IoFailure(f"Cannot read directory {path}: {e.strerror or e}") from e

        hidden_dirs: List[Entry] = []
        normal_dirs: List[Entry] = []
        hidden_files: List[Entry] = []
        normal_files: List[Entry] = []

        for dir_entry in raw_entries:
            name = dir_entry.name
            if name in (".", ".."):
                continue
            is_hidden = name.startswith(".")
            if is_hidden and not show_hidden:
                continue

            entry = self._make_entry(dir_entry)
            if entry is None:
                continue

            if entry.is_dir:
                (hidden_dirs if is_hidden else normal_dirs).append(entry)
            else:
                (hidden_files if is_hidden else normal_files).append(entry)

        entries = [Entry(name=PARENT_NAME, path=parent_of(Path(path)), is_dir=True)]
        for group in (hidden_dirs, normal_dirs, hidden_files, normal_files):
            entries.extend(sorted(group, key=_sort_key))

        return Listing(directory=Path(path), entries=entries)

    def _make_entry(self, dir_entry: os.DirEntry) -> Optional[Entry]:
        """Build an Entry, or None if the entry vanished mid-scan."""
        try:
            dir_entry.stat(follow_symlinks=False)
        except OSError:
            logger.debug(f"Skipping {dir_entry.path}: metadata unavailable")
            return None

        try:
            is_dir = dir_entry.is_dir()
        except OSError:
            # Symlink loops and similar resolve as plain files
            is_dir = False

        size = None
        if not is_dir:
            try:
                size = dir_entry.stat().st_size
            except OSError:
                size = None

        return Entry(name=dir_entry.name, path=Path(dir_entry.path), is_dir=is_dir, size=size)
