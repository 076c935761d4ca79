"""
Navigation history with back/forward.

Modified: 2025-11-12
"""

from pathlib import Path
from typing import List, Optional


class NavigationHistory:
    """
    Visited directories plus a cursor.

    Pushing a new path drops everything after the cursor, like a browser.
    """

    def __init__(self, initial: Optional[Path] = None):
        """
        Initialize history.

        Args:
            initial: Starting directory, if known
        """
        self._paths: List[Path] = []
        self._index = -1
        if initial is not None:
            self.push(initial)

    def __len__(self) -> int:
        return len(self._paths)

    @property
    def index(self) -> int:
        return self._index

    def push(self, path: Path) -> None:
        """Record a visit. Re-visiting the current path is a no-op."""
        if self._paths and self._paths[self._index] == path:
            return
        del self._paths[self._index + 1 :]
        self._paths.append(path)
        self._index = len(self._paths) - 1

    def back(self) -> Optional[Path]:
        """Step back; returns the new current path, or None at the start."""
        if self._index <= 0:
            return None
        self._index -= 1
        return self._paths[self._index]

    def forward(self) -> Optional[Path]:
        """Step forward; returns the new current path, or None at the tail."""
        if self._index >= len(self._paths) - 1:
            return None
        self._index += 1
        return self._paths[self._index]

    def current(self) -> Optional[Path]:
        if self._index < 0:
            return None
        return self._paths[self._index]

    def can_go_back(self) -> bool:
        return self._index > 0

    def can_go_forward(self) -> bool:
        return 0 <= self._index < len(self._paths) - 1
