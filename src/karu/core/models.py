"""
Core data models for Karu.

Entries, listings, clipboard, modes and the single mutable BrowserState.

Modified: 2025-11-12
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, List, Optional, Union


PARENT_NAME = ".."


@dataclass(frozen=True)
class Entry:
    """
    One child of a directory as shown in the file list.

    The synthetic ``..`` entry points at the parent directory (or at the
    directory itself when listing the filesystem root).
    """

    name: str
    path: Path
    is_dir: bool
    size: Optional[int] = None  # bytes, files only

    @property
    def is_parent(self) -> bool:
        return self.name == PARENT_NAME

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith(".") and not self.is_parent

    @property
    def suffix(self) -> str:
        """Lower-case extension without the dot."""
        return self.path.suffix.lower().lstrip(".")


@dataclass
class Listing:
    """Ordered entries of one directory."""

    directory: Path
    entries: List[Entry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> Entry:
        return self.entries[index]

    def names(self) -> List[str]:
        return [entry.name for entry in self.entries]

    def find(self, name: str) -> Optional[int]:
        """Index of the entry called ``name``, or None."""
        for i, entry in enumerate(self.entries):
            if entry.name == name:
                return i
        return None

    def filtered(self, text: str) -> "Listing":
        """Keep entries whose name contains ``text`` (case-sensitive), order preserved."""
        return Listing(
            directory=self.directory,
            entries=[entry for entry in self.entries if text in entry.name],
        )


@dataclass(frozen=True)
class ClipboardEntry:
    """Pending copy/cut source held for one subsequent paste."""

    path: Path
    is_cut: bool = False

    @property
    def operation(self) -> str:
        return "cut" if self.is_cut else "copy"


class PanelFocus(Enum):
    """Which panel receives directional keys."""

    FILES = "files"
    ACTIONS = "actions"
    TOP_BAR = "top_bar"


class InputKind(Enum):
    """Text-entry modes; each owns one buffer and commits through one handler."""

    ADDRESS = "AddressEdit"
    CREATE = "Create"
    RENAME = "Rename"
    FILTER = "Filter"
    CREATE_DIRECTORY = "CreateDirectory"
    MOVE = "Move"
    EDIT = "Edit"
    FIND = "Find"
    REPLACE = "Replace"


@dataclass
class NormalMode:
    """Browsing; keys navigate and trigger actions."""

    @property
    def name(self) -> str:
        return "Normal"


@dataclass
class ConfirmDelete:
    """Yes/no gate in front of moving ``target`` to the trash."""

    target: Entry

    @property
    def name(self) -> str:
        return "ConfirmDelete"


@dataclass
class TextEntry:
    """
    A text-input mode.

    ``target`` is the entry the commit acts on (Rename, Move, Edit, Find,
    Replace). ``pending`` holds the search text during the second phase of
    Replace.
    """

    kind: InputKind
    buffer: str = ""
    cursor: int = 0
    target: Optional[Entry] = None
    pending: Optional[str] = None

    @property
    def name(self) -> str:
        return self.kind.value

    def insert(self, text: str) -> None:
        self.buffer = self.buffer[: self.cursor] + text + self.buffer[self.cursor :]
        self.cursor += len(text)

    def backspace(self) -> None:
        if self.cursor == 0:
            return
        self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
        self.cursor -= 1

    def delete(self) -> None:
        self.buffer = self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :]

    def move_cursor(self, delta: int) -> None:
        self.cursor = max(0, min(self.cursor + delta, len(self.buffer)))

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.buffer)

    def move_line(self, delta: int) -> None:
        """Move the cursor one line up (-1) or down (+1), keeping the column where possible."""
        start = self.buffer.rfind("\n", 0, self.cursor) + 1
        column = self.cursor - start
        if delta < 0:
            if start == 0:
                return
            previous_start = self.buffer.rfind("\n", 0, start - 1) + 1
            self.cursor = min(previous_start + column, start - 1)
        else:
            newline = self.buffer.find("\n", self.cursor)
            if newline == -1:
                return
            next_end = self.buffer.find("\n", newline + 1)
            if next_end == -1:
                next_end = len(self.buffer)
            self.cursor = min(newline + 1 + column, next_end)


@dataclass
class ViewMode:
    """Read-only view of a text file."""

    path: Path
    lines: List[str] = field(default_factory=list)
    scroll: int = 0
    highlight: Optional[str] = None

    @property
    def name(self) -> str:
        return "View"

    def scroll_by(self, delta: int) -> None:
        self.scroll = max(0, min(self.scroll + delta, max(len(self.lines) - 1, 0)))


Mode = Union[NormalMode, ConfirmDelete, TextEntry, ViewMode]


@dataclass
class PlaybackStatus:
    """Audio currently handed to the playback service."""

    path: Path
    handle: Any
    paused: bool = False
    position: float = 0.0


@dataclass
class BrowserState:
    """
    The single mutable object of a browsing session.

    Mutated only by the ModeStateMachine; the renderer reads it.
    """

    path: Path
    listing: Listing
    selected_index: int = 0
    show_hidden: bool = True
    clipboard: Optional[ClipboardEntry] = None
    panel_focus: PanelFocus = PanelFocus.FILES
    selected_action: int = 0
    selected_control: int = 0
    mode: Mode = field(default_factory=NormalMode)
    error: Optional[str] = None
    filter_text: Optional[str] = None
    playback: Optional[PlaybackStatus] = None
    status: str = ""
    quit_requested: bool = False

    @property
    def selected_entry(self) -> Optional[Entry]:
        if 0 <= self.selected_index < len(self.listing):
            return self.listing[self.selected_index]
        return None

    def clamp_selection(self) -> None:
        """Keep ``selected_index`` within ``[0, len(listing)-1]``."""
        last = max(len(self.listing) - 1, 0)
        self.selected_index = max(0, min(self.selected_index, last))
