"""
Modal input state machine.

Every keystroke enters through ModeStateMachine.handle_key. Normal mode maps
keys to actions; text-entry modes share one buffer editor and commit through
a table keyed by InputKind. Failures never escape: they land in
``state.error`` and block input until acknowledged.

Modified: 2025-11-12
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from karu.core.exceptions import InvalidInput, IoFailure, KaruError
from karu.core.file_ops import FileOps, require_entry
from karu.core.history import NavigationHistory
from karu.core.lister import DirectoryLister, expand_path
from karu.core.models import (
    BrowserState,
    ConfirmDelete,
    Entry,
    InputKind,
    NormalMode,
    PanelFocus,
    PlaybackStatus,
    TextEntry,
    ViewMode,
)
from karu.core.services import PlaybackService


logger = logging.getLogger(__name__)


QUIT_KEY = "ctrl+q"
SEEK_STEP = 5.0
PAGE_SIZE = 10
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "flac", "ogg", "m4a", "aac", "opus"})

# (label, hint shown in the actions panel, key it triggers in Normal mode)
ACTIONS: List[Tuple[str, str, str]] = [
    ("Cut", "X", "x"),
    ("Copy", "C", "c"),
    ("Paste", "P", "p"),
    ("Delete", "D", "d"),
    ("Rename", "R", "r"),
    ("Create", "N", "n"),
    ("Create Directory", "+", "+"),
    ("Move", "M", "m"),
    ("Open", "O", "o"),
    ("Toggle Hidden", "Shift+H", "H"),
    ("View", "V", "v"),
    ("Edit", "E", "e"),
]

# (label, key it triggers in Normal mode)
TOP_BAR_CONTROLS: List[Tuple[str, str]] = [
    ("Back", "["),
    ("Forward", "]"),
    ("Up", "u"),
    ("Home", "~"),
]

FOCUS_CYCLE = [PanelFocus.FILES, PanelFocus.ACTIONS, PanelFocus.TOP_BAR]


class ModeStateMachine:
    """
    Owns the BrowserState and turns keys into state changes.

    Collaborators are injected so tests can run without a terminal, a trash
    can or an audio device.
    """

    def __init__(
        self,
        state: BrowserState,
        lister: Optional[DirectoryLister] = None,
        history: Optional[NavigationHistory] = None,
        file_ops: Optional[FileOps] = None,
        playback: Optional[PlaybackService] = None,
    ):
        """
        Initialize the state machine.

        Args:
            state: Browser state to drive
            lister: Directory lister
            history: Navigation history (seeded with the state's path if omitted)
            file_ops: File operations engine
            playback: Optional audio backend
        """
        self.state = state
        self.lister = lister or DirectoryLister()
        self.history = history or NavigationHistory(state.path)
        self.file_ops = file_ops or FileOps()
        self.playback = playback

        self._normal_keys: Dict[str, Callable[[], None]] = {
            "up": lambda: self.move_selection(-1),
            "k": lambda: self.move_selection(-1),
            "down": lambda: self.move_selection(1),
            "j": lambda: self.move_selection(1),
            "pageup": lambda: self.move_selection(-PAGE_SIZE),
            "pagedown": lambda: self.move_selection(PAGE_SIZE),
            "home": self.select_first,
            "g": self.select_first,
            "end": self.select_last,
            "G": self.select_last,
            "enter": self.open_selected,
            "o": self.open_selected,
            "right": lambda: self.set_focus(PanelFocus.ACTIONS),
            "l": lambda: self.set_focus(PanelFocus.ACTIONS),
            "left": self.go_up,
            "h": self.go_up,
            "u": self.go_up,
            "tab": self.cycle_focus,
            "[": self.go_back,
            "backspace": self.go_back,
            "]": self.go_forward,
            "~": self.go_home,
            "escape": self.clear_filter,
            "R": self.refresh,
            "H": self.toggle_hidden,
            "c": self.copy_selected,
            "x": self.cut_selected,
            "p": self.paste,
            "d": self.request_delete,
            "delete": self.request_delete,
            "/": lambda: self.begin_input(InputKind.ADDRESS),
            "n": lambda: self.begin_input(InputKind.CREATE),
            "+": lambda: self.begin_input(InputKind.CREATE_DIRECTORY),
            "r": lambda: self.begin_input(InputKind.RENAME),
            "m": lambda: self.begin_input(InputKind.MOVE),
            "f": lambda: self.begin_input(InputKind.FILTER),
            "e": lambda: self.begin_input(InputKind.EDIT),
            "ctrl+f": lambda: self.begin_input(InputKind.FIND),
            "ctrl+r": lambda: self.begin_input(InputKind.REPLACE),
            "v": self.begin_view,
            "a": self.toggle_playback,
            "s": self.stop_playback,
            ",": lambda: self.seek(-SEEK_STEP),
            ".": lambda: self.seek(SEEK_STEP),
            "q": self.request_quit,
        }

        self._commit_handlers: Dict[InputKind, Callable[[TextEntry], None]] = {
            InputKind.ADDRESS: self._commit_address,
            InputKind.CREATE: self._commit_create,
            InputKind.CREATE_DIRECTORY: self._commit_create_directory,
            InputKind.RENAME: self._commit_rename,
            InputKind.MOVE: self._commit_move,
            InputKind.FILTER: self._commit_filter,
            InputKind.EDIT: self._commit_edit,
            InputKind.FIND: self._commit_find,
            InputKind.REPLACE: self._commit_replace,
        }

    @classmethod
    def create(
        cls,
        start_path: Path,
        show_hidden: bool = True,
        lister: Optional[DirectoryLister] = None,
        file_ops: Optional[FileOps] = None,
        playback: Optional[PlaybackService] = None,
    ) -> "ModeStateMachine":
        """
        Build a state machine browsing ``start_path``.

        Raises:
            IoFailure: If the start directory cannot be listed
        """
        lister = lister or DirectoryLister()
        path = expand_path(str(start_path))
        listing = lister.list(path, show_hidden)
        state = BrowserState(path=path, listing=listing, show_hidden=show_hidden)
        return cls(state, lister=lister, file_ops=file_ops, playback=playback)

    # Entry points

    def handle_key(self, key: str) -> None:
        """
        Process one key.

        Args:
            key: A single printable character, or a key name such as
                "enter", "escape", "backspace", "up", "ctrl+s"
        """
        state = self.state

        if state.error is not None:
            if key in ("enter", "escape"):
                state.error = None
            return

        if key == QUIT_KEY:
            self.request_quit()
            return

        self._guarded(lambda: self._dispatch(key))

    def select_index(self, index: int) -> None:
        """Select a file row directly (mouse click)."""
        if self.state.error is not None or not isinstance(self.state.mode, NormalMode):
            return
        self.state.panel_focus = PanelFocus.FILES
        self.state.selected_index = index
        self.state.clamp_selection()

    def activate_action(self, index: int) -> None:
        """Run an action from the actions panel (mouse click)."""
        if self.state.error is not None or not isinstance(self.state.mode, NormalMode):
            return
        if not 0 <= index < len(ACTIONS):
            return
        self.state.selected_action = index
        self._guarded(self._run_selected_action)

    def activate_control(self, index: int) -> None:
        """Run a top bar control (mouse click)."""
        if self.state.error is not None or not isinstance(self.state.mode, NormalMode):
            return
        if not 0 <= index < len(TOP_BAR_CONTROLS):
            return
        self.state.selected_control = index
        _, shortcut = TOP_BAR_CONTROLS[index]
        self.set_focus(PanelFocus.FILES)
        self._guarded(self._normal_keys[shortcut])

    def tick(self) -> bool:
        """
        Periodic update; polls playback position.

        Returns:
            True if anything visible changed
        """
        playback = self.state.playback
        if playback is None or playback.paused or self.playback is None:
            return False

        def poll() -> None:
            playback.position = self.playback.position(playback.handle)

        before = playback.position
        self._guarded(poll)
        return playback.position != before or self.state.error is not None

    def _guarded(self, action: Callable[[], None]) -> None:
        try:
            action()
        except KaruError as e:
            logger.warning(f"{type(e).__name__}: {e}")
            self._fail(str(e))
        except Exception as e:
            logger.error(f"Unexpected error handling input: {e}", exc_info=True)
            self._fail(f"Unexpected error: {e}")
        finally:
            self.state.clamp_selection()

    def _fail(self, message: str) -> None:
        self.state.error = message
        self.state.mode = NormalMode()

    def _dispatch(self, key: str) -> None:
        mode = self.state.mode
        if isinstance(mode, NormalMode):
            self._handle_normal(key)
        elif isinstance(mode, ConfirmDelete):
            self._handle_confirm_delete(mode, key)
        elif isinstance(mode, TextEntry):
            self._handle_text(mode, key)
        elif isinstance(mode, ViewMode):
            self._handle_view(mode, key)

    # Normal mode and panel focus

    def _handle_normal(self, key: str) -> None:
        focus = self.state.panel_focus
        if focus == PanelFocus.ACTIONS:
            self._handle_actions(key)
        elif focus == PanelFocus.TOP_BAR:
            self._handle_top_bar(key)
        else:
            handler = self._normal_keys.get(key)
            if handler is not None:
                handler()

    def _handle_actions(self, key: str) -> None:
        state = self.state
        if key in ("up", "k"):
            state.selected_action = max(0, state.selected_action - 1)
        elif key in ("down", "j"):
            state.selected_action = min(len(ACTIONS) - 1, state.selected_action + 1)
        elif key in ("left", "h", "escape"):
            self.set_focus(PanelFocus.FILES)
        elif key == "tab":
            self.cycle_focus()
        elif key == "enter":
            self._run_selected_action()
        elif key == "q":
            self.request_quit()

    def _run_selected_action(self) -> None:
        _, _, shortcut = ACTIONS[self.state.selected_action]
        self.set_focus(PanelFocus.FILES)
        self._normal_keys[shortcut]()

    def _handle_top_bar(self, key: str) -> None:
        state = self.state
        if key in ("left", "h"):
            state.selected_control = max(0, state.selected_control - 1)
        elif key in ("right", "l"):
            state.selected_control = min(
                len(TOP_BAR_CONTROLS) - 1, state.selected_control + 1
            )
        elif key in ("escape", "down", "j"):
            self.set_focus(PanelFocus.FILES)
        elif key == "tab":
            self.cycle_focus()
        elif key == "enter":
            _, shortcut = TOP_BAR_CONTROLS[state.selected_control]
            self.set_focus(PanelFocus.FILES)
            self._normal_keys[shortcut]()
        elif key == "q":
            self.request_quit()

    def set_focus(self, focus: PanelFocus) -> None:
        self.state.panel_focus = focus

    def cycle_focus(self) -> None:
        current = FOCUS_CYCLE.index(self.state.panel_focus)
        self.state.panel_focus = FOCUS_CYCLE[(current + 1) % len(FOCUS_CYCLE)]

    def request_quit(self) -> None:
        self.state.quit_requested = True

    # Selection

    def move_selection(self, delta: int) -> None:
        self.state.selected_index += delta
        self.state.clamp_selection()

    def select_first(self) -> None:
        self.state.selected_index = 0

    def select_last(self) -> None:
        self.state.selected_index = len(self.state.listing) - 1
        self.state.clamp_selection()

    # Navigation

    def navigate(self, path: Path, record: bool = True) -> None:
        """
        Show ``path``. The listing is read before any state changes, so a
        failure leaves the previous directory in place.
        """
        listing = self.lister.list(path, self.state.show_hidden)
        state = self.state
        state.path = path
        state.listing = listing
        state.selected_index = 0
        state.filter_text = None
        if record:
            self.history.push(path)
        logger.debug(f"Navigated to {path}")

    def refresh(self) -> None:
        """Re-list the current directory, dropping any filter."""
        self.navigate(self.state.path, record=False)

    def go_up(self) -> None:
        parent = self.state.path.parent
        if parent == self.state.path:
            return
        self.navigate(parent)

    def go_home(self) -> None:
        self.navigate(expand_path("~"))

    def go_back(self) -> None:
        path = self.history.back()
        if path is None:
            return
        try:
            self.navigate(path, record=False)
        except KaruError:
            self.history.forward()
            raise

    def go_forward(self) -> None:
        path = self.history.forward()
        if path is None:
            return
        try:
            self.navigate(path, record=False)
        except KaruError:
            self.history.back()
            raise

    def open_selected(self) -> None:
        """Directories (and '..') navigate; files go to the default application."""
        entry = self.state.selected_entry
        if entry is None:
            return
        if entry.is_parent:
            self.go_up()
        elif entry.is_dir:
            self.navigate(entry.path)
        else:
            self.file_ops.open(entry)
            self.state.status = f"Opened {entry.name}"

    def toggle_hidden(self) -> None:
        show_hidden = not self.state.show_hidden
        listing = self.lister.list(self.state.path, show_hidden)
        self.state.show_hidden = show_hidden
        self.state.listing = listing
        self.state.selected_index = 0
        self.state.filter_text = None

    def clear_filter(self) -> None:
        if self.state.filter_text is not None:
            self.refresh()

    # Clipboard and trash

    def copy_selected(self) -> None:
        self.state.clipboard = self.file_ops.copy(self.state.selected_entry)
        self.state.status = f"Copied: {self.state.clipboard.path.name}"

    def cut_selected(self) -> None:
        self.state.clipboard = self.file_ops.cut(self.state.selected_entry)
        self.state.status = f"Cut: {self.state.clipboard.path.name}"

    def paste(self) -> None:
        clipboard = self.state.clipboard
        destination = self.file_ops.paste(clipboard, self.state.path)
        if clipboard is not None and clipboard.is_cut:
            self.state.clipboard = None
        self.state.status = f"Pasted {destination.name}"
        self.refresh()

    def request_delete(self) -> None:
        target = require_entry(self.state.selected_entry, "delete")
        self.state.mode = ConfirmDelete(target=target)

    def _handle_confirm_delete(self, mode: ConfirmDelete, key: str) -> None:
        self.state.mode = NormalMode()
        if key != "y":
            return
        self.file_ops.delete(mode.target)
        self.state.status = f"Moved to trash: {mode.target.name}"
        self.refresh()

    # Text entry

    def begin_input(self, kind: InputKind) -> None:
        """Enter a text-entry mode with its buffer initialized."""
        entry = self.state.selected_entry
        target: Optional[Entry] = None
        buffer = ""

        if kind == InputKind.ADDRESS:
            buffer = str(self.state.path)
        elif kind in (InputKind.RENAME, InputKind.MOVE):
            target = require_entry(entry, kind.value.lower())
            buffer = target.name
        elif kind == InputKind.EDIT:
            target = self._text_target(entry, "edit")
            buffer = self.file_ops.read_text(target.path)
        elif kind in (InputKind.FIND, InputKind.REPLACE):
            target = self._text_target(entry, "search")

        self.state.mode = TextEntry(kind=kind, buffer=buffer, cursor=len(buffer), target=target)

    def _text_target(self, entry: Optional[Entry], action: str) -> Entry:
        entry = require_entry(entry, action)
        if entry.is_dir:
            raise InvalidInput(f"Cannot {action} {entry.name}: it is a directory")
        return entry

    def _handle_text(self, mode: TextEntry, key: str) -> None:
        editing = mode.kind == InputKind.EDIT
        commit_key = "ctrl+s" if editing else "enter"

        if key == "escape":
            self._cancel_input(mode)
        elif key == commit_key:
            self._commit(mode)
        elif key == "enter":
            mode.insert("\n")
        elif key == "tab" and editing:
            mode.insert("\t")
        elif key == "backspace":
            mode.backspace()
        elif key == "delete":
            mode.delete()
        elif key == "left":
            mode.move_cursor(-1)
        elif key == "right":
            mode.move_cursor(1)
        elif key == "home":
            mode.home()
        elif key == "end":
            mode.end()
        elif key in ("up", "down") and editing:
            mode.move_line(-1 if key == "up" else 1)
        elif key == "space":
            mode.insert(" ")
        elif len(key) == 1 and key.isprintable():
            mode.insert(key)

    def _cancel_input(self, mode: TextEntry) -> None:
        self.state.mode = NormalMode()
        if mode.kind == InputKind.FILTER:
            self.refresh()

    def _commit(self, mode: TextEntry) -> None:
        self.state.mode = NormalMode()
        self._commit_handlers[mode.kind](mode)

    def _commit_address(self, mode: TextEntry) -> None:
        text = mode.buffer.strip()
        if not text:
            return
        target = expand_path(text, self.state.path)
        if target.is_dir():
            self.navigate(target)
        else:
            logger.info(f"Address {text!r} is not a directory, ignoring")

    def _commit_create(self, mode: TextEntry) -> None:
        created = self.file_ops.create(mode.buffer, self.state.path)
        self.refresh()
        self.state.status = f"Created {created.name}"

    def _commit_create_directory(self, mode: TextEntry) -> None:
        created = self.file_ops.create_directory(mode.buffer, self.state.path)
        self.refresh()
        self.state.status = f"Created directory {created.name}"

    def _commit_rename(self, mode: TextEntry) -> None:
        renamed = self.file_ops.rename(mode.target, mode.buffer, self.state.path)
        self.refresh()
        self.state.status = f"Renamed to {renamed.name}"

    def _commit_move(self, mode: TextEntry) -> None:
        moved = self.file_ops.move(mode.target, mode.buffer, self.state.path)
        self.refresh()
        self.state.status = f"Moved to {moved}"

    def _commit_filter(self, mode: TextEntry) -> None:
        listing = self.lister.list(self.state.path, self.state.show_hidden)
        if mode.buffer:
            listing = listing.filtered(mode.buffer)
        self.state.listing = listing
        self.state.filter_text = mode.buffer or None
        self.state.selected_index = 0

    def _commit_edit(self, mode: TextEntry) -> None:
        self.file_ops.write_text(mode.target.path, mode.buffer)
        self.refresh()
        self.state.status = f"Saved {mode.target.name}"

    def _commit_find(self, mode: TextEntry) -> None:
        needle = mode.buffer
        if not needle:
            raise InvalidInput("Search text cannot be empty")
        lines = self.file_ops.read_text(mode.target.path).splitlines()
        for number, line in enumerate(lines):
            if needle in line:
                self.state.mode = ViewMode(
                    path=mode.target.path, lines=lines, scroll=number, highlight=needle
                )
                return
        raise InvalidInput(f"'{needle}' not found in {mode.target.name}")

    def _commit_replace(self, mode: TextEntry) -> None:
        if mode.pending is None:
            if not mode.buffer:
                raise InvalidInput("Search text cannot be empty")
            self.state.mode = TextEntry(
                kind=InputKind.REPLACE, target=mode.target, pending=mode.buffer
            )
            return

        text = self.file_ops.read_text(mode.target.path)
        count = text.count(mode.pending)
        if count == 0:
            raise InvalidInput(f"'{mode.pending}' not found in {mode.target.name}")
        self.file_ops.write_text(mode.target.path, text.replace(mode.pending, mode.buffer))
        self.refresh()
        self.state.status = f"Replaced {count} occurrence(s) in {mode.target.name}"

    # View

    def begin_view(self) -> None:
        target = self._text_target(self.state.selected_entry, "view")
        lines = self.file_ops.read_text(target.path).splitlines()
        self.state.mode = ViewMode(path=target.path, lines=lines)

    def _handle_view(self, mode: ViewMode, key: str) -> None:
        if key in ("escape", "v"):
            self.state.mode = NormalMode()
        elif key == "q":
            self.request_quit()
        elif key in ("up", "k"):
            mode.scroll_by(-1)
        elif key in ("down", "j"):
            mode.scroll_by(1)
        elif key == "pageup":
            mode.scroll_by(-PAGE_SIZE)
        elif key == "pagedown":
            mode.scroll_by(PAGE_SIZE)
        elif key in ("home", "g"):
            mode.scroll = 0
        elif key in ("end", "G"):
            mode.scroll_by(len(mode.lines))
        elif key == "n" and mode.highlight:
            for number in range(mode.scroll + 1, len(mode.lines)):
                if mode.highlight in mode.lines[number]:
                    mode.scroll = number
                    return

    # Playback

    def _require_playback(self) -> PlaybackService:
        if self.playback is None:
            raise IoFailure("Audio playback is not available")
        return self.playback

    def toggle_playback(self) -> None:
        """Play the selected audio file, or pause/resume what is already playing."""
        current = self.state.playback
        entry = self.state.selected_entry
        if current is not None and (entry is None or entry.path == current.path):
            service = self._require_playback()
            if current.paused:
                service.resume(current.handle)
            else:
                service.pause(current.handle)
            current.paused = not current.paused
            return

        entry = require_entry(entry, "play")
        if entry.is_dir or entry.suffix not in AUDIO_EXTENSIONS:
            raise InvalidInput(f"{entry.name} is not an audio file")
        service = self._require_playback()
        if current is not None:
            self.stop_playback()
        handle = service.play(entry.path)
        self.state.playback = PlaybackStatus(path=entry.path, handle=handle)
        self.state.status = f"Playing {entry.name}"

    def stop_playback(self) -> None:
        current = self.state.playback
        if current is None:
            return
        self.state.playback = None
        self._require_playback().stop(current.handle)

    def seek(self, delta: float) -> None:
        current = self.state.playback
        if current is None:
            return
        position = max(0.0, current.position + delta)
        self._require_playback().seek(current.handle, position)
        current.position = position
