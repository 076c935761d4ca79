"""Screen description for the Karu TUI.

``build_screen`` turns a BrowserState into plain data the widgets draw.
It performs no terminal I/O and can be recomputed every frame.

Modified: 2025-11-12
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.models import (
    BrowserState,
    ConfirmDelete,
    Entry,
    InputKind,
    PanelFocus,
    TextEntry,
    ViewMode,
)
from ..core.modes import ACTIONS, TOP_BAR_CONTROLS
from ..core.preview import Preview, PreviewClassifier, format_size, truncate_line
from .keybindings import registry


DIR_GLYPH = "📁"
FILE_GLYPH = "📄"
SIZE_WIDTH = 10

CONFIRM_DELETE_TEXT = "Are you sure you want to move to trash? (y/n)"

OVERLAY_TITLES = {
    InputKind.CREATE: "Create New",
    InputKind.RENAME: "Rename",
    InputKind.FILTER: "Filter",
    InputKind.CREATE_DIRECTORY: "Create Directory",
    InputKind.MOVE: "Move",
    InputKind.FIND: "Find",
    InputKind.REPLACE: "Replace",
}


@dataclass(frozen=True)
class FileRow:
    """One drawn line of the file list."""

    text: str
    is_dir: bool
    selected: bool


@dataclass(frozen=True)
class Overlay:
    """Centered box drawn over the main layout."""

    title: str
    text: str
    cursor: Optional[int] = None  # index into text, None when not editable
    is_error: bool = False


@dataclass(frozen=True)
class PreviewArea:
    """Content of the preview pane."""

    title: str
    text: str
    cursor: Optional[int] = None
    highlight: Optional[str] = None
    preview: Optional[Preview] = None


@dataclass
class Screen:
    """Everything the widgets need for one frame."""

    address: str
    address_cursor: Optional[int]
    controls: List[str]
    selected_control: Optional[int]
    rows: List[FileRow]
    selected_index: int
    actions: List[str]
    selected_action: Optional[int]
    focus: PanelFocus
    preview: PreviewArea
    hints: str
    status_left: str
    status_center: str
    status_right: str
    overlay: Optional[Overlay] = None
    error: Optional[Overlay] = None
    mode_name: str = "Normal"


def format_row(entry: Entry, width: int) -> str:
    """
    Format a listing entry as ``glyph name  size``.

    The name is truncated with ``...`` so the row fits ``width`` columns;
    file sizes are right-aligned in a fixed column.
    """
    glyph = DIR_GLYPH if entry.is_dir else FILE_GLYPH
    size = "" if entry.is_dir or entry.size is None else format_size(entry.size)
    # glyph is two columns wide plus a separating space
    name_width = max(width - (SIZE_WIDTH + 4), 1)
    name = truncate_line(entry.name, name_width)
    if not size:
        return f"{glyph} {name}"
    return f"{glyph} {name.ljust(name_width)}{size.rjust(SIZE_WIDTH)}"


def format_position(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def edit_window(buffer: str, cursor: int, height: int) -> Tuple[str, int]:
    """Lines of ``buffer`` that fit ``height`` rows with the cursor line last
    at most, and the cursor index relative to them."""
    height = max(height, 1)
    lines = buffer.split("\n")
    cursor_line = buffer.count("\n", 0, cursor)
    top = max(0, cursor_line - height + 1)
    skipped = sum(len(line) + 1 for line in lines[:top])
    return "\n".join(lines[top:top + height]), cursor - skipped


def _preview_area(
    state: BrowserState,
    classifier: PreviewClassifier,
    width: int,
    height: int,
    preview: Optional[Preview] = None,
) -> PreviewArea:
    mode = state.mode

    if isinstance(mode, TextEntry) and mode.kind == InputKind.EDIT:
        name = mode.target.name if mode.target else ""
        text, cursor = edit_window(mode.buffer, mode.cursor, height)
        return PreviewArea(title=f"Edit: {name}", text=text, cursor=cursor)

    if isinstance(mode, ViewMode):
        visible = mode.lines[mode.scroll:mode.scroll + max(height, 1)]
        text = "\n".join(truncate_line(line, width) for line in visible)
        return PreviewArea(
            title=f"View: {mode.path.name}", text=text, highlight=mode.highlight
        )

    if preview is None:
        preview = classifier.classify(state.selected_entry, width, max_lines=height)
    entry = state.selected_entry
    title = "Preview" if entry is None else f"Preview: {entry.name}"
    return PreviewArea(title=title, text=preview.text, preview=preview)


def _overlay(state: BrowserState) -> Optional[Overlay]:
    mode = state.mode
    if isinstance(mode, ConfirmDelete):
        return Overlay(
            title="Confirm Delete",
            text=f"{mode.target.name}\n\n{CONFIRM_DELETE_TEXT}",
        )
    if isinstance(mode, TextEntry) and mode.kind in OVERLAY_TITLES:
        title = OVERLAY_TITLES[mode.kind]
        if mode.kind == InputKind.REPLACE:
            title = "Replace: search for" if mode.pending is None else f"Replace '{mode.pending}' with"
        return Overlay(title=title, text=mode.buffer, cursor=mode.cursor)
    return None


def _status(state: BrowserState) -> List[str]:
    left = state.mode.name
    if state.filter_text is not None:
        left += f" | filter: {state.filter_text}"
    if not state.show_hidden:
        left += " | hidden off"

    right_parts = []
    if state.clipboard is not None:
        label = "Cut" if state.clipboard.is_cut else "Copied"
        right_parts.append(f"{label}: {state.clipboard.path.name}")
    if state.playback is not None:
        icon = "⏸" if state.playback.paused else "▶"
        right_parts.append(
            f"{icon} {state.playback.path.name} {format_position(state.playback.position)}"
        )
    return [left, state.status, "  ".join(right_parts)]


def build_screen(
    state: BrowserState,
    classifier: PreviewClassifier,
    list_width: int = 40,
    preview_width: int = 80,
    preview_height: int = 40,
    preview: Optional[Preview] = None,
) -> Screen:
    """Describe one frame.

    Args:
        state: Current browser state
        classifier: Preview classifier for the selected entry
        list_width: Columns available to file rows
        preview_width: Columns available to preview lines
        preview_height: Rows available to preview lines
        preview: Already classified preview (skips classification)

    Returns:
        Screen description
    """
    mode = state.mode
    focus = state.panel_focus

    address = str(state.path)
    address_cursor = None
    if isinstance(mode, TextEntry) and mode.kind == InputKind.ADDRESS:
        address = mode.buffer
        address_cursor = mode.cursor

    rows = [
        FileRow(
            text=format_row(entry, list_width),
            is_dir=entry.is_dir,
            selected=i == state.selected_index,
        )
        for i, entry in enumerate(state.listing)
    ]

    error = None
    if state.error is not None:
        error = Overlay(title="Error", text=state.error, is_error=True)

    left, center, right = _status(state)

    return Screen(
        address=address,
        address_cursor=address_cursor,
        controls=[label for label, _ in TOP_BAR_CONTROLS],
        selected_control=state.selected_control if focus == PanelFocus.TOP_BAR else None,
        rows=rows,
        selected_index=state.selected_index,
        actions=[f"{label} ({hint})" for label, hint, _ in ACTIONS],
        selected_action=state.selected_action if focus == PanelFocus.ACTIONS else None,
        focus=focus,
        preview=_preview_area(state, classifier, preview_width, preview_height, preview),
        hints="enter/esc: dismiss" if error else registry.hints_for_mode(mode),
        status_left=left,
        status_center=center,
        status_right=right,
        overlay=_overlay(state),
        error=error,
        mode_name=mode.name,
    )
