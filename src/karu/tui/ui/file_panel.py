"""Panels of the main layout: file list, actions and preview.

The file list and the actions panel draw plain rows and report clicks as
messages; the app owns all state.

Modified: 2025-11-12
"""

from pathlib import Path
from typing import List, Optional, Tuple

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Static

from ..messages import ActionClicked, EntryClicked
from ..screen import FileRow, PreviewArea
from .image_view import render_thumbnail
from .prompt_overlay import cursor_text


class RowPanel(Widget):
    """Bordered list of single-line rows that keeps the selection in view."""

    DEFAULT_CSS = """
    RowPanel {
        height: 100%;
        border: round $panel-lighten-2;
        padding: 0 1;
    }

    RowPanel.focused {
        border: round $accent;
    }
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.rows: List[Tuple[str, str]] = []  # (text, style)
        self.selected: Optional[int] = None
        self.top = 0

    def show(self, rows: List[Tuple[str, str]], selected: Optional[int], focused: bool) -> None:
        """Replace the rows and redraw."""
        self.rows = rows
        self.selected = selected
        self.set_class(focused, "focused")
        self.refresh()

    def visible_height(self) -> int:
        return max(self.content_size.height, 1)

    def _scroll_to_selection(self) -> None:
        height = self.visible_height()
        if self.selected is None:
            self.top = min(self.top, max(len(self.rows) - height, 0))
            return
        if self.selected < self.top:
            self.top = self.selected
        elif self.selected >= self.top + height:
            self.top = self.selected - height + 1

    def render(self) -> Text:
        """Render the visible window of rows."""
        self._scroll_to_selection()
        text = Text(no_wrap=True, overflow="ellipsis", end="")
        window = self.rows[self.top:self.top + self.visible_height()]
        for offset, (line, style) in enumerate(window):
            if offset:
                text.append("\n")
            if self.top + offset == self.selected:
                style = f"{style} reverse".strip()
            text.append(line, style=style or None)
        return text

    def on_click(self, event: events.Click) -> None:
        """Translate a click into a row index."""
        offset = event.get_content_offset(self)
        if offset is None:
            return
        index = self.top + offset.y
        if 0 <= index < len(self.rows):
            self.post_message(self.clicked_message(index))

    def clicked_message(self, index: int) -> Message:
        raise NotImplementedError


class FileColumn(RowPanel):
    """Left column listing the current directory."""

    DEFAULT_CSS = """
    FileColumn {
        width: 30%;
    }
    """

    def on_mount(self) -> None:
        self.border_title = "Files"

    def show_rows(self, rows: List[FileRow], focused: bool) -> None:
        selected = next((i for i, row in enumerate(rows) if row.selected), None)
        self.show(
            [(row.text, "bold" if row.is_dir else "") for row in rows],
            selected,
            focused,
        )

    def clicked_message(self, index: int) -> Message:
        return EntryClicked(index)


class ActionColumn(RowPanel):
    """Actions panel above the preview."""

    DEFAULT_CSS = """
    ActionColumn {
        height: 14;
    }
    """

    def on_mount(self) -> None:
        self.border_title = "Actions"

    def show_actions(self, actions: List[str], selected: Optional[int]) -> None:
        self.show([(label, "") for label in actions], selected, selected is not None)

    def clicked_message(self, index: int) -> Message:
        return ActionClicked(index)


class PreviewPane(Vertical):
    """Preview of the selected entry, or the view/edit buffer."""

    DEFAULT_CSS = """
    PreviewPane {
        height: 1fr;
        border: round $panel-lighten-2;
        padding: 0 1;
    }

    PreviewPane > #preview-text {
        width: 100%;
    }

    PreviewPane > #preview-image {
        width: 100%;
        height: 1fr;
    }
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._thumbnail_key: Optional[Tuple[Path, int, int]] = None

    def compose(self) -> ComposeResult:
        """Text line (image caption or content) above an image area."""
        yield Static("", id="preview-text")
        yield Static("", id="preview-image")

    def show_area(self, area: PreviewArea) -> None:
        """Draw a preview area."""
        self.border_title = Text(area.title)
        text_widget = self.query_one("#preview-text", Static)
        image_widget = self.query_one("#preview-image", Static)
        text_widget.update(cursor_text(area.text, area.cursor, area.highlight))

        preview = area.preview
        if preview is None or not preview.is_image or preview.path is None:
            image_widget.display = False
            self._thumbnail_key = None
            return

        image_widget.display = True
        width = max(self.content_size.width, 1)
        height = max(self.content_size.height - 1, 1)
        key = (preview.path, width, height)
        if key == self._thumbnail_key:
            return
        try:
            image_widget.update(render_thumbnail(preview.path, width, height))
        except OSError as e:
            image_widget.update(Text(f"Could not load image: {e}"))
        self._thumbnail_key = key
