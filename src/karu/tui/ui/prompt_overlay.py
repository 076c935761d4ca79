"""Centered overlay for prompts, confirmations and errors.

Drawn on its own layer above the main layout; hidden while Normal mode has
nothing to ask.

Modified: 2025-11-12
"""

from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import Static

from ..screen import Overlay


def cursor_text(text: str, cursor: Optional[int], highlight: Optional[str] = None) -> Text:
    """Build rich Text with the cursor cell shown in reverse video.

    Args:
        text: Buffer contents
        cursor: Cursor index into ``text`` (None draws no cursor)
        highlight: Substring to highlight wherever it occurs

    Returns:
        Rich Text ready for a Static
    """
    if cursor is not None and (cursor >= len(text) or text[cursor] == "\n"):
        # cursor past the end of a line gets a visible cell of its own
        text = text[:cursor] + " " + text[cursor:]
    rendered = Text(text)
    if highlight:
        rendered.highlight_words([highlight], style="black on yellow")
    if cursor is not None:
        rendered.stylize("reverse", cursor, cursor + 1)
    return rendered


class PromptOverlay(Container):
    """Overlay box with a title and a body."""

    DEFAULT_CSS = """
    PromptOverlay {
        layer: overlay;
        width: 100%;
        height: 100%;
        align: center middle;
        background: transparent;
        display: none;
    }

    PromptOverlay.visible {
        display: block;
    }

    PromptOverlay > #prompt-box {
        width: 60;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    PromptOverlay.error > #prompt-box {
        border: thick $error;
    }

    PromptOverlay #prompt-title {
        text-align: center;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }

    PromptOverlay.error #prompt-title {
        color: $error;
    }

    PromptOverlay #prompt-help {
        color: $text-muted;
        text-style: italic;
        margin-top: 1;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the overlay layout."""
        with Container(id="prompt-box"):
            yield Static("", id="prompt-title")
            yield Static("", id="prompt-body")
            yield Static("", id="prompt-help")

    def show_overlay(self, overlay: Optional[Overlay], help_text: str = "") -> None:
        """Show ``overlay``, or hide the box when it is None."""
        if overlay is None:
            self.remove_class("visible")
            return

        self.set_class(overlay.is_error, "error")
        self.query_one("#prompt-title", Static).update(Text(overlay.title))
        self.query_one("#prompt-body", Static).update(cursor_text(overlay.text, overlay.cursor))
        self.query_one("#prompt-help", Static).update(Text(help_text))
        self.add_class("visible")
