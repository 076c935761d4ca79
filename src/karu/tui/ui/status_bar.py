"""Status bar widget for Karu.

Shows the mode, the last status message, clipboard and playback, with the
key hints underneath.

Modified: 2025-11-12
"""

from typing import Optional

from rich.text import Text

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Static
from textual.widget import Widget


class StatusBar(Widget):
    """Status bar showing context, status message and key hints."""

    DEFAULT_CSS = """
    StatusBar {
        height: 2;
        background: $panel;
        color: $text;
        dock: bottom;
    }

    StatusBar > Horizontal {
        width: 100%;
        height: 1;
    }

    StatusBar .status-left {
        width: 1fr;
        padding: 0 1;
        text-style: bold;
    }

    StatusBar .status-center {
        width: 2fr;
        text-align: center;
        padding: 0 1;
    }

    StatusBar .status-right {
        width: 1fr;
        text-align: right;
        padding: 0 1;
    }

    StatusBar .status-hints {
        width: 100%;
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.left_widget: Optional[Static] = None
        self.center_widget: Optional[Static] = None
        self.right_widget: Optional[Static] = None
        self.hints_widget: Optional[Static] = None

    def compose(self) -> ComposeResult:
        """Create status bar layout."""
        with Horizontal():
            self.left_widget = Static("", classes="status-left")
            self.center_widget = Static("", classes="status-center")
            self.right_widget = Static("", classes="status-right")

            yield self.left_widget
            yield self.center_widget
            yield self.right_widget

        self.hints_widget = Static("", classes="status-hints")
        yield self.hints_widget

    def update_context(self, context: str) -> None:
        """Update the mode and filter (left side)."""
        if self.left_widget:
            self.left_widget.update(Text(context))

    def update_status(self, status: str, clipboard: str = "") -> None:
        """Update status message and clipboard/playback info.

        Args:
            status: Status message to display
            clipboard: Clipboard and playback summary (right side)
        """
        if self.center_widget:
            self.center_widget.update(Text(status))
        if self.right_widget:
            self.right_widget.update(Text(clipboard))

    def update_hints(self, hints: str) -> None:
        """Update keyboard hints for the current mode."""
        if self.hints_widget:
            self.hints_widget.update(Text(hints))
