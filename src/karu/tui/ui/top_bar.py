"""Top bar: history and navigation controls plus the address field.

Modified: 2025-11-12
"""

from typing import List, Optional

from textual import events
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Static

from ..messages import ControlClicked
from .prompt_overlay import cursor_text


class ControlButton(Static):
    """One clickable control label."""

    DEFAULT_CSS = """
    ControlButton {
        width: auto;
        padding: 0 1;
        color: $text-muted;
    }

    ControlButton.selected {
        background: $accent;
        color: $text;
        text-style: bold;
    }
    """

    def __init__(self, label: str, index: int, **kwargs):
        super().__init__(label, **kwargs)
        self.index = index

    def on_click(self, event: events.Click) -> None:
        event.stop()
        self.post_message(ControlClicked(self.index))


class TopBar(Horizontal):
    """Controls on the left, current path (or the address being typed) on the right."""

    DEFAULT_CSS = """
    TopBar {
        height: 3;
        border: round $panel-lighten-2;
    }

    TopBar.focused {
        border: round $accent;
    }

    TopBar > #address {
        width: 1fr;
        padding: 0 1;
    }

    TopBar > #address.editing {
        background: $boost;
    }
    """

    def __init__(self, controls: List[str], **kwargs):
        super().__init__(**kwargs)
        self.controls = controls

    def compose(self) -> ComposeResult:
        """One button per control, then the address."""
        for index, label in enumerate(self.controls):
            yield ControlButton(label, index, classes="control")
        yield Static("", id="address")

    def show(self, address: str, cursor: Optional[int], selected_control: Optional[int]) -> None:
        """Update address text and control highlight."""
        self.set_class(selected_control is not None, "focused")
        for button in self.query(ControlButton):
            button.set_class(button.index == selected_control, "selected")

        address_widget = self.query_one("#address", Static)
        address_widget.set_class(cursor is not None, "editing")
        address_widget.update(cursor_text(address, cursor))
