"""Custom Textual messages for Karu.

Mouse clicks on panels are turned into messages the app forwards to the
state machine.

Modified: 2025-11-12
"""

from textual.message import Message


class EntryClicked(Message):
    """Message sent when a file row is clicked."""

    def __init__(self, index: int):
        super().__init__()
        self.index = index


class ActionClicked(Message):
    """Message sent when an action in the actions panel is clicked."""

    def __init__(self, index: int):
        super().__init__()
        self.index = index


class ControlClicked(Message):
    """Message sent when a top bar control (Back, Forward, Up, Home) is clicked."""

    def __init__(self, index: int):
        super().__init__()
        self.index = index
