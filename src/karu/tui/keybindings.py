"""Central keybinding registry for Karu.

Single source of truth for the key hint bar, the per-mode hints and the
``karu keys`` help text.

Modified: 2025-11-12
"""

from dataclasses import dataclass
from typing import Dict, List
from enum import Enum

from ..core.models import ConfirmDelete, InputKind, Mode, TextEntry, ViewMode
from ..core.modes import ACTIONS, TOP_BAR_CONTROLS


class KeyContext(Enum):
    """Context where a keybinding is active."""
    GLOBAL = "global"
    FILES = "files"
    ACTIONS = "actions"
    TOP_BAR = "top_bar"
    TEXT = "text"
    EDIT = "edit"
    VIEW = "view"
    CONFIRM = "confirm"


@dataclass
class Keybinding:
    """Represents a single keybinding."""
    key: str  # The key or key combination
    description: str  # Human-readable description
    context: KeyContext = KeyContext.GLOBAL  # Where this binding is active
    category: str = "General"  # Category for grouping in help
    hidden: bool = False  # Whether to show in help menu


# (vim key, arrow key) pairs shown in the hint bar
VIM_KEY_HINTS = [
    ("j", "Down"),
    ("k", "Up"),
    ("h", "Left"),
    ("l", "Right"),
    ("q", "Quit"),
]


class KeybindingRegistry:
    """Central registry for all keybindings."""

    def __init__(self):
        self.keybindings: Dict[str, Keybinding] = {}
        self._initialize_default_bindings()

    def _initialize_default_bindings(self):
        """Initialize default keybindings."""

        # Global bindings
        self.register("ctrl+q", "Quit from any mode", KeyContext.GLOBAL, "Application")
        self.register("q", "Quit application", KeyContext.FILES, "Application")
        self.register("tab", "Cycle focus: files, actions, top bar", KeyContext.FILES, "Application")

        # Navigation
        self.register("j", "Move down (Down)", KeyContext.FILES, "Navigation")
        self.register("k", "Move up (Up)", KeyContext.FILES, "Navigation")
        self.register("h", "Go up directory (Left)", KeyContext.FILES, "Navigation")
        self.register("l", "Focus actions panel (Right)", KeyContext.FILES, "Navigation")
        self.register("g", "Jump to top (Home)", KeyContext.FILES, "Navigation")
        self.register("G", "Jump to bottom (End)", KeyContext.FILES, "Navigation")
        self.register("enter", "Open selected", KeyContext.FILES, "Navigation")
        self.register("u", "Go up directory", KeyContext.FILES, "Navigation")
        self.register("[", "History back (Backspace)", KeyContext.FILES, "Navigation")
        self.register("]", "History forward", KeyContext.FILES, "Navigation")
        self.register("~", "Home directory", KeyContext.FILES, "Navigation")
        self.register("/", "Edit address", KeyContext.FILES, "Navigation")
        self.register("f", "Filter listing", KeyContext.FILES, "Navigation")
        self.register("R", "Refresh listing", KeyContext.FILES, "Navigation")

        # File operations
        self.register("c", "Copy selected", KeyContext.FILES, "Operations")
        self.register("x", "Cut selected", KeyContext.FILES, "Operations")
        self.register("p", "Paste", KeyContext.FILES, "Operations")
        self.register("d", "Move to trash (Delete)", KeyContext.FILES, "Operations")
        self.register("r", "Rename", KeyContext.FILES, "Operations")
        self.register("m", "Move", KeyContext.FILES, "Operations")
        self.register("n", "Create file (end with / for a directory)", KeyContext.FILES, "Operations")
        self.register("+", "Create directory", KeyContext.FILES, "Operations")
        self.register("o", "Open with default application", KeyContext.FILES, "Operations")
        self.register("H", "Toggle hidden files", KeyContext.FILES, "Operations")

        # Text
        self.register("v", "View file", KeyContext.FILES, "Text")
        self.register("e", "Edit file", KeyContext.FILES, "Text")
        self.register("ctrl+f", "Find in file", KeyContext.FILES, "Text")
        self.register("ctrl+r", "Replace in file", KeyContext.FILES, "Text")

        # Audio
        self.register("a", "Play / pause audio", KeyContext.FILES, "Audio")
        self.register("s", "Stop audio", KeyContext.FILES, "Audio")
        self.register(",", "Seek back 5s", KeyContext.FILES, "Audio")
        self.register(".", "Seek forward 5s", KeyContext.FILES, "Audio")

    def register(self, key: str, description: str,
                 context: KeyContext = KeyContext.GLOBAL,
                 category: str = "General",
                 hidden: bool = False) -> None:
        """Register a keybinding."""
        self.keybindings[key] = Keybinding(
            key=key,
            description=description,
            context=context,
            category=category,
            hidden=hidden
        )

    def get_bindings_by_category(self) -> Dict[str, List[Keybinding]]:
        """Get keybindings organized by category."""
        result = {}
        for binding in self.keybindings.values():
            if not binding.hidden:
                if binding.category not in result:
                    result[binding.category] = []
                result[binding.category].append(binding)
        return result

    def get_bindings_for_context(self, context: KeyContext) -> List[Keybinding]:
        """Get keybindings active in a specific context."""
        result = []
        for binding in self.keybindings.values():
            if not binding.hidden and (
                binding.context == context or
                binding.context == KeyContext.GLOBAL
            ):
                result.append(binding)
        return result

    def hints_for_mode(self, mode: Mode) -> str:
        """One-line key hints for the hint bar."""
        if isinstance(mode, ConfirmDelete):
            return "y: move to trash   any other key: cancel"
        if isinstance(mode, ViewMode):
            return "j/k: scroll   n: next match   esc: close"
        if isinstance(mode, TextEntry):
            if mode.kind == InputKind.EDIT:
                return "ctrl+s: save   esc: cancel"
            return "enter: confirm   esc: cancel"
        return "  ".join(f"{vim}/{arrow}" for vim, arrow in VIM_KEY_HINTS)

    def format_help_text(self) -> str:
        """Format help text for display."""
        lines = []
        lines.append("Karu - Terminal File Browser\n")
        lines.append("=" * 40 + "\n")

        # Group by category
        categories = self.get_bindings_by_category()
        for category in sorted(categories.keys()):
            lines.append(f"\n{category}:")
            lines.append("-" * len(category) + "-")

            bindings = sorted(categories[category], key=lambda b: b.key)
            for binding in bindings:
                # Format key with padding
                key_str = binding.key.ljust(12)
                lines.append(f"  {key_str} {binding.description}")

        # Actions panel section
        lines.append("\n\nActions panel (l / Right to focus):")
        lines.append("-" * 35)
        for label, hint, _ in ACTIONS:
            lines.append(f"  {hint.ljust(12)} {label}")

        lines.append("\nTop bar (tab twice to focus):")
        lines.append("-" * 29)
        lines.append("  " + "  ".join(label for label, _ in TOP_BAR_CONTROLS))

        lines.append("\n" + "=" * 40)

        return "\n".join(lines)


# Global registry instance
registry = KeybindingRegistry()
