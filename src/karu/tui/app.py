"""Main Karu TUI application.

Forwards every key and mouse click to the ModeStateMachine and redraws
the widgets from the resulting screen description.

Modified: 2025-11-12
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Tuple

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical

from ..config.settings import Settings
from ..core.file_ops import FileOps
from ..core.models import Entry, PanelFocus
from ..core.modes import ModeStateMachine, TOP_BAR_CONTROLS
from ..core.preview import Preview, PreviewClassifier
from ..core.services import PlaybackService
from .messages import ActionClicked, ControlClicked, EntryClicked
from .screen import build_screen
from .ui.file_panel import ActionColumn, FileColumn, PreviewPane
from .ui.prompt_overlay import PromptOverlay
from .ui.status_bar import StatusBar
from .ui.top_bar import TopBar


logger = logging.getLogger(__name__)

PREVIEW_CACHE_SIZE = 64


def key_token(event: events.Key) -> str:
    """Single printable characters pass through as themselves, everything
    else by its key name ("enter", "escape", "ctrl+s", ...)."""
    character = event.character
    if character is not None and len(character) == 1 and character.isprintable():
        return character
    return event.key


class KaruApp(App):
    """Main application class for Karu."""

    TITLE = "Karu"
    SUB_TITLE = "Terminal File Browser"
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        layers: base overlay;
    }

    #main-container {
        height: 1fr;
    }

    #right-column {
        width: 70%;
    }
    """

    # Keys Textual would otherwise claim for itself
    BINDINGS = [
        Binding("ctrl+q", "machine_key('ctrl+q')", "Quit", priority=True),
        Binding("tab", "machine_key('tab')", "Cycle focus", show=False, priority=True),
        Binding("shift+tab", "machine_key('tab')", show=False, priority=True),
        Binding("escape", "machine_key('escape')", show=False, priority=True),
    ]

    def __init__(
        self,
        start_path: Optional[Path] = None,
        settings: Optional[Settings] = None,
        file_ops: Optional[FileOps] = None,
        playback: Optional[PlaybackService] = None,
    ):
        """Initialize the application.

        Args:
            start_path: Directory to start in (default: configured or working directory)
            settings: Loaded settings (default: Settings.load())
            file_ops: File operations engine
            playback: Optional audio backend

        Raises:
            IoFailure: If the start directory cannot be listed
        """
        super().__init__()

        self.settings = settings or Settings.load()
        start = start_path or self.settings.browser.start_path or os.getcwd()

        self.machine = ModeStateMachine.create(
            Path(start),
            show_hidden=self.settings.browser.show_hidden,
            file_ops=file_ops,
            playback=playback,
        )
        self.classifier = PreviewClassifier(
            max_size_mb=self.settings.preview.max_size_mb,
            blocked_names=self.settings.preview.blocked_names,
            sniff_bytes=self.settings.preview.sniff_bytes,
        )
        self._preview_cache: Dict[Tuple, Preview] = {}

        # UI components (resolved in on_mount)
        self.top_bar: Optional[TopBar] = None
        self.file_column: Optional[FileColumn] = None
        self.action_column: Optional[ActionColumn] = None
        self.preview_pane: Optional[PreviewPane] = None
        self.status_bar: Optional[StatusBar] = None
        self.prompt_overlay: Optional[PromptOverlay] = None

    def compose(self) -> ComposeResult:
        """Create the application layout."""
        yield TopBar([label for label, _ in TOP_BAR_CONTROLS], id="top-bar")

        with Horizontal(id="main-container"):
            yield FileColumn(id="file-column")
            with Vertical(id="right-column"):
                yield ActionColumn(id="action-column")
                yield PreviewPane(id="preview-pane")

        yield StatusBar(id="status-bar")
        yield PromptOverlay(id="prompt-overlay")

    def on_mount(self) -> None:
        """Resolve widgets, start the playback poll and draw the first frame."""
        self.top_bar = self.query_one("#top-bar", TopBar)
        self.file_column = self.query_one("#file-column", FileColumn)
        self.action_column = self.query_one("#action-column", ActionColumn)
        self.preview_pane = self.query_one("#preview-pane", PreviewPane)
        self.status_bar = self.query_one("#status-bar", StatusBar)
        self.prompt_overlay = self.query_one("#prompt-overlay", PromptOverlay)

        self.set_interval(self.settings.browser.tick_interval, self._on_tick)
        self.refresh_view()
        # Panel sizes are only known after the first layout pass
        self.call_after_refresh(self.refresh_view)
        logger.info(f"Browsing {self.machine.state.path}")

    def on_resize(self, event: events.Resize) -> None:
        self.call_after_refresh(self.refresh_view)

    # Input

    async def on_key(self, event: events.Key) -> None:
        """Hand every key to the state machine."""
        event.stop()
        event.prevent_default()
        self._feed(key_token(event))

    def action_machine_key(self, key: str) -> None:
        """Bound keys reach the state machine through here."""
        self._feed(key)

    def _feed(self, key: str) -> None:
        self.machine.handle_key(key)
        self._after_input()

    def on_entry_clicked(self, message: EntryClicked) -> None:
        self.machine.select_index(message.index)
        self._after_input()

    def on_action_clicked(self, message: ActionClicked) -> None:
        self.machine.activate_action(message.index)
        self._after_input()

    def on_control_clicked(self, message: ControlClicked) -> None:
        self.machine.activate_control(message.index)
        self._after_input()

    def _after_input(self) -> None:
        if self.machine.state.quit_requested:
            logger.info("Quit requested")
            self.exit()
            return
        self.refresh_view()

    def _on_tick(self) -> None:
        if self.machine.tick():
            self.refresh_view()

    # Drawing

    def _classify(self, entry: Optional[Entry], width: int, height: int) -> Preview:
        """Classify with a small cache keyed on path, mtime, size and geometry."""
        if entry is None or entry.is_dir:
            return self.classifier.classify(entry, width, max_lines=height)
        try:
            stat = entry.path.stat()
        except OSError:
            return self.classifier.classify(entry, width, max_lines=height)

        key = (entry.path, stat.st_mtime_ns, stat.st_size, width, height)
        preview = self._preview_cache.get(key)
        if preview is None:
            if len(self._preview_cache) >= PREVIEW_CACHE_SIZE:
                self._preview_cache.clear()
            preview = self.classifier.classify(entry, width, max_lines=height)
            self._preview_cache[key] = preview
        return preview

    def refresh_view(self) -> None:
        """Redraw every widget from the current state."""
        if self.file_column is None or self.preview_pane is None:
            return

        state = self.machine.state
        list_width = self.file_column.content_size.width or 40
        preview_width = self.preview_pane.content_size.width or 80
        preview_height = self.preview_pane.content_size.height or 40

        screen = build_screen(
            state,
            self.classifier,
            list_width=list_width,
            preview_width=preview_width,
            preview_height=preview_height,
            preview=self._classify(state.selected_entry, preview_width, preview_height),
        )

        self.top_bar.show(screen.address, screen.address_cursor, screen.selected_control)
        self.file_column.show_rows(screen.rows, screen.focus == PanelFocus.FILES)
        self.action_column.show_actions(screen.actions, screen.selected_action)
        self.preview_pane.show_area(screen.preview)

        self.status_bar.update_context(screen.status_left)
        self.status_bar.update_status(screen.status_center, screen.status_right)
        self.status_bar.update_hints(screen.hints)
        self.prompt_overlay.show_overlay(screen.error or screen.overlay, screen.hints)


async def run_app(
    start_path: Optional[Path] = None,
    settings: Optional[Settings] = None,
) -> None:
    """Run the Karu TUI application.

    Args:
        start_path: Directory to start in
        settings: Loaded settings
    """
    app = KaruApp(start_path=start_path, settings=settings)
    await app.run_async()


if __name__ == "__main__":
    asyncio.run(run_app())
