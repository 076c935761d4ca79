"""
Tests for the Textual application wiring.

Created: 2025-11-12
"""

import pytest
from PIL import Image
from textual import events

from karu.core.models import PanelFocus
from karu.tui.app import KaruApp, key_token
from karu.tui.messages import ActionClicked, ControlClicked, EntryClicked
from karu.tui.ui.image_view import UPPER_HALF_BLOCK, render_thumbnail
from karu.tui.ui.prompt_overlay import PromptOverlay, cursor_text


@pytest.fixture
def app(sample_tree, test_settings, file_ops, playback):
    return KaruApp(
        start_path=sample_tree,
        settings=test_settings,
        file_ops=file_ops,
        playback=playback,
    )


class TestKeyToken:
    """Test key event translation."""

    def test_printable_character(self):
        """Test printable keys pass through as their character."""
        assert key_token(events.Key("j", "j")) == "j"
        assert key_token(events.Key("full_stop", ".")) == "."
        assert key_token(events.Key("G", "G")) == "G"

    def test_named_keys(self):
        """Test non-printable keys use their key name."""
        assert key_token(events.Key("enter", "\r")) == "enter"
        assert key_token(events.Key("ctrl+s", None)) == "ctrl+s"
        assert key_token(events.Key("up", None)) == "up"


class TestRendering:
    """Test widget helpers that need no running app."""

    def test_cursor_at_end_gets_a_cell(self):
        """Test a cursor past the text is drawn on an added space."""
        assert cursor_text("ab", 2).plain == "ab "
        assert cursor_text("a\nb", 1).plain == "a \nb"
        assert cursor_text("abc", 1).plain == "abc"
        assert cursor_text("abc", None).plain == "abc"

    def test_thumbnail(self, tmp_path):
        """Test images render as two pixel rows per text row."""
        path = tmp_path / "pic.png"
        Image.new("RGB", (4, 4), color=(0, 128, 255)).save(path)

        text = render_thumbnail(path, 10, 10)

        assert text.plain == "\n".join([UPPER_HALF_BLOCK * 4] * 2)

    def test_thumbnail_bad_file(self, tmp_path):
        """Test undecodable images raise OSError."""
        path = tmp_path / "bad.png"
        path.write_bytes(b"nope")

        with pytest.raises(OSError):
            render_thumbnail(path, 10, 10)


class TestKaruApp:
    """Drive the app headlessly through Textual's pilot."""

    @pytest.mark.asyncio
    async def test_startup(self, app, sample_tree):
        """Test the app starts in the requested directory with no overlay."""
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.pause()

            assert app.machine.state.path == sample_tree
            assert not app.query_one(PromptOverlay).has_class("visible")

    @pytest.mark.asyncio
    async def test_keys_move_and_enter(self, app, sample_tree):
        """Test keys reach the state machine."""
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("j", "j", "j", "enter")

            assert app.machine.state.path == sample_tree / "beta"

    @pytest.mark.asyncio
    async def test_bound_keys(self, app):
        """Test tab and escape are not swallowed by Textual."""
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("tab")
            assert app.machine.state.panel_focus == PanelFocus.ACTIONS

            await pilot.press("escape")
            assert app.machine.state.panel_focus == PanelFocus.FILES

    @pytest.mark.asyncio
    async def test_prompt_overlay(self, app, sample_tree):
        """Test the create prompt opens, takes text and closes."""
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("n")
            overlay = app.query_one(PromptOverlay)
            assert overlay.has_class("visible")

            await pilot.press("o", "k", "enter")

            assert (sample_tree / "ok").is_file()
            assert not overlay.has_class("visible")

    @pytest.mark.asyncio
    async def test_error_overlay(self, app):
        """Test errors show in the overlay until dismissed."""
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("c")
            overlay = app.query_one(PromptOverlay)
            assert overlay.has_class("visible")
            assert overlay.has_class("error")

            await pilot.press("enter")
            assert not overlay.has_class("visible")

    @pytest.mark.asyncio
    async def test_click_messages(self, app, sample_tree, isolated_home):
        """Test click messages are forwarded to the state machine."""
        async with app.run_test(size=(120, 40)) as pilot:
            app.post_message(EntryClicked(3))
            await pilot.pause()
            assert app.machine.state.selected_entry.name == "beta"

            app.post_message(ActionClicked(9))
            await pilot.pause()
            assert app.machine.state.show_hidden is False

            app.post_message(ControlClicked(3))
            await pilot.pause()
            assert app.machine.state.path == isolated_home

    @pytest.mark.asyncio
    async def test_ctrl_q_quits(self, app):
        """Test ctrl+q asks the app to exit."""
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("n", "ctrl+q")

            assert app.machine.state.quit_requested
