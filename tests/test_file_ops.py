"""
Tests for file operations.

Created: 2025-11-12
"""

import os

import pytest

from karu.core.exceptions import InvalidInput, IoFailure
from karu.core.file_ops import FileOps, require_entry
from karu.core.models import ClipboardEntry, Entry

from tests.utils import file_entry


class TestClipboard:
    """Test copy/cut into the clipboard."""

    def test_copy_and_cut(self, file_ops, sample_tree):
        """Test copy and cut record the source path and operation."""
        entry = file_entry(sample_tree / "b.txt")

        copied = file_ops.copy(entry)
        cut = file_ops.cut(entry)

        assert copied == ClipboardEntry(path=sample_tree / "b.txt", is_cut=False)
        assert cut.is_cut
        assert cut.operation == "cut"

    def test_parent_entry_rejected(self, file_ops, sample_tree):
        """Test '..' cannot be copied or cut."""
        parent = Entry(name="..", path=sample_tree.parent, is_dir=True)

        with pytest.raises(InvalidInput):
            file_ops.copy(parent)
        with pytest.raises(InvalidInput):
            file_ops.cut(parent)

    def test_nothing_selected(self):
        """Test require_entry rejects a missing selection."""
        with pytest.raises(InvalidInput, match="Nothing selected"):
            require_entry(None, "copy")


class TestPaste:
    """Test paste semantics."""

    def test_copy_file(self, file_ops, sample_tree, tmp_path):
        """Test pasting a copied file duplicates it and keeps the source."""
        dest_dir = tmp_path / "dest"
        dest_dir.mkdir()
        clipboard = file_ops.copy(file_entry(sample_tree / "b.txt"))

        pasted = file_ops.paste(clipboard, dest_dir)

        assert pasted == dest_dir / "b.txt"
        assert pasted.read_text() == "hello\nworld\nhello again\n"
        assert (sample_tree / "b.txt").exists()

    def test_copy_directory_is_shallow(self, file_ops, sample_tree, tmp_path):
        """Test directory copy takes direct files and creates child dirs empty."""
        (sample_tree / "beta" / "nested" / "deep.txt").write_text("deep")
        dest_dir = tmp_path / "dest"
        dest_dir.mkdir()

        pasted = file_ops.paste(file_ops.copy(file_entry(sample_tree / "beta")), dest_dir)

        assert (pasted / "inner.txt").read_text() == "inside\n"
        assert (pasted / "nested").is_dir()
        assert list((pasted / "nested").iterdir()) == []
        assert (sample_tree / "beta" / "nested" / "deep.txt").exists()

    def test_cut_directory_is_shallow_then_removed(self, file_ops, sample_tree, tmp_path):
        """Test a cut pastes the same shallow copy, then removes the whole source."""
        (sample_tree / "beta" / "nested" / "deep.txt").write_text("deep")
        dest_dir = tmp_path / "dest"
        dest_dir.mkdir()

        pasted = file_ops.paste(file_ops.cut(file_entry(sample_tree / "beta")), dest_dir)

        assert not (sample_tree / "beta").exists()
        assert (pasted / "inner.txt").read_text() == "inside\n"
        assert (pasted / "nested").is_dir()
        assert not (pasted / "nested" / "deep.txt").exists()

    def test_cut_file(self, file_ops, sample_tree, tmp_path):
        """Test a cut file is copied to the destination and removed from the source."""
        dest_dir = tmp_path / "dest"
        dest_dir.mkdir()

        pasted = file_ops.paste(file_ops.cut(file_entry(sample_tree / "b.txt")), dest_dir)

        assert pasted.read_text() == "hello\nworld\nhello again\n"
        assert not (sample_tree / "b.txt").exists()

    def test_cut_never_renames(self, file_ops, sample_tree, tmp_path, monkeypatch):
        """Test a cut goes through copy and removal, not a filesystem rename."""
        def no_rename(src, dst):
            raise AssertionError("rename used for cut")

        monkeypatch.setattr(os, "rename", no_rename)
        dest_dir = tmp_path / "dest"
        dest_dir.mkdir()

        pasted = file_ops.paste(file_ops.cut(file_entry(sample_tree / "beta")), dest_dir)

        assert (pasted / "inner.txt").exists()
        assert not (sample_tree / "beta").exists()

    def test_failed_cut_keeps_source(self, file_ops, sample_tree, tmp_path):
        """Test a cut whose copy fails leaves the source untouched."""
        clipboard = file_ops.cut(file_entry(sample_tree / "beta"))

        with pytest.raises(IoFailure):
            file_ops.paste(clipboard, tmp_path / "missing")

        assert (sample_tree / "beta" / "inner.txt").exists()

    def test_existing_destination_fails(self, file_ops, sample_tree):
        """Test pasting onto an existing name fails and changes nothing."""
        clipboard = file_ops.copy(file_entry(sample_tree / "b.txt"))

        with pytest.raises(IoFailure, match="already exists"):
            file_ops.paste(clipboard, sample_tree)

        assert (sample_tree / "b.txt").read_text() == "hello\nworld\nhello again\n"

    def test_missing_source_fails(self, file_ops, sample_tree, tmp_path):
        """Test pasting a source that vanished fails."""
        clipboard = file_ops.copy(file_entry(sample_tree / "b.txt"))
        (sample_tree / "b.txt").unlink()

        with pytest.raises(IoFailure, match="no longer exists"):
            file_ops.paste(clipboard, tmp_path)

    def test_empty_clipboard(self, file_ops, tmp_path):
        """Test pasting with nothing copied is invalid input."""
        with pytest.raises(InvalidInput, match="Clipboard is empty"):
            file_ops.paste(None, tmp_path)


class TestDeleteRenameMove:
    """Test trash, rename and move."""

    def test_delete_uses_trash(self, file_ops, trash, sample_tree):
        """Test delete goes through the trash service."""
        file_ops.delete(file_entry(sample_tree / "b.txt"))

        assert trash.deleted == [sample_tree / "b.txt"]

    def test_delete_parent_rejected(self, file_ops, trash, sample_tree):
        """Test '..' is never sent to the trash."""
        with pytest.raises(InvalidInput):
            file_ops.delete(Entry(name="..", path=sample_tree.parent, is_dir=True))
        assert trash.deleted == []

    def test_rename(self, file_ops, sample_tree):
        """Test renaming within the directory."""
        renamed = file_ops.rename(file_entry(sample_tree / "b.txt"), "c.txt", sample_tree)

        assert renamed == sample_tree / "c.txt"
        assert renamed.exists()
        assert not (sample_tree / "b.txt").exists()

    def test_rename_same_name_is_noop(self, file_ops, sample_tree):
        """Test renaming to the current name changes nothing."""
        renamed = file_ops.rename(file_entry(sample_tree / "b.txt"), "b.txt", sample_tree)

        assert renamed == sample_tree / "b.txt"
        assert renamed.exists()

    def test_rename_onto_existing_fails(self, file_ops, sample_tree):
        """Test renaming onto another entry never overwrites it."""
        with pytest.raises(IoFailure, match="already exists"):
            file_ops.rename(file_entry(sample_tree / "b.txt"), "A.md", sample_tree)

        assert (sample_tree / "A.md").read_text() == "# Title\n"

    def test_rename_empty_name(self, file_ops, sample_tree):
        """Test an empty new name is invalid."""
        with pytest.raises(InvalidInput):
            file_ops.rename(file_entry(sample_tree / "b.txt"), "", sample_tree)

    def test_move_into_directory(self, file_ops, sample_tree):
        """Test moving onto an existing directory places the entry inside it."""
        moved = file_ops.move(file_entry(sample_tree / "b.txt"), "Alpha", sample_tree)

        assert moved == sample_tree / "Alpha" / "b.txt"
        assert moved.exists()

    def test_move_to_new_path(self, file_ops, sample_tree):
        """Test moving to a new relative path."""
        moved = file_ops.move(file_entry(sample_tree / "b.txt"), "beta/renamed.txt", sample_tree)

        assert moved == sample_tree / "beta" / "renamed.txt"
        assert moved.read_text().startswith("hello")

    def test_move_missing_parent_fails(self, file_ops, sample_tree):
        """Test moving into a directory that does not exist fails."""
        with pytest.raises(IoFailure):
            file_ops.move(file_entry(sample_tree / "b.txt"), "nowhere/b.txt", sample_tree)
        assert (sample_tree / "b.txt").exists()


class TestCreate:
    """Test file and directory creation."""

    def test_create_file(self, file_ops, sample_tree):
        """Test creating an empty file."""
        created = file_ops.create("new.txt", sample_tree)

        assert created.is_file()
        assert created.read_text() == ""

    def test_create_never_truncates(self, file_ops, sample_tree):
        """Test creating an existing file fails and keeps its content."""
        with pytest.raises(IoFailure):
            file_ops.create("b.txt", sample_tree)

        assert (sample_tree / "b.txt").read_text().startswith("hello")

    def test_trailing_slash_creates_directories(self, file_ops, sample_tree):
        """Test a trailing separator creates the whole directory path."""
        created = file_ops.create("x/y/z/", sample_tree)

        assert (sample_tree / "x" / "y" / "z").is_dir()
        assert created == sample_tree / "x/y/z/"

    def test_create_directory_is_idempotent(self, file_ops, sample_tree):
        """Test creating an existing directory succeeds."""
        file_ops.create_directory("Alpha", sample_tree)

        assert (sample_tree / "Alpha").is_dir()

    def test_empty_names_rejected(self, file_ops, sample_tree):
        """Test empty names are invalid input."""
        with pytest.raises(InvalidInput):
            file_ops.create("", sample_tree)
        with pytest.raises(InvalidInput):
            file_ops.create_directory("/", sample_tree)


class TestOpenAndText:
    """Test opening and text read/write."""

    def test_open_uses_opener(self, file_ops, opener, sample_tree):
        """Test files are handed to the opener."""
        file_ops.open(file_entry(sample_tree / "A.md"))

        assert opener.opened == [sample_tree / "A.md"]

    def test_read_text_rejects_binary(self, file_ops, sample_tree):
        """Test binary files cannot be read as text."""
        with pytest.raises(InvalidInput, match="binary"):
            file_ops.read_text(sample_tree / "data.bin")

    def test_read_text_replaces_invalid_utf8(self, file_ops, tmp_path):
        """Test invalid UTF-8 is replaced rather than failing."""
        path = tmp_path / "latin1.txt"
        path.write_bytes(b"caf\xe9")

        assert file_ops.read_text(path) == "caf\ufffd"

    def test_write_text(self, file_ops, tmp_path):
        """Test writing text replaces the file content."""
        path = tmp_path / "out.txt"

        file_ops.write_text(path, "one\ntwo")

        assert path.read_text() == "one\ntwo"

    def test_default_services(self):
        """Test FileOps builds real services when none are injected."""
        ops = FileOps()

        assert ops.trash is not None
        assert ops.opener is not None
