"""Test utilities and helper functions.

Created: 2025-11-12
"""

from pathlib import Path
from typing import Dict, Union

from karu.core.models import Entry
from karu.core.modes import ModeStateMachine


TreeSpec = Dict[str, Union[str, bytes, dict]]


def build_tree(root: Path, spec: TreeSpec) -> Path:
    """Create files and directories from a nested dict.

    Args:
        root: Directory to create (parents included)
        spec: name -> str/bytes (file content) or dict (subdirectory)

    Returns:
        The root path

    Example:
        build_tree(tmp_path, {"docs": {"a.txt": "hi"}, "b.bin": b"\\x00"})
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, content in spec.items():
        path = root / name
        if isinstance(content, dict):
            build_tree(path, content)
        elif isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
    return root


def press(machine: ModeStateMachine, *keys: str) -> None:
    """Feed key tokens to the state machine one at a time."""
    for key in keys:
        machine.handle_key(key)


def type_text(machine: ModeStateMachine, text: str) -> None:
    """Type printable characters one key at a time."""
    for character in text:
        machine.handle_key(character)


def select(machine: ModeStateMachine, name: str) -> Entry:
    """Select the entry called ``name`` in the current listing."""
    index = machine.state.listing.find(name)
    assert index is not None, f"{name} not in {machine.state.listing.names()}"
    machine.select_index(index)
    return machine.state.listing[index]


def file_entry(path: Path) -> Entry:
    """Entry for an existing path, as the lister would build it."""
    is_dir = path.is_dir()
    size = None if is_dir else path.stat().st_size
    return Entry(name=path.name, path=path, is_dir=is_dir, size=size)
