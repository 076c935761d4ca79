"""
TUI (Terminal User Interface) for Karu.

Textual-based file browser: file list, actions panel and preview.

Modified: 2025-11-12
"""

__all__ = ["app", "keybindings", "messages", "screen"]
