"""
UI components for Karu TUI.

Modified: 2025-11-12
"""

__all__ = [
    "file_panel",
    "image_view",
    "prompt_overlay",
    "status_bar",
    "top_bar",
]
