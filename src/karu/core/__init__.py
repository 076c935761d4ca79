"""
Core browser logic for Karu.

Listing, history, file operations, preview classification and the modal
input state machine. Nothing in here imports the TUI.

Modified: 2025-11-12
"""

from karu.core.exceptions import (
    KaruError,
    IoFailure,
    InvalidInput,
    PreviewUnavailable,
    ConfigurationError,
)

__all__ = [
    "KaruError",
    "IoFailure",
    "InvalidInput",
    "PreviewUnavailable",
    "ConfigurationError",
]
